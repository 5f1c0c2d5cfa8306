"""Command gateway: the single ordered queue in front of the tagfs executable.

The tagfs tool keeps state on disk and is not safe to run concurrently, so
every invocation goes through one FIFO queue. A call starts only after every
previously submitted call has settled, and a failing call never stops the
calls queued behind it.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from collections import deque
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from tagfs_client.config import Settings, get_settings
from tagfs_client.errors import ExternalToolError

logger = logging.getLogger(__name__)


class CommandRunner(Protocol):
    """Executes one argv to completion and returns its stdout."""

    def __call__(
        self, argv: Sequence[str], cwd: str, env: Mapping[str, str]
    ) -> Awaitable[str]: ...


def build_env(settings: Settings, base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Environment for a single invocation with the search dir first on PATH."""
    env = dict(os.environ if base is None else base)
    current = env.get("PATH", "")
    search_dir = str(settings.search_dir)
    env["PATH"] = f"{search_dir}{os.pathsep}{current}" if current else search_dir
    return env


async def run_subprocess(argv: Sequence[str], cwd: str, env: Mapping[str, str]) -> str:
    """Run argv without a shell, resolving the program on ``env['PATH']``."""
    program, *args = argv
    executable = shutil.which(program, path=env.get("PATH"))
    if executable is None:
        raise ExternalToolError(f"{program}: executable not found")

    try:
        proc = await asyncio.create_subprocess_exec(
            executable,
            *args,
            cwd=cwd,
            env=dict(env),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ExternalToolError(f"{program}: {e.strerror or e}") from e

    stdout_bytes, stderr_bytes = await proc.communicate()
    # returncode is guaranteed to be set after communicate() returns
    assert proc.returncode is not None
    if proc.returncode != 0:
        stderr = stderr_bytes.decode(errors="replace").strip()
        raise ExternalToolError(
            stderr or f"{program} exited with status {proc.returncode}"
        )
    return stdout_bytes.decode(errors="replace")


@dataclass(slots=True)
class _PendingCall:
    args: list[str]
    cwd: str
    future: asyncio.Future[str]


class CommandGateway:
    """FIFO, non-overlapping, fault-isolated access to the tagfs executable."""

    def __init__(
        self,
        *,
        runner: CommandRunner = run_subprocess,
        settings: Callable[[], Settings] = get_settings,
    ) -> None:
        self._runner = runner
        self._settings = settings
        self._queue: deque[_PendingCall] = deque()
        self._active = False
        self._drain_task: asyncio.Task[None] | None = None

    @property
    def busy(self) -> bool:
        """True while a call is executing or waiting."""
        return self._active

    @property
    def pending(self) -> int:
        """Number of calls waiting behind the active one."""
        return len(self._queue)

    async def run(self, args: Sequence[str], cwd: str) -> str:
        """Queue a tagfs invocation and wait for its stdout.

        Args:
            args: Subcommand argv following the executable name
            cwd: Working directory (the workspace root)

        Raises:
            ExternalToolError: The tool exited non-zero or could not start
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()
        self._queue.append(_PendingCall(list(args), cwd, future))
        if not self._active:
            self._active = True
            self._drain_task = asyncio.create_task(self._drain())
        return await future

    async def _drain(self) -> None:
        """Execute queued calls one at a time until the queue is empty."""
        call: _PendingCall | None = None
        try:
            while self._queue:
                call = self._queue.popleft()
                if call.future.done():
                    # Caller went away before its turn
                    continue
                try:
                    result = await self._execute(call)
                except Exception as e:
                    if not call.future.done():
                        call.future.set_exception(e)
                else:
                    if not call.future.done():
                        call.future.set_result(result)
        except asyncio.CancelledError:
            # Settle every call this drain would have run
            stranded = [call, *self._queue] if call is not None else list(self._queue)
            self._queue.clear()
            for item in stranded:
                if not item.future.done():
                    item.future.cancel()
            raise
        finally:
            self._active = False

    async def _execute(self, call: _PendingCall) -> str:
        settings = self._settings()
        argv = [settings.executable_name, *call.args]
        env = build_env(settings)
        logger.debug("tagfs %s (cwd=%s)", " ".join(call.args), call.cwd)
        try:
            return await self._runner(argv, call.cwd, env)
        except ExternalToolError as e:
            logger.warning("tagfs %s failed: %s", call.args[0] if call.args else "", e)
            raise
