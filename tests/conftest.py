"""Shared pytest fixtures."""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

import pytest

from tagfs_client import (
    AsyncMemoryStore,
    CommandGateway,
    ExternalToolError,
    FileTagCache,
    Settings,
    TagCache,
    TagFSClient,
)

WORKSPACE = "/ws"


@dataclass
class RecordedCall:
    """One invocation seen by FakeRunner."""

    argv: list[str]
    cwd: str
    env: dict[str, str]
    started: float
    finished: float | None = None

    @property
    def args(self) -> tuple[str, ...]:
        """Subcommand argv without the executable."""
        return tuple(self.argv[1:])


@dataclass
class _Script:
    output: str = ""
    error: str | None = None
    delay: float = 0.0


@dataclass
class FakeRunner:
    """Stands in for run_subprocess with scripted outputs and timestamps."""

    calls: list[RecordedCall] = field(default_factory=list)
    scripts: dict[tuple[str, ...], list[_Script]] = field(default_factory=dict)
    running: int = 0
    max_running: int = 0

    def respond(
        self,
        *args: str,
        output: str = "",
        error: str | None = None,
        delay: float = 0.0,
    ) -> None:
        """Script the next response for argv args. The last script repeats."""
        self.scripts.setdefault(args, []).append(_Script(output, error, delay))

    def count(self, *args: str) -> int:
        return sum(1 for call in self.calls if call.args == args)

    def commands(self) -> list[tuple[str, ...]]:
        return [call.args for call in self.calls]

    async def __call__(self, argv: Any, cwd: str, env: Any) -> str:
        call = RecordedCall(list(argv), cwd, dict(env), time.monotonic())
        self.calls.append(call)
        self.running += 1
        self.max_running = max(self.max_running, self.running)
        try:
            queue = self.scripts.get(call.args)
            script = _Script()
            if queue:
                script = queue.pop(0) if len(queue) > 1 else queue[0]
            if script.delay:
                await asyncio.sleep(script.delay)
            else:
                await asyncio.sleep(0)
            if script.error is not None:
                raise ExternalToolError(script.error)
            return script.output
        finally:
            self.running -= 1
            call.finished = time.monotonic()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment's .env file."""
    return Settings(_env_file=None, path="/opt/htfs/tagfs", debounce=50)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def gateway(runner: FakeRunner, settings: Settings) -> CommandGateway:
    return CommandGateway(runner=runner, settings=lambda: settings)


@pytest.fixture
def tag_cache(gateway: CommandGateway) -> TagCache:
    return TagCache(gateway, WORKSPACE)


@pytest.fixture
def file_tag_cache(gateway: CommandGateway) -> FileTagCache:
    return FileTagCache(gateway, WORKSPACE, store=AsyncMemoryStore())


@pytest.fixture
def store() -> AsyncMemoryStore:
    """Create a fresh AsyncMemoryStore for each test."""
    return AsyncMemoryStore()


@pytest.fixture
def errors() -> list[str]:
    """Messages passed to the client's error surface."""
    return []


@pytest.fixture
def client(gateway: CommandGateway, settings: Settings, errors: list[str]) -> TagFSClient:
    return TagFSClient(
        WORKSPACE,
        gateway=gateway,
        settings=lambda: settings,
        on_error=errors.append,
    )
