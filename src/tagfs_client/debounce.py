"""Trailing-edge debounce as a cancel-and-restart single-shot timer."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class Debouncer:
    """Runs the most recent callback once ``window_ms`` passes without a trigger.

    Every trigger cancels the pending timer and starts a new one, so at most
    one callback runs per quiet window. Coroutine callbacks run as tasks that
    are retained until done.
    """

    def __init__(self, window_ms: int) -> None:
        if window_ms < 0:
            raise ValueError("window_ms must not be negative")
        self._window = window_ms / 1000
        self._handle: asyncio.TimerHandle | None = None
        self._background_tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, callback: Callable[[], Any]) -> None:
        """(Re)start the timer; callback replaces any pending one."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._window, self._fire, callback)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def wait(self) -> None:
        """Wait until running callbacks settle."""
        while self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    def _fire(self, callback: Callable[[], Any]) -> None:
        self._handle = None
        result = callback()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._background_tasks.add(task)
            task.add_done_callback(self._background_tasks.discard)
            task.add_done_callback(_log_failure)


def _log_failure(task: asyncio.Task[Any]) -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.error("Debounced callback failed", exc_info=task.exception())
