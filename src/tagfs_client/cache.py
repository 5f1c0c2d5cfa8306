"""Fill-on-miss cache machinery shared by the tag caches.

Provides:
- query(): cached fetch with single-flight protection
- drop(): explicit invalidation of one key
- generation guard so a fetch racing an invalidation is never stored
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any, TypeVar, cast

from tagfs_client.adapters.base import AsyncCacheStore
from tagfs_client.adapters.memory import AsyncMemoryStore
from tagfs_client.types import CacheEntry

T = TypeVar("T")

logger = logging.getLogger(__name__)


class KeyedCache:
    """Async fill-on-miss cache with stampede protection and no expiry."""

    def __init__(self, store: AsyncCacheStore | None = None) -> None:
        self._store: AsyncCacheStore = store if store is not None else AsyncMemoryStore()
        self._in_flight: dict[str, asyncio.Future[Any]] = {}
        self._generations: dict[str, int] = {}
        self._background_tasks: set[asyncio.Future[Any]] = set()

    async def query(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value for key, fetching it with fn on a miss."""
        entry = await self._store.get(key)
        if entry is not None:
            return cast(T, entry.value)
        return await self._coalesce(key, fn)

    async def drop(self, key: str) -> None:
        """Invalidate key. A miss is a no-op."""
        self._generations[key] = self._generations.get(key, 0) + 1
        # Later callers must not join a fetch that started before this point
        self._in_flight.pop(key, None)
        if await self._store.delete(key):
            logger.debug("Invalidated %s", key)

    async def drop_all(self) -> None:
        """Invalidate every key."""
        for key in await self._store.keys():
            await self.drop(key)
        for key in list(self._in_flight):
            await self.drop(key)

    async def _coalesce(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Coalesce concurrent misses for the same key (single-flight).

        The fetch runs in its own task, so a caller that gives up does not
        take the result away from the others waiting on it.
        """
        task = self._in_flight.get(key)
        if task is None:
            generation = self._generations.get(key, 0)
            task = asyncio.ensure_future(self._fill(key, fn, generation))
            self._in_flight[key] = task
            self._background_tasks.add(task)
            task.add_done_callback(self._background_tasks.discard)
            task.add_done_callback(partial(self._settle, key))
        return cast(T, await asyncio.shield(task))

    async def _fill(self, key: str, fn: Callable[[], Awaitable[T]], generation: int) -> T:
        value = await fn()
        if self._generations.get(key, 0) == generation:
            now = int(time.time() * 1000)
            await self._store.set(key, CacheEntry(value=value, created_at=now))
            logger.debug("Filled %s", key)
        return value

    def _settle(self, key: str, task: asyncio.Future[Any]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        if not task.cancelled():
            # Mark retrieved so a failure nobody awaited is not logged by asyncio
            task.exception()
