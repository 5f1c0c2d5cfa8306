"""Store protocol for cache backends."""

from typing import Protocol, runtime_checkable

from tagfs_client.types import CacheEntry


@runtime_checkable
class AsyncCacheStore(Protocol):
    """Async key/value store for cache entries. No expiry."""

    async def get(self, key: str) -> CacheEntry[object] | None:
        """Get a cache entry by key."""
        ...

    async def set(self, key: str, entry: CacheEntry[object]) -> None:
        """Store a cache entry."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete a cache entry. Returns False if it was absent."""
        ...

    async def keys(self) -> list[str]:
        """Keys currently held, least recently used first."""
        ...

    async def clear(self) -> None:
        """Clear all cached entries."""
        ...
