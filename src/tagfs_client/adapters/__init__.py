"""Cache stores backing the tag caches."""

from tagfs_client.adapters.base import AsyncCacheStore
from tagfs_client.adapters.memory import AsyncMemoryStore

__all__ = [
    "AsyncCacheStore",
    "AsyncMemoryStore",
]
