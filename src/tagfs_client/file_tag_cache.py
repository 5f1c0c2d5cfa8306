"""Per-file cache of tag associations."""

from __future__ import annotations

import logging

from tagfs_client import commands
from tagfs_client.adapters.base import AsyncCacheStore
from tagfs_client.cache import KeyedCache
from tagfs_client.errors import validate_tag_name
from tagfs_client.gateway import CommandGateway
from tagfs_client.types import FileId, TagSet

logger = logging.getLogger(__name__)


class FileTagCache:
    """Cache of ``tagfs getresourcetags`` keyed by file identity.

    An entry is dropped after every successful mutation that targets its
    file, and evicted when the file is closed, renamed or deleted. A failed
    mutation leaves the entry untouched; the failure is surfaced to the
    caller and the next explicit read reconciles.
    """

    def __init__(
        self,
        gateway: CommandGateway,
        workspace_root: str,
        *,
        store: AsyncCacheStore | None = None,
    ) -> None:
        self._gateway = gateway
        self._root = workspace_root
        self._cache = KeyedCache(store)

    async def get(self, file_id: FileId) -> TagSet:
        """Tags of file_id, fetching them on a miss."""

        async def fetch() -> TagSet:
            output = await self._gateway.run(
                commands.get_resource_tags(file_id), self._root
            )
            return commands.parse_lines(output)

        tags: TagSet = await self._cache.query(file_id, fetch)
        return list(tags)

    async def invalidate(self, file_id: FileId) -> None:
        await self._cache.drop(file_id)

    async def clear(self) -> None:
        await self._cache.drop_all()

    async def tag_file(self, file_id: FileId, tag: str) -> None:
        """Register file_id as a resource, then associate tag with it.

        Both calls must succeed. Registration is not rolled back when the
        association fails.
        """
        validate_tag_name(tag)
        await self._gateway.run(commands.add_resource(file_id), self._root)
        await self._gateway.run(commands.tag_resource(file_id, tag), self._root)
        await self.invalidate(file_id)
        logger.info("Tagged %s with %s", file_id, tag)

    async def untag_file(self, file_id: FileId, tag: str) -> None:
        validate_tag_name(tag)
        await self._gateway.run(commands.untag_resource(file_id, tag), self._root)
        await self.invalidate(file_id)
        logger.info("Removed tag %s from %s", tag, file_id)

    async def on_file_closed(self, file_id: FileId) -> None:
        await self.invalidate(file_id)

    async def on_file_deleted(self, file_id: FileId, *, forget: bool = False) -> None:
        """Evict file_id; with forget, also drop it from the backend."""
        try:
            if forget:
                await self._gateway.run(commands.remove_resource(file_id), self._root)
        finally:
            await self.invalidate(file_id)

    async def on_file_renamed(self, old_id: FileId, new_id: FileId) -> None:
        """Move backend associations to new_id and evict old_id.

        new_id is left unpopulated and fetched lazily.
        """
        try:
            await self._gateway.run(commands.move_resource(old_id, new_id), self._root)
        finally:
            await self.invalidate(old_id)
            await self.invalidate(new_id)
        logger.info("Moved %s to %s", old_id, new_id)
