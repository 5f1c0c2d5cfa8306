"""Cache of the workspace's full tag registry."""

from __future__ import annotations

import logging

from tagfs_client import commands
from tagfs_client.adapters.base import AsyncCacheStore
from tagfs_client.cache import KeyedCache
from tagfs_client.errors import validate_tag_name
from tagfs_client.gateway import CommandGateway
from tagfs_client.types import TagSet

logger = logging.getLogger(__name__)


class TagCache:
    """Single-entry cache of ``tagfs lstags`` for one workspace root.

    The entry is invalidated, never patched, after any mutation that can
    change the registry: the backend may reject, normalize or deduplicate
    names, so only a fresh listing is trusted.
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

    @property
    def workspace_root(self) -> str:
        return self._root

    async def get_all(self) -> TagSet:
        """All tags in backend order, listing them on a miss."""

        async def fetch() -> TagSet:
            output = await self._gateway.run(commands.list_tags(), self._root)
            return commands.parse_lines(output)

        tags: TagSet = await self._cache.query(self._root, fetch)
        return list(tags)

    async def contains(self, tag: str) -> bool:
        return tag in await self.get_all()

    async def invalidate(self) -> None:
        await self._cache.drop(self._root)

    async def create(self, tag: str) -> str:
        """Create a tag and return the tool's confirmation text.

        Raises:
            ValueError: Empty name or name containing whitespace
            ExternalToolError: The backend rejected the tag
        """
        validate_tag_name(tag)
        output = await self._gateway.run(commands.add_tag(tag), self._root)
        await self.invalidate()
        logger.info("Created tag %s", tag)
        return output.strip()

    async def link(self, child: str, parent: str) -> str:
        """Make parent a parent of child in the backend hierarchy."""
        validate_tag_name(child)
        validate_tag_name(parent)
        output = await self._gateway.run(commands.link_tags(child, parent), self._root)
        await self.invalidate()
        logger.info("Linked tag %s under %s", child, parent)
        return output.strip()
