"""tagfs client for a single workspace root.

This is the surface the editor layer calls: every read goes through the
caches, every write goes through the command gateway and then invalidates
what it may have changed.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from tagfs_client import commands
from tagfs_client.adapters.base import AsyncCacheStore
from tagfs_client.completion import CompletionTrigger, ErrorReporter
from tagfs_client.config import Settings, get_settings
from tagfs_client.errors import validate_tag_name
from tagfs_client.file_tag_cache import FileTagCache
from tagfs_client.gateway import CommandGateway
from tagfs_client.identity import file_identity
from tagfs_client.scanner import AnnotationScanner
from tagfs_client.tag_cache import TagCache
from tagfs_client.types import FileId, Occurrence, TagSet

logger = logging.getLogger(__name__)

PathArg = str | os.PathLike[str]


class TagFSClient:
    """Tag operations, caches and annotations for one workspace."""

    def __init__(
        self,
        workspace_root: PathArg,
        *,
        gateway: CommandGateway | None = None,
        settings: Callable[[], Settings] = get_settings,
        tag_store: AsyncCacheStore | None = None,
        file_tag_store: AsyncCacheStore | None = None,
        on_error: ErrorReporter | None = None,
    ) -> None:
        self._root = str(Path(workspace_root))
        self._settings = settings
        self._gateway = gateway if gateway is not None else CommandGateway(settings=settings)
        self._on_error = on_error
        self.tags = TagCache(self._gateway, self._root, store=tag_store)
        self.file_tags = FileTagCache(self._gateway, self._root, store=file_tag_store)

        current = settings()
        self.scanner = AnnotationScanner(self.file_tags, window_ms=current.debounce)
        self.completion = CompletionTrigger(
            self.tags,
            self.file_tags,
            trigger=current.trigger,
            on_error=self.report_error,
            on_tagged=self.scanner.refresh,
        )

    @property
    def workspace_root(self) -> str:
        return self._root

    @property
    def gateway(self) -> CommandGateway:
        return self._gateway

    def file_identity(self, path: PathArg) -> FileId:
        return file_identity(path, self._root)

    def report_error(self, message: str) -> None:
        """Standard error surface for failures nobody is awaiting."""
        text = f"HTFS error: {message}"
        if self._on_error is not None:
            self._on_error(text)
        else:
            logger.error("%s", text)

    # -------------------------------------------------------------------------
    # Workspace and registry
    # -------------------------------------------------------------------------

    async def init_workspace(self) -> str:
        """Initialize tagfs in the workspace and return its message."""
        output = await self._gateway.run(commands.init(), self._root)
        await self.tags.invalidate()
        await self.file_tags.clear()
        return output.strip()

    async def list_tags(self) -> TagSet:
        return await self.tags.get_all()

    async def create_tag(self, name: str) -> str:
        return await self.tags.create(name)

    async def link_tag(self, child: str, parent: str) -> str:
        return await self.tags.link(child, parent)

    async def search(self, tag_expr: str) -> list[str]:
        """Files matching a tag expression, in backend order."""
        if not tag_expr.strip():
            raise ValueError("Empty tag expression")
        output = await self._gateway.run(commands.list_resources(tag_expr), self._root)
        return commands.parse_lines(output)

    # -------------------------------------------------------------------------
    # File tags
    # -------------------------------------------------------------------------

    async def get_file_tags(self, path: PathArg) -> TagSet:
        return await self.file_tags.get(self.file_identity(path))

    async def tag_file(self, path: PathArg, tag: str) -> None:
        file_id = self.file_identity(path)
        await self.file_tags.tag_file(file_id, tag)
        self.scanner.refresh(file_id)

    async def untag_file(self, path: PathArg, tag: str) -> None:
        file_id = self.file_identity(path)
        await self.file_tags.untag_file(file_id, tag)
        self.scanner.refresh(file_id)

    async def add_tag_to_file(self, path: PathArg, tag: str) -> bool:
        """Tag a file, creating the tag first if the registry lacks it.

        Returns True when the tag had to be created.
        """
        validate_tag_name(tag)
        file_id = self.file_identity(path)
        created = not await self.tags.contains(tag)
        if created:
            await self.tags.create(tag)
        await self.file_tags.tag_file(file_id, tag)
        self.scanner.refresh(file_id)
        return created

    async def on_file_closed(self, path: PathArg) -> None:
        file_id = self.file_identity(path)
        self.scanner.cancel(file_id)
        await self.file_tags.on_file_closed(file_id)

    async def on_file_deleted(self, path: PathArg, *, forget: bool = False) -> None:
        file_id = self.file_identity(path)
        self.scanner.cancel(file_id)
        await self.file_tags.on_file_deleted(file_id, forget=forget)

    async def on_file_renamed(self, old_path: PathArg, new_path: PathArg) -> None:
        old_id = self.file_identity(old_path)
        new_id = self.file_identity(new_path)
        self.scanner.rename(old_id, new_id)
        await self.file_tags.on_file_renamed(old_id, new_id)
        self.scanner.refresh(new_id)

    # -------------------------------------------------------------------------
    # Passive views: failures degrade to an empty result instead of raising
    # -------------------------------------------------------------------------

    async def annotate(self, path: PathArg, text: str) -> list[Occurrence]:
        """Tag occurrences in text; none for files outside the workspace."""
        try:
            file_id = self.file_identity(path)
        except ValueError as e:
            logger.debug("No annotations: %s", e)
            return []
        return await self.scanner.scan(file_id, text)

    async def status(self) -> str:
        """Status bar text with the tag count."""
        if not self._settings().configured:
            return "HTFS: Not Configured"
        try:
            tags = await self.tags.get_all()
        except Exception as e:
            logger.debug("Status unavailable: %s", e)
            return "HTFS: Error"
        return f"HTFS: {len(tags)} tags"

    async def file_tag_label(self, path: PathArg) -> str | None:
        """Header label listing a file's tags, or None when it has none."""
        try:
            tags = await self.get_file_tags(path)
        except Exception as e:
            logger.debug("No tag label for %s: %s", path, e)
            return None
        if not tags:
            return None
        return f"🏷️ {', '.join(tags)}"
