"""Trigger-based tag completion.

Typing the trigger (``##`` by default) offers every known tag. Accepting a
suggestion replaces the trigger with the tag text, then tags the current
file in the background.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence

from tagfs_client.errors import ExternalToolError
from tagfs_client.file_tag_cache import FileTagCache
from tagfs_client.tag_cache import TagCache
from tagfs_client.types import FileId, Suggestion

logger = logging.getLogger(__name__)

PLACEHOLDER_LABEL = "(no tags found)"

ErrorReporter = Callable[[str], None]


def _log_error(message: str) -> None:
    logger.error("%s", message)


class CompletionTrigger:
    """Produces tag suggestions and applies the accepted one."""

    def __init__(
        self,
        tags: TagCache,
        file_tags: FileTagCache,
        *,
        trigger: str = "##",
        on_error: ErrorReporter = _log_error,
        on_tagged: Callable[[FileId], object] | None = None,
    ) -> None:
        self._tags = tags
        self._file_tags = file_tags
        self._trigger = trigger
        self._on_error = on_error
        self._on_tagged = on_tagged
        self._background_tasks: set[asyncio.Task[None]] = set()

    @property
    def trigger(self) -> str:
        return self._trigger

    def suggest(self, line_before_cursor: str, tag_set: Sequence[str]) -> list[Suggestion]:
        """Suggestions for the text left of the cursor on its line.

        Returns [] unless that text ends with the trigger. An empty tag set
        yields a single non-actionable placeholder so the menu still opens.
        """
        if not line_before_cursor.endswith(self._trigger):
            return []
        end = len(line_before_cursor)
        span = (end - len(self._trigger), end)

        if not tag_set:
            return [
                Suggestion(
                    label=PLACEHOLDER_LABEL,
                    insert_text=self._trigger,
                    filter_text=self._trigger,
                    replacement_range=span,
                    actionable=False,
                )
            ]
        return [
            Suggestion(
                label=tag,
                insert_text=tag,
                filter_text=f"{self._trigger}{tag}",
                replacement_range=span,
            )
            for tag in tag_set
        ]

    async def provide(self, line_before_cursor: str) -> list[Suggestion]:
        """Suggest from the Tag Cache; an unavailable backend counts as no tags."""
        if not line_before_cursor.endswith(self._trigger):
            return []
        try:
            tag_set = await self._tags.get_all()
        except ExternalToolError as e:
            logger.debug("Completion without tags: %s", e)
            tag_set = []
        return self.suggest(line_before_cursor, tag_set)

    def accept(self, suggestion: Suggestion, file_id: FileId) -> asyncio.Task[None] | None:
        """Tag file_id with the accepted suggestion without blocking the caller.

        Returns the background task, or None for the placeholder. Failures
        go to the error reporter; on success on_tagged is told the file changed.
        """
        tag = suggestion.tag
        if tag is None:
            return None

        async def apply() -> None:
            try:
                await self._file_tags.tag_file(file_id, tag)
            except (ExternalToolError, ValueError) as e:
                self._on_error(str(e))
                return
            if self._on_tagged is not None:
                self._on_tagged(file_id)

        task = asyncio.create_task(apply())
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def wait(self) -> None:
        """Wait for accepted suggestions still being applied."""
        while self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
