"""Annotation scanner: where a document's tags occur in its text.

A tag occurs where it stands alone as a token: preceded by start of text or
whitespace and followed by end of text or whitespace. Matching is exact and
case-sensitive. Occurrences of different tags are all kept, including
overlapping ones; the host decides how to stack them.
"""

from __future__ import annotations

import bisect
import inspect
import logging
import re
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from tagfs_client.debounce import Debouncer
from tagfs_client.file_tag_cache import FileTagCache
from tagfs_client.types import FileId, Occurrence, TextRange

logger = logging.getLogger(__name__)

TextProvider = Callable[[], str]
ResultCallback = Callable[[list[Occurrence]], Awaitable[Any] | Any]


def _token_pattern(tag: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\S){re.escape(tag)}(?!\S)")


def compute_occurrences(text: str, tags: Iterable[str]) -> list[Occurrence]:
    """Standalone occurrences of each tag, grouped by tag in tag-set order.

    One linear scan per tag, so cost grows with tags x document length.
    """
    occurrences: list[Occurrence] = []
    for tag in tags:
        if not tag:
            continue
        for match in _token_pattern(tag).finditer(text):
            occurrences.append(Occurrence(tag=tag, start=match.start(), end=match.end()))
    return occurrences


def to_ranges(text: str, occurrences: Iterable[Occurrence]) -> list[TextRange]:
    """Convert offsets to zero-based line/character ranges."""
    line_starts = [0]
    line_starts.extend(m.end() for m in re.finditer(r"\r\n|\r|\n", text))

    def position(offset: int) -> tuple[int, int]:
        line = bisect.bisect_right(line_starts, offset) - 1
        return line, offset - line_starts[line]

    ranges = []
    for occurrence in occurrences:
        start_line, start_char = position(occurrence.start)
        end_line, end_char = position(occurrence.end)
        ranges.append(TextRange(start_line, start_char, end_line, end_char))
    return ranges


class AnnotationScanner:
    """Computes tag annotations for open documents from their file tags.

    schedule() registers a document's text provider and result callback;
    refresh() reruns the latest registration after the document's tags change.
    """

    def __init__(self, file_tags: FileTagCache, *, window_ms: int = 300) -> None:
        self._file_tags = file_tags
        self._window_ms = window_ms
        self._debouncers: dict[FileId, Debouncer] = {}
        self._registrations: dict[FileId, tuple[TextProvider, ResultCallback]] = {}

    async def scan(self, file_id: FileId, text: str) -> list[Occurrence]:
        """Occurrences of the file's tags in text; none if tags are unavailable."""
        try:
            tags = await self._file_tags.get(file_id)
        except Exception as e:
            logger.debug("No annotations for %s: %s", file_id, e)
            return []
        return compute_occurrences(text, tags)

    def schedule(
        self,
        file_id: FileId,
        text: TextProvider,
        on_result: ResultCallback,
    ) -> None:
        """Rescan file_id after the debounce window, restarting it on each call.

        text is read when the timer fires, so the latest edit is scanned.
        """
        self._registrations[file_id] = (text, on_result)
        debouncer = self._debouncers.get(file_id)
        if debouncer is None:
            debouncer = self._debouncers[file_id] = Debouncer(self._window_ms)

        async def rescan() -> None:
            occurrences = await self.scan(file_id, text())
            result = on_result(occurrences)
            if inspect.isawaitable(result):
                await result

        debouncer.trigger(rescan)

    def refresh(self, file_id: FileId) -> bool:
        """Schedule a rescan with file_id's last registration.

        Returns False when the document has none (never scheduled or closed).
        """
        registration = self._registrations.get(file_id)
        if registration is None:
            return False
        self.schedule(file_id, *registration)
        return True

    def rename(self, old_id: FileId, new_id: FileId) -> None:
        """Move old_id's registration to new_id, dropping its pending rescan."""
        registration = self._registrations.get(old_id)
        self.cancel(old_id)
        if registration is not None:
            self._registrations[new_id] = registration

    def cancel(self, file_id: FileId) -> None:
        """Forget file_id and drop any pending rescan."""
        self._registrations.pop(file_id, None)
        debouncer = self._debouncers.pop(file_id, None)
        if debouncer is not None:
            debouncer.cancel()

    def is_pending(self, file_id: FileId) -> bool:
        debouncer = self._debouncers.get(file_id)
        return debouncer is not None and debouncer.pending

    async def wait(self) -> None:
        """Wait until rescans already fired have finished."""
        for debouncer in list(self._debouncers.values()):
            await debouncer.wait()
