"""Core types for the tagfs client."""

from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Generic,
    NewType,
    TypeVar,
)

T = TypeVar("T")

# Branded file identity - compile-time enforcement only
if TYPE_CHECKING:
    FileId = NewType("FileId", str)
else:
    FileId = str

# Ordered, distinct tag names in backend output order
TagSet = list[str]


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """A cached value with metadata."""

    value: T
    created_at: int  # Unix timestamp ms


@dataclass(frozen=True, slots=True)
class Occurrence:
    """A standalone occurrence of a tag in document text."""

    tag: str
    start: int  # offset of first character
    end: int  # offset one past the last character


@dataclass(frozen=True, slots=True)
class TextRange:
    """Line/character span, zero-based, end exclusive."""

    start_line: int
    start_character: int
    end_line: int
    end_character: int


@dataclass(frozen=True, slots=True)
class Suggestion:
    """A tag-insertion completion item."""

    label: str
    insert_text: str
    filter_text: str
    replacement_range: tuple[int, int]  # column span of the trigger
    actionable: bool = True

    @property
    def tag(self) -> str | None:
        """Tag applied when accepted, None for the placeholder."""
        return self.insert_text if self.actionable else None
