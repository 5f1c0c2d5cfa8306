"""tagfs_client - editor-side client for the tagfs file-tagging tool."""

# Stores
from tagfs_client.adapters import (
    AsyncCacheStore,
    AsyncMemoryStore,
)

# Client API
from tagfs_client.client import TagFSClient
from tagfs_client.completion import CompletionTrigger
from tagfs_client.config import Settings, get_settings, reload_settings
from tagfs_client.debounce import Debouncer
from tagfs_client.errors import ExternalToolError
from tagfs_client.file_tag_cache import FileTagCache
from tagfs_client.gateway import CommandGateway, run_subprocess
from tagfs_client.identity import file_identity
from tagfs_client.logging_config import enable_debug_mode
from tagfs_client.scanner import AnnotationScanner, compute_occurrences, to_ranges
from tagfs_client.tag_cache import TagCache

# Core types
from tagfs_client.types import (
    CacheEntry,
    FileId,
    Occurrence,
    Suggestion,
    TagSet,
    TextRange,
)

__version__ = "0.1.0"

__all__ = [
    "AnnotationScanner",
    "AsyncCacheStore",
    "AsyncMemoryStore",
    "CacheEntry",
    "CommandGateway",
    "CompletionTrigger",
    "Debouncer",
    "ExternalToolError",
    "FileId",
    "FileTagCache",
    "Occurrence",
    "Settings",
    "Suggestion",
    "TagCache",
    "TagFSClient",
    "TagSet",
    "TextRange",
    "compute_occurrences",
    "enable_debug_mode",
    "file_identity",
    "get_settings",
    "reload_settings",
    "run_subprocess",
    "to_ranges",
]
