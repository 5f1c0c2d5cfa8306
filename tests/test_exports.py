"""Tests for package exports."""

import logging
import sys

import tagfs_client
from tagfs_client import enable_debug_mode


def test_public_api_available() -> None:
    """Test that the public API is importable from the package root."""
    for name in tagfs_client.__all__:
        assert getattr(tagfs_client, name) is not None


def test_stores_satisfy_protocol() -> None:
    """Test that the memory store satisfies the store protocol."""
    from tagfs_client import AsyncCacheStore, AsyncMemoryStore

    assert isinstance(AsyncMemoryStore(), AsyncCacheStore)


def test_enable_debug_mode_is_idempotent() -> None:
    """Test that enabling debug mode twice adds one handler."""
    client_logger = logging.getLogger("tagfs_client")
    before = list(client_logger.handlers)
    try:
        first = enable_debug_mode()
        second = enable_debug_mode()
        assert first is second
        assert first.stream is sys.stderr
        assert client_logger.level == logging.DEBUG
    finally:
        for handler in client_logger.handlers:
            if handler not in before:
                client_logger.removeHandler(handler)
