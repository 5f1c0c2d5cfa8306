"""Client configuration using pydantic-settings.

All settings are read from ``TAGFS_*`` environment variables (or a ``.env``
file) through the Settings class. Consumers call ``get_settings()`` for a
cached instance; ``reload_settings()`` drops the cache so the next tool
invocation sees the new values. Tests construct ``Settings(_env_file=None,
...)`` directly for isolation.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_DURATION_PATTERN = re.compile(r"^(\d+)(ms|s|m)$")
_UNITS: dict[str, int] = {
    "ms": 1,
    "s": 1000,
    "m": 60_000,
}


def parse_duration(duration: str | int) -> int:
    """Parse a duration string to milliseconds. Passthrough if already int."""
    if isinstance(duration, int):
        return duration

    match = _DURATION_PATTERN.match(duration.strip())
    if not match:
        raise ValueError(f"Invalid duration: {duration!r}")

    value, unit = match.groups()
    return int(value) * _UNITS[unit]


class Settings(BaseSettings):
    """tagfs client settings."""

    model_config = SettingsConfigDict(
        env_prefix="TAGFS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    path: str = ""
    default_search_dir: Path = Path("/linuxdev/github/HTFS")
    program: str = "tagfs"
    trigger: str = "##"
    debounce: int = Field(default=300, ge=0)  # milliseconds

    @field_validator("path", mode="before")
    @classmethod
    def _strip_path(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("trigger")
    @classmethod
    def _check_trigger(cls, value: str) -> str:
        if len(value) != 2 or any(ch.isspace() for ch in value):
            msg = f"trigger must be two non-whitespace characters, got {value!r}"
            raise ValueError(msg)
        return value

    @field_validator("debounce", mode="before")
    @classmethod
    def _parse_debounce(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip().isdigit():
            return parse_duration(value)
        return value

    @property
    def configured(self) -> bool:
        """True when an explicit executable path is set."""
        return bool(self.path)

    @property
    def search_dir(self) -> Path:
        """Directory prepended to PATH for each invocation."""
        if self.configured:
            return Path(self.path).parent
        return self.default_search_dir

    @property
    def executable_name(self) -> str:
        """Program name looked up on the search path."""
        if self.configured:
            return Path(self.path).name
        return self.program


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings instance."""
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached settings and read them again."""
    get_settings.cache_clear()
    settings = get_settings()
    logger.debug("Reloaded settings: path=%r", settings.path)
    return settings
