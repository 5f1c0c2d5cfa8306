"""Tests for client settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from tagfs_client import Settings, get_settings, reload_settings
from tagfs_client.config import parse_duration


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("TAGFS_PATH", "TAGFS_PROGRAM", "TAGFS_TRIGGER", "TAGFS_DEBOUNCE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()


class TestParseDuration:
    """Tests for parse_duration function."""

    def test_milliseconds(self) -> None:
        """Test parsing millisecond durations."""
        assert parse_duration("300ms") == 300
        assert parse_duration("0ms") == 0

    def test_seconds_and_minutes(self) -> None:
        """Test parsing second and minute durations."""
        assert parse_duration("1s") == 1000
        assert parse_duration("2m") == 120_000

    def test_integer_passthrough(self) -> None:
        """Test that integers pass through unchanged."""
        assert parse_duration(250) == 250

    @pytest.mark.parametrize("value", ["", "fast", "10x", "s10", "1.5s"])
    def test_invalid_format(self, value: str) -> None:
        """Test that malformed durations raise ValueError."""
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(value)


class TestSettings:
    """Defaults, derived values and validation."""

    def test_defaults(self) -> None:
        """Test default settings."""
        settings = Settings(_env_file=None)
        assert settings.path == ""
        assert not settings.configured
        assert settings.search_dir == Path("/linuxdev/github/HTFS")
        assert settings.executable_name == "tagfs"
        assert settings.trigger == "##"
        assert settings.debounce == 300

    def test_configured_path(self) -> None:
        """Test values derived from an explicit executable path."""
        settings = Settings(_env_file=None, path="  /opt/htfs/bin/tagfs  ")
        assert settings.path == "/opt/htfs/bin/tagfs"
        assert settings.configured
        assert settings.search_dir == Path("/opt/htfs/bin")
        assert settings.executable_name == "tagfs"

    def test_whitespace_path_is_unset(self) -> None:
        """Test that a blank path counts as unset."""
        assert not Settings(_env_file=None, path="   ").configured

    def test_debounce_accepts_duration_strings(self) -> None:
        """Test that debounce accepts durations and plain numbers."""
        assert Settings(_env_file=None, debounce="1s").debounce == 1000
        assert Settings(_env_file=None, debounce="450").debounce == 450
        with pytest.raises(ValidationError):
            Settings(_env_file=None, debounce="soon")

    @pytest.mark.parametrize("debounce", [-1, "-5"])
    def test_negative_debounce_rejected(self, debounce: int | str) -> None:
        """Test that a negative debounce window is rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, debounce=debounce)

    @pytest.mark.parametrize("trigger", ["#", "###", "# ", ""])
    def test_trigger_must_be_two_characters(self, trigger: str) -> None:
        """Test that the trigger must be two non-whitespace characters."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, trigger=trigger)

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test reading settings from TAGFS_ variables."""
        monkeypatch.setenv("TAGFS_PATH", "/usr/local/htfs/tagfs")
        monkeypatch.setenv("TAGFS_DEBOUNCE", "500ms")
        settings = Settings(_env_file=None)
        assert settings.search_dir == Path("/usr/local/htfs")
        assert settings.debounce == 500

    def test_reads_env_file(self, tmp_path: Path) -> None:
        """Test reading settings from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("TAGFS_PATH=/srv/htfs/tagfs\nTAGFS_TRIGGER=@@\n")
        settings = Settings(_env_file=env_file)
        assert settings.path == "/srv/htfs/tagfs"
        assert settings.trigger == "@@"


class TestGetSettings:
    """The cached instance is refreshed only on reload."""

    def test_cached_until_reload(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that get_settings is cached until reload_settings."""
        monkeypatch.chdir(Path(__file__).parent)
        first = get_settings()
        assert get_settings() is first

        monkeypatch.setenv("TAGFS_PATH", "/new/tagfs")
        assert get_settings().path == first.path
        reloaded = reload_settings()
        assert reloaded.path == "/new/tagfs"
        assert get_settings() is reloaded
