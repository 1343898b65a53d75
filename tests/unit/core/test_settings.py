"""Unit tests for scan settings."""

import tomllib
from pathlib import Path

import pytest
from dustpan.core.paths import get_settings_path
from dustpan.core.settings import (
    DEFAULT_LARGE_FILE_THRESHOLD,
    ScanSettings,
    SettingsError,
    SettingsNotFoundError,
    SettingsParseError,
    get_settings,
    load_settings,
    save_settings,
)


class TestScanSettings:
    """Tests for the ScanSettings model."""

    def test_defaults(self) -> None:
        """Defaults match the built-in constants."""
        settings = ScanSettings()
        assert settings.large_file_threshold == DEFAULT_LARGE_FILE_THRESHOLD == 100_000_000
        assert settings.duplicate_min_size == 1024
        assert settings.fingerprint_bytes == 8192
        assert settings.publish_every == 20
        assert settings.use_trash is True
        assert settings.duplicate_root_paths() is None

    def test_extra_keys_forbidden(self) -> None:
        """Unknown keys are rejected."""
        with pytest.raises(ValueError):
            ScanSettings(unknown=1)  # type: ignore[call-arg]

    @pytest.mark.parametrize("workers", [0, 65])
    def test_worker_bounds(self, workers: int) -> None:
        """max_workers is bounded."""
        with pytest.raises(ValueError):
            ScanSettings(max_workers=workers)

    def test_roots_are_expanded(self) -> None:
        """Root lists expand ~ to the home directory."""
        settings = ScanSettings(large_file_roots=["~/Videos", "/data"])
        assert settings.large_file_root_paths() == (Path.home() / "Videos", Path("/data"))


class TestLoadSettings:
    """Tests for load_settings and get_settings."""

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """load_settings reports a missing file."""
        with pytest.raises(SettingsNotFoundError):
            load_settings(tmp_path / "settings.toml")

    def test_get_settings_defaults_when_missing(self) -> None:
        """get_settings falls back to defaults."""
        assert get_settings() == ScanSettings()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises a parse error."""
        path = tmp_path / "settings.toml"
        path.write_text("threshold = [[[")

        with pytest.raises(SettingsParseError):
            load_settings(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        """Schema violations raise SettingsError."""
        path = tmp_path / "settings.toml"
        path.write_text("max_workers = 0\n")

        with pytest.raises(SettingsError, match="Invalid settings content"):
            get_settings(path)

    def test_partial_file(self, tmp_path: Path) -> None:
        """Keys not in the file keep their defaults."""
        path = tmp_path / "settings.toml"
        path.write_text("large_file_threshold = 5000\nuse_trash = false\n")

        settings = load_settings(path)

        assert settings.large_file_threshold == 5000
        assert settings.use_trash is False
        assert settings.publish_every == 20


class TestSaveSettings:
    """Tests for save_settings."""

    def test_round_trip(self) -> None:
        """Saved settings load back unchanged."""
        original = ScanSettings(max_workers=2, duplicate_roots=["/srv/media"])

        path = save_settings(original)

        assert path == get_settings_path()
        assert load_settings() == original

    def test_omits_unset_roots(self, tmp_path: Path) -> None:
        """TOML has no null, so unset roots are not written."""
        path = save_settings(ScanSettings(), tmp_path / "settings.toml")

        with open(path, "rb") as f:
            data = tomllib.load(f)

        assert "duplicate_roots" not in data
        assert data["fingerprint_bytes"] == 8192

    def test_leaves_no_temp_files(self, tmp_path: Path) -> None:
        """The atomic write cleans up after itself."""
        save_settings(ScanSettings(), tmp_path / "settings.toml")
        assert [p.name for p in tmp_path.iterdir() if p.suffix == ".tmp"] == []
