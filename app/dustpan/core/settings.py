"""Scan settings and their TOML persistence.

Settings are stored in ~/.config/dustpan/settings.toml. Every key is
optional; a missing file means all defaults apply.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dustpan.core.paths import get_settings_path

logger = logging.getLogger(__name__)

DEFAULT_LARGE_FILE_THRESHOLD = 100_000_000
DEFAULT_DUPLICATE_MIN_SIZE = 1024
DEFAULT_FINGERPRINT_BYTES = 8192
DEFAULT_PUBLISH_EVERY = 20
DEFAULT_MAX_WORKERS = 4


class ScanSettings(BaseModel):
    """Tunable parameters for scanning and cleanup.

    Attributes:
        large_file_threshold: Minimum size in bytes for a large file.
        duplicate_min_size: Files below this size are ignored by the duplicate finder.
        fingerprint_bytes: Length of the file prefix hashed for duplicate detection.
        publish_every: Number of size buckets between partial duplicate results.
        max_workers: Upper bound on concurrent background workers.
        use_trash: Move files to the trash before falling back to deletion.
        duplicate_roots: Directories searched for duplicates (None = built-in set).
        large_file_roots: Directories searched for large files (None = built-in set).
    """

    model_config = ConfigDict(extra="forbid")

    large_file_threshold: Annotated[
        int,
        Field(ge=1, description="Large file threshold in bytes"),
    ] = DEFAULT_LARGE_FILE_THRESHOLD
    duplicate_min_size: Annotated[
        int,
        Field(ge=1, description="Minimum duplicate candidate size in bytes"),
    ] = DEFAULT_DUPLICATE_MIN_SIZE
    fingerprint_bytes: Annotated[
        int,
        Field(ge=512, le=1_048_576, description="Hashed prefix length (512-1048576)"),
    ] = DEFAULT_FINGERPRINT_BYTES
    publish_every: Annotated[
        int,
        Field(ge=1, description="Buckets between partial duplicate publications"),
    ] = DEFAULT_PUBLISH_EVERY
    max_workers: Annotated[
        int,
        Field(ge=1, le=64, description="Background worker limit (1-64)"),
    ] = DEFAULT_MAX_WORKERS
    use_trash: Annotated[
        bool,
        Field(description="Try the trash before permanent deletion"),
    ] = True
    duplicate_roots: Annotated[
        list[str] | None,
        Field(description="Duplicate scan roots (None = built-in set)"),
    ] = None
    large_file_roots: Annotated[
        list[str] | None,
        Field(description="Large file scan roots (None = built-in set)"),
    ] = None

    def duplicate_root_paths(self) -> tuple[Path, ...] | None:
        """Expanded duplicate roots, or None for the built-in set."""
        if self.duplicate_roots is None:
            return None
        return tuple(Path(p).expanduser() for p in self.duplicate_roots)

    def large_file_root_paths(self) -> tuple[Path, ...] | None:
        """Expanded large-file roots, or None for the built-in set."""
        if self.large_file_roots is None:
            return None
        return tuple(Path(p).expanduser() for p in self.large_file_roots)


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsNotFoundError(SettingsError):
    """Raised when the settings file is not found."""


class SettingsParseError(SettingsError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None) -> ScanSettings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated ScanSettings object.

    Raises:
        SettingsNotFoundError: If the settings file doesn't exist.
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the content doesn't match the schema.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        raise SettingsNotFoundError(f"Settings not found: {settings_path}")

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return ScanSettings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def get_settings(path: Path | None = None) -> ScanSettings:
    """Load settings, falling back to defaults when no file exists.

    Parse and validation errors still propagate.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        ScanSettings from the file, or defaults.
    """
    try:
        return load_settings(path)
    except SettingsNotFoundError:
        logger.debug("No settings file, using defaults")
        return ScanSettings()


def save_settings(settings: ScanSettings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The ScanSettings object to save.
        path: Path to save the settings. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    data = _settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path


def _settings_to_dict(settings: ScanSettings) -> dict[str, object]:
    """Convert ScanSettings to a dictionary for TOML serialization.

    TOML has no null, so unset root lists are omitted.
    """
    return settings.model_dump(exclude_none=True)
