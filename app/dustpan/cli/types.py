"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from collections.abc import Sequence
from enum import Enum

import typer

from dustpan.cleanup.executor import DeletionExecutor
from dustpan.core.settings import ScanSettings, SettingsError, get_settings
from dustpan.core.state import record_cleanup
from dustpan.engine import CleanupEngine
from dustpan.junk.analyzer import JunkAnalyzer
from dustpan.junk.catalog import CategorySpec
from dustpan.models.history import CleanupType
from dustpan.utils.formatting import print_error, print_info, print_warning


class OutputFormat(str, Enum):
    """Output format options for scan commands."""

    TABLE = "table"
    JSON = "json"


def require_settings() -> ScanSettings:
    """Load settings or exit with an error.

    Returns:
        Settings from the settings file, or defaults if there is none.

    Raises:
        typer.Exit: If the settings file is invalid.
    """
    try:
        return get_settings()
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def create_engine(
    *,
    dry_run: bool = False,
    catalog: Sequence[CategorySpec] | None = None,
    settings: ScanSettings | None = None,
) -> CleanupEngine:
    """Create an engine from the user's settings.

    Args:
        dry_run: Simulate deletions.
        catalog: Junk catalog override, defaults to the platform catalog.
        settings: Settings override, defaults to the settings file.
    """
    effective = settings if settings is not None else require_settings()
    executor = DeletionExecutor(use_trash=effective.use_trash, dry_run=dry_run)
    junk = JunkAnalyzer(catalog, max_workers=effective.max_workers)
    return CleanupEngine(effective, executor, junk=junk)


def confirm_or_abort(prompt: str) -> None:
    """Ask for confirmation and exit cleanly when declined."""
    if not typer.confirm(prompt, default=False):
        print_info("Aborted.")
        raise typer.Exit(code=0)


def save_to_history(
    cleanup_type: CleanupType,
    freed_bytes: int,
    item_count: int,
    details: list[str] | None = None,
) -> None:
    """Record a finished cleanup, warning instead of failing."""
    try:
        if record_cleanup(cleanup_type, freed_bytes, item_count, details) is not None:
            print_info("Cleanup recorded to history.")
    except (OSError, RuntimeError) as e:
        print_warning(f"Could not record to history: {e}")
