"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys
from datetime import UTC, datetime

from rich.console import Console

from dustpan.core.theme import get_theme

HUGE_FILE_BYTES = 1_000_000_000
LARGE_FILE_BYTES = 100_000_000


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def format_size(size_bytes: int | None) -> str:
    """Format byte count as human-readable string.

    Args:
        size_bytes: Number of bytes, or None.

    Returns:
        String such as "512 B", "1.5 KB" or "3.2 GB".
    """
    if size_bytes is None or size_bytes == 0:
        return "0 B"
    if size_bytes < 0:
        return f"-{format_size(-size_bytes)}"
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if abs(size) < 1024:
            return f"{size:.1f} {unit}" if unit != "B" else f"{int(size)} B"
        size /= 1024
    return f"{size:.1f} TB"


def styled_size(size_bytes: int) -> str:
    """Format a byte count with a size-bucket style markup."""
    if size_bytes >= HUGE_FILE_BYTES:
        style = "size_huge"
    elif size_bytes >= LARGE_FILE_BYTES:
        style = "size_large"
    else:
        style = "size_small"
    return f"[{style}]{format_size(size_bytes)}[/]"


def format_relative_time(iso_timestamp: str, now: datetime | None = None) -> str:
    """Format an ISO timestamp as relative time ('2 hours ago')."""
    dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    current = now or datetime.now(UTC)
    seconds = int((current - dt).total_seconds())

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        m = seconds // 60
        return f"{m} minute{'s' if m != 1 else ''} ago"
    if seconds < 86400:
        h = seconds // 3600
        return f"{h} hour{'s' if h != 1 else ''} ago"
    d = seconds // 86400
    if d < 30:
        return f"{d} day{'s' if d != 1 else ''} ago"
    mo = d // 30
    if mo < 12:
        return f"{mo} month{'s' if mo != 1 else ''} ago"
    y = d // 365
    return f"{y} year{'s' if y != 1 else ''} ago"


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
