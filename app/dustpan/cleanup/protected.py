"""Protected filesystem paths that should never be deleted.

This module defines path patterns for system locations and user data
that are critical for system operation or user security, and must be
refused by the deletion executor whatever the caller selected.
"""

import fnmatch
from pathlib import Path

# Protected filesystem path patterns (glob-style).
# Patterns starting with ~ are expanded to the user's home directory
# before matching. Patterns starting with / are matched as-is.
# A bare directory pattern protects the directory itself; a trailing
# /* protects everything beneath it.
PROTECTED_PATH_PATTERNS: list[str] = [
    # Filesystem roots
    "/",
    "~",
    # macOS system
    "/System",
    "/System/*",
    "/Library",
    "/Applications",
    "/private/var/db/*",
    # Unix system directories
    "/bin",
    "/bin/*",
    "/sbin",
    "/sbin/*",
    "/usr",
    "/usr/*",
    "/etc",
    "/etc/*",
    "/boot",
    "/boot/*",
    "/lib",
    "/lib/*",
    "/lib64",
    "/lib64/*",
    "/var/lib/*",
    # Security material
    "~/.ssh",
    "~/.ssh/*",
    "~/.gnupg",
    "~/.gnupg/*",
    "~/.local/share/keyrings",
    "~/.local/share/keyrings/*",
    "~/Library/Keychains",
    "~/Library/Keychains/*",
    # dustpan itself
    "~/.config/dustpan",
    "~/.config/dustpan/*",
    "~/.local/state/dustpan",
    "~/.local/state/dustpan/*",
]


def _normalize(path: str) -> str:
    """Strip trailing separators so '/usr/' matches '/usr'."""
    if len(path) > 1:
        return path.rstrip("/") or "/"
    return path


def is_protected_path(path: str | Path) -> bool:
    """Check if a filesystem path is protected and must not be deleted.

    The path argument should be absolute. Patterns using ~ notation are
    expanded to the actual home directory before comparison using fnmatch
    for glob-style matching.

    Args:
        path: Absolute filesystem path to check.

    Returns:
        True if the path matches any protected pattern, False otherwise.
    """
    home = str(Path.home())
    candidate = _normalize(str(path))

    for pattern in PROTECTED_PATH_PATTERNS:
        expanded = home + pattern[1:] if pattern.startswith("~") else pattern

        if fnmatch.fnmatchcase(candidate, expanded):
            return True

    return False
