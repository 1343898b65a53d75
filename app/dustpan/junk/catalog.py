"""Static catalog of well-known junk locations.

The catalog is a versioned table built at load time: one table for
macOS and one for XDG desktops (Linux and other Unix systems). Paths
that do not exist simply measure 0 and drop out of the scan result.
"""

import sys
from pathlib import Path
from typing import NamedTuple

# Bump when categories or items change meaning
CATALOG_VERSION = 3


class ItemSpec(NamedTuple):
    """One junk location.

    Attributes:
        name: Display name.
        path: Absolute path to measure and clean.
        recommended: Whether the item starts selected.
    """

    name: str
    path: str
    recommended: bool


class CategorySpec(NamedTuple):
    """A category of junk locations."""

    key: str
    name: str
    description: str
    items: tuple[ItemSpec, ...]


def _macos_catalog(home: str) -> tuple[CategorySpec, ...]:
    return (
        CategorySpec(
            "user_cache",
            "User Caches",
            "Application caches that can be safely regenerated",
            (ItemSpec("User Caches", f"{home}/Library/Caches", True),),
        ),
        CategorySpec(
            "system_logs",
            "System Logs",
            "Log files from macOS and applications",
            (
                ItemSpec("User Logs", f"{home}/Library/Logs", True),
                ItemSpec("Diagnostic Reports", f"{home}/Library/Logs/DiagnosticReports", True),
            ),
        ),
        CategorySpec(
            "xcode",
            "Xcode Junk",
            "Build data, simulators, and caches from Xcode",
            (
                ItemSpec("DerivedData", f"{home}/Library/Developer/Xcode/DerivedData", True),
                ItemSpec("Archives", f"{home}/Library/Developer/Xcode/Archives", False),
                ItemSpec(
                    "iOS DeviceSupport", f"{home}/Library/Developer/Xcode/iOS DeviceSupport", False
                ),
                ItemSpec("CoreSimulator", f"{home}/Library/Developer/CoreSimulator/Devices", False),
                ItemSpec("Xcode Caches", f"{home}/Library/Caches/com.apple.dt.Xcode", True),
            ),
        ),
        CategorySpec(
            "browser",
            "Browser Cache",
            "Temporary browser data for faster page loading",
            (
                ItemSpec("Safari Cache", f"{home}/Library/Caches/com.apple.Safari", True),
                ItemSpec("Chrome Cache", f"{home}/Library/Caches/Google/Chrome", True),
                ItemSpec("Firefox Cache", f"{home}/Library/Caches/Firefox", True),
                ItemSpec("Edge Cache", f"{home}/Library/Caches/com.microsoft.edgemac", True),
                ItemSpec("Brave Cache", f"{home}/Library/Caches/BraveSoftware", True),
            ),
        ),
        CategorySpec(
            "mail",
            "Mail Attachments",
            "Downloaded mail attachments and data",
            (
                ItemSpec(
                    "Mail Downloads",
                    f"{home}/Library/Containers/com.apple.mail/Data/Library/Mail Downloads",
                    False,
                ),
                ItemSpec("Mail Data", f"{home}/Library/Mail", False),
            ),
        ),
        CategorySpec(
            "temp",
            "Temporary Files",
            "System and application temporary files",
            (
                ItemSpec("Tmp", "/private/tmp", True),
                ItemSpec("Trash", f"{home}/.Trash", False),
            ),
        ),
        CategorySpec(
            "app_support",
            "Application Leftovers",
            "Support files from apps that may no longer be installed",
            (
                ItemSpec("Application Support", f"{home}/Library/Application Support", False),
                ItemSpec("Preferences", f"{home}/Library/Preferences", False),
            ),
        ),
    )


def _xdg_catalog(home: str) -> tuple[CategorySpec, ...]:
    return (
        CategorySpec(
            "user_cache",
            "User Caches",
            "Application caches that can be safely regenerated",
            (ItemSpec("User Caches", f"{home}/.cache", True),),
        ),
        CategorySpec(
            "system_logs",
            "Logs",
            "Session and application log files",
            (
                ItemSpec("Session Errors", f"{home}/.xsession-errors", True),
                ItemSpec("Application State Logs", f"{home}/.local/state/log", True),
            ),
        ),
        CategorySpec(
            "developer",
            "Developer Caches",
            "Package manager and build tool download caches",
            (
                ItemSpec("pip Cache", f"{home}/.cache/pip", True),
                ItemSpec("npm Cache", f"{home}/.npm/_cacache", True),
                ItemSpec("Yarn Cache", f"{home}/.cache/yarn", True),
                ItemSpec("Cargo Registry Cache", f"{home}/.cargo/registry/cache", False),
                ItemSpec("Gradle Caches", f"{home}/.gradle/caches", False),
                ItemSpec("Maven Repository", f"{home}/.m2/repository", False),
            ),
        ),
        CategorySpec(
            "browser",
            "Browser Cache",
            "Temporary browser data for faster page loading",
            (
                ItemSpec("Firefox Cache", f"{home}/.cache/mozilla/firefox", True),
                ItemSpec("Chrome Cache", f"{home}/.cache/google-chrome", True),
                ItemSpec("Chromium Cache", f"{home}/.cache/chromium", True),
                ItemSpec("Edge Cache", f"{home}/.cache/microsoft-edge", True),
                ItemSpec("Brave Cache", f"{home}/.cache/BraveSoftware", True),
            ),
        ),
        CategorySpec(
            "thumbnails",
            "Thumbnails",
            "Image previews regenerated by file managers on demand",
            (ItemSpec("Thumbnail Cache", f"{home}/.cache/thumbnails", True),),
        ),
        CategorySpec(
            "temp",
            "Temporary Files",
            "System and application temporary files",
            (
                ItemSpec("Tmp", "/tmp", True),
                ItemSpec("Var Tmp", "/var/tmp", False),
                ItemSpec("Trash", f"{home}/.local/share/Trash/files", False),
            ),
        ),
        CategorySpec(
            "app_support",
            "Application Leftovers",
            "Data files from apps that may no longer be installed",
            (ItemSpec("Recently Used", f"{home}/.local/share/recently-used.xbel", False),),
        ),
    )


def build_catalog(
    home: Path | str | None = None,
    platform: str | None = None,
) -> tuple[CategorySpec, ...]:
    """Build the junk catalog for a platform.

    Args:
        home: Home directory to expand. Defaults to the current user's home.
        platform: sys.platform-style name. Defaults to the running platform.

    Returns:
        Ordered tuple of category specs.
    """
    home_str = str(home if home is not None else Path.home())
    current = platform if platform is not None else sys.platform
    if current == "darwin":
        return _macos_catalog(home_str)
    return _xdg_catalog(home_str)
