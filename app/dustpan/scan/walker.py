"""Recursive directory walker.

Enumerates regular files below one or more roots. Hidden entries are
ignored and package-like bundle directories are never descended into.
The walk is lazy and tolerates every per-entry error: a permission
denial, a broken link or a file vanishing mid-walk skips that entry
and traversal continues.
"""

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from dustpan.scan.models import FileEntry, WalkStats

logger = logging.getLogger(__name__)

# (st_dev, st_ino) identifying one file across names
FileKey = tuple[int, int]

# Directory suffixes treated as opaque packages (bundles)
PACKAGE_SUFFIXES: frozenset[str] = frozenset(
    {
        ".app",
        ".appex",
        ".bundle",
        ".framework",
        ".kext",
        ".lproj",
        ".photoslibrary",
        ".musiclibrary",
        ".tvlibrary",
        ".fcpbundle",
        ".logicx",
        ".band",
        ".imovielibrary",
        ".pkg",
        ".plugin",
        ".rtfd",
        ".xcarchive",
        ".xcodeproj",
        ".xcworkspace",
        ".playground",
        ".docset",
        ".sparsebundle",
    }
)


def is_hidden(name: str) -> bool:
    """Check whether a directory entry name is hidden."""
    return name.startswith(".")


def is_package_dir(name: str) -> bool:
    """Check whether a directory name looks like a package bundle.

    Args:
        name: Directory basename.

    Returns:
        True if the name ends with a known bundle suffix (case-insensitive).
    """
    _, ext = os.path.splitext(name)
    return ext.lower() in PACKAGE_SUFFIXES


def _first_sighting(st: os.stat_result, seen: set[FileKey]) -> bool:
    """Record a file identity, returning False if it was already seen."""
    # Some platforms report no inode number; such files cannot be matched
    if st.st_ino == 0:
        return True
    key = (st.st_dev, st.st_ino)
    if key in seen:
        return False
    seen.add(key)
    return True


def walk(
    roots: Iterable[Path | str],
    min_size: int = 0,
    *,
    skip_packages: bool = True,
    stats: WalkStats | None = None,
    seen: set[FileKey] | None = None,
) -> Iterator[FileEntry]:
    """Yield every regular file reachable below the given roots.

    Missing roots produce nothing. A root that is itself a regular file is
    yielded as a single entry. Symlinks are never followed. No ordering is
    guaranteed. Each file is yielded once, even when roots overlap or hard
    links give it several names.

    Args:
        roots: Directories (or files) to walk.
        min_size: Files smaller than this are not yielded.
        skip_packages: If True, package-like directories are not descended into.
        stats: Optional counters updated during the walk.
        seen: File identities already yielded. Pass the same set to several
            walks to keep them from repeating each other.

    Yields:
        FileEntry for each regular file.
    """
    if seen is None:
        seen = set()
    for root in roots:
        yield from _walk_root(Path(root), min_size, skip_packages, stats, seen)


def _walk_root(
    root: Path,
    min_size: int,
    skip_packages: bool,
    stats: WalkStats | None,
    seen: set[FileKey],
) -> Iterator[FileEntry]:
    """Walk a single root with an explicit stack."""
    try:
        if root.is_file() and not root.is_symlink():
            st = root.stat()
            size = st.st_size
            if size >= min_size and _first_sighting(st, seen):
                if stats is not None:
                    stats.files += 1
                yield FileEntry(path=root, size=size)
            return
        if not root.is_dir():
            logger.debug("Walk root does not exist: %s", root)
            return
    except OSError as e:
        logger.debug("Cannot access walk root %s: %s", root, e)
        if stats is not None:
            stats.errors += 1
        return

    stack: list[str] = [str(root)]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            logger.debug("Cannot read directory %s: %s", current, e)
            if stats is not None:
                stats.errors += 1
            continue

        for entry in entries:
            if is_hidden(entry.name):
                if stats is not None:
                    stats.skipped_hidden += 1
                continue
            try:
                if entry.is_dir(follow_symlinks=False):
                    if skip_packages and is_package_dir(entry.name):
                        if stats is not None:
                            stats.skipped_packages += 1
                        continue
                    stack.append(entry.path)
                elif entry.is_file(follow_symlinks=False):
                    st = entry.stat(follow_symlinks=False)
                    size = st.st_size
                    if size < min_size or not _first_sighting(st, seen):
                        continue
                    if stats is not None:
                        stats.files += 1
                    yield FileEntry(path=Path(entry.path), size=size)
            except OSError as e:
                logger.debug("Skipping %s: %s", entry.path, e)
                if stats is not None:
                    stats.errors += 1
