"""Scan domain models.

This module defines the data structures produced by the directory
walker, the duplicate finder and the large file locator.
"""

import uuid
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class FileEntry:
    """A regular file discovered by the walker.

    Attributes:
        path: Filesystem path of the file.
        size: Size in bytes at the time it was seen.
    """

    path: Path
    size: int


@dataclass(slots=True)
class WalkStats:
    """Counters collected while walking directory trees.

    Attributes:
        files: Regular files yielded.
        errors: Entries skipped because of an OSError.
        skipped_hidden: Hidden entries ignored.
        skipped_packages: Package-like directories not descended into.
    """

    files: int = 0
    errors: int = 0
    skipped_hidden: int = 0
    skipped_packages: int = 0


@dataclass(frozen=True, slots=True)
class DuplicateGroup:
    """Files sharing one byte size and one content fingerprint.

    Attributes:
        size: Size in bytes of every member.
        fingerprint: Hex digest of the hashed prefix.
        paths: Member paths, at least two.
    """

    size: int
    fingerprint: str
    paths: tuple[Path, ...]

    def __post_init__(self) -> None:
        """Validate group data after initialization."""
        if len(self.paths) < 2:
            msg = f"Duplicate group needs at least 2 members, got {len(self.paths)}"
            raise ValueError(msg)
        if self.size < 0:
            msg = f"Size cannot be negative, got {self.size}"
            raise ValueError(msg)

    @property
    def count(self) -> int:
        """Number of members."""
        return len(self.paths)

    @property
    def total_bytes(self) -> int:
        """Bytes occupied by all members together."""
        return self.size * len(self.paths)

    @property
    def wasted_bytes(self) -> int:
        """Bytes reclaimable by keeping a single copy."""
        return self.size * (len(self.paths) - 1)

    def without(self, path: Path) -> "DuplicateGroup | None":
        """Return this group minus a path and anything below it.

        Returns None if fewer than 2 members remain.
        """
        remaining = tuple(p for p in self.paths if p != path and path not in p.parents)
        if len(remaining) < 2:
            return None
        if len(remaining) == len(self.paths):
            return self
        return DuplicateGroup(size=self.size, fingerprint=self.fingerprint, paths=remaining)


@dataclass(frozen=True, slots=True)
class LargeFile:
    """A file at or above the large file threshold.

    The id is independent of the path so selections survive result
    refreshes within one scan.

    Attributes:
        path: Filesystem path of the file.
        size: Size in bytes.
        id: Stable identity (hex string).
    """

    path: Path
    size: int
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


def sort_duplicate_groups(groups: list[DuplicateGroup]) -> list[DuplicateGroup]:
    """Order groups by member count, then size, both descending.

    The first path breaks remaining ties so output is deterministic.
    """
    return sorted(groups, key=lambda g: (-g.count, -g.size, str(g.paths[0])))


def sort_large_files(files: list[LargeFile]) -> list[LargeFile]:
    """Order large files by size descending, then path."""
    return sorted(files, key=lambda f: (-f.size, str(f.path)))
