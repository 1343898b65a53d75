"""Duplicate file detection.

Two phases keep hashing cheap:

1. Files are bucketed by exact byte size. Equal size is necessary but
   not sufficient, and singleton buckets are dropped before any file
   is opened.
2. Within each surviving bucket a SHA-256 digest of a fixed-size prefix
   is computed per file. Members sharing a digest form a group.

The prefix digest is a heuristic: two files with equal size and equal
first bytes but different tails are reported as duplicates.
"""

import hashlib
import logging
import threading
from collections import defaultdict
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from dustpan.cleanup.executor import CleanupReport, DeletionExecutor, DeletionResult, FailureKind
from dustpan.core.settings import (
    DEFAULT_DUPLICATE_MIN_SIZE,
    DEFAULT_FINGERPRINT_BYTES,
    DEFAULT_MAX_WORKERS,
    DEFAULT_PUBLISH_EVERY,
)
from dustpan.scan.generation import ProgressCallback, ScanGeneration, UpdateCallback
from dustpan.scan.models import DuplicateGroup, FileEntry, WalkStats, sort_duplicate_groups
from dustpan.scan.walker import walk

logger = logging.getLogger(__name__)

# User content folders searched by default (relative to home)
DEFAULT_DUPLICATE_ROOT_NAMES: tuple[str, ...] = (
    "Downloads",
    "Documents",
    "Desktop",
    "Pictures",
    "Music",
    "Movies",
    "Videos",
)


def default_duplicate_roots(home: Path | None = None) -> tuple[Path, ...]:
    """Return the built-in duplicate scan roots under a home directory."""
    base = home if home is not None else Path.home()
    return tuple(base / name for name in DEFAULT_DUPLICATE_ROOT_NAMES)


def fingerprint(path: Path | str, length: int = DEFAULT_FINGERPRINT_BYTES) -> str | None:
    """Hash the first bytes of a file.

    Args:
        path: File to read.
        length: Number of leading bytes to hash.

    Returns:
        SHA-256 hex digest, or None if the file is unreadable or empty.
    """
    try:
        with open(path, "rb") as f:
            data = f.read(length)
    except OSError as e:
        logger.debug("Cannot fingerprint %s: %s", path, e)
        return None
    if not data:
        return None
    return hashlib.sha256(data).hexdigest()


def bucket_by_size(entries: Iterable[FileEntry]) -> dict[int, list[FileEntry]]:
    """Group entries by exact size, dropping buckets with fewer than two members."""
    buckets: dict[int, list[FileEntry]] = defaultdict(list)
    for entry in entries:
        buckets[entry.size].append(entry)
    return {size: members for size, members in buckets.items() if len(members) > 1}


def group_by_fingerprint(
    paths: Iterable[Path],
    length: int = DEFAULT_FINGERPRINT_BYTES,
) -> dict[str, list[Path]]:
    """Group paths by prefix fingerprint.

    Unreadable files are left out. Only groups with at least two members
    are returned; members are sorted by path.
    """
    by_hash: dict[str, list[Path]] = defaultdict(list)
    for path in paths:
        digest = fingerprint(path, length)
        if digest is None:
            continue
        by_hash[digest].append(path)
    return {
        digest: sorted(members, key=str) for digest, members in by_hash.items() if len(members) > 1
    }


class DuplicateFinder:
    """Finds groups of files with identical size and prefix fingerprint.

    The finder keeps the latest published result so deletions can prune
    it. Each ``scan`` starts a new generation; results published by an
    older, still running scan are dropped.
    """

    def __init__(
        self,
        *,
        min_size: int = DEFAULT_DUPLICATE_MIN_SIZE,
        fingerprint_bytes: int = DEFAULT_FINGERPRINT_BYTES,
        publish_every: int = DEFAULT_PUBLISH_EVERY,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        if publish_every < 1:
            msg = f"publish_every must be at least 1, got {publish_every}"
            raise ValueError(msg)
        self._min_size = min_size
        self._fingerprint_bytes = fingerprint_bytes
        self._publish_every = publish_every
        self._max_workers = max(1, max_workers)

        self._lock = threading.Lock()
        self._generation = ScanGeneration()
        self._groups: tuple[DuplicateGroup, ...] = ()
        self.status_text = ""
        self.last_stats = WalkStats()

    @property
    def groups(self) -> list[DuplicateGroup]:
        """Latest published duplicate groups, largest groups first."""
        with self._lock:
            return list(self._groups)

    @property
    def generation(self) -> int:
        """Number of the most recent scan."""
        return self._generation.current

    def scan(
        self,
        roots: Iterable[Path] | None = None,
        on_update: UpdateCallback[DuplicateGroup] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[DuplicateGroup]:
        """Find duplicates below the given roots.

        Partial results are published through ``on_update`` every
        ``publish_every`` buckets, followed by the final list. All
        publications are sorted by descending member count.

        Args:
            roots: Directories to search. Defaults to the user content folders.
            on_update: Receives each published snapshot.
            on_progress: Receives (fraction, status) updates.

        Returns:
            Final list of duplicate groups for this scan.
        """
        generation = self._generation.begin()
        with self._lock:
            self._groups = ()

        scan_roots = tuple(roots) if roots is not None else default_duplicate_roots()
        self._report(generation, on_progress, 0.0, "Collecting files…")

        stats = WalkStats()
        entries = list(walk(scan_roots, self._min_size, stats=stats))
        self.last_stats = stats
        logger.debug(
            "Collected %d candidate files (%d errors skipped)", len(entries), stats.errors
        )

        buckets = bucket_by_size(entries)
        if not buckets:
            self._report(generation, on_progress, 1.0, "No potential duplicates found.")
            self._publish(generation, [], on_update)
            return []

        total = len(buckets)
        self._report(
            generation,
            on_progress,
            0.4,
            f"{total} size groups. Comparing file hashes…",
        )

        confirmed: list[DuplicateGroup] = []
        workers = min(self._max_workers, total)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dustpan-hash") as pool:
            futures = [
                pool.submit(self._hash_bucket, size, [e.path for e in members])
                for size, members in buckets.items()
            ]
            for processed, future in enumerate(as_completed(futures), start=1):
                confirmed.extend(future.result())
                self._report(
                    generation,
                    on_progress,
                    0.4 + 0.6 * processed / total,
                    f"Compared {processed} of {total} size groups",
                )
                if processed % self._publish_every == 0 and processed < total:
                    self._publish(generation, confirmed, on_update)

        final = sort_duplicate_groups(confirmed)
        file_count = sum(g.count for g in final)
        status = (
            f"Found {len(final)} duplicate groups ({file_count} files)"
            if final
            else "No duplicate files found."
        )
        self._report(generation, on_progress, 1.0, status)
        self._publish(generation, final, on_update)
        return final

    def prune(self, path: Path | str) -> None:
        """Drop a path, or anything below it, from the in-memory result.

        Groups left with fewer than two members disappear.
        """
        target = Path(path)
        with self._lock:
            remaining: list[DuplicateGroup] = []
            for group in self._groups:
                reduced = group.without(target)
                if reduced is not None:
                    remaining.append(reduced)
            self._groups = tuple(sort_duplicate_groups(remaining))

    def remove(self, path: Path | str, executor: DeletionExecutor) -> DeletionResult:
        """Delete one duplicate and prune it from the result.

        The path leaves the result when it was removed, or when it was
        already gone. A file that could not be deleted stays listed.

        Args:
            path: Member path to delete.
            executor: Executor performing the trash-first removal.

        Returns:
            DeletionResult for the file.
        """
        result = executor.delete_file(path)
        if executor.dry_run:
            return result
        if result.success or result.failure == FailureKind.NOT_FOUND:
            self.prune(path)
        return result

    def remove_extras(self, executor: DeletionExecutor) -> CleanupReport:
        """Delete all but the first member of every group.

        Args:
            executor: Executor performing the trash-first removals.

        Returns:
            CleanupReport covering every deleted member.
        """
        report = CleanupReport()
        for group in self.groups:
            for path in group.paths[1:]:
                report.results.append(self.remove(path, executor))
        return report

    def _hash_bucket(self, size: int, paths: list[Path]) -> list[DuplicateGroup]:
        """Fingerprint one size bucket and return its confirmed groups."""
        groups = group_by_fingerprint(paths, self._fingerprint_bytes)
        return [
            DuplicateGroup(size=size, fingerprint=digest, paths=tuple(members))
            for digest, members in groups.items()
        ]

    def _publish(
        self,
        generation: int,
        groups: list[DuplicateGroup],
        on_update: UpdateCallback[DuplicateGroup] | None,
    ) -> None:
        """Replace the visible result, unless the scan was superseded."""
        snapshot = sort_duplicate_groups(groups)
        with self._lock:
            if not self._generation.is_current(generation):
                logger.debug("Discarding duplicate results from stale scan %d", generation)
                return
            self._groups = tuple(snapshot)
        if on_update is not None:
            on_update(snapshot)

    def _report(
        self,
        generation: int,
        on_progress: ProgressCallback | None,
        fraction: float,
        status: str,
    ) -> None:
        if not self._generation.is_current(generation):
            return
        self.status_text = status
        if on_progress is not None:
            on_progress(fraction, status)
