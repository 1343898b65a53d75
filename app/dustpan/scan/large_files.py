"""Large file locator.

Walks a fixed, ordered list of user directories and keeps every file at
or above a size threshold. The result is republished after each root so
it grows visibly root by root.
"""

import logging
import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from dustpan.cleanup.executor import CleanupReport, DeletionExecutor, FailureKind
from dustpan.core.settings import DEFAULT_LARGE_FILE_THRESHOLD
from dustpan.scan.generation import ProgressCallback, ScanGeneration, UpdateCallback
from dustpan.scan.models import LargeFile, WalkStats, sort_large_files
from dustpan.scan.walker import FileKey, walk

logger = logging.getLogger(__name__)

# Scanned in this order (relative to home)
DEFAULT_LARGE_FILE_ROOT_NAMES: tuple[str, ...] = (
    "Downloads",
    "Documents",
    "Desktop",
    "Movies",
    "Videos",
    "Music",
    "Pictures",
    "Library",
    "Developer",
)


def default_large_file_roots(home: Path | None = None) -> tuple[Path, ...]:
    """Return the built-in large file roots under a home directory."""
    base = home if home is not None else Path.home()
    return tuple(base / name for name in DEFAULT_LARGE_FILE_ROOT_NAMES)


def find_large_files(
    root: Path,
    threshold: int,
    stats: WalkStats | None = None,
    seen: set[FileKey] | None = None,
) -> list[LargeFile]:
    """Return every file below one root whose size is at least the threshold.

    Files whose identity is already in ``seen`` are left out.
    """
    entries = walk([root], threshold, stats=stats, seen=seen)
    return [LargeFile(path=e.path, size=e.size) for e in entries]


class LargeFileLocator:
    """Locates files at or above a byte threshold.

    Attributes:
        threshold: Minimum size in bytes, mutable between scans.
        roots: Ordered directories to scan.
    """

    def __init__(
        self,
        threshold: int = DEFAULT_LARGE_FILE_THRESHOLD,
        roots: Iterable[Path] | None = None,
    ) -> None:
        self.threshold = threshold
        self.roots: tuple[Path, ...] = (
            tuple(roots) if roots is not None else default_large_file_roots()
        )
        self._lock = threading.Lock()
        self._generation = ScanGeneration()
        self._files: tuple[LargeFile, ...] = ()
        self.last_stats = WalkStats()

    @property
    def files(self) -> list[LargeFile]:
        """Latest published large files, biggest first."""
        with self._lock:
            return list(self._files)

    @property
    def generation(self) -> int:
        """Number of the most recent scan."""
        return self._generation.current

    def get(self, file_id: str) -> LargeFile | None:
        """Look up a file of the current result by identity."""
        with self._lock:
            for f in self._files:
                if f.id == file_id:
                    return f
        return None

    def prune(self, path: Path) -> None:
        """Drop a path, or anything below it, from the current result."""
        with self._lock:
            self._files = tuple(
                f for f in self._files if f.path != path and path not in f.path.parents
            )

    def scan(
        self,
        on_update: UpdateCallback[LargeFile] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[LargeFile]:
        """Scan every root in order.

        Each root is walked on a background worker. After each root the
        full result so far is republished, sorted by descending size.

        Args:
            on_update: Receives each published snapshot.
            on_progress: Receives (fraction, status) updates.

        Returns:
            Final list of large files for this scan.
        """
        generation = self._generation.begin()
        with self._lock:
            self._files = ()

        threshold = self.threshold
        roots = self.roots
        stats = WalkStats()
        seen: set[FileKey] = set()
        found: list[LargeFile] = []

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="dustpan-large") as pool:
            for idx, root in enumerate(roots):
                if on_progress is not None and self._generation.is_current(generation):
                    on_progress(idx / len(roots), f"Scanning {root}")
                found.extend(pool.submit(find_large_files, root, threshold, stats, seen).result())
                self._publish(generation, found, on_update)

        self.last_stats = stats
        final = sort_large_files(found)
        if on_progress is not None and self._generation.is_current(generation):
            total = sum(f.size for f in final)
            on_progress(1.0, f"Found {len(final)} large files ({total} bytes)")
        logger.debug("Large file scan found %d files, %d errors skipped", len(final), stats.errors)
        return final

    def delete(self, file_ids: Iterable[str], executor: DeletionExecutor) -> CleanupReport:
        """Delete selected files by identity, trash first.

        Unknown identities are skipped. Failed deletions are logged and
        do not stop the batch. Removed identities leave the result.

        Args:
            file_ids: Identities of files in the current result.
            executor: Executor performing the removals.

        Returns:
            CleanupReport for the attempted deletions.
        """
        report = CleanupReport()
        removed: set[str] = set()

        for file_id in file_ids:
            large_file = self.get(file_id)
            if large_file is None:
                logger.info("Large file %s is not in the current result, skipping", file_id)
                continue
            result = executor.delete_file(large_file.path)
            report.results.append(result)
            if result.success or result.failure == FailureKind.NOT_FOUND:
                removed.add(file_id)
            else:
                logger.warning("Failed to delete %s: %s", large_file.path, result.error)

        if removed and not executor.dry_run:
            with self._lock:
                self._files = tuple(f for f in self._files if f.id not in removed)
        return report

    def _publish(
        self,
        generation: int,
        files: list[LargeFile],
        on_update: UpdateCallback[LargeFile] | None,
    ) -> None:
        """Replace the visible result, unless the scan was superseded."""
        snapshot = sort_large_files(files)
        with self._lock:
            if not self._generation.is_current(generation):
                logger.debug("Discarding large file results from stale scan %d", generation)
                return
            self._files = tuple(snapshot)
        if on_update is not None:
            on_update(snapshot)
