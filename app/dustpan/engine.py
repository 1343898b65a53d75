"""Cleanup engine facade.

Wires one size cache, one deletion executor, the duplicate finder, the
large file locator and the junk analyzer together. Every operation has
a blocking form and a ``submit_*`` form that runs on a bounded
background pool and returns a Future, so a UI thread is never blocked.
"""

import logging
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from dustpan.cleanup.executor import CleanupReport, DeletionExecutor
from dustpan.core.settings import ScanSettings
from dustpan.junk.analyzer import JunkAnalyzer
from dustpan.junk.models import JunkCategory
from dustpan.scan.duplicates import DuplicateFinder
from dustpan.scan.generation import ProgressCallback, UpdateCallback
from dustpan.scan.large_files import LargeFileLocator
from dustpan.scan.models import DuplicateGroup, FileEntry, LargeFile
from dustpan.scan.sizes import SizeCache, cached_directory_size, directory_size
from dustpan.scan.walker import walk

logger = logging.getLogger(__name__)


class CleanupEngine:
    """Entry point for scanning and cleaning.

    Attributes:
        settings: Effective scan settings.
        cache: Size cache shared by measurements.
        executor: Deletion executor used by every cleanup.
        duplicates: Duplicate finder holding the latest groups.
        large_files: Large file locator holding the latest files.
        junk: Junk analyzer holding categories and selection.
    """

    def __init__(
        self,
        settings: ScanSettings | None = None,
        executor: DeletionExecutor | None = None,
        *,
        junk: JunkAnalyzer | None = None,
    ) -> None:
        """Initialize the CleanupEngine.

        Args:
            settings: Scan settings. Defaults to ScanSettings().
            executor: Deletion executor. Defaults to one honoring ``use_trash``.
            junk: Junk analyzer. Defaults to the platform catalog.
        """
        self.settings = settings if settings is not None else ScanSettings()
        self.cache = SizeCache()
        if executor is None:
            executor = DeletionExecutor(use_trash=self.settings.use_trash)
        self.executor = executor
        self.duplicates = DuplicateFinder(
            min_size=self.settings.duplicate_min_size,
            fingerprint_bytes=self.settings.fingerprint_bytes,
            publish_every=self.settings.publish_every,
            max_workers=self.settings.max_workers,
        )
        self.large_files = LargeFileLocator(
            threshold=self.settings.large_file_threshold,
            roots=self.settings.large_file_root_paths(),
        )
        self.junk = (
            junk if junk is not None else JunkAnalyzer(max_workers=self.settings.max_workers)
        )
        self._pool = ThreadPoolExecutor(
            max_workers=self.settings.max_workers, thread_name_prefix="dustpan-engine"
        )

    # -- scanning ---------------------------------------------------------

    def walk(self, roots: Iterable[Path | str], min_size: int = 0) -> list[FileEntry]:
        """Collect regular files at or above ``min_size`` below the roots."""
        return list(walk([Path(r) for r in roots], min_size))

    def directory_size(self, path: Path | str, *, use_cache: bool = False) -> int:
        """Measure a file or directory tree.

        Args:
            path: Path to measure.
            use_cache: Read and populate the engine's size cache.
        """
        if use_cache:
            return cached_directory_size(path, self.cache)
        return directory_size(path)

    def find_duplicates(
        self,
        roots: Iterable[Path | str] | None = None,
        on_update: UpdateCallback[DuplicateGroup] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[DuplicateGroup]:
        """Find duplicate groups. Roots default to the configured set."""
        scan_roots = (
            [Path(r) for r in roots] if roots is not None else self.settings.duplicate_root_paths()
        )
        return self.duplicates.scan(scan_roots, on_update=on_update, on_progress=on_progress)

    def find_large_files(
        self,
        threshold: int | None = None,
        roots: Iterable[Path | str] | None = None,
        on_update: UpdateCallback[LargeFile] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[LargeFile]:
        """Find large files.

        Args:
            threshold: Minimum size in bytes, defaults to the configured threshold.
            roots: Directories to scan, defaults to the configured roots.
            on_update: Receives each published snapshot.
            on_progress: Receives (fraction, status) updates.
        """
        if threshold is not None:
            self.large_files.threshold = threshold
        if roots is not None:
            self.large_files.roots = tuple(Path(r) for r in roots)
        return self.large_files.scan(on_update=on_update, on_progress=on_progress)

    def analyze_junk(
        self,
        on_progress: ProgressCallback | None = None,
        on_update: UpdateCallback[JunkCategory] | None = None,
    ) -> list[JunkCategory]:
        """Measure every junk catalog location."""
        return self.junk.scan(on_progress=on_progress, on_update=on_update)

    # -- deletion ---------------------------------------------------------

    def delete(self, target: Path | str) -> int:
        """Delete a path or a large file identity and return bytes freed.

        A large file identity from the current result is resolved to its
        path and pruned from the result. Anything else is treated as a
        path: files are removed and directories emptied. Duplicate and
        large file results drop whatever was removed.
        """
        large_file = self.large_files.get(target) if isinstance(target, str) else None
        if large_file is not None:
            report = self.large_files.delete([large_file.id], self.executor)
            if not self.executor.dry_run and not report.failures:
                self.duplicates.prune(large_file.path)
            return report.freed_bytes
        result = self.executor.delete(target)
        self.cache.remove(target)
        if not self.executor.dry_run and not any(result.iter_failures()):
            self.duplicates.prune(target)
            self.large_files.prune(Path(target))
        return result.freed_bytes

    def delete_batch(self, targets: Iterable[Path | str]) -> int:
        """Delete many paths or large file identities and return bytes freed."""
        return sum(self.delete(t) for t in targets)

    def clean_junk(self, on_progress: ProgressCallback | None = None) -> CleanupReport:
        """Clean the junk items currently selected."""
        report = self.junk.clean(self.executor, on_progress=on_progress)
        for item in self.junk.selected_items():
            self.cache.remove(item.path)
        return report

    def remove_duplicate_extras(self) -> CleanupReport:
        """Delete all but the first member of every duplicate group."""
        report = self.duplicates.remove_extras(self.executor)
        if not self.executor.dry_run:
            for result in report.results:
                if not any(result.iter_failures()):
                    self.large_files.prune(Path(result.path))
        return report

    # -- background execution ---------------------------------------------

    def submit_directory_size(self, path: Path | str, *, use_cache: bool = False) -> Future[int]:
        """Measure a path on the background pool."""
        return self._pool.submit(self.directory_size, path, use_cache=use_cache)

    def submit_find_duplicates(
        self,
        roots: Iterable[Path | str] | None = None,
        on_update: UpdateCallback[DuplicateGroup] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> Future[list[DuplicateGroup]]:
        """Find duplicates on the background pool."""
        root_list = list(roots) if roots is not None else None
        return self._pool.submit(self.find_duplicates, root_list, on_update, on_progress)

    def submit_find_large_files(
        self,
        threshold: int | None = None,
        roots: Iterable[Path | str] | None = None,
        on_update: UpdateCallback[LargeFile] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> Future[list[LargeFile]]:
        """Find large files on the background pool."""
        root_list = list(roots) if roots is not None else None
        return self._pool.submit(
            self.find_large_files, threshold, root_list, on_update, on_progress
        )

    def submit_analyze_junk(
        self,
        on_progress: ProgressCallback | None = None,
        on_update: UpdateCallback[JunkCategory] | None = None,
    ) -> Future[list[JunkCategory]]:
        """Measure junk locations on the background pool."""
        return self._pool.submit(self.analyze_junk, on_progress, on_update)

    def submit_delete_batch(self, targets: Iterable[Path | str]) -> Future[int]:
        """Delete many targets on the background pool."""
        return self._pool.submit(self.delete_batch, list(targets))

    def shutdown(self, wait: bool = True) -> None:
        """Stop the background pool."""
        logger.debug("Shutting down engine pool")
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> "CleanupEngine":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
