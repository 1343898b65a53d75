"""Trash-first deletion executor.

Every removal first tries the platform trash (reversible) and falls
back to permanent deletion. Each target, and each child of a directory
target, fails independently: a failure credits 0 bytes and is recorded,
and the batch always runs to completion.
"""

import logging
import os
import shutil
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from send2trash import send2trash

from dustpan.cleanup.protected import is_protected_path
from dustpan.scan.sizes import directory_size

logger = logging.getLogger(__name__)

TrashFunction = Callable[[str], None]


class FailureKind(str, Enum):
    """Why a deletion credited no bytes.

    Attributes:
        NOT_FOUND: The path no longer exists.
        PERMISSION_DENIED: Access to the path was refused.
        IO_FAILURE: The path could not be read or measured.
        DELETE_FAILURE: Both trash and permanent removal failed.
        PROTECTED: The path matches a protected pattern.
    """

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    IO_FAILURE = "io_failure"
    DELETE_FAILURE = "delete_failure"
    PROTECTED = "protected"


class RemovalMethod(str, Enum):
    """How a path was removed."""

    TRASH = "trash"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class DeletionResult:
    """Result of deleting a single path.

    For a directory target the directory itself is kept and ``children``
    holds one result per direct child.

    Attributes:
        path: Path that was operated on.
        freed_bytes: Bytes actually freed (or that would be, on dry-run).
        method: Removal method used, None if nothing was removed.
        failure: Failure classification, None on success.
        error: Error message if the operation failed.
        dry_run: Whether this was a simulated deletion.
        children: Per-child results for directory targets.
    """

    path: str
    freed_bytes: int = 0
    method: RemovalMethod | None = None
    failure: FailureKind | None = None
    error: str | None = None
    dry_run: bool = False
    children: tuple["DeletionResult", ...] = ()

    @property
    def success(self) -> bool:
        """Whether the target itself was handled without failure."""
        return self.failure is None

    def iter_failures(self) -> Iterable["DeletionResult"]:
        """Yield this result and child results that failed.

        An entry that was already gone is not a failure.
        """
        if self.failure is not None and self.failure != FailureKind.NOT_FOUND:
            yield self
        for child in self.children:
            yield from child.iter_failures()


@dataclass(slots=True)
class CleanupReport:
    """Aggregate outcome of a batch deletion.

    Attributes:
        results: One result per requested target, in request order.
    """

    results: list[DeletionResult] = field(default_factory=list)

    @property
    def freed_bytes(self) -> int:
        """Total bytes freed across the batch."""
        return sum(r.freed_bytes for r in self.results)

    @property
    def failures(self) -> list[DeletionResult]:
        """Every failed target or directory child."""
        return [f for r in self.results for f in r.iter_failures()]

    @property
    def removed_count(self) -> int:
        """Number of filesystem entries removed (files or directory children)."""
        return sum(_count_removed(r) for r in self.results)

    @property
    def dry_run(self) -> bool:
        """Whether every result in the batch was simulated."""
        return bool(self.results) and all(r.dry_run for r in self.results)


def _count_removed(result: DeletionResult) -> int:
    if result.children:
        return sum(_count_removed(c) for c in result.children)
    return 1 if result.method is not None else 0


def _classify(error: OSError) -> FailureKind:
    """Map an OSError to a failure kind."""
    if isinstance(error, FileNotFoundError):
        return FailureKind.NOT_FOUND
    if isinstance(error, PermissionError):
        return FailureKind.PERMISSION_DENIED
    return FailureKind.IO_FAILURE


class DeletionExecutor:
    """Removes files and directory contents, trash first.

    Attributes:
        _use_trash: If False, skip the trash and delete permanently.
        _dry_run: If True, measure and report without modifying anything.
        _trash: Callable moving one path to the trash.
    """

    def __init__(
        self,
        *,
        use_trash: bool = True,
        dry_run: bool = False,
        trash: TrashFunction | None = None,
    ) -> None:
        """Initialize the DeletionExecutor.

        Args:
            use_trash: Try the trash before permanent deletion.
            dry_run: If True, report what would be freed without deleting.
            trash: Trash implementation, defaults to send2trash.
        """
        self._use_trash = use_trash
        self._dry_run = dry_run
        self._trash: TrashFunction = trash if trash is not None else send2trash

    @property
    def dry_run(self) -> bool:
        """Whether deletions are simulated."""
        return self._dry_run

    def delete(self, path: Path | str, keep: Iterable[Path | str] = ()) -> DeletionResult:
        """Delete a file, or empty a directory while keeping it.

        Files are trashed, or permanently removed if trashing fails.
        For directories every direct child is measured first, then
        removed the same way; a child that cannot be removed is skipped
        without affecting its siblings.

        Args:
            path: File or directory to clean.
            keep: Paths inside the directory to leave in place. Directories
                leading to a kept path are emptied around it.

        Returns:
            DeletionResult with the bytes actually freed.
        """
        target = Path(path)
        path_str = str(target)

        if is_protected_path(path_str):
            logger.warning("Refusing to delete protected path: %s", path_str)
            return DeletionResult(
                path=path_str,
                failure=FailureKind.PROTECTED,
                error=f"Protected path cannot be deleted: {path_str}",
                dry_run=self._dry_run,
            )

        try:
            is_dir = target.is_dir() and not target.is_symlink()
            exists = is_dir or target.exists() or target.is_symlink()
        except OSError as e:
            logger.warning("Cannot access %s: %s", path_str, e)
            return DeletionResult(
                path=path_str, failure=_classify(e), error=str(e), dry_run=self._dry_run
            )

        if not exists:
            logger.info("Nothing to delete, path does not exist: %s", path_str)
            return DeletionResult(
                path=path_str,
                failure=FailureKind.NOT_FOUND,
                error=f"Path does not exist: {path_str}",
                dry_run=self._dry_run,
            )

        if is_dir:
            return self._empty_directory(target, frozenset(Path(k) for k in keep))
        return self.delete_file(target)

    def delete_file(self, path: Path | str) -> DeletionResult:
        """Remove exactly one entry, trash first.

        The entry is measured before removal and that size is credited
        only if a removal attempt succeeds. A directory passed here is
        removed as a whole.

        Args:
            path: Entry to remove.

        Returns:
            DeletionResult for the entry.
        """
        target = Path(path)
        path_str = str(target)

        if is_protected_path(path_str):
            logger.warning("Refusing to delete protected path: %s", path_str)
            return DeletionResult(
                path=path_str,
                failure=FailureKind.PROTECTED,
                error=f"Protected path cannot be deleted: {path_str}",
                dry_run=self._dry_run,
            )

        try:
            exists = target.exists() or target.is_symlink()
        except OSError as e:
            logger.warning("Cannot access %s: %s", path_str, e)
            return DeletionResult(
                path=path_str, failure=_classify(e), error=str(e), dry_run=self._dry_run
            )

        if not exists:
            return DeletionResult(
                path=path_str,
                failure=FailureKind.NOT_FOUND,
                error=f"Path does not exist: {path_str}",
                dry_run=self._dry_run,
            )

        size = directory_size(target)

        if self._dry_run:
            logger.info("Dry-run: would delete %s (%d bytes)", path_str, size)
            return DeletionResult(path=path_str, freed_bytes=size, dry_run=True)

        if self._use_trash:
            try:
                self._trash(path_str)
                logger.debug("Moved to trash: %s", path_str)
                return DeletionResult(path=path_str, freed_bytes=size, method=RemovalMethod.TRASH)
            except OSError as e:
                logger.debug("Trash failed for %s, deleting permanently: %s", path_str, e)

        try:
            self._remove_permanently(target)
        except OSError as e:
            logger.warning("Could not delete %s: %s", path_str, e)
            failure = (
                FailureKind.NOT_FOUND
                if isinstance(e, FileNotFoundError)
                else FailureKind.DELETE_FAILURE
            )
            return DeletionResult(path=path_str, failure=failure, error=str(e))

        logger.debug("Deleted permanently: %s", path_str)
        return DeletionResult(path=path_str, freed_bytes=size, method=RemovalMethod.DELETE)

    def delete_batch(self, paths: Iterable[Path | str]) -> CleanupReport:
        """Delete many targets, isolating failures per target.

        Args:
            paths: Files or directories to clean.

        Returns:
            CleanupReport with one result per target.
        """
        report = CleanupReport()
        for path in paths:
            report.results.append(self.delete(path))

        failures = report.failures
        if failures:
            logger.warning(
                "Cleanup finished with %d failure(s), %d bytes freed",
                len(failures),
                report.freed_bytes,
            )
        return report

    def _empty_directory(
        self, directory: Path, keep: frozenset[Path] = frozenset()
    ) -> DeletionResult:
        """Remove every direct child of a directory, keeping the directory."""
        path_str = str(directory)
        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            logger.warning("Cannot list directory %s: %s", path_str, e)
            return DeletionResult(
                path=path_str, failure=_classify(e), error=str(e), dry_run=self._dry_run
            )

        results: list[DeletionResult] = []
        for child in children:
            if child in keep:
                continue
            if not child.is_symlink() and any(child in k.parents for k in keep):
                results.append(self._empty_directory(child, keep))
            else:
                results.append(self.delete_file(child))
        return DeletionResult(
            path=path_str,
            freed_bytes=sum(r.freed_bytes for r in results),
            dry_run=self._dry_run,
            children=tuple(results),
        )

    @staticmethod
    def _remove_permanently(target: Path) -> None:
        """Delete a path without going through the trash."""
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            os.remove(target)
