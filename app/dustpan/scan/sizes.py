"""Size aggregation and the shared size cache.

``directory_size`` is pure with respect to the filesystem at call time
and never touches a cache. ``SizeCache`` is a separate, explicitly
driven layer for sizes of stable entities that are expensive to
recompute.
"""

import logging
import threading
from pathlib import Path

from dustpan.scan.walker import walk

logger = logging.getLogger(__name__)


def directory_size(path: Path | str) -> int:
    """Calculate the total size of a file or directory tree.

    For a regular file this is its byte length. For a directory it is the
    sum of all regular files beneath it; hidden entries and unreadable
    entries are skipped, package bundles are counted. A path that does
    not exist measures 0.

    Args:
        path: File or directory to measure.

    Returns:
        Size in bytes.
    """
    target = Path(path)
    try:
        if target.is_symlink():
            return 0
        if target.is_file():
            return target.stat().st_size
        if not target.is_dir():
            return 0
    except OSError as e:
        logger.debug("Cannot measure %s: %s", target, e)
        return 0

    return sum(entry.size for entry in walk([target], skip_packages=False))


class SizeCache:
    """Thread-safe map from path to a previously computed size.

    All access goes through one lock, so concurrent workers can share
    a single instance.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sizes: dict[str, int] = {}

    @staticmethod
    def _key(path: Path | str) -> str:
        return str(path)

    def get(self, path: Path | str) -> int | None:
        """Return the cached size, or None when absent."""
        with self._lock:
            return self._sizes.get(self._key(path))

    def set(self, path: Path | str, size: int) -> None:
        """Store a size for a path."""
        if size < 0:
            msg = f"Size cannot be negative, got {size}"
            raise ValueError(msg)
        with self._lock:
            self._sizes[self._key(path)] = size

    def remove(self, path: Path | str) -> None:
        """Forget a cached size. Missing keys are ignored."""
        with self._lock:
            self._sizes.pop(self._key(path), None)

    def clear(self) -> None:
        """Forget all cached sizes."""
        with self._lock:
            self._sizes.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sizes)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        with self._lock:
            return self._key(path) in self._sizes


def cached_directory_size(path: Path | str, cache: SizeCache) -> int:
    """Measure a path through a cache.

    A cached value is returned as-is. Otherwise the path is measured with
    ``directory_size`` and the result stored. Concurrent callers may both
    measure the same path; the last write wins with an identical value.

    Args:
        path: File or directory to measure.
        cache: Cache to read from and populate.

    Returns:
        Size in bytes.
    """
    cached = cache.get(path)
    if cached is not None:
        return cached
    size = directory_size(path)
    cache.set(path, size)
    return size
