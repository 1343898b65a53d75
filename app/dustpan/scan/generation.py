"""Scan generations and progress callback types.

Scans cannot be aborted mid-flight. Starting a new scan bumps the
generation instead, and anything published by an older generation is
discarded by the component that owns the result.
"""

import threading
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")

# (fraction complete in [0, 1], human-readable status)
ProgressCallback = Callable[[float, str], None]
# Receives a full, already sorted snapshot of the current result
UpdateCallback = Callable[[list[T]], None]


class ScanGeneration:
    """Monotonic counter identifying the active scan."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current = 0

    def begin(self) -> int:
        """Start a new generation and return its number."""
        with self._lock:
            self._current += 1
            return self._current

    @property
    def current(self) -> int:
        """Number of the most recently started generation."""
        with self._lock:
            return self._current

    def is_current(self, generation: int) -> bool:
        """Check whether a generation has not been superseded."""
        with self._lock:
            return generation == self._current
