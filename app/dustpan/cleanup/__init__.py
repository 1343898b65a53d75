"""Deletion of selected items.

This module provides the trash-first deletion executor and the
protected path guard it enforces.
"""

from dustpan.cleanup.executor import (
    CleanupReport,
    DeletionExecutor,
    DeletionResult,
    FailureKind,
    RemovalMethod,
)
from dustpan.cleanup.protected import PROTECTED_PATH_PATTERNS, is_protected_path

__all__ = [
    "PROTECTED_PATH_PATTERNS",
    "CleanupReport",
    "DeletionExecutor",
    "DeletionResult",
    "FailureKind",
    "RemovalMethod",
    "is_protected_path",
]
