"""dustpan data models."""

from dustpan.models.history import CleanupSession, CleanupType, create_cleanup_session

__all__ = [
    "CleanupSession",
    "CleanupType",
    "create_cleanup_session",
]
