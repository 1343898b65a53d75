"""Cleanup session model for tracking reclaimed space.

This module defines the record written to the history file after each
cleanup, from which cumulative totals are derived.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class CleanupType(str, Enum):
    """Kind of cleanup recorded in history.

    Attributes:
        QUICK: Cleaning every scanned junk category.
        SMART: Cleaning the recommended junk selection.
        TRASH: Emptying the trash.
        DUPLICATES: Removing duplicate files.
        LARGE_FILES: Removing large files.
    """

    QUICK = "quick"
    SMART = "smart"
    TRASH = "trash"
    DUPLICATES = "duplicates"
    LARGE_FILES = "large_files"

    @property
    def label(self) -> str:
        """Human-readable label."""
        return _LABELS[self]


_LABELS: dict[CleanupType, str] = {
    CleanupType.QUICK: "Quick Clean",
    CleanupType.SMART: "Smart Clean",
    CleanupType.TRASH: "Empty Trash",
    CleanupType.DUPLICATES: "Duplicates",
    CleanupType.LARGE_FILES: "Large Files",
}


@dataclass(frozen=True, slots=True)
class CleanupSession:
    """Record of a single completed cleanup.

    Attributes:
        id: Unique identifier (12-character hex string from UUID).
        timestamp: When the cleanup finished (ISO 8601 with timezone).
        cleanup_type: Kind of cleanup.
        freed_bytes: Bytes actually freed.
        item_count: Number of entries removed.
        details: Short free-form lines, e.g. "User Caches: 520 MB".
    """

    id: str
    timestamp: str
    cleanup_type: CleanupType
    freed_bytes: int
    item_count: int
    details: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate session data after initialization."""
        if not self.id:
            msg = "Session ID cannot be empty"
            raise ValueError(msg)
        if not self.timestamp:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)
        if self.freed_bytes < 0:
            msg = f"Freed bytes cannot be negative, got {self.freed_bytes}"
            raise ValueError(msg)
        if self.item_count < 0:
            msg = f"Item count cannot be negative, got {self.item_count}"
            raise ValueError(msg)

    @property
    def recorded_at(self) -> datetime:
        """Timestamp as an aware datetime."""
        return datetime.fromisoformat(self.timestamp.replace("Z", "+00:00"))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "cleanup_type": self.cleanup_type.value,
            "freed_bytes": self.freed_bytes,
            "item_count": self.item_count,
            "details": list(self.details),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CleanupSession":
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If cleanup_type or numeric data is invalid.
        """
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            cleanup_type=CleanupType(data["cleanup_type"]),
            freed_bytes=int(data["freed_bytes"]),
            item_count=int(data.get("item_count", 0)),
            details=tuple(data.get("details", ())),
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> "CleanupSession":
        """Deserialize from a JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        return cls.from_dict(json.loads(line.strip()))


def create_cleanup_session(
    cleanup_type: CleanupType,
    freed_bytes: int,
    item_count: int,
    details: list[str] | None = None,
) -> CleanupSession:
    """Factory function to create a new CleanupSession.

    Automatically generates a unique ID and current timestamp.
    """
    return CleanupSession(
        id=uuid.uuid4().hex[:12],
        timestamp=datetime.now(UTC).isoformat(),
        cleanup_type=cleanup_type,
        freed_bytes=freed_bytes,
        item_count=item_count,
        details=tuple(details or ()),
    )
