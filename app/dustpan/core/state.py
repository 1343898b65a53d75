"""Cleanup history persistence.

This module provides the HistoryManager class for recording cleanup
sessions in a JSONL file and deriving cumulative totals from it.
"""

import json
import logging
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path
from tempfile import NamedTemporaryFile

from dustpan.core.paths import ensure_state_dir, get_state_dir
from dustpan.models.history import CleanupSession, CleanupType, create_cleanup_session

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 100


class HistoryManager:
    """Manages cleanup history in a JSONL file.

    Storage location: ~/.local/state/dustpan/history.jsonl

    Each line is one CleanupSession. Sessions are appended; when the file
    holds more than ``max_sessions`` entries the oldest are dropped.

    Attributes:
        state_dir: Directory containing the history file.
    """

    HISTORY_FILENAME = "history.jsonl"

    def __init__(
        self,
        state_dir: Path | None = None,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        """Initialize HistoryManager.

        Args:
            state_dir: Optional override for state directory.
                      Default: ~/.local/state/dustpan
            max_sessions: Number of newest sessions kept on disk.
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()
        self._max_sessions = max_sessions

    @property
    def history_path(self) -> Path:
        """Path to history.jsonl file."""
        return self._state_dir / self.HISTORY_FILENAME

    def record(self, session: CleanupSession) -> None:
        """Append a session to the history file.

        Creates file and parent directories if they don't exist.

        Raises:
            RuntimeError: If the state directory cannot be created.
            OSError: If the file cannot be written.
        """
        if self._state_dir == get_state_dir():
            ensure_state_dir()
        else:
            self._state_dir.mkdir(parents=True, exist_ok=True)

        with self.history_path.open(mode="a", encoding="utf-8") as f:
            f.write(session.to_json_line() + "\n")
            f.flush()

        self._trim()

    def get_sessions(self, limit: int | None = None) -> list[CleanupSession]:
        """Read sessions, newest first.

        Corrupt lines are skipped with a warning.

        Args:
            limit: Maximum number of sessions to return. None returns all.

        Returns:
            List of sessions, newest first. Empty if no history exists.
        """
        sessions = self._read_all()
        sessions.reverse()
        if limit is not None:
            return sessions[:limit]
        return sessions

    def get_sessions_since(self, days: int, now: datetime | None = None) -> list[CleanupSession]:
        """Sessions recorded within the last ``days`` days, newest first."""
        cutoff = (now or datetime.now(UTC)) - timedelta(days=days)
        return [s for s in self.get_sessions() if s.recorded_at >= cutoff]

    def total_freed(self) -> int:
        """Bytes freed across all recorded sessions."""
        return sum(s.freed_bytes for s in self._read_all())

    def average_per_session(self) -> int:
        """Average bytes freed per session, 0 without history."""
        sessions = self._read_all()
        if not sessions:
            return 0
        return sum(s.freed_bytes for s in sessions) // len(sessions)

    def clear(self) -> None:
        """Delete all recorded history."""
        try:
            self.history_path.unlink()
        except FileNotFoundError:
            pass

    def _read_all(self) -> list[CleanupSession]:
        """Read sessions in file order (oldest first)."""
        if not self.history_path.exists():
            return []

        sessions: list[CleanupSession] = []
        with self.history_path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    sessions.append(CleanupSession.from_json_line(line))
                except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
                    logger.warning("Skipping corrupt history line %d: %s", line_num, str(e))
        return sessions

    def _trim(self) -> None:
        """Rewrite the file with only the newest ``max_sessions`` lines."""
        sessions = self._read_all()
        if len(sessions) <= self._max_sessions:
            return

        kept = sessions[-self._max_sessions :]
        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._state_dir,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                for session in kept:
                    f.write(session.to_json_line() + "\n")
            os.replace(str(tmp_path), str(self.history_path))
        except OSError:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise


def record_cleanup(
    cleanup_type: CleanupType,
    freed_bytes: int,
    item_count: int,
    details: list[str] | None = None,
    manager: HistoryManager | None = None,
) -> CleanupSession | None:
    """Record a cleanup to history.

    Cleanups that freed nothing are not recorded.

    Args:
        cleanup_type: Kind of cleanup.
        freed_bytes: Bytes actually freed.
        item_count: Entries removed.
        details: Optional detail lines.
        manager: History manager to write to. Defaults to the user history.

    Returns:
        The recorded session, or None if nothing was recorded.
    """
    if freed_bytes <= 0:
        return None
    session = create_cleanup_session(cleanup_type, freed_bytes, item_count, details)
    (manager or HistoryManager()).record(session)
    return session
