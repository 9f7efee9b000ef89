"""CRUD operations for session and hand records."""

import logging
import sqlite3
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Generic, List, Mapping, Optional, Sequence, TypeVar

from poker_tracker.errors import DecodeError, PersistenceError, RecordNotFoundError
from poker_tracker.models.hand import PokerHand
from poker_tracker.models.session import PokerSession, utc_now
from poker_tracker.storage.codec import (
    HAND_COLUMNS,
    SESSION_COLUMNS,
    from_timestamp,
    hand_to_row,
    row_to_hand,
    row_to_session,
    session_to_row,
    to_timestamp,
)
from poker_tracker.storage.database import Database

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _insert_sql(table: str, columns: Sequence[str]) -> str:
    names = ", ".join(columns)
    params = ", ".join(f":{c}" for c in columns)
    return f"INSERT INTO {table} ({names}) VALUES ({params})"


def _update_sql(table: str, columns: Sequence[str]) -> str:
    assignments = ", ".join(f"{c} = :{c}" for c in columns if c not in ("id", "created_at"))
    return f"UPDATE {table} SET {assignments} WHERE id = :id"


INSERT_SESSION = _insert_sql("sessions", SESSION_COLUMNS)
UPDATE_SESSION = _update_sql("sessions", SESSION_COLUMNS)
INSERT_HAND = _insert_sql("hands", HAND_COLUMNS)


@dataclass
class LoadResult(Generic[T]):
    """Records decoded by a bulk load, plus the rows that had to be skipped."""

    records: List[T] = field(default_factory=list)
    errors: List[DecodeError] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.errors)


class TrackerRepository:
    """Repository for storing and retrieving sessions, hands and settings."""

    def __init__(self, db: Database):
        self.db = db

    # Sessions

    def insert_session(self, session: PokerSession) -> None:
        """Insert a new session row, keeping the caller's timestamps."""
        self._execute("insert session", INSERT_SESSION, session_to_row(session))
        logger.info("Session %s inserted", session.id)

    def update_session(self, session: PokerSession, now: Optional[datetime] = None) -> PokerSession:
        """Replace every mutable column of a session and stamp `updated_at`.

        Returns the session as stored. Raises RecordNotFoundError when no row
        has the session's id.
        """
        try:
            stored = replace(session, updated_at=now or utc_now())
        except ValueError as e:
            raise PersistenceError(f"Could not update session {session.id}: {e}") from e
        cursor = self._execute("update session", UPDATE_SESSION, session_to_row(stored))
        if cursor.rowcount == 0:
            logger.error("Could not update session %s: no such row", session.id)
            raise RecordNotFoundError("sessions", session.id)
        logger.info("Session %s updated", session.id)
        return stored

    def delete_session(self, session_id: str) -> bool:
        """Delete a session row. Hands that point at it are left alone."""
        cursor = self._execute("delete session", "DELETE FROM sessions WHERE id = ?", (session_id,))
        logger.info("Session %s deleted (%d row)", session_id, cursor.rowcount)
        return cursor.rowcount > 0

    def load_sessions(self) -> LoadResult[PokerSession]:
        """Read every session, most recently created first."""
        rows = self._fetch_all("load sessions", "SELECT * FROM sessions ORDER BY created_at DESC")
        return self._decode_rows(rows, row_to_session, "session")

    # Hands

    def insert_hand(self, hand: PokerHand) -> None:
        self._execute("insert hand", INSERT_HAND, hand_to_row(hand))
        logger.info("Hand %s inserted for session %s", hand.id, hand.session_id)

    def delete_hand(self, hand_id: str) -> bool:
        cursor = self._execute("delete hand", "DELETE FROM hands WHERE id = ?", (hand_id,))
        logger.info("Hand %s deleted (%d row)", hand_id, cursor.rowcount)
        return cursor.rowcount > 0

    def load_hands(self) -> LoadResult[PokerHand]:
        """Read every hand, most recently created first."""
        rows = self._fetch_all("load hands", "SELECT * FROM hands ORDER BY created_at DESC")
        return self._decode_rows(rows, row_to_hand, "hand")

    # Settings

    def get_setting(self, key: str) -> Optional[str]:
        rows = self._fetch_all("read setting", "SELECT value FROM settings WHERE key = ?", (key,))
        return rows[0]["value"] if rows else None

    def set_setting(self, key: str, value: str, now: Optional[datetime] = None) -> None:
        self._execute(
            "write setting",
            """INSERT INTO settings (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                           updated_at = excluded.updated_at""",
            (key, value, to_timestamp(now or utc_now())),
        )
        logger.info("Setting %s written", key)

    def setting_updated_at(self, key: str) -> Optional[datetime]:
        rows = self._fetch_all("read setting", "SELECT updated_at FROM settings WHERE key = ?", (key,))
        return from_timestamp(rows[0]["updated_at"]) if rows else None

    # Maintenance

    def clear_all(self) -> None:
        """Delete every session, hand and setting in one transaction."""
        try:
            with self.db.connect() as conn:
                conn.execute("DELETE FROM hands")
                conn.execute("DELETE FROM sessions")
                conn.execute("DELETE FROM settings")
        except sqlite3.Error as e:
            logger.error("Could not clear data: %s", e)
            raise PersistenceError(f"Could not clear data: {e}") from e
        logger.info("All data cleared")

    # Helpers

    def _execute(self, what: str, sql: str, params: Any = ()) -> sqlite3.Cursor:
        try:
            with self.db.connect() as conn:
                return conn.execute(sql, params)
        except sqlite3.Error as e:
            logger.error("Could not %s: %s", what, e)
            raise PersistenceError(f"Could not {what}: {e}") from e

    def _fetch_all(self, what: str, sql: str, params: Any = ()) -> List[sqlite3.Row]:
        try:
            with self.db.connect() as conn:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            logger.error("Could not %s: %s", what, e)
            raise PersistenceError(f"Could not {what}: {e}") from e

    @staticmethod
    def _decode_rows(rows: List[Mapping[str, Any]],
                     decode: Callable[[Mapping[str, Any]], T],
                     kind: str) -> LoadResult[T]:
        result: LoadResult[T] = LoadResult()
        for row in rows:
            try:
                result.records.append(decode(row))
            except DecodeError as e:
                logger.warning("Skipping %s row: %s", kind, e)
                result.errors.append(e)
        if result.errors:
            logger.warning("Loaded %d %ss, skipped %d unreadable rows",
                           len(result.records), kind, result.skipped)
        else:
            logger.debug("Loaded %d %ss", len(result.records), kind)
        return result
