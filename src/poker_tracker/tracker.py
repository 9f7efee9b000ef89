"""PokerTracker - the state holder handed to the rest of the application.

Writes go to storage first. The cache is updated only once the write has
committed, and before the call returns. Writes are serialized; reads go to
the cache and never touch storage. Change handlers are called after the
write lock is released.
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from poker_tracker.cache import HANDS, SESSIONS, RecordCache
from poker_tracker.errors import (
    DecodeError,
    InitializationError,
    PersistenceError,
    PokerTrackerError,
)
from poker_tracker.models.hand import PokerHand
from poker_tracker.models.session import PokerSession
from poker_tracker.storage import Database, TrackerRepository

logger = logging.getLogger(__name__)


class PokerTracker:
    """Persistence for sessions and hands, with an observable read cache."""

    def __init__(self, db_path: Path | str | None = None,
                 cache: Optional[RecordCache] = None):
        self.cache = cache or RecordCache()
        self.skipped_rows: List[DecodeError] = []
        self._write_lock = threading.Lock()
        self._load_warning: Optional[str] = None
        try:
            self.db = Database(db_path)
        except InitializationError as e:
            self.cache.set_error(str(e))
            raise
        self.repo = TrackerRepository(self.db)
        try:
            self.load_all()
        except PersistenceError as e:
            self.db.close()
            self.cache.set_error(str(e))
            raise InitializationError(f"Initial load failed: {e}") from e

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "PokerTracker":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # Read surface

    @property
    def sessions(self) -> List[PokerSession]:
        return self.cache.sessions

    @property
    def hands(self) -> List[PokerHand]:
        return self.cache.hands

    @property
    def is_loading(self) -> bool:
        return self.cache.is_loading

    @property
    def error_message(self) -> Optional[str]:
        return self.cache.last_error

    def hands_for_session(self, session_id: str) -> List[PokerHand]:
        return self.cache.hands_for_session(session_id)

    def active_session(self) -> Optional[PokerSession]:
        return self.cache.active_session()

    def search_hands(self, text: str) -> List[PokerHand]:
        return self.cache.search_hands(text)

    # Loading

    def load_all(self) -> None:
        """Reload both collections from storage, replacing the cache.

        Rows that cannot be decoded are skipped and kept in `skipped_rows`.
        """
        with self._writing():
            self.cache.set_loading(True)
            try:
                sessions = self.repo.load_sessions()
                hands = self.repo.load_hands()
            except PersistenceError as e:
                self.cache.set_error(str(e))
                raise
            finally:
                self.cache.set_loading(False)
            self.cache.replace_all(SESSIONS, sessions.records)
            self.cache.replace_all(HANDS, hands.records)
            self.skipped_rows = sessions.errors + hands.errors
            self._load_warning = None
            if self.skipped_rows:
                self._load_warning = f"Skipped {len(self.skipped_rows)} unreadable rows"
            self.cache.set_error(self._load_warning)
        logger.info("Loaded %d sessions and %d hands",
                    len(sessions.records), len(hands.records))

    # Sessions

    def create_session(self, session: PokerSession) -> PokerSession:
        with self._writing():
            self._validate(session, "create session")
            self._store(self.repo.insert_session, session)
            self.cache.upsert_append(SESSIONS, session)
        return session

    def update_session(self, session: PokerSession) -> PokerSession:
        """Overwrite a stored session. `updated_at` is stamped with the current
        time; the returned (and cached) session carries that stamp."""
        with self._writing():
            self._validate(session, "update session")
            stored = self._store(self.repo.update_session, session)
            self.cache.replace_by_id(SESSIONS, stored)
        return stored

    def delete_session(self, session_id: str) -> bool:
        with self._writing():
            removed = self._store(self.repo.delete_session, session_id)
            self.cache.remove_by_id(SESSIONS, session_id)
        return removed

    # Hands

    def create_hand(self, hand: PokerHand) -> PokerHand:
        with self._writing():
            self._validate(hand, "create hand")
            self._store(self.repo.insert_hand, hand)
            self.cache.upsert_append(HANDS, hand)
        return hand

    def delete_hand(self, hand_id: str) -> bool:
        with self._writing():
            removed = self._store(self.repo.delete_hand, hand_id)
            self.cache.remove_by_id(HANDS, hand_id)
        return removed

    # Settings and maintenance

    def get_setting(self, key: str) -> Optional[str]:
        return self.repo.get_setting(key)

    def set_setting(self, key: str, value: str) -> None:
        with self._writing():
            self._store(self.repo.set_setting, key, value)

    def clear_all(self) -> None:
        with self._writing():
            self._store(self.repo.clear_all)
            self.cache.clear()

    # Helpers

    @contextmanager
    def _writing(self) -> Iterator[None]:
        """Serialize a write. Change handlers run once the lock is released."""
        with self.cache.deferred_notifications():
            with self._write_lock:
                yield

    def _validate(self, record, what: str) -> None:
        try:
            record.validate()
        except ValueError as e:
            message = f"Could not {what}: {e}"
            logger.error(message)
            self.cache.set_error(message)
            raise PersistenceError(message) from e

    def _store(self, operation, *args):
        try:
            result = operation(*args)
        except PokerTrackerError as e:
            self.cache.set_error(str(e))
            raise
        self.cache.set_error(self._load_warning)
        return result
