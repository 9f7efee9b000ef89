"""In-memory mirror of the sessions and hands tables.

The cache is the read surface of the tracker. It is only ever changed after
a storage write has committed, so it never shows a write that failed. Each
collection is held as a tuple and swapped whole on every change: readers on
any thread get a consistent snapshot without waiting on storage.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from poker_tracker.models.hand import PokerHand
from poker_tracker.models.session import PokerSession

logger = logging.getLogger(__name__)

SESSIONS = "sessions"
HANDS = "hands"
IS_LOADING = "is_loading"
LAST_ERROR = "last_error"

ChangeHandler = Callable[[str], None]


class RecordCache:
    """Observable state: sessions, hands, a busy flag and the last error."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: Dict[str, Tuple] = {SESSIONS: (), HANDS: ()}
        self._is_loading = False
        self._last_error: Optional[str] = None
        self._subscriptions: Dict[str, ChangeHandler] = {}
        self._deferred = threading.local()

    # Observation

    def subscribe(self, handler: ChangeHandler) -> str:
        """Call `handler(name)` after every change, where name is the attribute
        that changed. Returns a subscription id for `unsubscribe`."""
        subscription_id = str(uuid.uuid4())
        with self._lock:
            self._subscriptions[subscription_id] = handler
        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        with self._lock:
            return self._subscriptions.pop(subscription_id, None) is not None

    @contextmanager
    def deferred_notifications(self) -> Iterator[None]:
        """Hold back change notifications made by this thread until the block
        exits, then send each changed name once.

        Handlers run outside any lock held inside the block, so they may write
        through the tracker themselves.
        """
        if getattr(self._deferred, "pending", None) is not None:
            yield
            return
        self._deferred.pending = pending = []
        try:
            yield
        finally:
            self._deferred.pending = None
            for name in dict.fromkeys(pending):
                self._dispatch(name)

    def _notify(self, name: str) -> None:
        pending = getattr(self._deferred, "pending", None)
        if pending is not None:
            pending.append(name)
        else:
            self._dispatch(name)

    def _dispatch(self, name: str) -> None:
        with self._lock:
            handlers = list(self._subscriptions.values())
        for handler in handlers:
            try:
                handler(name)
            except Exception:
                logger.exception("Change handler failed for %s", name)

    # Read surface

    @property
    def sessions(self) -> List[PokerSession]:
        return list(self._records[SESSIONS])

    @property
    def hands(self) -> List[PokerHand]:
        return list(self._records[HANDS])

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def hands_for_session(self, session_id: str) -> List[PokerHand]:
        return [h for h in self._records[HANDS] if h.session_id == session_id]

    def active_session(self) -> Optional[PokerSession]:
        return next((s for s in self._records[SESSIONS] if s.is_active), None)

    def search_hands(self, text: str) -> List[PokerHand]:
        """Hands whose notes or position contain `text`, ignoring case."""
        if not text:
            return self.hands
        needle = text.casefold()
        return [
            h for h in self._records[HANDS]
            if needle in h.notes.casefold() or needle in h.position.value.casefold()
        ]

    def get_session(self, session_id: str) -> Optional[PokerSession]:
        return next((s for s in self._records[SESSIONS] if s.id == session_id), None)

    # Updates

    def replace_all(self, name: str, records: Sequence) -> None:
        """Swap in a freshly loaded collection, discarding the old one."""
        with self._lock:
            self._records[name] = tuple(records)
        self._notify(name)

    def upsert_append(self, name: str, record) -> None:
        with self._lock:
            self._records[name] = self._records[name] + (record,)
        self._notify(name)

    def replace_by_id(self, name: str, record) -> bool:
        with self._lock:
            current = self._records[name]
            index = next((i for i, r in enumerate(current) if r.id == record.id), None)
            if index is None:
                return False
            self._records[name] = current[:index] + (record,) + current[index + 1:]
        self._notify(name)
        return True

    def remove_by_id(self, name: str, record_id: str) -> bool:
        with self._lock:
            current = self._records[name]
            kept = tuple(r for r in current if r.id != record_id)
            if len(kept) == len(current):
                return False
            self._records[name] = kept
        self._notify(name)
        return True

    def clear(self) -> None:
        with self._lock:
            self._records = {SESSIONS: (), HANDS: ()}
        self._notify(SESSIONS)
        self._notify(HANDS)

    def set_loading(self, value: bool) -> None:
        if self._is_loading != value:
            self._is_loading = value
            self._notify(IS_LOADING)

    def set_error(self, message: Optional[str]) -> None:
        if self._last_error != message:
            self._last_error = message
            self._notify(LAST_ERROR)
