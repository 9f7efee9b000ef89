"""Tests for PokerTracker: writes through storage, reads from the cache."""

import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from poker_tracker.cache import RecordCache
from poker_tracker.demo import seed_demo_data
from poker_tracker.errors import InitializationError, PersistenceError
from poker_tracker.models import (
    Card, HandAction, HandResult, PokerHand, PokerSession, Position, Rank, Suit,
)
from poker_tracker.tracker import PokerTracker

T0 = datetime(2024, 5, 1, 20, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "PokerTracker.sqlite"


@pytest.fixture
def tracker(db_path):
    t = PokerTracker(db_path)
    yield t
    t.close()


def _reopen(tracker, db_path):
    tracker.close()
    return PokerTracker(db_path)


def _session(minutes=0, **kwargs):
    at = T0 + timedelta(minutes=minutes)
    return PokerSession(date=at, created_at=at, updated_at=at, **kwargs)


class TestStartup:
    def test_empty_database(self, tracker):
        assert tracker.sessions == []
        assert tracker.hands == []
        assert tracker.active_session() is None
        assert not tracker.is_loading
        assert tracker.error_message is None

    def test_initialization_error(self, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("x")
        cache = RecordCache()
        with pytest.raises(InitializationError):
            PokerTracker(blocker / "db.sqlite", cache=cache)
        assert cache.last_error

    def test_reload_replaces_cache(self, tracker, db_path):
        tracker.create_session(_session(minutes=0, location="first"))
        tracker.create_session(_session(minutes=5, location="second"))
        # appended in creation order, reloaded newest first
        assert [s.location for s in tracker.sessions] == ["first", "second"]
        tracker.load_all()
        assert [s.location for s in tracker.sessions] == ["second", "first"]

    def test_corrupt_row_does_not_block_load(self, tracker, db_path):
        tracker.create_hand(PokerHand(session_id="S1", created_at=T0))
        with tracker.db.connect() as conn:
            conn.execute("UPDATE hands SET actions = '[\"Limp\"' ")
        tracker.create_hand(PokerHand(session_id="S1", created_at=T0))
        tracker.load_all()
        assert len(tracker.hands) == 1
        assert len(tracker.skipped_rows) == 1
        assert "Skipped 1" in tracker.error_message

    def test_load_warning_survives_later_writes(self, tracker):
        tracker.create_hand(PokerHand(session_id="S1", created_at=T0))
        with tracker.db.connect() as conn:
            conn.execute("UPDATE hands SET hole_cards = 'not json'")
        tracker.load_all()
        assert "Skipped 1" in tracker.error_message

        tracker.create_hand(PokerHand(session_id="S1", created_at=T0))
        tracker.set_setting("theme", "dark")
        assert "Skipped 1" in tracker.error_message

        with tracker.db.connect() as conn:
            conn.execute("DELETE FROM hands WHERE hole_cards = 'not json'")
        tracker.load_all()
        assert tracker.error_message is None


class TestSessions:
    def test_create_then_reload_is_equal(self, tracker, db_path):
        session = _session(location="Casino A", blinds="1/2", currency="EUR",
                           table_size=6, effective_stack=200, buy_in=100, cash_out=250)
        tracker.create_session(session)
        reopened = _reopen(tracker, db_path)
        assert reopened.sessions == [session]
        reopened.close()

    def test_naive_session_reloads_equal(self, tracker, db_path):
        local = datetime(2024, 5, 1, 20, 0, 0)
        session = tracker.create_session(
            PokerSession(date=local, created_at=local, location="Casino A"))
        reopened = _reopen(tracker, db_path)
        assert reopened.sessions == [session]
        assert reopened.sessions[0].created_at == local.astimezone(timezone.utc)
        reopened.close()

    def test_update_with_naive_timestamp_is_rejected(self, tracker):
        session = tracker.create_session(_session())
        session.created_at = datetime(2024, 5, 1, 20, 0, 0)
        with pytest.raises(PersistenceError, match="timezone-aware"):
            tracker.update_session(session)
        assert tracker.error_message

    def test_profit_scenario(self, tracker, db_path):
        session = tracker.create_session(_session(location="Casino A", buy_in=100, cash_out=250))
        assert tracker.sessions[0].profit == 150

        tracker.update_session(replace(session, cash_out=300))
        reopened = _reopen(tracker, db_path)
        assert reopened.sessions[0].profit == 200
        reopened.close()

    def test_update_stamps_and_caches_stored_copy(self, tracker):
        session = tracker.create_session(_session())
        stored = tracker.update_session(replace(session, location="Casino B"))
        assert stored.updated_at > session.updated_at
        assert stored.created_at == session.created_at
        assert tracker.sessions == [stored]

    def test_update_missing_id_leaves_cache(self, tracker):
        tracker.create_session(_session(location="kept"))
        before = tracker.sessions
        with pytest.raises(PersistenceError):
            tracker.update_session(_session(location="ghost"))
        assert tracker.sessions == before
        assert tracker.error_message

    def test_duplicate_create_leaves_cache(self, tracker):
        session = tracker.create_session(_session())
        with pytest.raises(PersistenceError):
            tracker.create_session(session)
        assert len(tracker.sessions) == 1

    def test_invalid_session_is_rejected_before_storage(self, tracker, db_path):
        session = _session()
        session.table_size = 0
        with pytest.raises(PersistenceError):
            tracker.create_session(session)
        assert tracker.sessions == []
        tracker.load_all()
        assert tracker.sessions == []

    def test_delete_removes_only_matching_id(self, tracker):
        a = tracker.create_session(_session(location="Twin", buy_in=50))
        b = tracker.create_session(_session(location="Twin", buy_in=50))
        assert a.id != b.id
        assert tracker.delete_session(a.id)
        assert [s.id for s in tracker.sessions] == [b.id]

    def test_delete_missing_id_is_noop(self, tracker):
        tracker.create_session(_session())
        assert not tracker.delete_session("nope")
        assert len(tracker.sessions) == 1

    def test_active_session(self, tracker):
        tracker.create_session(_session(minutes=0, is_active=False))
        live = tracker.create_session(_session(minutes=1, is_active=True))
        assert tracker.active_session() == live


class TestHands:
    def test_hand_roundtrip_scenario(self, tracker, db_path):
        hand = PokerHand(
            session_id="S1",
            hole_cards=[Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)],
            board_cards=[],
            actions=[HandAction.RAISE, HandAction.CALL],
            created_at=T0,
        )
        tracker.create_hand(hand)
        reopened = _reopen(tracker, db_path)
        loaded = reopened.hands[0]
        assert loaded.hole_cards == [Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)]
        assert loaded.board_cards == []
        assert loaded.actions == [HandAction.RAISE, HandAction.CALL]
        reopened.close()

    def test_hands_for_session(self, tracker):
        x = tracker.create_session(_session(minutes=0))
        y = tracker.create_session(_session(minutes=1))
        created = []
        for i, sid in enumerate([x.id, y.id, x.id, y.id, x.id]):
            created.append(tracker.create_hand(PokerHand(session_id=sid, notes=f"hand {i}")))
        result = tracker.hands_for_session(x.id)
        assert [h.notes for h in result] == ["hand 0", "hand 2", "hand 4"]
        assert len(tracker.hands_for_session(y.id)) == 2

    def test_orphaned_hands_remain(self, tracker, db_path):
        session = tracker.create_session(_session())
        tracker.create_hand(PokerHand(session_id=session.id))
        tracker.delete_session(session.id)
        reopened = _reopen(tracker, db_path)
        assert len(reopened.hands_for_session(session.id)) == 1
        reopened.close()

    def test_search_hands(self, tracker):
        tracker.create_hand(PokerHand(session_id="S1", position=Position.SB, notes="Hero call"))
        tracker.create_hand(PokerHand(session_id="S1", position=Position.CO, notes="cooler"))
        assert len(tracker.search_hands("HERO")) == 1
        assert len(tracker.search_hands("co")) == 1
        assert len(tracker.search_hands("")) == 2

    def test_delete_hand(self, tracker):
        hand = tracker.create_hand(PokerHand(session_id="S1"))
        assert tracker.delete_hand(hand.id)
        assert tracker.hands == []

    def test_invalid_hand_is_rejected(self, tracker):
        hand = PokerHand(session_id="S1")
        hand.hole_cards.extend([Card.parse("As"), Card.parse("Ks"), Card.parse("Qs")])
        with pytest.raises(PersistenceError):
            tracker.create_hand(hand)
        assert tracker.hands == []


class TestNotifications:
    def test_subscribers_see_writes(self, tracker):
        seen = []
        sub = tracker.cache.subscribe(seen.append)
        tracker.create_session(_session())
        tracker.create_hand(PokerHand(session_id="S1"))
        assert "sessions" in seen and "hands" in seen
        assert tracker.cache.unsubscribe(sub)
        seen.clear()
        tracker.create_hand(PokerHand(session_id="S1"))
        assert seen == []

    def test_failed_write_reports_error(self, tracker):
        seen = []
        tracker.cache.subscribe(seen.append)
        with pytest.raises(PersistenceError):
            tracker.update_session(_session())
        assert seen == ["last_error"]

    def test_handler_may_write_through_tracker(self, tracker):
        def on_change(name):
            if name == "sessions":
                tracker.set_setting("last_session_change", "now")

        tracker.cache.subscribe(on_change)
        writer = threading.Thread(target=tracker.create_session, args=(_session(),))
        writer.start()
        writer.join(timeout=5)
        assert not writer.is_alive()
        assert tracker.get_setting("last_session_change") == "now"
        assert len(tracker.sessions) == 1

    def test_handler_sees_committed_state(self, tracker):
        seen = []
        tracker.cache.subscribe(lambda name: seen.append((name, len(tracker.hands))))
        tracker.create_hand(PokerHand(session_id="S1"))
        assert seen == [("hands", 1)]


def test_concurrent_writers(tracker, db_path):
    def worker(n):
        for i in range(10):
            tracker.create_session(PokerSession(location=f"w{n}-{i}"))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(tracker.sessions) == 40
    reopened = _reopen(tracker, db_path)
    assert len(reopened.sessions) == 40
    reopened.close()


def test_clear_all(tracker):
    seed_demo_data(tracker)
    tracker.set_setting("currency", "USD")
    tracker.clear_all()
    assert tracker.sessions == [] and tracker.hands == []
    assert tracker.get_setting("currency") is None


def test_seed_demo_data(tracker):
    session, hand = seed_demo_data(tracker)
    assert session.profit == 150
    assert not session.is_active
    assert hand.result is HandResult.WIN
    assert tracker.hands_for_session(session.id) == [hand]
