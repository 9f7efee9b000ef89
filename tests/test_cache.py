"""Tests for the in-memory record cache."""

import threading

import pytest

from poker_tracker.cache import HANDS, SESSIONS, RecordCache
from poker_tracker.models import PokerHand, PokerSession


@pytest.fixture
def cache():
    return RecordCache()


class TestRecordCache:
    def test_replace_all_discards_old_content(self, cache):
        cache.upsert_append(SESSIONS, PokerSession(location="old"))
        fresh = [PokerSession(location="a"), PokerSession(location="b")]
        cache.replace_all(SESSIONS, fresh)
        assert cache.sessions == fresh

    def test_append_keeps_insertion_order(self, cache):
        a, b = PokerSession(), PokerSession()
        cache.upsert_append(SESSIONS, a)
        cache.upsert_append(SESSIONS, b)
        assert cache.sessions == [a, b]

    def test_replace_by_id_in_place(self, cache):
        a, b, c = PokerSession(), PokerSession(), PokerSession()
        cache.replace_all(SESSIONS, [a, b, c])
        changed = PokerSession(id=b.id, location="changed", created_at=b.created_at)
        assert cache.replace_by_id(SESSIONS, changed)
        assert [s.location for s in cache.sessions][1] == "changed"
        assert [s.id for s in cache.sessions] == [a.id, b.id, c.id]

    def test_replace_by_id_missing_is_noop(self, cache):
        a = PokerSession()
        cache.replace_all(SESSIONS, [a])
        assert not cache.replace_by_id(SESSIONS, PokerSession())
        assert cache.sessions == [a]

    def test_remove_by_id(self, cache):
        a, b = PokerHand(session_id="S"), PokerHand(session_id="S")
        cache.replace_all(HANDS, [a, b])
        assert cache.remove_by_id(HANDS, a.id)
        assert not cache.remove_by_id(HANDS, a.id)
        assert cache.hands == [b]

    def test_snapshots_are_copies(self, cache):
        cache.upsert_append(SESSIONS, PokerSession())
        cache.sessions.clear()
        assert len(cache.sessions) == 1

    def test_active_session_is_first_active(self, cache):
        a = PokerSession(is_active=False)
        b = PokerSession(is_active=True)
        c = PokerSession(is_active=True)
        cache.replace_all(SESSIONS, [a, b, c])
        assert cache.active_session() == b

    def test_hands_for_session(self, cache):
        hands = [PokerHand(session_id=s) for s in ("X", "Y", "X")]
        cache.replace_all(HANDS, hands)
        assert cache.hands_for_session("X") == [hands[0], hands[2]]
        assert cache.hands_for_session("Z") == []

    def test_flags_notify_only_on_change(self, cache):
        seen = []
        cache.subscribe(seen.append)
        cache.set_loading(True)
        cache.set_loading(True)
        cache.set_error("boom")
        cache.set_error("boom")
        cache.set_loading(False)
        assert seen == ["is_loading", "last_error", "is_loading"]
        assert cache.last_error == "boom"

    def test_failing_handler_does_not_break_others(self, cache):
        seen = []

        def broken(name):
            raise RuntimeError("handler bug")

        cache.subscribe(broken)
        cache.subscribe(seen.append)
        cache.upsert_append(HANDS, PokerHand(session_id="S"))
        assert seen == ["hands"]

    def test_clear(self, cache):
        cache.upsert_append(SESSIONS, PokerSession())
        cache.upsert_append(HANDS, PokerHand(session_id="S"))
        cache.clear()
        assert cache.sessions == [] and cache.hands == []


class TestDeferredNotifications:
    def test_held_until_block_exits(self, cache):
        seen = []
        cache.subscribe(seen.append)
        with cache.deferred_notifications():
            cache.upsert_append(SESSIONS, PokerSession())
            cache.upsert_append(SESSIONS, PokerSession())
            cache.set_error("boom")
            assert seen == []
        assert seen == ["sessions", "last_error"]

    def test_nested_blocks_send_once(self, cache):
        seen = []
        cache.subscribe(seen.append)
        with cache.deferred_notifications():
            with cache.deferred_notifications():
                cache.upsert_append(HANDS, PokerHand(session_id="S"))
            assert seen == []
        assert seen == ["hands"]

    def test_sent_when_block_raises(self, cache):
        seen = []
        cache.subscribe(seen.append)
        with pytest.raises(RuntimeError):
            with cache.deferred_notifications():
                cache.set_error("boom")
                raise RuntimeError("write failed")
        assert seen == ["last_error"]

    def test_other_threads_are_not_held(self, cache):
        seen = []
        cache.subscribe(seen.append)
        with cache.deferred_notifications():
            writer = threading.Thread(target=cache.upsert_append,
                                      args=(HANDS, PokerHand(session_id="S")))
            writer.start()
            writer.join()
            assert seen == ["hands"]
