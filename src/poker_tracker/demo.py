"""Sample data for a fresh install."""

from typing import Tuple

from poker_tracker.models import (
    Card, HandAction, HandResult, PokerHand, PokerSession, Position, Rank,
    SessionTag, Suit,
)
from poker_tracker.tracker import PokerTracker


def seed_demo_data(tracker: PokerTracker) -> Tuple[PokerSession, PokerHand]:
    """Create one finished session and one hand played in it."""
    session = tracker.create_session(PokerSession(
        location="Live Casino",
        blinds="5/10",
        currency="USD",
        table_size=9,
        effective_stack=400,
        session_tag=SessionTag.GREEN,
        buy_in=400,
        cash_out=550,
        is_active=False,
    ))
    hand = tracker.create_hand(PokerHand(
        session_id=session.id,
        position=Position.BTN,
        hole_cards=[Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)],
        board_cards=[
            Card(Rank.ACE, Suit.CLUBS),
            Card(Rank.KING, Suit.DIAMONDS),
            Card(Rank.QUEEN, Suit.SPADES),
        ],
        actions=[HandAction.RAISE, HandAction.CALL],
        result=HandResult.WIN,
        pot_size=150,
        net_result=75,
        notes="Demo hand - AK on an A-K-Q board",
    ))
    return session, hand
