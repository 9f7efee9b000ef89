"""Data models for the poker tracker."""

from poker_tracker.models.card import Card, Rank, Suit, full_deck
from poker_tracker.models.action import HandAction, HandResult
from poker_tracker.models.position import Position
from poker_tracker.models.session import PokerSession, SessionTag
from poker_tracker.models.hand import PokerHand

__all__ = [
    "Card", "Rank", "Suit", "full_deck",
    "HandAction", "HandResult",
    "Position",
    "PokerSession", "SessionTag",
    "PokerHand",
]
