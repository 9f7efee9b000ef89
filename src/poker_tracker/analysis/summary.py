"""Summary figures over the cached sessions and hands."""

from dataclasses import dataclass, field
from typing import Dict, List

from poker_tracker import config
from poker_tracker.models.hand import PokerHand
from poker_tracker.models.position import Position
from poker_tracker.models.session import PokerSession


@dataclass
class PositionSummary:
    """Hands played and net result from one seat position."""
    position: Position
    hands: int = 0
    net_result: float = 0.0


@dataclass
class TrackerSummary:
    total_profit: float = 0.0
    total_sessions: int = 0
    total_hands: int = 0
    avg_session_profit: float = 0.0
    # Percentage of sessions that ended in profit
    win_rate: float = 0.0
    by_position: Dict[Position, PositionSummary] = field(default_factory=dict)
    recent_sessions: List[PokerSession] = field(default_factory=list)


class SummaryCalculator:
    """Calculate totals and per-position results.

    Sessions are expected in cache order, so `recent_sessions` is the head of
    the list after a full load (most recently created first).
    """

    def __init__(self, recent_count: int = config.RECENT_SESSIONS):
        self.recent_count = recent_count

    def calculate(self, sessions: List[PokerSession],
                  hands: List[PokerHand]) -> TrackerSummary:
        summary = TrackerSummary(
            total_sessions=len(sessions),
            total_hands=len(hands),
            by_position={p: PositionSummary(position=p) for p in Position},
            recent_sessions=list(sessions[:self.recent_count]),
        )
        if sessions:
            summary.total_profit = sum(s.profit for s in sessions)
            summary.avg_session_profit = summary.total_profit / len(sessions)
            winning = sum(1 for s in sessions if s.is_profit)
            summary.win_rate = winning / len(sessions) * 100

        for hand in hands:
            pos = summary.by_position[hand.position]
            pos.hands += 1
            pos.net_result += hand.net_result

        return summary
