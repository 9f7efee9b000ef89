"""PokerHand - one dealt hand played within a session."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from poker_tracker.models.action import HandAction, HandResult
from poker_tracker.models.card import Card
from poker_tracker.models.position import Position
from poker_tracker.models.session import as_utc, check_timestamps, new_id, utc_now

MAX_HOLE_CARDS = 2
MAX_BOARD_CARDS = 5


@dataclass
class PokerHand:
    """Record of a single hand.

    `session_id` points at the owning session but is advisory only: hands
    survive the deletion of their session.
    """

    session_id: str
    position: Position = Position.BTN
    hole_cards: List[Card] = field(default_factory=list)
    board_cards: List[Card] = field(default_factory=list)
    actions: List[HandAction] = field(default_factory=list)
    result: HandResult = HandResult.FOLD
    pot_size: float = 0.0
    net_result: float = 0.0
    notes: str = ""
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.updated_at is None:
            self.updated_at = self.created_at
        self.created_at = as_utc(self.created_at)
        self.updated_at = as_utc(self.updated_at)
        self.position = Position(self.position)
        self.result = HandResult(self.result)
        self.hole_cards = list(self.hole_cards)
        self.board_cards = list(self.board_cards)
        self.actions = [HandAction(a) for a in self.actions]
        self.validate()

    def validate(self) -> None:
        """Raise ValueError if the hand breaks a record invariant."""
        if not self.id:
            raise ValueError("Hand id must not be empty")
        if len(self.hole_cards) > MAX_HOLE_CARDS:
            raise ValueError(f"At most {MAX_HOLE_CARDS} hole cards, got {len(self.hole_cards)}")
        if len(self.board_cards) > MAX_BOARD_CARDS:
            raise ValueError(f"At most {MAX_BOARD_CARDS} board cards, got {len(self.board_cards)}")
        seen = set()
        for card in self.cards:
            if card in seen:
                raise ValueError(f"Duplicate card in hand: {card}")
            seen.add(card)
        check_timestamps(self)

    @property
    def cards(self) -> List[Card]:
        """Hole cards followed by board cards."""
        return self.hole_cards + self.board_cards

    @property
    def hole_cards_str(self) -> str:
        return " ".join(str(c) for c in self.hole_cards)

    @property
    def board_str(self) -> str:
        return " ".join(str(c) for c in self.board_cards)

    @property
    def actions_str(self) -> str:
        return ", ".join(a.value for a in self.actions)
