"""PokerSession - one sitting at a table, with buy-in/cash-out economics."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from poker_tracker import config


class SessionTag(str, Enum):
    NONE = "None"
    RED = "Red"
    BLUE = "Blue"
    GREEN = "Green"
    YELLOW = "Yellow"
    PURPLE = "Purple"
    ORANGE = "Orange"
    TEAL = "Teal"
    PINK = "Pink"

    @property
    def color(self) -> str:
        """Rich color name used when rendering the tag."""
        if self is SessionTag.NONE:
            return "grey50"
        if self is SessionTag.TEAL:
            return "cyan"
        if self is SessionTag.PINK:
            return "magenta"
        return self.value.lower()


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return `value` as an aware UTC datetime. Naive values are read as local time."""
    return value.astimezone(timezone.utc)


def check_timestamps(record) -> None:
    if record.created_at.tzinfo is None or record.updated_at.tzinfo is None:
        raise ValueError("Timestamps must be timezone-aware")
    if record.created_at > record.updated_at:
        raise ValueError("created_at must not be later than updated_at")


def new_id() -> str:
    return str(uuid.uuid4()).upper()


@dataclass
class PokerSession:
    """A poker session. `profit` is derived and never stored."""

    date: datetime = field(default_factory=utc_now)
    location: str = config.DEFAULT_LOCATION
    blinds: str = config.DEFAULT_BLINDS
    currency: str = config.DEFAULT_CURRENCY
    table_size: int = config.DEFAULT_TABLE_SIZE
    effective_stack: float = config.DEFAULT_EFFECTIVE_STACK
    session_tag: SessionTag = SessionTag.NONE
    buy_in: float = 0.0
    cash_out: float = 0.0
    is_active: bool = True
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.updated_at is None:
            self.updated_at = self.created_at
        self.date = as_utc(self.date)
        self.created_at = as_utc(self.created_at)
        self.updated_at = as_utc(self.updated_at)
        self.session_tag = SessionTag(self.session_tag)
        self.validate()

    def validate(self) -> None:
        """Raise ValueError if the session breaks a record invariant."""
        if not self.id:
            raise ValueError("Session id must not be empty")
        if (isinstance(self.table_size, bool) or int(self.table_size) != self.table_size
                or self.table_size <= 0):
            raise ValueError(f"Table size must be a positive integer, got {self.table_size}")
        if self.effective_stack < 0:
            raise ValueError(f"Effective stack must not be negative, got {self.effective_stack}")
        if self.buy_in < 0 or self.cash_out < 0:
            raise ValueError("Buy-in and cash-out must not be negative")
        if self.date.tzinfo is None:
            raise ValueError("Session date must be timezone-aware")
        check_timestamps(self)

    @property
    def profit(self) -> float:
        return self.cash_out - self.buy_in

    @property
    def is_profit(self) -> bool:
        return self.profit > 0

    @property
    def duration(self) -> timedelta:
        return self.updated_at - self.created_at
