"""Encoding between records and flat table rows.

Card lists and action lists are stored as JSON arrays in a single TEXT
column. Cards are objects with the rank and suit tags::

    [{"rank": "A", "suit": "♠"}, {"rank": "K", "suit": "♥"}]

Actions are arrays of action tags::

    ["Raise", "Call"]

Timestamps are seconds since the epoch as REAL, booleans 0/1, and
enumerations their string tag.
"""

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Type, TypeVar

from poker_tracker.errors import DecodeError
from poker_tracker.models.action import HandAction, HandResult
from poker_tracker.models.card import Card, Rank, Suit
from poker_tracker.models.hand import PokerHand
from poker_tracker.models.position import Position
from poker_tracker.models.session import PokerSession, SessionTag

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

SESSION_COLUMNS = (
    "id", "date", "location", "blinds", "currency", "table_size",
    "effective_stack", "session_tag", "buy_in", "cash_out", "is_active",
    "created_at", "updated_at",
)

HAND_COLUMNS = (
    "id", "session_id", "position", "hole_cards", "board_cards", "actions",
    "result", "pot_size", "net_result", "notes", "created_at", "updated_at",
)


def to_timestamp(value: datetime) -> float:
    return value.timestamp()


def from_timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


# Structured fields

def encode_cards(cards: List[Card]) -> str:
    return json.dumps(
        [{"rank": c.rank.value, "suit": c.suit.value} for c in cards],
        ensure_ascii=False,
    )


def decode_cards(text: str) -> List[Card]:
    items = _load_array(text, "cards")
    cards = []
    for item in items:
        if not isinstance(item, dict):
            raise DecodeError(f"Card entry is not an object: {item!r}")
        try:
            cards.append(Card(Rank(item["rank"]), Suit(item["suit"])))
        except (KeyError, ValueError) as e:
            raise DecodeError(f"Invalid card entry {item!r}: {e}") from e
    return cards


def encode_actions(actions: List[HandAction]) -> str:
    return json.dumps([a.value for a in actions])


def decode_actions(text: str) -> List[HandAction]:
    items = _load_array(text, "actions")
    try:
        return [HandAction(item) for item in items]
    except ValueError as e:
        raise DecodeError(f"Invalid action in {text!r}: {e}") from e


def _load_array(text: str, what: str) -> list:
    try:
        value = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise DecodeError(f"Malformed {what} encoding {text!r}: {e}") from e
    if not isinstance(value, list):
        raise DecodeError(f"Expected a JSON array for {what}, got {text!r}")
    return value


# Rows

def session_to_row(session: PokerSession) -> Dict[str, Any]:
    return {
        "id": session.id,
        "date": to_timestamp(session.date),
        "location": session.location,
        "blinds": session.blinds,
        "currency": session.currency,
        "table_size": int(session.table_size),
        "effective_stack": float(session.effective_stack),
        "session_tag": session.session_tag.value,
        "buy_in": float(session.buy_in),
        "cash_out": float(session.cash_out),
        "is_active": int(session.is_active),
        "created_at": to_timestamp(session.created_at),
        "updated_at": to_timestamp(session.updated_at),
    }


def row_to_session(row: Mapping[str, Any]) -> PokerSession:
    """Decode one sessions row. Raises DecodeError if the row is unusable."""
    record_id = _record_id(row)
    try:
        return PokerSession(
            id=record_id,
            date=from_timestamp(row["date"]),
            location=row["location"],
            blinds=row["blinds"],
            currency=row["currency"],
            table_size=row["table_size"],
            effective_stack=row["effective_stack"],
            session_tag=_enum_or_default(SessionTag, row["session_tag"], SessionTag.NONE, record_id),
            buy_in=row["buy_in"],
            cash_out=row["cash_out"],
            is_active=row["is_active"] == 1,
            created_at=from_timestamp(row["created_at"]),
            updated_at=from_timestamp(row["updated_at"]),
        )
    except (KeyError, IndexError, TypeError, ValueError, OverflowError, OSError) as e:
        raise DecodeError(f"Session {record_id}: {e}", record_id=record_id) from e


def hand_to_row(hand: PokerHand) -> Dict[str, Any]:
    return {
        "id": hand.id,
        "session_id": hand.session_id,
        "position": hand.position.value,
        "hole_cards": encode_cards(hand.hole_cards),
        "board_cards": encode_cards(hand.board_cards),
        "actions": encode_actions(hand.actions),
        "result": hand.result.value,
        "pot_size": float(hand.pot_size),
        "net_result": float(hand.net_result),
        "notes": hand.notes,
        "created_at": to_timestamp(hand.created_at),
        "updated_at": to_timestamp(hand.updated_at),
    }


def row_to_hand(row: Mapping[str, Any]) -> PokerHand:
    """Decode one hands row. Raises DecodeError if the row is unusable."""
    record_id = _record_id(row)
    try:
        return PokerHand(
            id=record_id,
            session_id=row["session_id"],
            position=_enum_or_default(Position, row["position"], Position.BTN, record_id),
            hole_cards=decode_cards(row["hole_cards"]),
            board_cards=decode_cards(row["board_cards"]),
            actions=decode_actions(row["actions"]),
            result=_enum_or_default(HandResult, row["result"], HandResult.FOLD, record_id),
            pot_size=row["pot_size"],
            net_result=row["net_result"],
            notes=row["notes"],
            created_at=from_timestamp(row["created_at"]),
            updated_at=from_timestamp(row["updated_at"]),
        )
    except DecodeError as e:
        raise DecodeError(f"Hand {record_id}: {e}", record_id=record_id) from e
    except (KeyError, IndexError, TypeError, ValueError, OverflowError, OSError) as e:
        raise DecodeError(f"Hand {record_id}: {e}", record_id=record_id) from e


def _record_id(row: Mapping[str, Any]) -> str:
    try:
        record_id = row["id"]
    except (KeyError, IndexError) as e:
        raise DecodeError("Row has no id column") from e
    if not record_id:
        raise DecodeError("Row has an empty id")
    return record_id


def _enum_or_default(enum_cls: Type[E], value: Any, default: E, record_id: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning("Row %s: unknown %s %r, using %s",
                       record_id, enum_cls.__name__, value, default.value)
        return default
