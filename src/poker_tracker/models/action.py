"""Hand action and hand result models."""

from enum import Enum


class HandAction(str, Enum):
    FOLD = "Fold"
    CALL = "Call"
    RAISE = "Raise"
    CHECK = "Check"
    BET = "Bet"
    ALL_IN = "All-In"

    @classmethod
    def from_name(cls, name: str) -> "HandAction":
        """Look up an action by tag, case-insensitively ('raise', 'all-in', 'allin')."""
        key = name.strip().lower().replace("_", "-")
        for action in cls:
            if action.value.lower() == key or action.value.lower().replace("-", "") == key:
                return action
        raise ValueError(f"Unknown action: {name}")


class HandResult(str, Enum):
    FOLD = "Fold"
    WIN = "Win"
    LOSE = "Lose"
    CHOP = "Chop"

    @classmethod
    def from_name(cls, name: str) -> "HandResult":
        for result in cls:
            if result.value.lower() == name.strip().lower():
                return result
        raise ValueError(f"Unknown result: {name}")
