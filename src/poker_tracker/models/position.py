"""Seat position model."""

from enum import Enum


class Position(str, Enum):
    UTG = "UTG"
    UTG1 = "UTG+1"
    MP = "MP"
    CO = "CO"
    BTN = "BTN"
    SB = "SB"
    BB = "BB"

    @property
    def is_early(self) -> bool:
        return self in (Position.UTG, Position.UTG1)

    @property
    def is_late(self) -> bool:
        return self in (Position.CO, Position.BTN)

    @property
    def is_blind(self) -> bool:
        return self in (Position.SB, Position.BB)

    @property
    def category(self) -> str:
        if self.is_early:
            return "Early"
        if self.is_late:
            return "Late"
        if self.is_blind:
            return "Blinds"
        return "Middle"
