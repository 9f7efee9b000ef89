"""Poker session and hand tracker."""

__version__ = "0.1.0"
