"""Output formatting for the terminal."""

from poker_tracker.formatters.table import TableFormatter

__all__ = ["TableFormatter"]
