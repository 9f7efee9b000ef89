"""Summary statistics."""

from poker_tracker.analysis.summary import PositionSummary, SummaryCalculator, TrackerSummary

__all__ = ["PositionSummary", "SummaryCalculator", "TrackerSummary"]
