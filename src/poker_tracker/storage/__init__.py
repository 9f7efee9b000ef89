"""SQLite storage layer."""

from poker_tracker.storage.database import Database
from poker_tracker.storage.repository import LoadResult, TrackerRepository

__all__ = ["Database", "LoadResult", "TrackerRepository"]
