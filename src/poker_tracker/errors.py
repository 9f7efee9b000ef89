"""Error types raised by the tracker."""


class PokerTrackerError(Exception):
    """Base class for all tracker errors."""


class InitializationError(PokerTrackerError):
    """The database could not be opened, its schema created, or its data loaded."""


class PersistenceError(PokerTrackerError):
    """A statement failed to prepare or execute, including constraint violations."""


class RecordNotFoundError(PersistenceError):
    """An update matched no row."""

    def __init__(self, table: str, record_id: str):
        super().__init__(f"No row in {table} with id {record_id}")
        self.table = table
        self.record_id = record_id


class DecodeError(PokerTrackerError, ValueError):
    """A stored row or structured field could not be decoded."""

    def __init__(self, message: str, record_id: str | None = None):
        super().__init__(message)
        self.record_id = record_id
