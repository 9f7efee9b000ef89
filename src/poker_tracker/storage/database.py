"""Database connection management."""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from poker_tracker.config import DB_PATH
from poker_tracker.errors import InitializationError

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


class Database:
    """SQLite database connection manager.

    Holds a single connection for the lifetime of the object. Every use of
    the connection goes through `connect()`, which serializes callers on a
    re-entrant lock and commits (or rolls back) when the block exits.
    """

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = str(db_path or DB_PATH)
        self._lock = threading.RLock()
        self._conn = self._open()
        self._init_schema()

    def _open(self) -> sqlite3.Connection:
        try:
            if self.db_path != MEMORY:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except (OSError, sqlite3.Error) as e:
            logger.error("Unable to open database at %s: %s", self.db_path, e)
            raise InitializationError(f"Unable to open database at {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        logger.info("Opened database at %s", self.db_path)
        return conn

    def _init_schema(self):
        schema_path = Path(__file__).parent / "schema.sql"
        try:
            schema_sql = schema_path.read_text(encoding="utf-8")
            with self.connect() as conn:
                conn.executescript(schema_sql)
        except (OSError, sqlite3.Error) as e:
            logger.error("Schema could not be created: %s", e)
            self.close()
            raise InitializationError(f"Schema could not be created: {e}") from e
        logger.debug("Schema ready")

    @contextmanager
    def connect(self) -> Generator[sqlite3.Connection, None, None]:
        with self._lock:
            if self._conn is None:
                raise sqlite3.ProgrammingError("Cannot operate on a closed database.")
            try:
                yield self._conn
                self._conn.commit()
            except Exception:
                self._conn.rollback()
                raise

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.info("Database connection closed")

    @property
    def is_open(self) -> bool:
        return self._conn is not None
