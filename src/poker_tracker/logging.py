"""
Logging for the poker_tracker package: stdout plus an optional log file.

Only the package logger is configured, so running the tracker inside another
application leaves that application's root logger alone.
"""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

LOGGER_NAME = "poker_tracker"
LOG_FILE_PREFIX = "poker_tracker"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def log_file_name(now: datetime | None = None) -> str:
    now = now or datetime.now(tz=timezone.utc)
    return f"{LOG_FILE_PREFIX}_{now.strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | str = logging.INFO,
) -> Path | None:
    """
    Send poker_tracker log records to stdout, and to a file when log_dir is set.

    The file is named after the start time, e.g.
    ~/.poker_tracker/logs/poker_tracker_2026-01-31_14-30-00.log.
    Returns the log file path if one was created, None otherwise.
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.propagate = False

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    package_logger.addHandler(stdout_handler)

    if log_dir is None:
        return None

    dir_path = Path(log_dir)
    dir_path.mkdir(parents=True, exist_ok=True)
    file_path = dir_path / log_file_name()
    file_handler = logging.FileHandler(file_path, encoding="utf-8")
    file_handler.setFormatter(formatter)
    package_logger.addHandler(file_handler)
    return file_path
