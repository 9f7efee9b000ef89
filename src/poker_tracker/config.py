"""Configuration loading from environment variables and defaults."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if it exists
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)

# Database
APP_DIR = Path(os.getenv("POKER_TRACKER_HOME", Path.home() / ".poker_tracker"))
DB_FILENAME = "PokerTracker.sqlite"
DB_PATH = Path(os.getenv("POKER_TRACKER_DB_PATH", APP_DIR / DB_FILENAME))

# Logging
LOG_LEVEL = os.getenv("POKER_TRACKER_LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("POKER_TRACKER_LOG_DIR") or None

# Analytics
RECENT_SESSIONS = int(os.getenv("POKER_TRACKER_RECENT_SESSIONS", "5"))

# Session defaults
DEFAULT_LOCATION = os.getenv("POKER_TRACKER_DEFAULT_LOCATION", "Live Casino")
DEFAULT_BLINDS = os.getenv("POKER_TRACKER_DEFAULT_BLINDS", "5/10")
DEFAULT_CURRENCY = os.getenv("POKER_TRACKER_DEFAULT_CURRENCY", "USD")
DEFAULT_TABLE_SIZE = int(os.getenv("POKER_TRACKER_DEFAULT_TABLE_SIZE", "10"))
DEFAULT_EFFECTIVE_STACK = float(os.getenv("POKER_TRACKER_DEFAULT_STACK", "400"))
