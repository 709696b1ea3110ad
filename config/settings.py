"""
Configuration settings for the Crypto Price Tracker.

Loads overrides from environment variables (optionally via a .env file in the
project root). Defines application constants.
"""

import os
import logging
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Load environment variables from .env file ---
# Project root is one level above config/
current_file_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.abspath(os.path.join(current_file_dir, ".."))
dotenv_path = os.path.join(project_root, ".env")

if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path=dotenv_path)
else:
    logger.debug(f".env file not found at expected path: {dotenv_path}")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# --- Price API Configuration ---
COINGECKO_API_URL = os.getenv("COINGECKO_API_URL", "https://api.coingecko.com")
SIMPLE_PRICE_PATH = "/api/v3/simple/price"
FETCH_TIMEOUT_SEC = float(os.getenv("FETCH_TIMEOUT_SEC", 5))

# --- Refresh Configuration ---
REFRESH_INTERVAL_SEC = float(os.getenv("REFRESH_INTERVAL_SEC", 30))

# --- Watchlist Storage ---
WATCHLIST_DIR = os.getenv("WATCHLIST_DIR", "data")
WATCHLIST_FILENAME = os.getenv("WATCHLIST_FILENAME", "watchlist.json")
# true: save on every toggle. false: save only on shutdown.
WATCHLIST_AUTOSAVE = _env_bool("WATCHLIST_AUTOSAVE", "true")

# --- Display / Logging ---
DISPLAY_REFRESH_SEC = float(os.getenv("DISPLAY_REFRESH_SEC", 5))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = _env_bool("LOG_TO_FILE", "false")
LOG_FILENAME = os.getenv("LOG_FILENAME", "crypto_tracker.log")

# --- Validation ---
if FETCH_TIMEOUT_SEC <= 0:
    raise ValueError("FETCH_TIMEOUT_SEC must be positive.")

if REFRESH_INTERVAL_SEC <= 0:
    raise ValueError("REFRESH_INTERVAL_SEC must be positive.")

if DISPLAY_REFRESH_SEC <= 0:
    raise ValueError("DISPLAY_REFRESH_SEC must be positive.")

logger.info("Configuration loaded:")
logger.info(f"  COINGECKO_API_URL: {COINGECKO_API_URL}")
logger.info(f"  FETCH_TIMEOUT_SEC: {FETCH_TIMEOUT_SEC}")
logger.info(f"  REFRESH_INTERVAL_SEC: {REFRESH_INTERVAL_SEC}")
logger.info(f"  WATCHLIST_PATH: {os.path.join(WATCHLIST_DIR, WATCHLIST_FILENAME)}")
logger.info(f"  WATCHLIST_AUTOSAVE: {WATCHLIST_AUTOSAVE}")
