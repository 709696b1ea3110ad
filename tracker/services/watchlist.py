"""
Durable storage for the set of watched coin ids.

The watchlist is a pretty-printed JSON array of id strings. Writes go to a
temporary file that then replaces the real one, so a crash mid-write never
leaves a truncated watchlist behind.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Iterable, Optional, Set

from config import settings
from tracker.api.exceptions import WatchlistStorageError

logger = logging.getLogger(__name__)


class WatchlistStore:
    """
    Loads and saves the watched coin ids.

    Saves are serialized by an internal lock, so at most one writer touches
    the file at a time.
    """

    def __init__(self, path: Optional[os.PathLike] = None):
        if path is None:
            path = Path(settings.WATCHLIST_DIR) / settings.WATCHLIST_FILENAME
        self.path = Path(path)
        self.tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        self._write_lock = threading.Lock()

    def load(self) -> Set[str]:
        """
        Returns the saved watchlist. A missing file is an empty watchlist.

        Raises:
            WatchlistStorageError: the file exists but cannot be read or parsed.
        """
        if not self.path.exists():
            logger.info(f"No watchlist file found at {self.path}, starting fresh.")
            return set()

        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise WatchlistStorageError(f"Could not read watchlist {self.path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise WatchlistStorageError(f"Malformed watchlist {self.path}: {e}") from e

        if not isinstance(data, list):
            raise WatchlistStorageError(
                f"Malformed watchlist {self.path}: expected a JSON array, got {type(data).__name__}")

        ids = set()
        for entry in data:
            if isinstance(entry, str):
                ids.add(entry)
            else:
                logger.warning(f"Ignoring non-string watchlist entry: {entry!r}")
        logger.info(f"Watchlist loaded: {len(ids)} coin(s).")
        return ids

    def save(self, ids: Iterable[str]) -> None:
        """
        Writes the watchlist, creating its directory if needed.

        Raises:
            WatchlistStorageError: the file could not be written.
        """
        payload = json.dumps(sorted(ids), indent=4)
        with self._write_lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.tmp.write_text(payload, encoding="utf-8")
                self.tmp.replace(self.path)
            except OSError as e:
                raise WatchlistStorageError(f"Could not write watchlist {self.path}: {e}") from e
        logger.debug(f"Watchlist saved to {self.path}")
