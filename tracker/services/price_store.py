"""
Thread-safe table of coin prices, watchlist flags and feed connectivity.

Every read hands out copies taken under the lock; every write is an in-memory
field assignment under the same lock. Network and file I/O always happen with
the lock released.
"""

import logging
import threading
from typing import List, Mapping, Optional, Set

from config import settings
from tracker.api.exceptions import CoinNotFoundError, WatchlistStorageError
from tracker.models import CoinCatalog, CoinRecord, ConnectivityState, PriceUpdate
from .watchlist import WatchlistStore

logger = logging.getLogger(__name__)


class PriceStore:
    """
    Single source of truth for all CoinRecords and the ConnectivityState.

    Records are created once from the catalog, in catalog order, and are never
    added or removed afterwards. One lock covers both the records and the
    connectivity state so the two never drift apart.
    """

    def __init__(self,
                 catalog: CoinCatalog,
                 watchlist_store: Optional[WatchlistStore] = None,
                 autosave: Optional[bool] = None):
        """
        Args:
            catalog: The fixed set of coins to track.
            watchlist_store: Persistence for watched ids. When given, the saved
                watchlist is loaded immediately.
            autosave: Save the watchlist after every toggle. Defaults to
                settings.WATCHLIST_AUTOSAVE. When False, callers are expected
                to call save_watchlist() on shutdown.
        """
        self.catalog = catalog
        self.watchlist_store = watchlist_store
        self.autosave = settings.WATCHLIST_AUTOSAVE if autosave is None else autosave

        self._lock = threading.Lock()
        # Orders whole snapshot-then-write saves; taken before _lock, never after
        self._persist_lock = threading.Lock()
        self._records: List[CoinRecord] = [CoinRecord.from_info(info) for info in catalog]
        self._index = {record.id: record for record in self._records}
        self._connectivity = ConnectivityState()

        if self.watchlist_store is not None:
            self.load_watchlist()

    # --- Reads ---

    def get_all_snapshot(self) -> List[CoinRecord]:
        """Point-in-time copy of every record, in catalog order."""
        with self._lock:
            return [record.copy() for record in self._records]

    def get_watched_snapshot(self) -> List[CoinRecord]:
        """Point-in-time copy of the watched records, in catalog order."""
        with self._lock:
            return [record.copy() for record in self._records if record.watched]

    def get_coin(self, coin_id: str) -> CoinRecord:
        with self._lock:
            record = self._index.get(coin_id)
            if record is None:
                raise CoinNotFoundError(coin_id)
            return record.copy()

    def watched_ids(self) -> Set[str]:
        with self._lock:
            return {record.id for record in self._records if record.watched}

    def get_connectivity(self) -> ConnectivityState:
        with self._lock:
            return self._connectivity.copy()

    # --- Writes ---

    def apply_price_updates(self, updates: Mapping[str, PriceUpdate]) -> int:
        """
        Overwrites price and 24h change for every known id in ``updates``.

        Ids the catalog does not contain are ignored. The whole batch is
        applied inside one critical section, so readers see all of it or none.

        Returns:
            int: Number of records updated.
        """
        applied = 0
        with self._lock:
            for coin_id, update in updates.items():
                record = self._index.get(coin_id)
                if record is None:
                    continue
                record.price = update.price
                record.change_24h = update.change_24h
                applied += 1
        ignored = len(updates) - applied
        if ignored:
            logger.debug(f"Ignored {ignored} price update(s) for coins outside the catalog.")
        return applied

    def set_connectivity(self, connected: bool, last_update: Optional[str] = None) -> None:
        """
        Records the outcome of a fetch cycle.

        Args:
            connected: Whether the last fetch succeeded.
            last_update: New HH:MM:SS timestamp, or None to keep the current one.
        """
        with self._lock:
            self._connectivity.connected = connected
            if last_update is not None:
                self._connectivity.last_update = last_update

    def set_watched(self, coin_id: str, watched: bool) -> None:
        """
        Adds a coin to, or removes it from, the watchlist.

        With autosave enabled the watchlist is written before returning. A
        failed save is logged and the in-memory flag is kept.

        Raises:
            CoinNotFoundError: ``coin_id`` is not in the catalog.
        """
        with self._lock:
            record = self._index.get(coin_id)
            if record is None:
                raise CoinNotFoundError(coin_id)
            changed = record.watched != watched
            record.watched = watched

        if changed:
            logger.info(f"{'Added' if watched else 'Removed'} {coin_id} "
                        f"{'to' if watched else 'from'} watchlist.")
        if changed and self.autosave and self.watchlist_store is not None:
            try:
                self.save_watchlist()
            except WatchlistStorageError as e:
                logger.error(f"Watchlist change for {coin_id} kept in memory but not saved: {e}")

    def add_to_watchlist(self, coin_id: str) -> None:
        self.set_watched(coin_id, True)

    def remove_from_watchlist(self, coin_id: str) -> None:
        self.set_watched(coin_id, False)

    # --- Persistence ---

    def load_watchlist(self) -> Set[str]:
        """
        Marks coins as watched from the saved watchlist.

        A storage error is logged and leaves the watchlist empty. Saved ids
        that are no longer in the catalog are skipped.

        Returns:
            Set[str]: The ids that were marked as watched.
        """
        if self.watchlist_store is None:
            return set()
        try:
            saved = self.watchlist_store.load()
        except WatchlistStorageError as e:
            logger.error(f"Error loading watchlist, starting with an empty one: {e}")
            return set()

        marked = set()
        with self._lock:
            for coin_id in saved:
                record = self._index.get(coin_id)
                if record is not None:
                    record.watched = True
                    marked.add(coin_id)
        unknown = saved - marked
        if unknown:
            logger.warning(f"Saved watchlist has unknown coin ids: {', '.join(sorted(unknown))}")
        return marked

    def save_watchlist(self) -> None:
        """
        Writes the current watched ids to storage.

        The ids are read after the persist lock is taken, so overlapping saves
        always leave the file matching the latest in-memory watchlist.

        Raises:
            WatchlistStorageError: the write failed.
        """
        if self.watchlist_store is None:
            return
        with self._persist_lock:
            ids = self.watched_ids()
            self.watchlist_store.save(ids)
        logger.info(f"Watchlist saved ({len(ids)} coin(s)).")
