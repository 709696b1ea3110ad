"""
Background refresh loop that keeps the PriceStore up to date.
"""

import datetime
import logging
import threading
import time
from typing import Optional

from config import settings
from tracker.api.http_fetcher import FetchResult, PriceFetcher
from .price_store import PriceStore

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Runs fetch cycles on a background thread at a fixed interval.

    On start the thread performs one immediate cycle, then waits
    ``interval`` seconds between cycles. The wait is an Event wait, so
    ``stop()`` and ``trigger_refresh()`` wake it at once. A failed cycle only
    flips the store's connectivity to disconnected; the loop keeps going.

    ``refresh_now()`` runs a cycle in the caller's thread through the same
    code path. It may overlap with a periodic cycle; the store's lock
    serializes the writes and the last batch applied wins.
    """

    def __init__(self,
                 store: PriceStore,
                 fetcher: Optional[PriceFetcher] = None,
                 interval: Optional[float] = None):
        self.store = store
        self.fetcher = fetcher if fetcher is not None else PriceFetcher()
        self.interval = interval if interval is not None else settings.REFRESH_INTERVAL_SEC
        if self.interval <= 0:
            raise ValueError("interval must be positive")

        # Catalog ids never change, so they are read without the store lock
        self._ids = store.catalog.ids()
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._stats_lock = threading.Lock()
        self._cycle_count = 0
        self._consecutive_failures = 0

    # --- Lifecycle ---

    def start(self) -> None:
        """Starts the background thread. Calling start twice is a no-op."""
        if self._thread is not None and self._thread.is_alive():
            logger.warning("RefreshScheduler already running.")
            return
        self._stop_event.clear()
        self._wake_event.clear()
        self._thread = threading.Thread(target=self._run, name="price-refresh", daemon=True)
        self._thread.start()
        logger.info(f"Price refresh started (interval {self.interval:g}s).")

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Signals the loop to stop and waits for the thread to exit.

        An in-flight fetch is allowed to finish (bounded by the fetcher's
        timeout); a pending interval wait is interrupted immediately.

        Returns:
            bool: True if the thread has terminated.
        """
        logger.info("Price refresh stop requested.")
        self._stop_event.set()
        self._wake_event.set()
        thread = self._thread
        if thread is None:
            return True
        if thread is threading.current_thread():
            return False
        thread.join(timeout)
        if thread.is_alive():
            logger.warning("Price refresh thread did not terminate within timeout.")
            return False
        logger.info("Price refresh stopped.")
        return True

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False

    # --- Triggers ---

    def refresh_now(self) -> bool:
        """
        Performs one fetch cycle synchronously in the calling thread.

        Blocks for up to the fetcher's network timeout; do not call it from a
        thread that must stay responsive.

        Returns:
            bool: True if the prices were updated.
        """
        return self._run_cycle(trigger="manual")

    def trigger_refresh(self) -> None:
        """Wakes the background loop so it fetches now instead of at the next interval."""
        self._wake_event.set()

    # --- Health ---

    @property
    def cycle_count(self) -> int:
        with self._stats_lock:
            return self._cycle_count

    @property
    def consecutive_failures(self) -> int:
        with self._stats_lock:
            return self._consecutive_failures

    # --- Internals ---

    def _run(self) -> None:
        logger.debug("Refresh thread running.")
        if not self._stop_event.is_set():
            self._run_cycle(trigger="startup")

        while not self._stop_event.is_set():
            self._wake_event.wait(self.interval)
            self._wake_event.clear()
            if self._stop_event.is_set():
                break
            self._run_cycle(trigger="periodic")

        logger.debug("Refresh thread finished.")

    def _run_cycle(self, trigger: str) -> bool:
        cycle_start = time.perf_counter()
        try:
            result = self.fetcher.fetch(self._ids)
        except Exception as e:
            # The fetcher reports errors in its result; anything raised is a bug
            logger.exception(f"Unexpected error in {trigger} fetch cycle: {e}")
            result = None

        ok = isinstance(result, FetchResult) and result.ok
        if ok:
            applied = self.store.apply_price_updates(result.updates)
            timestamp = datetime.datetime.now().strftime("%H:%M:%S")
            self.store.set_connectivity(True, timestamp)
            logger.info(f"Prices updated successfully at {timestamp} ({applied} coins, {trigger}).")
        else:
            self.store.set_connectivity(False)
            if result is not None:
                logger.warning(f"{trigger.capitalize()} fetch cycle failed: {result.error}")

        with self._stats_lock:
            self._cycle_count += 1
            if ok:
                self._consecutive_failures = 0
            else:
                self._consecutive_failures += 1
            failures = self._consecutive_failures
        if failures > 1:
            logger.warning(f"{failures} consecutive fetch failures; will retry in {self.interval:g}s.")
        logger.debug(f"Fetch cycle ({trigger}) finished in {(time.perf_counter() - cycle_start)*1000:.2f}ms")
        return ok
