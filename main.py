"""
Main entry point for the Crypto Price Tracker.

Initializes components, starts the background price refresh, prints the
watchlist and price table periodically, and saves the watchlist on exit.
"""

import argparse
import logging
import os
import signal
import sys
import threading

from dotenv import load_dotenv
# Load .env located next to main.py BEFORE importing settings
dotenv_path = os.path.join(os.path.dirname(__file__), '.env')
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path=dotenv_path)

from config import settings
from tracker.api import CoinNotFoundError, PriceFetcher, WatchlistStorageError
from tracker.models import default_catalog
from tracker.services import PriceStore, RefreshScheduler, WatchlistStore
from tracker.utils import (
    filter_coins,
    render_status,
    render_table,
    render_watchlist,
    setup_logging,
)

setup_logging(level=settings.LOG_LEVEL, log_to_file=settings.LOG_TO_FILE,
              log_filename=settings.LOG_FILENAME)

logger = logging.getLogger(__name__)

shutdown_event = threading.Event()


def handle_shutdown_signal(sig, frame):
    """Sets the shutdown event when a signal is received."""
    logger.warning(f"Received signal {sig}. Initiating graceful shutdown...")
    shutdown_event.set()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Track live cryptocurrency prices.")
    parser.add_argument("--watch", action="append", default=[], metavar="COIN_ID",
                        help="Add a coin to the watchlist (repeatable).")
    parser.add_argument("--unwatch", action="append", default=[], metavar="COIN_ID",
                        help="Remove a coin from the watchlist (repeatable).")
    parser.add_argument("--search", default="", help="Only show coins whose name or symbol matches.")
    parser.add_argument("--watched-only", action="store_true", help="Only show watched coins in the table.")
    parser.add_argument("--once", action="store_true",
                        help="Fetch prices once, print them and exit.")
    return parser.parse_args(argv)


def print_screen(store: PriceStore, args, interval: float) -> None:
    # Copies only; nothing below holds the store lock
    watched = store.get_watched_snapshot()
    coins = filter_coins(store.get_all_snapshot(), args.search, args.watched_only)
    connectivity = store.get_connectivity()

    print("=== My Watchlist ===")
    print(render_watchlist(watched))
    print()
    print("=== All Cryptocurrencies ===")
    print(render_table(coins))
    print()
    print(render_status(connectivity, interval))
    sys.stdout.flush()


def apply_watchlist_args(store: PriceStore, args) -> None:
    for coin_id in args.watch:
        try:
            store.add_to_watchlist(coin_id)
        except CoinNotFoundError as e:
            logger.error(f"Cannot watch {coin_id}: {e}")
    for coin_id in args.unwatch:
        try:
            store.remove_from_watchlist(coin_id)
        except CoinNotFoundError as e:
            logger.error(f"Cannot unwatch {coin_id}: {e}")


def run(args) -> int:
    catalog = default_catalog()
    store = PriceStore(catalog, WatchlistStore())
    scheduler = RefreshScheduler(store, PriceFetcher())

    apply_watchlist_args(store, args)

    try:
        if args.once:
            if not scheduler.refresh_now():
                logger.error("Could not fetch prices.")
            print_screen(store, args, scheduler.interval)
            return 0 if store.get_connectivity().connected else 1

        scheduler.start()
        while not shutdown_event.is_set():
            print_screen(store, args, scheduler.interval)
            shutdown_event.wait(settings.DISPLAY_REFRESH_SEC)
        return 0
    finally:
        logger.info("Initiating shutdown...")
        scheduler.stop()
        try:
            store.save_watchlist()
        except WatchlistStorageError as e:
            logger.error(f"Error saving watchlist on shutdown: {e}")
        logger.info("Shutdown complete.")


if __name__ == "__main__":
    signal.signal(signal.SIGINT, handle_shutdown_signal)
    signal.signal(signal.SIGTERM, handle_shutdown_signal)

    logger.info("Starting Crypto Price Tracker...")
    try:
        exit_code = run(parse_args())
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt caught in __main__.")
        exit_code = 0
    except Exception as e:
        logger.critical(f"Critical error: {e}", exc_info=True)
        exit_code = 1

    logger.info("Crypto Price Tracker finished.")
    sys.exit(exit_code)
