"""
Core application services: the shared price store, watchlist persistence and
the background refresh loop.
"""
from .watchlist import WatchlistStore
from .price_store import PriceStore
from .scheduler import RefreshScheduler

__all__ = ["WatchlistStore", "PriceStore", "RefreshScheduler"]
