"""
Price API interaction package.

Provides the HTTP client for the CoinGecko simple-price endpoint and the
exceptions shared across the tracker.
"""

from .exceptions import FetchError, WatchlistStorageError, CoinNotFoundError
from .http_fetcher import PriceFetcher, FetchResult

__all__ = [
    "FetchError",
    "WatchlistStorageError",
    "CoinNotFoundError",
    "PriceFetcher",
    "FetchResult",
]
