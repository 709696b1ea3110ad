"""
Custom exceptions for price fetching, watchlist storage and coin lookup.
"""

from typing import Optional


class FetchError(Exception):
    """A price API request that produced no usable data."""
    def __init__(self, reason: str, status_code: Optional[int] = None):
        self.reason = reason
        self.status_code = status_code
        if status_code is not None:
            super().__init__(f"Price fetch failed (HTTP {status_code}): {reason}")
        else:
            super().__init__(f"Price fetch failed: {reason}")

    def __str__(self):
        return f"FetchError(reason='{self.reason}', status_code={self.status_code})"


class WatchlistStorageError(OSError):
    """The watchlist file could not be read or written."""


class CoinNotFoundError(LookupError):
    """A coin id that is not part of the catalog."""
    def __init__(self, coin_id: str):
        self.coin_id = coin_id
        super().__init__(f"Unknown coin id: {coin_id}")
