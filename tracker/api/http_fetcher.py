"""
Module for fetching live prices via the CoinGecko "simple price" HTTP REST API.
"""

import requests
import logging
import math
from typing import Dict, Optional, Sequence

from config import settings
from tracker.models.coin import PriceUpdate
from .exceptions import FetchError

logger = logging.getLogger(__name__)


class FetchResult:
    """
    Outcome of one price API request: either a mapping of coin id to
    PriceUpdate, or the FetchError that prevented it.
    """
    __slots__ = ("updates", "error")

    def __init__(self, updates: Optional[Dict[str, PriceUpdate]] = None,
                 error: Optional[FetchError] = None):
        if error is not None and updates:
            raise ValueError("FetchResult cannot carry both updates and an error")
        self.updates: Dict[str, PriceUpdate] = updates if updates is not None else {}
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, updates: Dict[str, PriceUpdate]) -> "FetchResult":
        return cls(updates=updates)

    @classmethod
    def failure(cls, error: FetchError) -> "FetchResult":
        return cls(error=error)

    def __repr__(self):
        if self.ok:
            return f"FetchResult(updates={len(self.updates)})"
        return f"FetchResult(error={self.error!r})"


def _as_number(value) -> Optional[float]:
    # bool is an int subclass; JSON true/false are not prices
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class PriceFetcher:
    """
    Fetches USD price and 24h change for a batch of coins in a single request.

    Stateless apart from its configuration: no retries, no caching. Every
    failure is reported through the returned FetchResult, never raised.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.COINGECKO_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT_SEC

    @property
    def url(self) -> str:
        return f"{self.base_url}{settings.SIMPLE_PRICE_PATH}"

    @staticmethod
    def build_params(ids: Sequence[str]) -> Dict[str, str]:
        return {
            "ids": ",".join(ids),
            "vs_currencies": "usd",
            "include_24hr_change": "true",
        }

    def fetch(self, ids: Sequence[str]) -> FetchResult:
        """
        Requests current prices for the given coin ids.

        Args:
            ids (Sequence[str]): CoinGecko ids, in catalog order.

        Returns:
            FetchResult: updates for every coin that came back with both a
                price and a 24h change, or the error that prevented the fetch.
        """
        if not ids:
            logger.warning("fetch called with no coin ids.")
            return FetchResult.success({})

        params = self.build_params(ids)
        logger.debug(f"Fetching prices from {self.url} for {len(ids)} coins")
        try:
            response = requests.get(self.url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout fetching prices after {self.timeout}s: {e}")
            return FetchResult.failure(FetchError(f"timeout: {e}"))
        except requests.exceptions.RequestException as e:
            logger.error(f"HTTP Error fetching prices: {e}")
            return FetchResult.failure(FetchError(f"request failed: {e}"))

        if response.status_code != 200:
            logger.error(f"Price API returned HTTP {response.status_code}")
            return FetchResult.failure(
                FetchError("unexpected status", status_code=response.status_code))

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"JSON Decode Error fetching prices: {e}")
            return FetchResult.failure(FetchError(f"malformed JSON: {e}", status_code=200))

        if not isinstance(data, dict):
            logger.error(f"Price API returned {type(data).__name__}, expected an object.")
            return FetchResult.failure(FetchError("response is not a JSON object", status_code=200))

        updates = self.parse_prices(data, ids)
        logger.info(f"Fetched prices for {len(updates)}/{len(ids)} coins.")
        return FetchResult.success(updates)

    @staticmethod
    def parse_prices(data: Dict[str, object], ids: Sequence[str]) -> Dict[str, PriceUpdate]:
        """
        Maps a decoded simple-price response to PriceUpdates.

        Coins absent from the response, or missing either the ``usd`` or the
        ``usd_24h_change`` field, are left out so their stored values stay as
        they were. Ids in the response that were not requested are kept; the
        store ignores ids it does not know.
        """
        updates: Dict[str, PriceUpdate] = {}
        missing = []
        for coin_id, coin_data in data.items():
            if not isinstance(coin_data, dict):
                logger.warning(f"Skipping {coin_id}: entry is {type(coin_data).__name__}, not an object.")
                continue
            price = _as_number(coin_data.get("usd"))
            change = _as_number(coin_data.get("usd_24h_change"))
            if price is None or change is None:
                missing.append(coin_id)
                continue
            if price < 0:
                logger.warning(f"Skipping {coin_id}: negative price {price}")
                continue
            updates[coin_id] = PriceUpdate(price, change)

        if missing:
            logger.debug(f"Incomplete price data for: {', '.join(missing)}")
        absent = [coin_id for coin_id in ids if coin_id not in data]
        if absent:
            logger.debug(f"No price data returned for: {', '.join(absent)}")
        return updates
