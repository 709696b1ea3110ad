"""
The fixed list of coins tracked by the application.
"""

import logging
from typing import Iterable, Iterator, List, Optional

from .coin import CoinInfo

logger = logging.getLogger(__name__)


class CoinCatalog:
    """
    Ordered, immutable collection of CoinInfo entries.

    Membership is fixed at construction; ids must be unique.
    """
    def __init__(self, coins: Iterable[CoinInfo]):
        self._coins = tuple(coins)
        self._by_id = {}
        for coin in self._coins:
            if coin.id in self._by_id:
                raise ValueError(f"Duplicate coin id in catalog: {coin.id}")
            self._by_id[coin.id] = coin
        logger.debug(f"Catalog initialized with {len(self._coins)} coins.")

    def ids(self) -> List[str]:
        """Coin ids in catalog order."""
        return [coin.id for coin in self._coins]

    def get(self, coin_id: str) -> Optional[CoinInfo]:
        return self._by_id.get(coin_id)

    def __iter__(self) -> Iterator[CoinInfo]:
        return iter(self._coins)

    def __len__(self) -> int:
        return len(self._coins)

    def __contains__(self, coin_id: object) -> bool:
        return coin_id in self._by_id

    def __repr__(self):
        return f"CoinCatalog({len(self._coins)} coins)"


# 20 popular cryptocurrencies, keyed by CoinGecko id
DEFAULT_COINS = (
    CoinInfo("bitcoin", "BTC", "Bitcoin"),
    CoinInfo("ethereum", "ETH", "Ethereum"),
    CoinInfo("tether", "USDT", "Tether"),
    CoinInfo("binancecoin", "BNB", "BNB"),
    CoinInfo("solana", "SOL", "Solana"),
    CoinInfo("ripple", "XRP", "XRP"),
    CoinInfo("usd-coin", "USDC", "USD Coin"),
    CoinInfo("cardano", "ADA", "Cardano"),
    CoinInfo("dogecoin", "DOGE", "Dogecoin"),
    CoinInfo("tron", "TRX", "TRON"),
    CoinInfo("avalanche-2", "AVAX", "Avalanche"),
    CoinInfo("polkadot", "DOT", "Polkadot"),
    CoinInfo("chainlink", "LINK", "Chainlink"),
    CoinInfo("shiba-inu", "SHIB", "Shiba Inu"),
    CoinInfo("bitcoin-cash", "BCH", "Bitcoin Cash"),
    CoinInfo("litecoin", "LTC", "Litecoin"),
    CoinInfo("polygon", "MATIC", "Polygon"),
    CoinInfo("uniswap", "UNI", "Uniswap"),
    CoinInfo("stellar", "XLM", "Stellar"),
    CoinInfo("monero", "XMR", "Monero"),
)


def default_catalog() -> CoinCatalog:
    return CoinCatalog(DEFAULT_COINS)
