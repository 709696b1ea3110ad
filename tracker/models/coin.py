"""
Defines the value types shared between the fetcher, the price store and the
display layer.
"""

from typing import Dict, NamedTuple


class CoinInfo(NamedTuple):
    """Immutable identity of a tracked coin."""
    id: str       # CoinGecko ID (e.g., "bitcoin")
    symbol: str   # Trading symbol (e.g., "BTC")
    name: str     # Display name (e.g., "Bitcoin")


class PriceUpdate(NamedTuple):
    """One coin's freshly fetched market data."""
    price: float
    change_24h: float


class CoinRecord:
    """
    A cryptocurrency with its latest market data and watchlist status.

    Attributes:
        id (str): CoinGecko ID, unique across the catalog.
        symbol (str): Ticker symbol.
        name (str): Display name.
        price (float): Last known USD price. 0.0 means never fetched.
        change_24h (float): 24-hour percentage change (signed).
        watched (bool): Whether the coin is on the user's watchlist.
    """
    __slots__ = ("id", "symbol", "name", "price", "change_24h", "watched")

    def __init__(self, id: str, symbol: str, name: str,
                 price: float = 0.0, change_24h: float = 0.0, watched: bool = False):
        self.id = id
        self.symbol = symbol
        self.name = name
        self.price = price
        self.change_24h = change_24h
        self.watched = watched

    @classmethod
    def from_info(cls, info: CoinInfo) -> "CoinRecord":
        return cls(info.id, info.symbol, info.name)

    def copy(self) -> "CoinRecord":
        return CoinRecord(self.id, self.symbol, self.name,
                          self.price, self.change_24h, self.watched)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "change_24h": self.change_24h,
            "watched": self.watched,
        }

    def __eq__(self, other):
        if not isinstance(other, CoinRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"CoinRecord(id={self.id!r}, symbol={self.symbol!r}, price={self.price}, "
                f"change_24h={self.change_24h}, watched={self.watched})")


class ConnectivityState:
    """Health of the price feed as seen by the last completed fetch cycle."""
    __slots__ = ("connected", "last_update")

    def __init__(self, connected: bool = False, last_update: str = ""):
        self.connected = connected
        self.last_update = last_update  # HH:MM:SS of the last successful update

    def copy(self) -> "ConnectivityState":
        return ConnectivityState(self.connected, self.last_update)

    def __eq__(self, other):
        if not isinstance(other, ConnectivityState):
            return NotImplemented
        return (self.connected, self.last_update) == (other.connected, other.last_update)

    def __repr__(self):
        return f"ConnectivityState(connected={self.connected}, last_update={self.last_update!r})"

