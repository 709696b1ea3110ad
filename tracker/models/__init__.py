"""
Data models for tracked coins, their prices and feed connectivity.
"""
from .coin import CoinInfo, CoinRecord, ConnectivityState, PriceUpdate
from .catalog import CoinCatalog, DEFAULT_COINS, default_catalog

__all__ = [
    "CoinInfo",
    "CoinRecord",
    "ConnectivityState",
    "PriceUpdate",
    "CoinCatalog",
    "DEFAULT_COINS",
    "default_catalog",
]
