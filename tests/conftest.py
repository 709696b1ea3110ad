"""
Pytest configuration and fixtures.
Adds the repo root to the Python path so tests can import tracker and config.
"""

import sys
from pathlib import Path

import pytest

repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from tracker.models import CoinCatalog, CoinInfo  # noqa: E402
from tracker.services import WatchlistStore  # noqa: E402


@pytest.fixture
def small_catalog():
    return CoinCatalog([
        CoinInfo("bitcoin", "BTC", "Bitcoin"),
        CoinInfo("ethereum", "ETH", "Ethereum"),
        CoinInfo("solana", "SOL", "Solana"),
    ])


@pytest.fixture
def watchlist_path(tmp_path):
    return tmp_path / "data" / "watchlist.json"


@pytest.fixture
def watchlist_store(watchlist_path):
    return WatchlistStore(watchlist_path)
