"""
Text formatting for showing price snapshots on a console.

Everything here works on snapshot copies from the PriceStore, so no lock is
held while formatting or printing.
"""

from typing import Iterable, List, Optional

from tracker.models import CoinRecord, ConnectivityState


def format_price(price: float) -> str:
    """Formats a USD price, e.g. ``$50000.00``. Sub-cent prices keep more digits."""
    if 0 < price < 0.01:
        return f"${price:.8f}"
    return f"${price:.2f}"


def format_change(change: float) -> str:
    """Formats a 24h change with an explicit sign, e.g. ``+2.50%``."""
    sign = "+" if change >= 0 else ""
    return f"{sign}{change:.2f}%"


def filter_coins(records: Iterable[CoinRecord], search: Optional[str] = None,
                 watched_only: bool = False) -> List[CoinRecord]:
    """
    Filters records by watchlist membership and a case-insensitive search term
    matched against the name or the symbol.
    """
    term = (search or "").strip().lower()
    result = []
    for record in records:
        if watched_only and not record.watched:
            continue
        if term and term not in record.name.lower() and term not in record.symbol.lower():
            continue
        result.append(record)
    return result


def render_table(records: Iterable[CoinRecord]) -> str:
    rows = [f"{'Name':<14} {'Symbol':<7} {'Price':>16} {'24h Change':>11}  Watch"]
    rows.append("-" * len(rows[0]))
    for record in records:
        rows.append(
            f"{record.name:<14} {record.symbol:<7} {format_price(record.price):>16} "
            f"{format_change(record.change_24h):>11}  {'*' if record.watched else ''}"
        )
    return "\n".join(rows)


def render_watchlist(records: List[CoinRecord]) -> str:
    if not records:
        return "No coins in watchlist."
    lines = [f"{r.symbol:<7} {format_price(r.price):>16} {format_change(r.change_24h):>11}"
             for r in records]
    lines.append(f"Total Coins: {len(records)}")
    return "\n".join(lines)


def render_status(connectivity: ConnectivityState, interval: float) -> str:
    status = "Connected" if connectivity.connected else "Disconnected"
    last_update = connectivity.last_update or "never"
    return f"{status} | Last Update: {last_update} | Auto-refresh: {interval:g}s"
