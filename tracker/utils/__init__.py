"""
Utility modules for logging setup and console display.
"""
from .logging_config import setup_logging
from .display import (
    filter_coins,
    format_change,
    format_price,
    render_status,
    render_table,
    render_watchlist,
)

__all__ = [
    "setup_logging",
    "filter_coins",
    "format_change",
    "format_price",
    "render_status",
    "render_table",
    "render_watchlist",
]
