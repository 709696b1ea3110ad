"""
Crypto Price Tracker.

Keeps a live table of cryptocurrency prices refreshed from the CoinGecko API
on a background thread, with a persisted watchlist.
"""
