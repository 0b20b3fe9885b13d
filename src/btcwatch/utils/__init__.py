"""Utility functions for btcwatch."""

from btcwatch.utils.formatting import format_btc, format_usd, shorten_address
from btcwatch.utils.time_ranges import get_range_start

__all__ = ["format_btc", "format_usd", "shorten_address", "get_range_start"]
