"""Block-explorer API clients for btcwatch."""

from btcwatch.clients.mempool import MempoolClient, DEFAULT_API_URL

__all__ = ["MempoolClient", "DEFAULT_API_URL"]
