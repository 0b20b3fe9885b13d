"""Async client for the mempool.space block-explorer API."""

import logging
from typing import Any, Optional

import httpx

from btcwatch.clients.mappers import price_from_payload, transactions_to_domain, utxos_to_domain
from btcwatch.domain.entities import RawTransaction, UnspentOutput
from btcwatch.domain.errors import (
    PRICES_FETCH_FAILED,
    TRANSACTIONS_FETCH_FAILED,
    UTXOS_FETCH_FAILED,
    ParseError,
    UpstreamFetchError,
)

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://mempool.space/api"
DEFAULT_TIMEOUT = 10.0


class MempoolClient:
    """Fetches address data and prices from a mempool.space compatible API."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root, e.g. 'https://mempool.space/api'
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests to stub responses)
        """
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "MempoolClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    async def _get_json(self, path: str, failure_message: str) -> Any:
        logger.debug("GET %s%s", self.base_url, path)
        try:
            response = await self._http.get(path)
        except httpx.TransportError as e:
            logger.warning("Request to %s failed: %s", path, e)
            raise UpstreamFetchError(failure_message) from e

        if not response.is_success:
            logger.warning("Request to %s returned HTTP %d", path, response.status_code)
            raise UpstreamFetchError(failure_message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Response from {path} is not valid JSON") from e

    async def fetch_transactions(self, address: str) -> list[RawTransaction]:
        """Fetch the transactions of an address (confirmed and pending)."""
        payload = await self._get_json(f"/address/{address}/txs", TRANSACTIONS_FETCH_FAILED)
        return transactions_to_domain(payload)

    async def fetch_utxos(self, address: str) -> list[UnspentOutput]:
        """Fetch the unspent outputs of an address."""
        payload = await self._get_json(f"/address/{address}/utxo", UTXOS_FETCH_FAILED)
        return utxos_to_domain(payload)

    async def fetch_price(self) -> float:
        """Fetch the current USD price of one BTC."""
        payload = await self._get_json("/v1/prices", PRICES_FETCH_FAILED)
        return price_from_payload(payload, "USD")
