"""Address watch domain service."""

import asyncio
import logging
from typing import Protocol

from btcwatch.domain.entities import DashboardState, RawTransaction, UnspentOutput
from btcwatch.domain.errors import (
    ADDRESS_REQUIRED,
    UNEXPECTED_ERROR,
    StaleRequestError,
    UpstreamFetchError,
    ValidationError,
    stale_request,
)
from btcwatch.domain.ledger import build_chart_series, build_transaction_rows, compute_balance

logger = logging.getLogger(__name__)


class AddressDataSource(Protocol):
    """What the watch service needs from a block-explorer client."""

    async def fetch_transactions(self, address: str) -> list[RawTransaction]: ...

    async def fetch_utxos(self, address: str) -> list[UnspentOutput]: ...

    async def fetch_price(self) -> float: ...


class WatchService:
    """Service for loading the dashboard of a watched address.

    Each submission gets a request token from an increasing counter. Only the
    newest submission may replace ``state``; results of older submissions that
    finish later are discarded.
    """

    def __init__(self, client: AddressDataSource):
        """Initialize watch service.

        Args:
            client: Block-explorer client
        """
        self.client = client
        self.state = DashboardState()
        self._latest_token = 0

    @property
    def latest_token(self) -> int:
        """Token of the most recently started submission."""
        return self._latest_token

    async def _fetch_all(self, address: str):
        tasks = [
            asyncio.ensure_future(self.client.fetch_transactions(address)),
            asyncio.ensure_future(self.client.fetch_utxos(address)),
            asyncio.ensure_future(self.client.fetch_price()),
        ]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

    async def submit(self, address: str) -> DashboardState:
        """Fetch and derive everything shown for an address.

        The previous state is cleared as soon as the submission starts. If any
        of the three fetches fails, the state stays empty and carries an error
        message instead.

        Args:
            address: Bitcoin address to watch

        Returns:
            The new dashboard state

        Raises:
            ValidationError: If address is blank
            StaleRequestError: If a newer submission started before this one finished
        """
        address = (address or "").strip()
        if not address:
            raise ValidationError(ADDRESS_REQUIRED)

        self._latest_token += 1
        token = self._latest_token
        self.state = DashboardState(request_token=token)
        logger.debug("Request %d: loading address %s", token, address)

        try:
            transactions, utxos, price = await self._fetch_all(address)
            new_state = DashboardState(
                address=address,
                balance=compute_balance(utxos, price),
                chart=tuple(build_chart_series(transactions, address, price)),
                transactions=tuple(build_transaction_rows(transactions, utxos, address)),
                request_token=token,
            )
        except UpstreamFetchError as e:
            new_state = DashboardState(error=str(e), request_token=token)
        except Exception:
            logger.exception("Request %d: failed to load address %s", token, address)
            new_state = DashboardState(error=UNEXPECTED_ERROR, request_token=token)

        if token != self._latest_token:
            logger.warning("Discarding result of request %d; request %d is newer", token, self._latest_token)
            raise StaleRequestError(stale_request(token, self._latest_token))

        self.state = new_state
        return new_state
