"""Balance and transaction history reconstruction.

Everything here is a pure function of its inputs: the raw transactions and
unspent outputs of one address, plus the current price. Nothing is cached
between calls, so calling again with the same inputs yields the same result.

Two walks are performed over the same transactions:

- The chart series walks confirmed transactions oldest-first, summing each
  transaction's net effect from zero.
- The transaction table walks all transactions newest-first, starting from the
  current balance (sum of unspent outputs) and undoing each confirmed
  transaction's net effect to find the balance before it.
"""

import math
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from btcwatch.domain.entities import (
    Balance,
    ChartPoint,
    ProcessedTransaction,
    RawTransaction,
    SortDirection,
    TransactionFilter,
    TransactionStatus,
    TransactionType,
    UnspentOutput,
)
from btcwatch.domain.errors import ValidationError
from btcwatch.utils.formatting import (
    format_full_date,
    format_short_date,
    format_usd,
    to_utc_datetime,
)
from btcwatch.utils.time_ranges import DEFAULT_TIME_RANGE, get_range_start

SATS_PER_BTC = Decimal(100_000_000)
DEFAULT_PAGE_SIZE = 9
SORT_KEYS = ("txid", "type", "date", "amount", "balance", "status")

Price = Union[Decimal, float, int, str]


def sats_to_btc(sats: int) -> Decimal:
    """Convert satoshis to BTC."""
    return Decimal(sats) / SATS_PER_BTC


def _price(price_usd: Price) -> Decimal:
    # str() keeps floats like 60000.1 from turning into long binary expansions
    return price_usd if isinstance(price_usd, Decimal) else Decimal(str(price_usd))


def compute_balance(unspent_outputs: Iterable[UnspentOutput], price_usd: Price) -> Balance:
    """Compute the current balance from unspent outputs.

    Args:
        unspent_outputs: All unspent outputs of the address
        price_usd: Current USD price of one BTC

    Returns:
        Balance in BTC and USD (zero for no outputs)
    """
    total_sats = sum(utxo.value for utxo in unspent_outputs)
    btc = sats_to_btc(total_sats)
    return Balance(btc=btc, usd=btc * _price(price_usd))


def net_amount(tx: RawTransaction, address: str) -> int:
    """Net satoshis received by address in tx (outputs to it minus inputs from it)."""
    value_in = sum(vin.value for vin in tx.inputs if vin.address == address)
    value_out = sum(vout.value for vout in tx.outputs if vout.address == address)
    return value_out - value_in


def build_chart_series(
    transactions: Iterable[RawTransaction], address: str, price_usd: Price
) -> list[ChartPoint]:
    """Build the historical balance series for the chart.

    Only confirmed transactions contribute. USD values use the current price
    for every point, not the price at the time of the transaction.

    Args:
        transactions: All transactions of the address
        address: Watched address
        price_usd: Current USD price of one BTC

    Returns:
        One point per confirmed transaction, oldest first
    """
    price = _price(price_usd)
    confirmed = sorted(
        (tx for tx in transactions if tx.confirmed), key=lambda tx: tx.block_time or 0
    )

    points = []
    running_sats = 0
    for tx in confirmed:
        running_sats += net_amount(tx, address)
        balance = sats_to_btc(running_sats)
        block_date = to_utc_datetime(tx.block_time or 0)
        points.append(
            ChartPoint(
                date=format_short_date(block_date),
                balance=balance,
                full_date=format_full_date(block_date),
                usd_balance=format_usd(balance * price),
                timestamp=tx.block_time or 0,
            )
        )
    return points


def _newest_first_key(tx: RawTransaction) -> float:
    # Unconfirmed transactions have no block time and count as the newest
    if not tx.confirmed or tx.block_time is None:
        return math.inf
    return tx.block_time


def build_transaction_rows(
    transactions: Iterable[RawTransaction],
    unspent_outputs: Iterable[UnspentOutput],
    address: str,
) -> list[ProcessedTransaction]:
    """Build the transaction table rows with the balance after each transaction.

    Confirmed rows show the ledger balance right after the transaction. Pending
    rows show the current balance adjusted by that transaction alone; they do
    not move the running balance.

    Args:
        transactions: All transactions of the address
        unspent_outputs: All unspent outputs of the address
        address: Watched address

    Returns:
        One row per transaction, newest first
    """
    ordered = sorted(transactions, key=_newest_first_key, reverse=True)
    final_sats = sum(utxo.value for utxo in unspent_outputs)
    running_sats = final_sats

    rows = []
    for tx in ordered:
        net = net_amount(tx, address)
        if tx.confirmed:
            balance_after = running_sats
            running_sats -= net
        else:
            balance_after = final_sats + net

        rows.append(
            ProcessedTransaction(
                txid=tx.txid,
                # Zero net counts as a send
                type=TransactionType.RECEIVE if net > 0 else TransactionType.SEND,
                date=to_utc_datetime(tx.block_time) if tx.confirmed and tx.block_time is not None else None,
                amount=sats_to_btc(net),
                balance=sats_to_btc(balance_after),
                status=TransactionStatus.COMPLETED if tx.confirmed else TransactionStatus.PENDING,
            )
        )
    return rows


def _coerce_filter(value: Union[str, TransactionFilter]) -> TransactionFilter:
    try:
        return TransactionFilter(str(value.value if isinstance(value, TransactionFilter) else value).upper())
    except ValueError:
        raise ValidationError(
            f"Unknown filter '{value}'. Supported filters: ALL, SENT, RECEIVED"
        ) from None


def _coerce_direction(value: Union[str, SortDirection]) -> SortDirection:
    try:
        return SortDirection(str(value.value if isinstance(value, SortDirection) else value).lower())
    except ValueError:
        raise ValidationError(
            f"Unknown sort direction '{value}'. Supported directions: asc, desc"
        ) from None


def filter_rows(
    rows: Iterable[ProcessedTransaction], filter_value: Union[str, TransactionFilter]
) -> list[ProcessedTransaction]:
    """Keep the rows matching a direction filter (ALL, SENT or RECEIVED)."""
    selected = _coerce_filter(filter_value)
    if selected == TransactionFilter.SENT:
        return [row for row in rows if row.type == TransactionType.SEND]
    if selected == TransactionFilter.RECEIVED:
        return [row for row in rows if row.type == TransactionType.RECEIVE]
    return list(rows)


def _sort_key(key: str):
    if key == "date":
        # Rows without a date sort after dated rows ascending, before them descending
        return lambda row: (row.date is None, row.date.timestamp() if row.date else 0.0)
    if key in ("type", "status"):
        return lambda row: getattr(row, key).value
    return lambda row: getattr(row, key)


def sort_rows(
    rows: Iterable[ProcessedTransaction],
    key: str,
    direction: Union[str, SortDirection] = SortDirection.ASC,
) -> list[ProcessedTransaction]:
    """Stable sort of rows by one of SORT_KEYS.

    Raises:
        ValidationError: If key or direction is not recognized
    """
    if key not in SORT_KEYS:
        raise ValidationError(
            f"Unknown sort key '{key}'. Supported keys: {', '.join(SORT_KEYS)}"
        )
    descending = _coerce_direction(direction) == SortDirection.DESC
    return sorted(rows, key=_sort_key(key), reverse=descending)


def total_pages(count: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    """Number of pages needed for count rows."""
    if page_size < 1:
        raise ValidationError("Page size must be at least 1")
    return math.ceil(count / page_size)


def clamp_page(page_number: int, pages: int) -> int:
    """Clamp a requested page number to [1, pages] (page 1 when there are no pages)."""
    return max(1, min(page_number, max(pages, 1)))


def page_window(current_page: int, pages: int, width: int = 4) -> list[int]:
    """Page numbers shown in the pagination bar.

    The window starts up to three pages before the current one and never goes
    past the last page.
    """
    start = current_page - min(current_page - 1, 3)
    return [number for number in range(start, start + width) if number <= pages]


def toggle_sort(
    current_key: str, current_direction: Union[str, SortDirection], key: str
) -> tuple[str, SortDirection]:
    """Sort state after a column header is selected.

    Selecting the column already sorted ascending switches it to descending;
    anything else sorts ascending.
    """
    if current_key == key and _coerce_direction(current_direction) == SortDirection.ASC:
        return key, SortDirection.DESC
    return key, SortDirection.ASC


def select_display_page(
    rows: Sequence[ProcessedTransaction],
    filter_value: Union[str, TransactionFilter] = TransactionFilter.ALL,
    sort_key: str = "date",
    sort_direction: Union[str, SortDirection] = SortDirection.DESC,
    page_number: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> list[ProcessedTransaction]:
    """Filter, sort and slice rows for one page of the transaction table.

    The caller is expected to clamp page_number with clamp_page first.

    Args:
        rows: Rows from build_transaction_rows
        filter_value: ALL, SENT or RECEIVED
        sort_key: One of SORT_KEYS
        sort_direction: asc or desc
        page_number: 1-based page number
        page_size: Rows per page

    Returns:
        Rows on the requested page
    """
    if page_size < 1:
        raise ValidationError("Page size must be at least 1")
    filtered = filter_rows(rows, filter_value)
    ordered = sort_rows(filtered, sort_key, sort_direction)
    start = (page_number - 1) * page_size
    return ordered[start : start + page_size]


def filter_chart_range(
    points: Iterable[ChartPoint],
    time_range: str = DEFAULT_TIME_RANGE,
    now: Optional[datetime] = None,
) -> list[ChartPoint]:
    """Keep the chart points whose day falls inside a chart time range.

    Args:
        points: Points from build_chart_series
        time_range: "1 D", "1 WK", "1 MO", "3 MO" or "1 YR"
        now: Reference time (defaults to the current UTC time)

    Returns:
        Points on or after the start of the range, in their original order
    """
    if now is None:
        now = datetime.now(timezone.utc)
    start = get_range_start(time_range, now)
    selected = []
    for point in points:
        point_date = to_utc_datetime(point.timestamp)
        day_start = point_date.replace(hour=0, minute=0, second=0, microsecond=0)
        if day_start >= start:
            selected.append(point)
    return selected
