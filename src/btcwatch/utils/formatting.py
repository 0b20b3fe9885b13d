"""Display formatting helpers.

Dates are rendered in UTC so output does not depend on the machine's timezone.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional


def to_utc_datetime(timestamp: int) -> datetime:
    """Convert epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def format_short_date(dt: datetime) -> str:
    """Format a chart label, e.g. 'Jan 05'."""
    return dt.strftime("%b %d")


def format_full_date(dt: datetime) -> str:
    """Format a chart tooltip date, e.g. 'FRI JAN 05 2024'."""
    return dt.strftime("%a %b %d %Y").upper()


def format_row_date(dt: Optional[datetime]) -> str:
    """Format a transaction row date as MM/DD/YYYY, or 'Pending' when unconfirmed."""
    if dt is None:
        return "Pending"
    return dt.strftime("%m/%d/%Y")


def format_usd(amount: Decimal) -> str:
    """Format a USD amount as currency.

    Examples:
        Decimal("48000") -> "$48,000.00"
        Decimal("-12.5") -> "-$12.50"
    """
    rounded = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def format_btc(amount: Decimal) -> str:
    """Format a BTC amount with eight decimal places."""
    return f"{Decimal(amount):.8f}"


def format_signed_btc(amount: Decimal) -> str:
    """Format a row amount with an explicit direction marker.

    Zero is shown as a send, matching how zero-net transactions are classified.
    """
    prefix = "+ " if amount > 0 else "- "
    return prefix + format_btc(abs(amount))


def shorten_address(address: str, keep: int = 10) -> str:
    """Shorten an address to its first and last characters."""
    if len(address) <= keep * 2:
        return address
    return f"{address[:keep]}...{address[-keep:]}"


def shorten_txid(txid: str, keep: int = 25) -> str:
    """Shorten a transaction ID for table display."""
    return f"{txid[:keep]}..."
