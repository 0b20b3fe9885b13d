"""Tests for display formatting helpers."""

from datetime import datetime, UTC
from decimal import Decimal

import pytest

from btcwatch.utils.formatting import (
    format_btc,
    format_full_date,
    format_row_date,
    format_short_date,
    format_signed_btc,
    format_usd,
    shorten_address,
    shorten_txid,
    to_utc_datetime,
)
from conftest import JAN_05_2024


def test_to_utc_datetime():
    assert to_utc_datetime(JAN_05_2024) == datetime(2024, 1, 5, tzinfo=UTC)


def test_chart_dates():
    dt = datetime(2024, 1, 5, tzinfo=UTC)

    assert format_short_date(dt) == "Jan 05"
    assert format_full_date(dt) == "FRI JAN 05 2024"


def test_row_date():
    assert format_row_date(datetime(2024, 3, 9, tzinfo=UTC)) == "03/09/2024"
    assert format_row_date(None) == "Pending"


@pytest.mark.parametrize(
    "amount,expected",
    [
        (Decimal("48000"), "$48,000.00"),
        (Decimal("0"), "$0.00"),
        (Decimal("1234567.891"), "$1,234,567.89"),
        (Decimal("0.005"), "$0.01"),
        (Decimal("-12.5"), "-$12.50"),
    ],
)
def test_format_usd(amount, expected):
    assert format_usd(amount) == expected


def test_format_btc():
    assert format_btc(Decimal("0.8")) == "0.80000000"
    assert format_btc(Decimal(0) / Decimal(100_000_000)) == "0.00000000"


def test_format_signed_btc():
    assert format_signed_btc(Decimal("0.5")) == "+ 0.50000000"
    assert format_signed_btc(Decimal("-0.3")) == "- 0.30000000"
    assert format_signed_btc(Decimal("0")) == "- 0.00000000"


def test_shorten_address():
    address = "bc1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh"

    assert shorten_address(address) == "bc1qxy2kgd...kkfjhx0wlh"
    assert shorten_address("short") == "short"


def test_shorten_txid():
    txid = "a" * 64

    assert shorten_txid(txid) == "a" * 25 + "..."
