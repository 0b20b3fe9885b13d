"""Shared pytest fixtures for btcwatch tests."""

import tempfile
import os
from datetime import datetime, timedelta, UTC
import pytest

from btcwatch.database.factories import create_sqlite_database
from btcwatch.domain.access import AccessService, AllowList
from btcwatch.domain.entities import RawTransaction, TxInput, TxOutput, UnspentOutput

WATCHED = "bc1qwatched0000000000000000000000000000000"
OTHER = "bc1qother00000000000000000000000000000000"
ALLOWED_EMAIL = "owner@example.com"

# 2024-01-05 00:00:00 UTC (a Friday)
JAN_05_2024 = 1704412800
DAY = 86400


def receive(txid, sats, block_time=None, confirmed=True):
    """Transaction paying sats from OTHER to the watched address."""
    return RawTransaction(
        txid=txid,
        confirmed=confirmed,
        block_time=block_time if confirmed else None,
        inputs=(TxInput(address=OTHER, value=sats + 1_000),),
        outputs=(TxOutput(address=WATCHED, value=sats), TxOutput(address=OTHER, value=500)),
    )


def send(txid, sats, block_time=None, confirmed=True):
    """Transaction paying sats from the watched address to OTHER."""
    return RawTransaction(
        txid=txid,
        confirmed=confirmed,
        block_time=block_time if confirmed else None,
        inputs=(TxInput(address=WATCHED, value=sats),),
        outputs=(TxOutput(address=OTHER, value=sats),),
    )


def utxos(*values):
    """Unspent outputs with the given satoshi values."""
    return [UnspentOutput(value=v) for v in values]


class FakeClock:
    """Controllable clock returning aware UTC datetimes."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 7, 1, 12, 0, tzinfo=UTC)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class RecordingMailer:
    """Mailer that keeps the links it was asked to send."""

    def __init__(self):
        self.sent = []

    def send_sign_in_link(self, email, token):
        self.sent.append((email, token))

    @property
    def last_token(self):
        return self.sent[-1][1]


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def mailer():
    """Create a mailer that records sign-in links."""
    return RecordingMailer()


@pytest.fixture
def allow_list():
    """Allow-list containing one address."""
    return AllowList([ALLOWED_EMAIL])


@pytest.fixture
def access_service(temp_db, allow_list, mailer, clock):
    """Create an AccessService with a temporary database."""
    return AccessService(temp_db, allow_list, mailer=mailer, clock=clock)


@pytest.fixture
def session_token(temp_db, allow_list, mailer):
    """Sign in the allowed user and return a session token valid right now."""
    service = AccessService(temp_db, allow_list, mailer=mailer)
    service.request_sign_in(ALLOWED_EMAIL)
    return service.verify_sign_in(mailer.last_token)


@pytest.fixture
def sample_transactions():
    """Receive 1 BTC, send 0.3, receive 0.5 (confirmed), then a pending 0.1 receive.

    Matching unspent outputs total 1.2 BTC.
    """
    return [
        receive("tx-receive-1", 100_000_000, JAN_05_2024),
        send("tx-send-2", 30_000_000, JAN_05_2024 + 10 * DAY),
        receive("tx-receive-3", 50_000_000, JAN_05_2024 + 20 * DAY),
        receive("tx-pending-4", 10_000_000, confirmed=False),
    ]


@pytest.fixture
def sample_utxos():
    """Unspent outputs matching sample_transactions."""
    return utxos(70_000_000, 50_000_000)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
