"""Domain model entities for btcwatch.

These are pure data classes representing the watched address, its raw
block-explorer data and the values derived from it. They are independent of
both the database schema and the block-explorer wire format.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a transaction relative to the watched address."""

    SEND = "SEND"
    RECEIVE = "RECEIVE"


class TransactionStatus(str, Enum):
    """Confirmation status shown for a transaction row."""

    COMPLETED = "Completed"
    PENDING = "Pending"


class TransactionFilter(str, Enum):
    """Direction filter for the transaction table."""

    ALL = "ALL"
    SENT = "SENT"
    RECEIVED = "RECEIVED"


class SortDirection(str, Enum):
    """Sort direction for the transaction table."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class TxInput:
    """Input of a raw transaction (the previous output it spends)."""

    address: Optional[str]
    value: int


@dataclass(frozen=True)
class TxOutput:
    """Output of a raw transaction."""

    address: Optional[str]
    value: int


@dataclass(frozen=True)
class RawTransaction:
    """Transaction as reported by the block explorer."""

    txid: str
    confirmed: bool
    block_time: Optional[int]
    inputs: tuple[TxInput, ...] = ()
    outputs: tuple[TxOutput, ...] = ()


@dataclass(frozen=True)
class UnspentOutput:
    """Currently unspent output owned by the watched address."""

    value: int
    txid: Optional[str] = None
    vout: Optional[int] = None
    confirmed: Optional[bool] = None


@dataclass(frozen=True)
class Balance:
    """Current balance in BTC and USD."""

    btc: Decimal
    usd: Decimal


@dataclass(frozen=True)
class ChartPoint:
    """One sample of the historical balance series."""

    date: str
    balance: Decimal
    full_date: str
    usd_balance: str
    timestamp: int


@dataclass(frozen=True)
class ProcessedTransaction:
    """One row of the transaction table."""

    txid: str
    type: TransactionType
    date: Optional[datetime]
    amount: Decimal
    balance: Decimal
    status: TransactionStatus


@dataclass(frozen=True)
class DashboardState:
    """Everything displayed for the currently watched address."""

    address: Optional[str] = None
    balance: Optional[Balance] = None
    chart: tuple[ChartPoint, ...] = ()
    transactions: tuple[ProcessedTransaction, ...] = ()
    error: Optional[str] = None
    request_token: int = 0


@dataclass(frozen=True)
class User:
    """Signed-up user."""

    id: int
    email: str
    created_at: datetime
    email_verified_at: Optional[datetime] = None


@dataclass(frozen=True)
class AuthSession:
    """Persisted sign-in session."""

    id: int
    session_token: str
    user_id: int
    expires_at: datetime


@dataclass(frozen=True)
class VerificationToken:
    """Single-use sign-in link token."""

    id: int
    identifier: str
    token: str
    expires_at: datetime
    created_at: datetime


@dataclass(frozen=True)
class SessionInfo:
    """Result of a session lookup: the identity behind a valid session."""

    user_id: int
    email: str
    expires_at: datetime
