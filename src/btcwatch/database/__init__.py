"""Database layer for btcwatch application."""

from btcwatch.database.base import Database
from btcwatch.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
