"""Database factory functions."""

import os
from pathlib import Path
from typing import Optional

from btcwatch.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DB_DIR = Path.home() / ".btcwatch"


def default_database_path() -> str:
    """Path of the per-user database file, creating its directory."""
    DEFAULT_DB_DIR.mkdir(parents=True, exist_ok=True)
    return str(DEFAULT_DB_DIR / "btcwatch.db")


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite-backed database.

    Args:
        database_path: SQLite file. Falls back to BTCWATCH_DB_PATH, then to
            ~/.btcwatch/btcwatch.db

    Returns:
        Unconnected SQLAlchemyDatabase
    """
    path = database_path or os.environ.get("BTCWATCH_DB_PATH") or default_database_path()
    return SQLAlchemyDatabase(f"sqlite:///{path}")
