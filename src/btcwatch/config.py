"""Environment-based configuration for btcwatch.

Variables (a .env file in the working directory is loaded first when present):

- BTCWATCH_DB_PATH: SQLite database file (default ~/.btcwatch/btcwatch.db)
- BTCWATCH_ALLOWED_EMAILS: comma-separated emails permitted to sign in
- BTCWATCH_API_URL: block-explorer API root (default https://mempool.space/api)
- BTCWATCH_HTTP_TIMEOUT: request timeout in seconds (default 10)
- BTCWATCH_LOG_LEVEL: logging level name (default WARNING)
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from btcwatch.clients.mempool import DEFAULT_API_URL, DEFAULT_TIMEOUT
from btcwatch.domain.errors import ValidationError


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""

    db_path: Optional[str]
    allowed_emails: tuple[str, ...]
    api_url: str
    http_timeout: float
    log_level: str


def parse_email_list(raw: Optional[str]) -> tuple[str, ...]:
    """Split a comma-separated email list, dropping blanks."""
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Load settings from the environment.

    Args:
        env_file: Optional .env path; by default a .env in the working
            directory is used if it exists. Existing environment variables win.

    Raises:
        ValidationError: If BTCWATCH_HTTP_TIMEOUT is not a positive number
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))

    raw_timeout = os.environ.get("BTCWATCH_HTTP_TIMEOUT")
    timeout = DEFAULT_TIMEOUT
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValidationError(f"Invalid BTCWATCH_HTTP_TIMEOUT '{raw_timeout}'") from None
        if timeout <= 0:
            raise ValidationError("BTCWATCH_HTTP_TIMEOUT must be positive")

    return Settings(
        db_path=os.environ.get("BTCWATCH_DB_PATH"),
        allowed_emails=parse_email_list(os.environ.get("BTCWATCH_ALLOWED_EMAILS")),
        api_url=os.environ.get("BTCWATCH_API_URL", DEFAULT_API_URL),
        http_timeout=timeout,
        log_level=os.environ.get("BTCWATCH_LOG_LEVEL", "WARNING").upper(),
    )
