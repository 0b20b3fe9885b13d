"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from btcwatch.domain.entities import (
    User,
    AuthSession,
    VerificationToken,
)


class Database(ABC):
    """Abstract database interface for btcwatch."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, email: str) -> int:
        """Create a new user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by (normalized) email address."""
        pass

    @abstractmethod
    def mark_email_verified(self, user_id: int, verified_at: datetime) -> None:
        """Record when a user's email address was verified."""
        pass

    # Verification token operations
    @abstractmethod
    def create_verification_token(
        self, identifier: str, token: str, expires_at: datetime, created_at: datetime
    ) -> int:
        """Create a sign-in link token. Returns token row ID."""
        pass

    @abstractmethod
    def get_latest_verification_token(self, identifier: str) -> Optional[VerificationToken]:
        """Get the most recently issued token for an identifier."""
        pass

    @abstractmethod
    def consume_verification_token(self, token: str) -> Optional[VerificationToken]:
        """Delete a token and return it, or None if it does not exist."""
        pass

    # Session operations
    @abstractmethod
    def create_session(self, user_id: int, session_token: str, expires_at: datetime) -> int:
        """Create a session. Returns session ID."""
        pass

    @abstractmethod
    def get_session(self, session_token: str) -> Optional[AuthSession]:
        """Get session by token."""
        pass

    @abstractmethod
    def delete_session(self, session_token: str) -> bool:
        """Delete a session. Returns True if a session was deleted."""
        pass
