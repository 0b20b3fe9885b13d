"""Mapper functions to convert between domain models and SQLAlchemy models.

SQLite drops timezone information, so datetimes read back from the database
are marked as UTC here.
"""

from datetime import datetime, UTC
from typing import Optional

from btcwatch.domain import entities as domain
from btcwatch.database.models import (
    User as ORMUser,
    AuthSession as ORMAuthSession,
    VerificationToken as ORMVerificationToken,
)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return value as an aware UTC datetime (naive values are assumed UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        email=orm_user.email,
        created_at=as_utc(orm_user.created_at),
        email_verified_at=as_utc(orm_user.email_verified_at),
    )


def session_to_domain(orm_session: ORMAuthSession) -> domain.AuthSession:
    """Convert SQLAlchemy AuthSession model to domain AuthSession entity."""
    return domain.AuthSession(
        id=orm_session.id,
        session_token=orm_session.session_token,
        user_id=orm_session.user_id,
        expires_at=as_utc(orm_session.expires_at),
    )


def verification_token_to_domain(orm_token: ORMVerificationToken) -> domain.VerificationToken:
    """Convert SQLAlchemy VerificationToken model to domain VerificationToken entity."""
    return domain.VerificationToken(
        id=orm_token.id,
        identifier=orm_token.identifier,
        token=orm_token.token,
        expires_at=as_utc(orm_token.expires_at),
        created_at=as_utc(orm_token.created_at),
    )
