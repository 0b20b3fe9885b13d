"""Sign-in and session domain service.

Sign-in is passwordless: an allowed email address receives a single-use link
token, and exchanging that token creates a session.
"""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta, UTC
from typing import Callable, Iterable, Optional, Protocol

from btcwatch.database.base import Database
from btcwatch.domain.entities import SessionInfo
from btcwatch.domain.errors import (
    EMAIL_REQUIRED,
    INCORRECT_EMAIL,
    AccessDeniedError,
    ValidationError,
    invalid_sign_in_token,
    resend_cooldown,
)

logger = logging.getLogger(__name__)

VERIFICATION_TOKEN_TTL = timedelta(hours=24)
SESSION_TTL = timedelta(days=30)
RESEND_COOLDOWN = timedelta(seconds=30)


def normalize_email(email: str) -> str:
    """Trim and lowercase an email address."""
    return email.strip().lower()


def hash_token(token: str) -> str:
    """Hash a sign-in link token for storage."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class AllowList:
    """Fixed set of email addresses permitted to sign in."""

    def __init__(self, emails: Iterable[str]):
        self.emails = frozenset(normalize_email(e) for e in emails if e.strip())

    def is_allowed(self, email: str) -> bool:
        """Check whether an email (normalized first) is on the list."""
        return normalize_email(email) in self.emails

    def __len__(self) -> int:
        return len(self.emails)


class Mailer(Protocol):
    """Delivers sign-in links."""

    def send_sign_in_link(self, email: str, token: str) -> None: ...


class LogMailer:
    """Mailer that logs the sign-in link instead of sending email."""

    def __init__(self, echo: Optional[Callable[[str], None]] = None):
        self.echo = echo

    def send_sign_in_link(self, email: str, token: str) -> None:
        logger.info("Sign-in link issued for %s", email)
        if self.echo is not None:
            self.echo(f"Sign-in token for {email}: {token}")


class AccessService:
    """Service for the allow-list check, sign-in links and sessions."""

    def __init__(
        self,
        db: Database,
        allow_list: AllowList,
        mailer: Optional[Mailer] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize access service.

        Args:
            db: Database instance
            allow_list: Emails permitted to sign in
            mailer: Delivers sign-in links (defaults to LogMailer)
            clock: Returns the current aware UTC time (defaults to datetime.now(UTC))
        """
        self.db = db
        self.allow_list = allow_list
        self.mailer = mailer if mailer is not None else LogMailer()
        self.clock = clock if clock is not None else (lambda: datetime.now(UTC))

    def _require_email(self, email: Optional[str]) -> str:
        if email is None or not email.strip():
            raise ValidationError(EMAIL_REQUIRED)
        return normalize_email(email)

    def check_email(self, email: Optional[str]) -> bool:
        """Report whether an email may sign in.

        Any caller learns whether an address is on the allow-list.

        Raises:
            ValidationError: If email is blank
        """
        return self.allow_list.is_allowed(self._require_email(email))

    def request_sign_in(self, email: Optional[str]) -> None:
        """Issue a sign-in link for an allowed email.

        Creates the user on first sign-in.

        Args:
            email: Email address as entered

        Raises:
            ValidationError: If email is blank or a link was sent too recently
            AccessDeniedError: If email is not on the allow-list
        """
        email = self._require_email(email)
        if not self.allow_list.is_allowed(email):
            raise AccessDeniedError(INCORRECT_EMAIL)

        now = self.clock()
        latest = self.db.get_latest_verification_token(email)
        if latest is not None and now - latest.created_at < RESEND_COOLDOWN:
            seconds_left = int((RESEND_COOLDOWN - (now - latest.created_at)).total_seconds()) or 1
            raise ValidationError(resend_cooldown(seconds_left))

        if self.db.get_user_by_email(email) is None:
            self.db.create_user(email)

        token = secrets.token_urlsafe(32)
        self.db.create_verification_token(
            identifier=email,
            token=hash_token(token),
            expires_at=now + VERIFICATION_TOKEN_TTL,
            created_at=now,
        )
        self.mailer.send_sign_in_link(email, token)

    def verify_sign_in(self, token: str) -> str:
        """Exchange a sign-in link token for a session.

        The token is single-use. The allow-list is checked again so removing
        an address also blocks links already sent to it.

        Args:
            token: Token from the sign-in link

        Returns:
            New session token

        Raises:
            AccessDeniedError: If the token is unknown, used, expired or no longer allowed
        """
        record = self.db.consume_verification_token(hash_token(token.strip()))
        now = self.clock()
        if record is None or record.expires_at <= now:
            raise AccessDeniedError(invalid_sign_in_token())
        if not self.allow_list.is_allowed(record.identifier):
            raise AccessDeniedError(INCORRECT_EMAIL)

        user = self.db.get_user_by_email(record.identifier)
        user_id = user.id if user is not None else self.db.create_user(record.identifier)
        self.db.mark_email_verified(user_id, now)

        session_token = secrets.token_urlsafe(32)
        self.db.create_session(user_id, session_token, now + SESSION_TTL)
        logger.info("Session created for user %d", user_id)
        return session_token

    def get_session(self, session_token: Optional[str]) -> Optional[SessionInfo]:
        """Look up a session.

        Returns:
            Identity behind the session, or None if absent or expired
        """
        if not session_token:
            return None
        auth_session = self.db.get_session(session_token)
        if auth_session is None or auth_session.expires_at <= self.clock():
            return None
        user = self.db.get_user(auth_session.user_id)
        if user is None:
            return None
        return SessionInfo(user_id=user.id, email=user.email, expires_at=auth_session.expires_at)

    def sign_out(self, session_token: str) -> bool:
        """End a session. Returns True if a session was ended."""
        return self.db.delete_session(session_token)
