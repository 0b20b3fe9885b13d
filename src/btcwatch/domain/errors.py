"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class AccessDeniedError(DomainError):
    """Sign-in or session check refused."""


class UpstreamFetchError(DomainError):
    """Block-explorer request returned a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(DomainError):
    """Block-explorer response could not be interpreted."""


class StaleRequestError(DomainError):
    """A newer address submission superseded this one."""


TRANSACTIONS_FETCH_FAILED = (
    "Failed to fetch transaction data. Please check the address and try again."
)
UTXOS_FETCH_FAILED = (
    "Failed to fetch UTXO data. The address may be invalid or have no unspent outputs."
)
PRICES_FETCH_FAILED = "Failed to fetch pricing data. Please try again later."
UNEXPECTED_ERROR = "An unexpected error occurred."
EMAIL_REQUIRED = "Email address is required"
INCORRECT_EMAIL = "Incorrect Email Address"
ADDRESS_REQUIRED = "Bitcoin address is required"
NOT_SIGNED_IN = "Not signed in"


def resend_cooldown(seconds_left: int) -> str:
    """Return message for a sign-in link requested too soon."""
    return f"Please wait {seconds_left} second{'s' if seconds_left != 1 else ''} before requesting another link"


def invalid_sign_in_token() -> str:
    """Return message for an unknown, used or expired sign-in token."""
    return "Sign-in link is invalid or has expired"


def stale_request(token: int, latest: int) -> str:
    """Return message for a superseded address submission."""
    return f"Request {token} was superseded by request {latest}"
