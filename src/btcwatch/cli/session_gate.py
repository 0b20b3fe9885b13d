"""CLI helpers for services and the signed-in gate."""

from __future__ import annotations

import click
from btcwatch.cli.error_handling import fail
from btcwatch.domain.access import AccessService, AllowList, LogMailer
from btcwatch.domain.entities import SessionInfo
from btcwatch.domain.errors import NOT_SIGNED_IN


def access_service_from_context(ctx: click.Context) -> AccessService:
    """Build an AccessService from the CLI context.

    Sign-in links are echoed to the terminal in place of an email.
    """
    settings = ctx.obj["settings"]
    return AccessService(
        ctx.obj["db"],
        AllowList(settings.allowed_emails),
        mailer=LogMailer(echo=click.echo),
    )


def require_session_or_exit(ctx: click.Context) -> SessionInfo:
    """Return the current session, or exit with a CLI error when signed out."""
    service = access_service_from_context(ctx)
    info = service.get_session(ctx.obj.get("session_token"))
    if info is None:
        fail(ctx, NOT_SIGNED_IN, "Run 'btcwatch auth sign-in EMAIL' first.")
    return info
