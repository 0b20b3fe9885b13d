"""CLI error handling helpers."""

import logging
from typing import Optional

import click

from btcwatch.domain.errors import DomainError

logger = logging.getLogger(__name__)


def fail(ctx: click.Context, message: str, hint: Optional[str] = None) -> None:
    """Print an error (and an optional follow-up hint) to stderr and exit 1."""
    click.echo(f"Error: {message}", err=True)
    if hint:
        click.echo(hint, err=True)
    ctx.exit(1)


def handle_domain_error(ctx: click.Context, error: DomainError, hint: Optional[str] = None) -> None:
    """Render a domain error and exit with failure."""
    logger.debug("%s in '%s': %s", type(error).__name__, ctx.info_name, error)
    fail(ctx, str(error), hint)
