"""Sign-in and session commands."""

import click
from btcwatch.cli.error_handling import handle_domain_error
from btcwatch.cli.session_gate import access_service_from_context, require_session_or_exit
from btcwatch.domain.errors import DomainError


@click.group()
def auth_group():
    """Sign in and manage sessions."""
    pass


@auth_group.command("check")
@click.argument("email")
@click.pass_context
def check_email(ctx, email: str):
    """Check whether EMAIL is allowed to sign in."""
    service = access_service_from_context(ctx)
    try:
        allowed = service.check_email(email)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo("allowed" if allowed else "not allowed")


@auth_group.command("sign-in")
@click.argument("email")
@click.pass_context
def sign_in(ctx, email: str):
    """Request a sign-in link for EMAIL.

    Only addresses on the allow-list (BTCWATCH_ALLOWED_EMAILS) receive a link.
    A new link can be requested every 30 seconds.

    Examples:
        btcwatch auth sign-in me@example.com
    """
    service = access_service_from_context(ctx)
    try:
        service.request_sign_in(email)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo("Check your email for a sign-in link.")


@auth_group.command("verify")
@click.argument("token")
@click.pass_context
def verify(ctx, token: str):
    """Exchange a sign-in link TOKEN for a session token."""
    service = access_service_from_context(ctx)
    try:
        session_token = service.verify_sign_in(token)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Signed in. Session token: {session_token}")
    click.echo("Pass it with --session or set BTCWATCH_SESSION.")


@auth_group.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the signed-in user."""
    info = require_session_or_exit(ctx)
    click.echo(f"Signed in as {info.email}")
    click.echo(f"Session expires {info.expires_at:%Y-%m-%d %H:%M} UTC")


@auth_group.command("sign-out")
@click.pass_context
def sign_out(ctx):
    """End the current session."""
    require_session_or_exit(ctx)
    service = access_service_from_context(ctx)
    service.sign_out(ctx.obj["session_token"])
    click.echo("Signed out.")


def register_commands(cli):
    """Register auth commands with main CLI."""
    cli.add_command(auth_group, name="auth")
