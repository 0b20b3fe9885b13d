"""Main CLI entry point."""

import click
from btcwatch.config import load_settings
from btcwatch.database.factories import create_sqlite_database
from btcwatch.domain.errors import DomainError
from btcwatch.logging_config import configure_logging
from btcwatch.cli.error_handling import handle_domain_error

# Import and register all commands at module level
from btcwatch.cli.commands import auth, watch


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BTCWATCH_DB_PATH environment variable)",
    envvar="BTCWATCH_DB_PATH",
)
@click.option(
    "--session",
    "session_token",
    help="Session token from 'btcwatch auth verify' (or BTCWATCH_SESSION)",
    envvar="BTCWATCH_SESSION",
)
@click.option(
    "--api-url",
    help="Block-explorer API root (overrides BTCWATCH_API_URL environment variable)",
    envvar="BTCWATCH_API_URL",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, session_token: str | None, api_url: str | None, verbose: bool):
    """btcwatch - Bitcoin address watch dashboard.

    Sign in with an emailed link, then watch an address to see its balance,
    balance history and transactions.
    """
    ctx.ensure_object(dict)

    # Initialize settings and database only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            settings = load_settings()
        except DomainError as e:
            handle_domain_error(ctx, e)
        configure_logging("DEBUG" if verbose else settings.log_level)

        db = create_sqlite_database(database_path=db_path or settings.db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["settings"] = settings
        ctx.obj["session_token"] = session_token
        ctx.obj["api_url"] = api_url or settings.api_url


# Register all commands
auth.register_commands(cli)
watch.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
