"""Address watch command."""

import asyncio

import click
from btcwatch.cli.error_handling import fail, handle_domain_error
from btcwatch.cli.session_gate import require_session_or_exit
from btcwatch.clients.mempool import MempoolClient
from btcwatch.domain.entities import DashboardState
from btcwatch.domain.errors import DomainError
from btcwatch.domain.ledger import (
    DEFAULT_PAGE_SIZE,
    SORT_KEYS,
    clamp_page,
    filter_chart_range,
    filter_rows,
    page_window,
    select_display_page,
    total_pages,
)
from btcwatch.domain.watch import WatchService
from btcwatch.utils.formatting import (
    format_btc,
    format_row_date,
    format_signed_btc,
    format_usd,
    shorten_address,
    shorten_txid,
)
from btcwatch.utils.time_ranges import DEFAULT_TIME_RANGE, TIME_RANGES


async def load_dashboard(address: str, api_url: str, timeout: float) -> DashboardState:
    """Fetch an address and build its dashboard state."""
    async with MempoolClient(base_url=api_url, timeout=timeout) as client:
        return await WatchService(client).submit(address)


def _echo_chart(state: DashboardState, time_range: str) -> None:
    points = filter_chart_range(state.chart, time_range)
    click.echo(f"\nBalance history ({time_range}):")
    if not points:
        click.echo("No balance history in this range.")
        return
    click.echo("-" * 50)
    click.echo(f"{'DATE':<8} {'BALANCE (BTC)':>16} {'USD':>20}")
    click.echo("-" * 50)
    for point in points:
        click.echo(f"{point.date:<8} {format_btc(point.balance):>16} {point.usd_balance:>20}")


def _echo_transactions(
    state: DashboardState, filter_value: str, sort_key: str, direction: str, page: int
) -> None:
    pages = total_pages(len(filter_rows(state.transactions, filter_value)))
    page = clamp_page(page, pages)
    rows = select_display_page(
        state.transactions,
        filter_value=filter_value,
        sort_key=sort_key,
        sort_direction=direction,
        page_number=page,
        page_size=DEFAULT_PAGE_SIZE,
    )

    click.echo(f"\nTransactions ({filter_value}, sorted by {sort_key} {direction}):")
    if not rows:
        click.echo("No transactions to show")
        return
    click.echo("-" * 110)
    click.echo(
        f"{'TYPE':<8} {'DATE':<11} {'TX ID':<29} {'AMOUNT (BTC)':>16} {'BALANCE (BTC)':>16}  {'STATUS':<10}"
    )
    click.echo("-" * 110)
    for row in rows:
        click.echo(
            f"{row.type.value:<8} {format_row_date(row.date):<11} {shorten_txid(row.txid):<29} "
            f"{format_signed_btc(row.amount):>16} {format_btc(row.balance):>16}  {row.status.value:<10}"
        )

    if pages > 1:
        window = " ".join(f"[{n}]" if n == page else str(n) for n in page_window(page, pages))
        click.echo(f"\nPages: {window}")
    click.echo(f"Page {page} of {max(pages, 1)}")


@click.command("watch")
@click.argument("address")
@click.option(
    "--filter",
    "filter_value",
    type=click.Choice(["ALL", "SENT", "RECEIVED"], case_sensitive=False),
    default="ALL",
    show_default=True,
    help="Show only sent or received transactions",
)
@click.option(
    "--sort",
    "sort_key",
    type=click.Choice(list(SORT_KEYS)),
    default="date",
    show_default=True,
    help="Column to sort transactions by",
)
@click.option(
    "--direction",
    type=click.Choice(["asc", "desc"], case_sensitive=False),
    default="desc",
    show_default=True,
    help="Sort direction",
)
@click.option("--page", type=int, default=1, show_default=True, help="Transaction page (9 per page)")
@click.option(
    "--range",
    "time_range",
    type=click.Choice(list(TIME_RANGES), case_sensitive=False),
    default=DEFAULT_TIME_RANGE,
    show_default=True,
    help="Balance history range",
)
@click.pass_context
def watch_address(
    ctx, address: str, filter_value: str, sort_key: str, direction: str, page: int, time_range: str
):
    """Show balance, balance history and transactions for ADDRESS.

    Requires a session (see 'btcwatch auth sign-in').

    Examples:
        btcwatch watch bc1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh
        btcwatch watch ADDRESS --filter RECEIVED --sort amount --direction asc
        btcwatch watch ADDRESS --page 2 --range "1 YR"
    """
    require_session_or_exit(ctx)
    settings = ctx.obj["settings"]

    try:
        state = asyncio.run(load_dashboard(address, ctx.obj["api_url"], settings.http_timeout))
    except DomainError as e:
        handle_domain_error(ctx, e)

    if state.error:
        fail(ctx, state.error)

    click.echo(f"Address: {shorten_address(state.address)}")
    click.echo(f"Balance: {format_btc(state.balance.btc)} BTC ({format_usd(state.balance.usd)} USD)")

    _echo_chart(state, time_range.upper())
    _echo_transactions(state, filter_value.upper(), sort_key, direction.lower(), page)


def register_commands(cli):
    """Register watch command with main CLI."""
    cli.add_command(watch_address)
