"""Cash-register session commands."""

import click

from cashdesk.cli.date_filters import resolve_cli_date_range
from cashdesk.cli.error_handling import handle_domain_error
from cashdesk.cli.options import parse_channel_amounts
from cashdesk.domain.errors import DomainError
from cashdesk.domain.history import group_sessions_by_day, summarize_sessions
from cashdesk.domain.reconciliation import count_status
from cashdesk.domain.session import SessionService
from cashdesk.utils.amount_parser import require_amount

STATUS_LABELS = {"balanced": "Balanced", "surplus": "Surplus", "shortage": "Shortage"}


def _signed(amount) -> str:
    sign = "+" if amount >= 0 else "-"
    return f"{sign}${abs(amount):,.2f}"


@click.group()
def session_group():
    """Open, inspect and close cash-register sessions."""
    pass


@session_group.command("open")
@click.option("--cash", required=True, help="Opening cash in the drawer")
@click.option("--balance", "balances", multiple=True, help="Channel opening balance as NAME=AMOUNT")
@click.pass_context
def open_session(ctx, cash: str, balances: tuple[str, ...]):
    """Open a session.

    Examples:
        cashdesk session open --cash 100
        cashdesk session open --cash 100 --balance "Banco Pichincha=200"
    """
    service = SessionService(ctx.obj["db"])
    try:
        opening_cash = require_amount(cash, "opening cash")
        channel_balances = parse_channel_amounts(balances, "--balance")
        session = service.open_session(ctx.obj["user"], opening_cash, channel_balances)
    except DomainError as e:
        handle_domain_error(ctx, e)

    channel_total = sum(b.balance for b in session.opening_balances)
    click.echo(f"Opened session {session.id}")
    click.echo(f"  Opening cash: ${session.opening_cash:,.2f}")
    click.echo(f"  Channel balances: ${channel_total:,.2f}")


@session_group.command("status")
@click.option("--all", "include_idle", is_flag=True, help="Include channels without activity")
@click.pass_context
def session_status(ctx, include_idle: bool):
    """Show totals and channel balances of the open session."""
    service = SessionService(ctx.obj["db"])
    session = service.get_open_session(ctx.obj["user"])
    if session is None:
        click.echo("No open session.")
        return

    totals = service.session_totals(session.id)
    click.echo(f"Session {session.id} (opened {session.opened_at:%Y-%m-%d %H:%M})")
    click.echo("-" * 60)
    click.echo(f"{'Opening cash':30s} ${totals.opening_cash:>12,.2f}")
    click.echo(f"{'Income':30s} +${totals.income_total:>11,.2f}")
    click.echo(f"{'Expenses':30s} -${totals.expense_total:>11,.2f}")
    click.echo(f"{'Commissions':30s} +${totals.commission_total:>11,.2f}")
    click.echo(f"{'Expected balance':30s} ${totals.expected_balance:>12,.2f}")
    click.echo(f"{'Operations':30s} {totals.operation_count:>13d}")

    balances = service.channel_balances(session.id, include_idle=include_idle)
    if balances:
        click.echo("\nChannels:")
        click.echo("-" * 60)
        for balance in balances:
            click.echo(
                f"{balance.channel_name:20s} | opening ${balance.opening_balance:,.2f} | "
                f"in ${balance.inflow:,.2f} | out ${balance.outflow:,.2f} | "
                f"expected ${balance.expected_balance:,.2f}"
            )


@session_group.command("close")
@click.option("--counted", required=True, help="Cash counted in the drawer")
@click.option("--count", "counts", multiple=True, help="Counted channel balance as NAME=AMOUNT")
@click.option("--notes", help="Closing notes")
@click.pass_context
def close_session(ctx, counted: str, counts: tuple[str, ...], notes: str | None):
    """Close the open session.

    Examples:
        cashdesk session close --counted 151.00
        cashdesk session close --counted 151 --count "Banco Pichincha=170"
    """
    service = SessionService(ctx.obj["db"])
    try:
        counted_balance = require_amount(counted, "counted balance")
        channel_counts = parse_channel_amounts(counts, "--count")
        session = service.close_session(
            ctx.obj["user"], counted_balance, channel_counts=channel_counts, notes=notes
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Closed session {session.id}")
    click.echo(f"  Expected: ${session.expected_balance:,.2f}")
    click.echo(f"  Counted:  ${session.counted_balance:,.2f}")
    status = STATUS_LABELS[count_status(session.difference)]
    click.echo(f"  Difference: {_signed(session.difference)} ({status})")
    click.echo(f"  Commissions earned: ${session.totals.commission_total:,.2f}")
    for count in session.channel_counts:
        counted_str = "not counted" if count.counted is None else f"${count.counted:,.2f}"
        click.echo(
            f"  {count.channel_name}: expected ${count.expected:,.2f}, counted {counted_str}, "
            f"difference {_signed(count.difference)}"
        )


@session_group.command("history")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--this-week", is_flag=True, help="Filter to current week")
@click.option("--this-month", is_flag=True, help="Filter to current month")
@click.option("--this-year", is_flag=True, help="Filter to current year")
@click.option("--last-week", is_flag=True, help="Filter to previous week")
@click.option("--last-month", is_flag=True, help="Filter to previous month")
@click.option("--last-year", is_flag=True, help="Filter to previous year")
@click.pass_context
def session_history(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_week: bool,
    this_month: bool,
    this_year: bool,
    last_week: bool,
    last_month: bool,
    last_year: bool,
):
    """List closed sessions grouped by day."""
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-week": this_week,
            "this-month": this_month,
            "this-year": this_year,
            "last-week": last_week,
            "last-month": last_month,
            "last-year": last_year,
        },
    )
    service = SessionService(ctx.obj["db"])
    sessions = service.list_closed_sessions(ctx.obj["user"], start_date=start, end_date=end)
    if not sessions:
        click.echo("No closed sessions found.")
        return

    for day, day_sessions in group_sessions_by_day(sessions).items():
        click.echo(f"\n{day}")
        for session in day_sessions:
            click.echo(
                f"  #{session.id:<5d} {session.opened_at:%H:%M}-{session.closed_at:%H:%M} | "
                f"commissions ${session.totals.commission_total:,.2f} | "
                f"difference {_signed(session.difference)}"
            )

    summary = summarize_sessions(sessions)
    click.echo("\nSummary:")
    click.echo(f"  Sessions: {summary.session_count}")
    click.echo(f"  Commissions: ${summary.commission_total:,.2f}")
    click.echo(f"  Average commission: ${summary.average_commission:,.2f}")
    click.echo(f"  Income: ${summary.income_total:,.2f}")
    click.echo(f"  Expenses: ${summary.expense_total:,.2f}")
    click.echo(f"  Differences: {_signed(summary.difference_total)}")


def register_commands(cli):
    """Register session commands with main CLI."""
    cli.add_command(session_group, name="session")
