"""Default fee schedule and commission quote commands."""

import click

from cashdesk.cli.error_handling import handle_domain_error
from cashdesk.cli.options import build_fee_schedule, format_fee_schedule
from cashdesk.domain.channel import ChannelService
from cashdesk.domain.entities import OperationCategory
from cashdesk.domain.errors import DomainError
from cashdesk.utils.amount_parser import require_amount

CATEGORY_CHOICES = [category.value for category in OperationCategory]


@click.group()
def fees_group():
    """Manage the default fee schedule."""
    pass


@fees_group.command("show")
@click.pass_context
def show_fees(ctx):
    """Show the default fee schedule."""
    service = ChannelService(ctx.obj["db"])
    for line in format_fee_schedule(service.get_default_fee_schedule(ctx.obj["user"])):
        click.echo(line)


@fees_group.command("set")
@click.option("--mode", type=click.Choice(["flat", "tiered"]), help="Commission mode")
@click.option("--deposit", help="Flat deposit fee")
@click.option("--withdrawal", help="Flat withdrawal fee")
@click.option("--tier", "tiers", multiple=True, help="Tier as MIN:MAX:DEPOSIT:WITHDRAWAL (MAX '*' = no limit)")
@click.pass_context
def set_fees(ctx, mode, deposit, withdrawal, tiers):
    """Edit the default fee schedule.

    Options not given keep their current value. Passing any --tier replaces
    the whole tier list.

    Examples:
        cashdesk fees set --mode flat --deposit 0.50 --withdrawal 0.50
        cashdesk fees set --mode tiered --tier 0:100:0.25:0.25 --tier 100:*:0.50:0.50
    """
    service = ChannelService(ctx.obj["db"])
    user_id = ctx.obj["user"]
    try:
        schedule = build_fee_schedule(
            service.get_default_fee_schedule(user_id), mode, deposit, withdrawal, tiers
        )
        schedule = service.set_default_fee_schedule(user_id, schedule)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo("Updated default fee schedule")
    for line in format_fee_schedule(schedule):
        click.echo(f"  {line}")


@click.command("quote")
@click.argument("amount")
@click.option("--category", required=True, type=click.Choice(CATEGORY_CHOICES), help="Operation category")
@click.option("--channel", help="Channel name")
@click.pass_context
def quote(ctx, amount: str, category: str, channel: str | None):
    """Suggest the commission for an operation.

    Examples:
        cashdesk quote 150 --category deposit --channel "Banco Pichincha"
    """
    service = ChannelService(ctx.obj["db"])
    try:
        value = require_amount(amount)
        commission = service.quote_commission(
            ctx.obj["user"], value, OperationCategory(category), channel_name=channel
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Commission: ${commission:,.2f}")


def register_commands(cli):
    """Register fee commands with main CLI."""
    cli.add_command(fees_group, name="fees")
    cli.add_command(quote)
