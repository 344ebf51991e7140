"""Channel management commands."""

import click

from cashdesk.cli.error_handling import handle_domain_error
from cashdesk.cli.options import build_fee_schedule, format_fee_schedule
from cashdesk.domain.channel import ChannelService
from cashdesk.domain.errors import DomainError


@click.group()
def channel_group():
    """Manage transaction channels."""
    pass


@channel_group.command("list")
@click.option("--active", "active_only", is_flag=True, help="Only show active channels")
@click.pass_context
def list_channels(ctx, active_only: bool):
    """List channels."""
    service = ChannelService(ctx.obj["db"])
    channels = service.list_channels(ctx.obj["user"], active_only=active_only)
    if not channels:
        click.echo("No channels found. Run 'cashdesk init' to create the defaults.")
        return

    click.echo("\nChannels:")
    click.echo("-" * 78)
    for ch in channels:
        status = "active" if ch.active else "inactive"
        kind = "default" if ch.is_default else "custom"
        fees = "custom fees" if ch.use_custom_fees else "default fees"
        click.echo(f"{ch.id:32s} | {ch.name:20s} | {status:8s} | {kind:7s} | {fees}")


@channel_group.command("add")
@click.argument("name")
@click.pass_context
def add_channel(ctx, name: str):
    """Add a custom channel.

    Examples:
        cashdesk channel add "Banco del Austro"
    """
    service = ChannelService(ctx.obj["db"])
    try:
        channel = service.add_channel(ctx.obj["user"], name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created channel '{channel.name}' (ID: {channel.id})")


@channel_group.command("toggle")
@click.argument("channel")
@click.pass_context
def toggle_channel(ctx, channel: str):
    """Activate or deactivate a channel (by ID or name)."""
    service = ChannelService(ctx.obj["db"])
    user_id = ctx.obj["user"]
    try:
        found = service.resolve_channel(user_id, channel)
        updated = service.toggle_channel(user_id, found.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    status = "active" if updated.active else "inactive"
    click.echo(f"Channel '{updated.name}' is now {status}")


@channel_group.command("delete")
@click.argument("channel")
@click.pass_context
def delete_channel(ctx, channel: str):
    """Delete a custom channel (by ID or name)."""
    service = ChannelService(ctx.obj["db"])
    user_id = ctx.obj["user"]
    try:
        found = service.resolve_channel(user_id, channel)
        service.delete_channel(user_id, found.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted channel '{found.name}'")


@channel_group.command("fees")
@click.argument("channel")
@click.option("--custom/--no-custom", default=None, help="Use the channel's own schedule")
@click.option("--mode", type=click.Choice(["flat", "tiered"]), help="Commission mode")
@click.option("--deposit", help="Flat deposit fee")
@click.option("--withdrawal", help="Flat withdrawal fee")
@click.option("--tier", "tiers", multiple=True, help="Tier as MIN:MAX:DEPOSIT:WITHDRAWAL (MAX '*' = no limit)")
@click.pass_context
def channel_fees(ctx, channel: str, custom, mode, deposit, withdrawal, tiers):
    """Show or edit a channel's personalized fee schedule.

    Examples:
        cashdesk channel fees "Western Union"
        cashdesk channel fees "Western Union" --custom --mode flat --deposit 1 --withdrawal 1.25
        cashdesk channel fees "Western Union" --no-custom
    """
    service = ChannelService(ctx.obj["db"])
    user_id = ctx.obj["user"]
    try:
        found = service.resolve_channel(user_id, channel)
        edits = any(value is not None for value in (mode, deposit, withdrawal)) or bool(tiers)
        if custom is not None or edits:
            schedule = None
            if edits:
                base = found.fee_schedule or service.get_default_fee_schedule(user_id)
                schedule = build_fee_schedule(base, mode, deposit, withdrawal, tiers)
            use_custom = found.use_custom_fees if custom is None else custom
            found = service.set_channel_fees(user_id, found.id, use_custom, schedule)
    except DomainError as e:
        handle_domain_error(ctx, e)

    source = "custom" if found.use_custom_fees and found.fee_schedule else "default"
    click.echo(f"Channel '{found.name}' uses {source} fees")
    for line in format_fee_schedule(service.fee_schedule_for(user_id, found)):
        click.echo(f"  {line}")


def register_commands(cli):
    """Register channel commands with main CLI."""
    cli.add_command(channel_group, name="channel")
