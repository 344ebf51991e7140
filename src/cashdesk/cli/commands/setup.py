"""Setup and reference commands."""

import click

from cashdesk.domain.categories import CATEGORIES, channel_effect
from cashdesk.domain.channel import ChannelService


@click.command("init")
@click.pass_context
def init(ctx):
    """Create the default channels for the current user."""
    service = ChannelService(ctx.obj["db"])
    created = service.seed_default_channels(ctx.obj["user"])
    if created:
        click.echo(f"Created {len(created)} default channel(s).")
    else:
        click.echo("Default channels already exist.")


@click.command("categories")
def categories():
    """List operation categories."""
    click.echo("\nCategories:")
    click.echo("-" * 78)
    for config in CATEGORIES:
        flags = []
        if config.requires_channel:
            flags.append("channel")
        if config.requires_reference:
            flags.append("reference")
        required = ", ".join(flags) or "-"
        click.echo(
            f"{config.id.value:22s} | {config.type.value:7s} | "
            f"channel {channel_effect(config.id).value:9s} | requires: {required}"
        )


def register_commands(cli):
    """Register setup commands with main CLI."""
    cli.add_command(init)
    cli.add_command(categories)
