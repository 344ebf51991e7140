"""Main CLI entry point."""

import click
from cashdesk.database.factories import create_sqlite_database
from cashdesk.logging_setup import configure_logging

# Import and register all commands at module level
from cashdesk.cli.commands import (
    channel,
    fees,
    operation,
    session,
    setup,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CASHDESK_DB_PATH environment variable)",
    envvar="CASHDESK_DB_PATH",
)
@click.option(
    "--user",
    default="default",
    show_default=True,
    envvar="CASHDESK_USER",
    help="Operator whose channels, fees and sessions are used",
)
@click.option(
    "--log-level",
    envvar="CASHDESK_LOG_LEVEL",
    help="Logging level (DEBUG, INFO, WARNING, ...)",
)
@click.pass_context
def cli(ctx, db_path: str | None, user: str, log_level: str | None):
    """Cashdesk - Cash register bookkeeping for banking correspondents.

    Record deposits, withdrawals, bill payments and top-ups against an open
    cash-register session, with automatic commissions and per-channel
    balance reconciliation.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["user"] = user
        ctx.call_on_close(db.disconnect)


# Register all commands
setup.register_commands(cli)
channel.register_commands(cli)
fees.register_commands(cli)
session.register_commands(cli)
operation.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
