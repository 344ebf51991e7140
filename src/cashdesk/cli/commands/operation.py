"""Operation commands."""

import click

from cashdesk.cli.error_handling import handle_domain_error
from cashdesk.domain.entities import OperationCategory
from cashdesk.domain.errors import DomainError
from cashdesk.domain.session import SessionService
from cashdesk.utils.amount_parser import require_amount

CATEGORY_CHOICES = [category.value for category in OperationCategory]


@click.group()
def operation_group():
    """Record, void and list operations."""
    pass


@operation_group.command("add")
@click.argument("category", type=click.Choice(CATEGORY_CHOICES))
@click.argument("amount")
@click.option("--channel", help="Channel name")
@click.option("--reference", help="Reference / voucher number")
@click.option("--commission", help="Commission charged (computed from the fee schedule if omitted)")
@click.pass_context
def add_operation(
    ctx,
    category: str,
    amount: str,
    channel: str | None,
    reference: str | None,
    commission: str | None,
):
    """Record an operation in the open session.

    Examples:
        cashdesk op add deposit 80 --channel "Banco Pichincha" --reference 12345
        cashdesk op add phone_topup 5 --commission 0.10
    """
    service = SessionService(ctx.obj["db"])
    try:
        txn = service.record_operation(
            ctx.obj["user"],
            OperationCategory(category),
            require_amount(amount),
            channel_name=channel,
            reference_number=reference,
            commission=require_amount(commission, "commission") if commission is not None else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded transaction {txn.id}")
    click.echo(f"  {txn.concept}: ${txn.amount:,.2f} ({txn.type.value})")
    if txn.channel_name:
        click.echo(f"  Channel: {txn.channel_name}")
    click.echo(f"  Commission: ${txn.commission:,.2f}")


@operation_group.command("void")
@click.argument("transaction_id", type=int)
@click.pass_context
def void_operation(ctx, transaction_id: int):
    """Void an operation of the open session."""
    service = SessionService(ctx.obj["db"])
    try:
        txn = service.void_transaction(ctx.obj["user"], transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Voided transaction {txn.id} ({txn.concept} ${txn.amount:,.2f})")


@operation_group.command("list")
@click.option("--session", "session_id", type=int, help="Session ID (defaults to the open session)")
@click.pass_context
def list_operations(ctx, session_id: int | None):
    """List operations of a session."""
    service = SessionService(ctx.obj["db"])
    try:
        if session_id is None:
            session_id = service.require_open_session(ctx.obj["user"]).id
        transactions = service.list_transactions(session_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No operations found.")
        return

    click.echo(f"\nOperations for session {session_id}:")
    click.echo("-" * 78)
    for txn in transactions:
        sign = "+" if txn.type.value == "income" else "-"
        voided = " (voided)" if txn.voided else ""
        channel = txn.channel_name or "-"
        click.echo(
            f"{txn.id:5d} | {txn.created_at:%H:%M} | {txn.concept:22s} | {channel:18s} | "
            f"{sign}${txn.amount:,.2f} | fee ${txn.commission:,.2f}{voided}"
        )


def register_commands(cli):
    """Register operation commands with main CLI."""
    cli.add_command(operation_group, name="op")
