"""Channel balance reconciliation and session totals.

Everything here is recomputed from scratch on each call; inputs are never
mutated and nothing is cached between calls.
"""

from decimal import Decimal
from typing import Mapping, Optional, Sequence

from cashdesk.domain.categories import CHANNEL_EFFECTS, ChannelEffect, channel_effect
from cashdesk.domain.entities import (
    ZERO,
    Channel,
    ChannelBalance,
    ChannelCount,
    ChannelOpeningBalance,
    OperationCategory,
    SessionTotals,
    Transaction,
    TransactionType,
)

BALANCED = "balanced"
SURPLUS = "surplus"
SHORTAGE = "shortage"


def _opening_balance_for(
    channel_id: str, opening_balances: Sequence[ChannelOpeningBalance]
) -> Decimal:
    for opening in opening_balances:
        if opening.channel_id == channel_id:
            return opening.balance
    return ZERO


def _match_channel(name: str, channels: Sequence[Channel]) -> Optional[Channel]:
    # Matched by display name: a renamed channel no longer matches old operations.
    for channel in channels:
        if channel.name == name:
            return channel
    return None


def reconcile_channels(
    opening_balances: Sequence[ChannelOpeningBalance],
    transactions: Sequence[Transaction],
    active_channels: Sequence[Channel],
    effects: Mapping[OperationCategory, ChannelEffect] = CHANNEL_EFFECTS,
    include_idle: bool = False,
) -> list[ChannelBalance]:
    """Compute the expected balance of every active channel.

    Args:
        opening_balances: Snapshot taken when the session opened; channels
            missing from it opened at 0
        transactions: Operations of the session
        active_channels: Channels to report on, in output order
        effects: Category to channel-effect classification
        include_idle: If True, keep channels with no opening balance and no
            movement

    Returns:
        List of ChannelBalance, one per reported channel
    """
    movements: dict[str, list[Decimal]] = {
        channel.id: [ZERO, ZERO] for channel in active_channels
    }

    for txn in transactions:
        if txn.voided or not txn.channel_name:
            continue
        channel = _match_channel(txn.channel_name, active_channels)
        if channel is None:
            continue

        effect = channel_effect(txn.category, effects)
        if effect == ChannelEffect.INCREASES:
            movements[channel.id][0] += txn.amount
        elif effect == ChannelEffect.DECREASES:
            movements[channel.id][1] += txn.amount

    results = []
    for channel in active_channels:
        opening = _opening_balance_for(channel.id, opening_balances)
        inflow, outflow = movements[channel.id]
        if not include_idle and opening == 0 and inflow == 0 and outflow == 0:
            continue
        results.append(
            ChannelBalance(
                channel_id=channel.id,
                channel_name=channel.name,
                opening_balance=opening,
                inflow=inflow,
                outflow=outflow,
                expected_balance=opening + inflow - outflow,
            )
        )
    return results


def reconcile_channels_by_name(
    opening_balances: Sequence[ChannelOpeningBalance],
    transactions: Sequence[Transaction],
    active_channels: Sequence[Channel],
    effects: Mapping[OperationCategory, ChannelEffect] = CHANNEL_EFFECTS,
    include_idle: bool = False,
) -> dict[str, ChannelBalance]:
    """Same as ``reconcile_channels`` keyed by channel name."""
    balances = reconcile_channels(
        opening_balances,
        transactions,
        active_channels,
        effects=effects,
        include_idle=include_idle,
    )
    return {balance.channel_name: balance for balance in balances}


def compute_session_totals(
    opening_cash: Decimal, transactions: Sequence[Transaction]
) -> SessionTotals:
    """Aggregate the non-voided operations of a session.

    The expected drawer balance is opening cash plus income, minus expenses,
    plus every commission charged.
    """
    income = expense = deposits = withdrawals = ZERO
    other_income = other_expense = commissions = ZERO
    count = 0

    for txn in transactions:
        if txn.voided:
            continue
        count += 1
        commissions += txn.commission
        if txn.type == TransactionType.INCOME:
            income += txn.amount
            if txn.category == OperationCategory.DEPOSIT:
                deposits += txn.amount
            else:
                other_income += txn.amount
        else:
            expense += txn.amount
            if txn.category == OperationCategory.WITHDRAWAL:
                withdrawals += txn.amount
            else:
                other_expense += txn.amount

    return SessionTotals(
        opening_cash=opening_cash,
        income_total=income,
        expense_total=expense,
        deposit_total=deposits,
        withdrawal_total=withdrawals,
        other_income_total=other_income,
        other_expense_total=other_expense,
        commission_total=commissions,
        expected_balance=opening_cash + income - expense + commissions,
        operation_count=count,
    )


def count_channels(
    balances: Sequence[ChannelBalance], counted: Optional[Mapping[str, Decimal]] = None
) -> list[ChannelCount]:
    """Compare counted channel balances against the reconciled ones.

    Channels that were not counted get a difference of 0.
    """
    counted = counted or {}
    results = []
    for balance in balances:
        real = counted.get(balance.channel_name)
        difference = ZERO if real is None else real - balance.expected_balance
        results.append(
            ChannelCount(
                channel_name=balance.channel_name,
                expected=balance.expected_balance,
                counted=real,
                difference=difference,
            )
        )
    return results


def count_status(difference: Decimal) -> str:
    """Describe a counted-minus-expected difference."""
    if difference == 0:
        return BALANCED
    return SURPLUS if difference > 0 else SHORTAGE
