"""Mapper functions to convert between domain models and SQLAlchemy models.

Fee schedules and session totals are stored as JSON documents; decimals are
written as strings so no precision is lost through float conversion.
"""

from decimal import Decimal
from typing import Any, Optional

from cashdesk.domain import entities as domain
from cashdesk.database.models import (
    Channel as ORMChannel,
    CashSession as ORMCashSession,
    SessionChannelBalance as ORMSessionChannelBalance,
    SessionChannelCount as ORMSessionChannelCount,
    Transaction as ORMTransaction,
)

_TOTALS_DECIMAL_FIELDS = (
    "opening_cash",
    "income_total",
    "expense_total",
    "deposit_total",
    "withdrawal_total",
    "other_income_total",
    "other_expense_total",
    "commission_total",
    "expected_balance",
)


def fee_schedule_to_dict(schedule: domain.FeeSchedule) -> dict[str, Any]:
    """Convert a FeeSchedule to a JSON-compatible dict."""
    return {
        "mode": schedule.mode.value,
        "flat": {
            "deposit_fee": str(schedule.flat.deposit_fee),
            "withdrawal_fee": str(schedule.flat.withdrawal_fee),
        },
        "tiers": [
            {
                "id": tier.id,
                "min_amount": str(tier.min_amount),
                "max_amount": str(tier.max_amount),
                "deposit_fee": str(tier.deposit_fee),
                "withdrawal_fee": str(tier.withdrawal_fee),
            }
            for tier in schedule.tiers
        ],
    }


def fee_schedule_from_dict(data: dict[str, Any]) -> domain.FeeSchedule:
    """Convert a stored dict back into a FeeSchedule."""
    flat = data.get("flat", {})
    return domain.FeeSchedule(
        mode=domain.FeeMode(data["mode"]),
        flat=domain.FlatFees(
            deposit_fee=Decimal(flat.get("deposit_fee", "0")),
            withdrawal_fee=Decimal(flat.get("withdrawal_fee", "0")),
        ),
        tiers=tuple(
            domain.FeeTier(
                id=tier["id"],
                min_amount=Decimal(tier["min_amount"]),
                max_amount=Decimal(tier["max_amount"]),
                deposit_fee=Decimal(tier["deposit_fee"]),
                withdrawal_fee=Decimal(tier["withdrawal_fee"]),
            )
            for tier in data.get("tiers", [])
        ),
    )


def totals_to_dict(totals: domain.SessionTotals) -> dict[str, Any]:
    """Convert SessionTotals to a JSON-compatible dict."""
    data: dict[str, Any] = {name: str(getattr(totals, name)) for name in _TOTALS_DECIMAL_FIELDS}
    data["operation_count"] = totals.operation_count
    return data


def totals_from_dict(data: Optional[dict[str, Any]]) -> Optional[domain.SessionTotals]:
    """Convert stored totals back into SessionTotals."""
    if data is None:
        return None
    values: dict[str, Any] = {name: Decimal(data[name]) for name in _TOTALS_DECIMAL_FIELDS}
    values["operation_count"] = int(data["operation_count"])
    return domain.SessionTotals(**values)


def channel_to_domain(orm_channel: ORMChannel) -> domain.Channel:
    """Convert SQLAlchemy Channel model to domain Channel entity."""
    schedule = None
    if orm_channel.fee_schedule is not None:
        schedule = fee_schedule_from_dict(orm_channel.fee_schedule)
    return domain.Channel(
        id=orm_channel.channel_key,
        name=orm_channel.name,
        active=orm_channel.active,
        is_default=orm_channel.is_default,
        use_custom_fees=orm_channel.use_custom_fees,
        fee_schedule=schedule,
    )


def opening_balance_to_domain(
    orm_balance: ORMSessionChannelBalance,
) -> domain.ChannelOpeningBalance:
    """Convert SQLAlchemy SessionChannelBalance to domain ChannelOpeningBalance."""
    return domain.ChannelOpeningBalance(
        channel_id=orm_balance.channel_key,
        channel_name=orm_balance.channel_name,
        balance=orm_balance.balance,
    )


def channel_count_to_domain(orm_count: ORMSessionChannelCount) -> domain.ChannelCount:
    """Convert SQLAlchemy SessionChannelCount to domain ChannelCount."""
    return domain.ChannelCount(
        channel_name=orm_count.channel_name,
        expected=orm_count.expected,
        counted=orm_count.counted,
        difference=orm_count.difference,
    )


def session_to_domain(orm_session: ORMCashSession) -> domain.CashSession:
    """Convert SQLAlchemy CashSession model to domain CashSession entity."""
    return domain.CashSession(
        id=orm_session.id,
        user_id=orm_session.user_id,
        status=domain.SessionStatus(orm_session.status),
        opening_cash=orm_session.opening_cash,
        opened_at=orm_session.opened_at,
        opening_balances=tuple(
            opening_balance_to_domain(balance) for balance in orm_session.opening_balances
        ),
        closed_at=orm_session.closed_at,
        counted_balance=orm_session.counted_balance,
        expected_balance=orm_session.expected_balance,
        difference=orm_session.difference,
        totals=totals_from_dict(orm_session.totals),
        channel_counts=tuple(
            channel_count_to_domain(count) for count in orm_session.channel_counts
        ),
        notes=orm_session.notes,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        session_id=orm_transaction.session_id,
        type=domain.TransactionType(orm_transaction.type),
        amount=orm_transaction.amount,
        category=domain.OperationCategory(orm_transaction.category),
        concept=orm_transaction.concept,
        commission=orm_transaction.commission,
        created_at=orm_transaction.created_at,
        user_id=orm_transaction.user_id,
        channel_name=orm_transaction.channel_name,
        reference_number=orm_transaction.reference_number,
        voided=orm_transaction.voided,
    )
