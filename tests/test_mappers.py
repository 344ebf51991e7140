"""Tests for database mappers."""

from datetime import datetime, UTC
from decimal import Decimal

from cashdesk.database.mappers import (
    channel_to_domain,
    fee_schedule_from_dict,
    fee_schedule_to_dict,
    session_to_domain,
    totals_from_dict,
    totals_to_dict,
    transaction_to_domain,
)
from cashdesk.database.models import (
    CashSession as ORMCashSession,
    Channel as ORMChannel,
    SessionChannelBalance as ORMSessionChannelBalance,
    Transaction as ORMTransaction,
)
from cashdesk.domain.commission import DEFAULT_FEE_SCHEDULE
from cashdesk.domain.entities import (
    Channel,
    FeeMode,
    OperationCategory,
    SessionStatus,
    SessionTotals,
    TransactionType,
)
from cashdesk.domain.reconciliation import compute_session_totals


class TestFeeScheduleMapper:
    """Tests for fee schedule JSON conversion."""

    def test_decimals_stored_as_strings(self):
        data = fee_schedule_to_dict(DEFAULT_FEE_SCHEDULE)
        assert data["mode"] == "flat"
        assert data["flat"]["deposit_fee"] == "0.50"
        assert data["tiers"][-1]["max_amount"] == "-1"

    def test_restores_schedule(self):
        restored = fee_schedule_from_dict(fee_schedule_to_dict(DEFAULT_FEE_SCHEDULE))
        assert restored == DEFAULT_FEE_SCHEDULE
        assert restored.tiers[-1].unbounded

    def test_missing_flat_fees_default_to_zero(self):
        schedule = fee_schedule_from_dict({"mode": "tiered", "tiers": []})
        assert schedule.mode == FeeMode.TIERED
        assert schedule.flat.deposit_fee == Decimal("0")
        assert schedule.tiers == ()


class TestTotalsMapper:
    """Tests for session totals JSON conversion."""

    def test_totals(self):
        totals = compute_session_totals(Decimal("100"), [])
        data = totals_to_dict(totals)
        assert data["expected_balance"] == "100"
        assert data["operation_count"] == 0
        restored = totals_from_dict(data)
        assert isinstance(restored, SessionTotals)
        assert restored == totals

    def test_none(self):
        assert totals_from_dict(None) is None


class TestChannelMapper:
    """Tests for Channel mapper."""

    def test_channel_to_domain(self):
        orm_channel = ORMChannel(
            id=7,
            user_id="operator",
            channel_key="western_union",
            name="Western Union",
            active=False,
            is_default=True,
            use_custom_fees=True,
            fee_schedule=fee_schedule_to_dict(DEFAULT_FEE_SCHEDULE),
        )
        channel = channel_to_domain(orm_channel)
        assert isinstance(channel, Channel)
        assert channel.id == "western_union"
        assert channel.name == "Western Union"
        assert not channel.active
        assert channel.is_default
        assert channel.fee_schedule == DEFAULT_FEE_SCHEDULE

    def test_channel_without_schedule(self):
        orm_channel = ORMChannel(
            id=1,
            user_id="operator",
            channel_key="pichincha",
            name="Banco Pichincha",
            active=True,
            is_default=True,
            use_custom_fees=False,
            fee_schedule=None,
        )
        assert channel_to_domain(orm_channel).fee_schedule is None


def test_session_to_domain():
    opened_at = datetime.now(UTC)
    orm_session = ORMCashSession(
        id=3,
        user_id="operator",
        status="open",
        opening_cash=Decimal("100.00"),
        opened_at=opened_at,
        totals=None,
    )
    orm_session.opening_balances.append(
        ORMSessionChannelBalance(
            channel_key="pichincha", channel_name="Banco Pichincha", balance=Decimal("200")
        )
    )
    session = session_to_domain(orm_session)
    assert session.status == SessionStatus.OPEN
    assert session.opening_cash == Decimal("100.00")
    assert session.opened_at == opened_at
    assert [b.channel_id for b in session.opening_balances] == ["pichincha"]
    assert session.totals is None
    assert session.channel_counts == ()


def test_transaction_to_domain():
    created_at = datetime.now(UTC)
    orm_transaction = ORMTransaction(
        id=5,
        session_id=3,
        user_id="operator",
        type="expense",
        amount=Decimal("50.00"),
        category="withdrawal",
        concept="Bank Withdrawal",
        channel_name="Banco Pichincha",
        reference_number="A-1",
        commission=Decimal("0.50"),
        voided=False,
        created_at=created_at,
    )
    txn = transaction_to_domain(orm_transaction)
    assert txn.type == TransactionType.EXPENSE
    assert txn.category == OperationCategory.WITHDRAWAL
    assert txn.reference_number == "A-1"
    assert txn.created_at == created_at
