"""Tests for cash-register session service."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from cashdesk.domain.commission import DEFAULT_FLAT_FEES
from cashdesk.domain.entities import (
    UNBOUNDED,
    FeeMode,
    FeeSchedule,
    FeeTier,
    OperationCategory,
    SessionStatus,
    TransactionType,
)
from cashdesk.domain.errors import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def open_session(session_service, seeded_channels, user_id):
    """Open a session with a balance at Banco Pichincha."""
    return session_service.open_session(
        user_id, Decimal("100"), {"Banco Pichincha": Decimal("200")}
    )


class TestOpenSession:
    """Tests for opening sessions."""

    def test_open_snapshots_active_channels(self, open_session, seeded_channels):
        assert open_session.status == SessionStatus.OPEN
        assert open_session.opening_cash == Decimal("100")
        assert [b.channel_id for b in open_session.opening_balances] == list(seeded_channels)
        balances = {b.channel_id: b.balance for b in open_session.opening_balances}
        assert balances["pichincha"] == Decimal("200")
        assert balances["guayaquil"] == Decimal("0")

    def test_balance_keyed_by_channel_id(self, session_service, seeded_channels, user_id):
        session = session_service.open_session(user_id, Decimal("0"), {"guayaquil": Decimal("75")})
        balances = {b.channel_id: b.balance for b in session.opening_balances}
        assert balances["guayaquil"] == Decimal("75")

    def test_inactive_channels_not_snapshotted(
        self, session_service, channel_service, seeded_channels, user_id
    ):
        channel_service.toggle_channel(user_id, "yaganaste")
        session = session_service.open_session(user_id, Decimal("0"))
        assert "yaganaste" not in [b.channel_id for b in session.opening_balances]

    def test_only_one_open_session(self, session_service, open_session, user_id):
        with pytest.raises(ConflictError, match="already has an open session"):
            session_service.open_session(user_id, Decimal("50"))

    def test_negative_opening_cash(self, session_service, user_id):
        with pytest.raises(ValidationError):
            session_service.open_session(user_id, Decimal("-1"))

    def test_unknown_channel_balance(self, session_service, seeded_channels, user_id):
        with pytest.raises(ValidationError, match="not an active channel"):
            session_service.open_session(user_id, Decimal("0"), {"Nowhere": Decimal("10")})

    def test_negative_channel_balance(self, session_service, seeded_channels, user_id):
        with pytest.raises(ValidationError):
            session_service.open_session(user_id, Decimal("0"), {"pichincha": Decimal("-5")})

    def test_get_missing_session(self, session_service):
        with pytest.raises(NotFoundError):
            session_service.get_session(999)


class TestRecordOperation:
    """Tests for recording operations."""

    def test_record_with_auto_commission(self, session_service, open_session, user_id):
        txn = session_service.record_operation(
            user_id,
            OperationCategory.DEPOSIT,
            Decimal("80"),
            channel_name="Banco Pichincha",
            reference_number="12345",
        )
        assert txn.session_id == open_session.id
        assert txn.type == TransactionType.INCOME
        assert txn.concept == "Bank Deposit"
        assert txn.commission == Decimal("0.50")
        assert txn.reference_number == "12345"

    def test_record_with_explicit_commission(self, session_service, open_session, user_id):
        txn = session_service.record_operation(
            user_id, OperationCategory.PHONE_TOPUP, Decimal("5"), commission=Decimal("0.10")
        )
        assert txn.commission == Decimal("0.10")
        assert txn.channel_name is None

    def test_requires_open_session(self, session_service, seeded_channels, user_id):
        with pytest.raises(NotFoundError, match="No open session"):
            session_service.record_operation(user_id, OperationCategory.OTHER_INCOME, Decimal("5"))

    @pytest.mark.parametrize("amount", ["0", "-10", "NaN"])
    def test_rejects_non_positive_amount(self, session_service, open_session, user_id, amount):
        with pytest.raises(ValidationError):
            session_service.record_operation(user_id, OperationCategory.OTHER_INCOME, Decimal(amount))

    def test_rejects_negative_commission(self, session_service, open_session, user_id):
        with pytest.raises(ValidationError):
            session_service.record_operation(
                user_id, OperationCategory.OTHER_INCOME, Decimal("5"), commission=Decimal("-1")
            )

    def test_deposit_requires_channel(self, session_service, open_session, user_id):
        with pytest.raises(ValidationError, match="requires a channel"):
            session_service.record_operation(user_id, OperationCategory.DEPOSIT, Decimal("10"))

    def test_rejects_inactive_channel(
        self, session_service, channel_service, open_session, user_id
    ):
        channel_service.toggle_channel(user_id, "guayaquil")
        with pytest.raises(ValidationError, match="not an active channel"):
            session_service.record_operation(
                user_id, OperationCategory.WITHDRAWAL, Decimal("10"), channel_name="Banco Guayaquil"
            )


class TestVoid:
    """Tests for voiding operations."""

    def test_void(self, session_service, open_session, user_id):
        txn = session_service.record_operation(user_id, OperationCategory.OTHER_INCOME, Decimal("5"))
        voided = session_service.void_transaction(user_id, txn.id)
        assert voided.voided
        assert session_service.list_transactions(open_session.id, include_voided=False) == []
        assert len(session_service.list_transactions(open_session.id)) == 1

    def test_void_twice(self, session_service, open_session, user_id):
        txn = session_service.record_operation(user_id, OperationCategory.OTHER_INCOME, Decimal("5"))
        session_service.void_transaction(user_id, txn.id)
        with pytest.raises(ConflictError, match="already voided"):
            session_service.void_transaction(user_id, txn.id)

    def test_void_missing(self, session_service, open_session, user_id):
        with pytest.raises(NotFoundError):
            session_service.void_transaction(user_id, 12345)


class TestBalances:
    """Tests for totals and channel reconciliation within a session."""

    def test_channel_balances(self, session_service, open_session, user_id):
        session_service.record_operation(
            user_id, OperationCategory.WITHDRAWAL, Decimal("50"), channel_name="Banco Pichincha"
        )
        session_service.record_operation(
            user_id, OperationCategory.DEPOSIT, Decimal("80"), channel_name="Banco Pichincha"
        )
        balances = session_service.channel_balances(open_session.id)
        assert [b.channel_id for b in balances] == ["pichincha"]
        assert balances[0].expected_balance == Decimal("170")

        all_balances = session_service.channel_balances(open_session.id, include_idle=True)
        assert len(all_balances) == 5

    def test_voided_operation_excluded_from_totals(self, session_service, open_session, user_id):
        txn = session_service.record_operation(
            user_id, OperationCategory.DEPOSIT, Decimal("80"), channel_name="Banco Pichincha"
        )
        session_service.void_transaction(user_id, txn.id)
        totals = session_service.session_totals(open_session.id)
        assert totals.operation_count == 0
        assert totals.expected_balance == Decimal("100")
        assert session_service.channel_balances(open_session.id)[0].expected_balance == Decimal("200")

    def test_session_totals(self, session_service, open_session, user_id):
        session_service.record_operation(
            user_id, OperationCategory.DEPOSIT, Decimal("80"), channel_name="Banco Pichincha"
        )
        session_service.record_operation(
            user_id, OperationCategory.WITHDRAWAL, Decimal("30"), channel_name="Banco Pichincha"
        )
        totals = session_service.session_totals(open_session.id)
        assert totals.income_total == Decimal("80")
        assert totals.expense_total == Decimal("30")
        assert totals.commission_total == Decimal("1.00")
        assert totals.expected_balance == Decimal("151.00")


class TestCloseSession:
    """Tests for closing sessions."""

    def test_close(self, session_service, open_session, user_id):
        session_service.record_operation(
            user_id, OperationCategory.DEPOSIT, Decimal("80"), channel_name="Banco Pichincha"
        )
        closed = session_service.close_session(
            user_id,
            Decimal("180"),
            channel_counts={"Banco Pichincha": Decimal("119")},
            notes="end of day",
        )
        assert closed.status == SessionStatus.CLOSED
        assert closed.closed_at is not None
        assert closed.expected_balance == Decimal("180.50")
        assert closed.counted_balance == Decimal("180")
        assert closed.difference == Decimal("-0.50")
        assert closed.totals.commission_total == Decimal("0.50")
        assert closed.notes == "end of day"
        assert len(closed.channel_counts) == 1
        count = closed.channel_counts[0]
        assert count.channel_name == "Banco Pichincha"
        assert count.expected == Decimal("120")
        assert count.difference == Decimal("-1")
        assert session_service.get_open_session(user_id) is None

    def test_close_without_open_session(self, session_service, user_id):
        with pytest.raises(NotFoundError):
            session_service.close_session(user_id, Decimal("0"))

    def test_close_rejects_negative_count(self, session_service, open_session, user_id):
        with pytest.raises(ValidationError):
            session_service.close_session(user_id, Decimal("-1"))

    def test_reopen_after_close(self, session_service, open_session, user_id):
        session_service.close_session(user_id, Decimal("100"))
        reopened = session_service.open_session(user_id, Decimal("100"))
        assert reopened.id != open_session.id

    def test_list_closed_sessions(self, session_service, open_session, user_id):
        session_service.close_session(user_id, Decimal("100"))
        session_service.open_session(user_id, Decimal("20"))

        closed = session_service.list_closed_sessions(user_id)
        assert [s.id for s in closed] == [open_session.id]

        future = date.today() + timedelta(days=2)
        assert session_service.list_closed_sessions(user_id, start_date=future) == []


class TestExactAmounts:
    """Amounts and commissions are stored exactly as given or quoted."""

    def test_sub_cent_fee_and_amount_round_trip(
        self, session_service, channel_service, open_session, user_id
    ):
        channel_service.set_default_fee_schedule(
            user_id,
            FeeSchedule(
                mode=FeeMode.TIERED,
                flat=DEFAULT_FLAT_FEES,
                tiers=(FeeTier("all", Decimal("0"), UNBOUNDED, Decimal("0.125"), Decimal("0.125")),),
            ),
        )
        quoted = channel_service.quote_commission(
            user_id, Decimal("12.345"), OperationCategory.PHONE_TOPUP
        )
        txn = session_service.record_operation(
            user_id, OperationCategory.PHONE_TOPUP, Decimal("12.345")
        )

        assert quoted == Decimal("0.125")
        assert txn.commission == quoted
        assert txn.amount == Decimal("12.345")
        totals = session_service.session_totals(open_session.id)
        assert totals.expected_balance == Decimal("112.470")

    def test_opening_and_closing_amounts_exact(self, session_service, seeded_channels, user_id):
        session = session_service.open_session(
            user_id, Decimal("10.005"), {"Banco Pichincha": Decimal("0.001")}
        )
        assert session.opening_cash == Decimal("10.005")
        assert session.opening_balances[0].balance == Decimal("0.001")

        closed = session_service.close_session(user_id, Decimal("10.004"))
        assert closed.difference == Decimal("-0.001")


class TestChannelKeys:
    """Channel balances and counts keyed by ID or name."""

    def test_same_balance_by_id_and_name(self, session_service, seeded_channels, user_id):
        session = session_service.open_session(
            user_id,
            Decimal("0"),
            {"pichincha": Decimal("200"), "Banco Pichincha": Decimal("200.00")},
        )
        balances = {b.channel_id: b.balance for b in session.opening_balances}
        assert balances["pichincha"] == Decimal("200")

    def test_conflicting_balance_by_id_and_name(self, session_service, seeded_channels, user_id):
        with pytest.raises(ValidationError, match="Conflicting opening balances"):
            session_service.open_session(
                user_id,
                Decimal("0"),
                {"pichincha": Decimal("200"), "Banco Pichincha": Decimal("150")},
            )

    def test_close_rejects_misspelled_count(self, session_service, open_session, user_id):
        with pytest.raises(ValidationError, match="'Banco Pichinca' is not an active channel"):
            session_service.close_session(
                user_id, Decimal("100"), channel_counts={"Banco Pichinca": Decimal("150")}
            )
        assert session_service.get_open_session(user_id).id == open_session.id

    def test_close_rejects_negative_channel_count(self, session_service, open_session, user_id):
        with pytest.raises(ValidationError):
            session_service.close_session(
                user_id, Decimal("100"), channel_counts={"Banco Pichincha": Decimal("-1")}
            )

    def test_close_counts_idle_channel_when_given(self, session_service, open_session, user_id):
        closed = session_service.close_session(
            user_id, Decimal("100"), channel_counts={"Banco Guayaquil": Decimal("5")}
        )
        counts = {count.channel_name: count for count in closed.channel_counts}
        assert set(counts) == {"Banco Pichincha", "Banco Guayaquil"}
        assert counts["Banco Guayaquil"].difference == Decimal("5")
        assert counts["Banco Pichincha"].counted is None
