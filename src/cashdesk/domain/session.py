"""Cash-register session domain service."""

from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Mapping, Optional

from cashdesk.database.base import Database
from cashdesk.domain.categories import get_category
from cashdesk.domain.channel import ChannelService
from cashdesk.domain.entities import (
    CashSession,
    ChannelBalance,
    ChannelOpeningBalance,
    OperationCategory,
    SessionStatus,
    SessionTotals,
    Transaction,
)
from cashdesk.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    inactive_channel,
    no_open_session,
    session_already_open,
    session_not_found,
    transaction_already_voided,
    transaction_not_found,
)
from cashdesk.domain.reconciliation import (
    compute_session_totals,
    count_channels,
    reconcile_channels,
)
from cashdesk.logging_setup import get_logger

logger = get_logger("cashdesk.domain.session")


class SessionService:
    """Service for opening, operating and closing cash-register sessions."""

    def __init__(self, db: Database, channel_service: Optional[ChannelService] = None):
        """Initialize session service.

        Args:
            db: Database instance
            channel_service: Optional channel service sharing the same database
        """
        self.db = db
        self.channels = channel_service or ChannelService(db)

    def open_session(
        self,
        user_id: str,
        opening_cash: Decimal,
        channel_balances: Optional[Mapping[str, Decimal]] = None,
    ) -> CashSession:
        """Open a session for a user.

        Args:
            user_id: Session owner
            opening_cash: Cash in the drawer at open
            channel_balances: Opening balance per active channel, keyed by
                channel ID or name; channels left out open at 0

        Returns:
            The open session

        Raises:
            ConflictError: If the user already has an open session
            ValidationError: If an amount is negative or a channel is unknown
        """
        existing = self.db.get_open_session(user_id)
        if existing is not None:
            raise ConflictError(session_already_open(user_id, existing.id))
        if opening_cash < 0:
            raise ValidationError("Opening cash cannot be negative")

        channel_balances = dict(channel_balances or {})
        snapshot = []
        for channel in self.channels.list_channels(user_id, active_only=True):
            given = {
                channel_balances.pop(key)
                for key in (channel.id, channel.name)
                if key in channel_balances
            }
            if len(given) > 1:
                raise ValidationError(f"Conflicting opening balances for '{channel.name}'")
            balance = given.pop() if given else Decimal("0")
            if balance.is_nan() or balance < 0:
                raise ValidationError(f"Opening balance for '{channel.name}' cannot be negative")
            snapshot.append(
                ChannelOpeningBalance(
                    channel_id=channel.id, channel_name=channel.name, balance=balance
                )
            )

        if channel_balances:
            unknown = sorted(channel_balances)[0]
            raise ValidationError(inactive_channel(unknown))

        session_id = self.db.create_session(user_id, opening_cash, snapshot)
        logger.info("Opened session %s for user %s with %s cash", session_id, user_id, opening_cash)
        return self.get_session(session_id)

    def get_session(self, session_id: int) -> CashSession:
        """Get session by ID.

        Raises:
            NotFoundError: If the session does not exist
        """
        session = self.db.get_session(session_id)
        if session is None:
            raise NotFoundError(session_not_found(session_id))
        return session

    def get_open_session(self, user_id: str) -> Optional[CashSession]:
        """Get the user's open session, if any."""
        return self.db.get_open_session(user_id)

    def require_open_session(self, user_id: str) -> CashSession:
        """Get the user's open session.

        Raises:
            NotFoundError: If no session is open
        """
        session = self.db.get_open_session(user_id)
        if session is None:
            raise NotFoundError(no_open_session(user_id))
        return session

    def record_operation(
        self,
        user_id: str,
        category: OperationCategory,
        amount: Decimal,
        channel_name: Optional[str] = None,
        reference_number: Optional[str] = None,
        commission: Optional[Decimal] = None,
    ) -> Transaction:
        """Record an operation in the user's open session.

        Args:
            user_id: Operator
            category: Operation category
            amount: Operation amount (must be positive)
            channel_name: Channel display name
            reference_number: Optional voucher/reference number
            commission: Commission charged; computed from the applicable fee
                schedule when None

        Returns:
            The recorded transaction

        Raises:
            NotFoundError: If no session is open
            ValidationError: If the amount, commission or channel is invalid
        """
        config = get_category(category)
        if config is None:
            raise ValidationError(f"Unknown category '{category}'")
        if amount.is_nan() or amount <= 0:
            raise ValidationError("Amount must be greater than 0")
        if commission is not None and (commission.is_nan() or commission < 0):
            raise ValidationError("Commission cannot be negative")

        session = self.require_open_session(user_id)

        channel_name = channel_name.strip() if channel_name else None
        if channel_name:
            channel = self.channels.find_channel_by_name(user_id, channel_name, active_only=True)
            if channel is None:
                raise ValidationError(inactive_channel(channel_name))
        elif config.requires_channel:
            raise ValidationError(f"{config.name} requires a channel")

        if commission is None:
            commission = self.channels.quote_commission(
                user_id, amount, config.id, channel_name=channel_name
            )

        transaction_id = self.db.create_transaction(
            session_id=session.id,
            user_id=user_id,
            type=config.type,
            amount=amount,
            category=config.id,
            concept=config.name,
            commission=commission,
            channel_name=channel_name,
            reference_number=reference_number or None,
        )
        logger.info(
            "Recorded %s of %s (commission %s) in session %s",
            config.id.value,
            amount,
            commission,
            session.id,
        )
        return self.db.get_transaction(transaction_id)

    def void_transaction(self, user_id: str, transaction_id: int) -> Transaction:
        """Void an operation of the user's open session.

        Raises:
            NotFoundError: If the transaction does not belong to the open session
            ConflictError: If the transaction is already voided
        """
        session = self.require_open_session(user_id)
        txn = self.db.get_transaction(transaction_id)
        if txn is None or txn.session_id != session.id:
            raise NotFoundError(transaction_not_found(transaction_id))
        if txn.voided:
            raise ConflictError(transaction_already_voided(transaction_id))

        self.db.void_transaction(transaction_id)
        logger.info("Voided transaction %s in session %s", transaction_id, session.id)
        return self.db.get_transaction(transaction_id)

    def list_transactions(self, session_id: int, include_voided: bool = True) -> list[Transaction]:
        """List a session's transactions."""
        self.get_session(session_id)
        return self.db.list_transactions(session_id, include_voided=include_voided)

    def session_totals(self, session_id: int) -> SessionTotals:
        """Recompute totals from the session's transactions."""
        session = self.get_session(session_id)
        return compute_session_totals(
            session.opening_cash, self.db.list_transactions(session_id)
        )

    def channel_balances(self, session_id: int, include_idle: bool = False) -> list[ChannelBalance]:
        """Reconcile the session against the owner's active channels."""
        session = self.get_session(session_id)
        logger.debug("Reconciling channels for session %s", session_id)
        return reconcile_channels(
            session.opening_balances,
            self.db.list_transactions(session_id),
            self.channels.list_channels(session.user_id, active_only=True),
            include_idle=include_idle,
        )

    def close_session(
        self,
        user_id: str,
        counted_balance: Decimal,
        channel_counts: Optional[Mapping[str, Decimal]] = None,
        notes: Optional[str] = None,
    ) -> CashSession:
        """Close the user's open session.

        Args:
            user_id: Session owner
            counted_balance: Cash counted in the drawer
            channel_counts: Optional counted balance per channel name
            notes: Optional closing notes

        Returns:
            The closed session, including totals and differences

        Raises:
            NotFoundError: If no session is open
            ValidationError: If a counted amount is negative or names a
                channel that is not active
        """
        if counted_balance.is_nan() or counted_balance < 0:
            raise ValidationError("Counted balance cannot be negative")
        channel_counts = dict(channel_counts or {})
        for name, amount in channel_counts.items():
            if amount.is_nan() or amount < 0:
                raise ValidationError(f"Counted balance for '{name}' cannot be negative")

        session = self.require_open_session(user_id)
        totals = self.session_totals(session.id)

        # Idle channels are reported only when the operator counted them.
        all_balances = self.channel_balances(session.id, include_idle=True)
        known = {balance.channel_name for balance in all_balances}
        for name in sorted(channel_counts):
            if name not in known:
                raise ValidationError(inactive_channel(name))
        moved = {balance.channel_id for balance in self.channel_balances(session.id)}
        balances = [
            balance
            for balance in all_balances
            if balance.channel_id in moved or balance.channel_name in channel_counts
        ]
        counts = count_channels(balances, channel_counts)
        difference = counted_balance - totals.expected_balance

        self.db.close_session(
            session.id,
            closed_at=datetime.now(UTC),
            counted_balance=counted_balance,
            totals=totals,
            difference=difference,
            channel_counts=counts,
            notes=notes,
        )
        logger.info(
            "Closed session %s: expected %s, counted %s, difference %s",
            session.id,
            totals.expected_balance,
            counted_balance,
            difference,
        )
        return self.get_session(session.id)

    def list_closed_sessions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[CashSession]:
        """List closed sessions, newest first."""
        return self.db.list_sessions(
            user_id,
            status=SessionStatus.CLOSED,
            start_date=start_date,
            end_date=end_date,
        )
