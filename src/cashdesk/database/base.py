"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from cashdesk.domain.entities import (
    CashSession,
    Channel,
    ChannelCount,
    ChannelOpeningBalance,
    FeeSchedule,
    OperationCategory,
    SessionStatus,
    SessionTotals,
    Transaction,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for cashdesk."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Channel operations
    @abstractmethod
    def create_channel(
        self,
        user_id: str,
        channel_id: str,
        name: str,
        is_default: bool = False,
        active: bool = True,
    ) -> str:
        """Create a channel. Returns channel ID."""
        pass

    @abstractmethod
    def get_channel(self, user_id: str, channel_id: str) -> Optional[Channel]:
        """Get channel by ID."""
        pass

    @abstractmethod
    def list_channels(self, user_id: str) -> list[Channel]:
        """List a user's channels in creation order."""
        pass

    @abstractmethod
    def update_channel_active(self, user_id: str, channel_id: str, active: bool) -> None:
        """Activate or deactivate a channel."""
        pass

    @abstractmethod
    def update_channel_fees(
        self,
        user_id: str,
        channel_id: str,
        use_custom_fees: bool,
        fee_schedule: Optional[FeeSchedule],
    ) -> None:
        """Set a channel's personalized fee schedule."""
        pass

    @abstractmethod
    def delete_channel(self, user_id: str, channel_id: str) -> None:
        """Delete a channel."""
        pass

    # Fee settings operations
    @abstractmethod
    def get_default_fee_schedule(self, user_id: str) -> Optional[FeeSchedule]:
        """Get a user's stored default fee schedule, if any."""
        pass

    @abstractmethod
    def set_default_fee_schedule(self, user_id: str, fee_schedule: FeeSchedule) -> None:
        """Store a user's default fee schedule."""
        pass

    # Session operations
    @abstractmethod
    def create_session(
        self,
        user_id: str,
        opening_cash: Decimal,
        opening_balances: list[ChannelOpeningBalance],
    ) -> int:
        """Create an open session. Returns session ID."""
        pass

    @abstractmethod
    def get_session(self, session_id: int) -> Optional[CashSession]:
        """Get session by ID."""
        pass

    @abstractmethod
    def get_open_session(self, user_id: str) -> Optional[CashSession]:
        """Get the user's open session, if any."""
        pass

    @abstractmethod
    def list_sessions(
        self,
        user_id: str,
        status: Optional[SessionStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[CashSession]:
        """List sessions, newest first.

        Args:
            user_id: Session owner
            status: Optional status filter
            start_date: Optional earliest close date (inclusive)
            end_date: Optional latest close date (inclusive)
        """
        pass

    @abstractmethod
    def close_session(
        self,
        session_id: int,
        closed_at: datetime,
        counted_balance: Decimal,
        totals: SessionTotals,
        difference: Decimal,
        channel_counts: list[ChannelCount],
        notes: Optional[str] = None,
    ) -> None:
        """Store close data and mark the session closed."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        session_id: int,
        user_id: str,
        type: TransactionType,
        amount: Decimal,
        category: OperationCategory,
        concept: str,
        commission: Decimal,
        channel_name: Optional[str] = None,
        reference_number: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(self, session_id: int, include_voided: bool = True) -> list[Transaction]:
        """List a session's transactions in recording order."""
        pass

    @abstractmethod
    def void_transaction(self, transaction_id: int) -> None:
        """Mark a transaction as voided."""
        pass
