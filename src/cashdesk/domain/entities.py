"""Domain model entities for cashdesk.

These are pure data classes representing business concepts, independent of
database schema. The commission engine and the channel reconciler only ever
receive these snapshots and return freshly built values.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0")

# Marks a fee tier without an upper limit.
UNBOUNDED = Decimal("-1")


class TransactionType(str, Enum):
    """Cash-drawer direction of an operation."""

    INCOME = "income"
    EXPENSE = "expense"


class OperationCategory(str, Enum):
    """Operations a correspondent performs at the counter."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    BILL_PAYMENT = "bill_payment"
    PHONE_TOPUP = "phone_topup"
    MONEY_ORDER_SENT = "money_order_sent"
    MONEY_ORDER_RECEIVED = "money_order_received"
    OTHER_INCOME = "other_income"
    OTHER_EXPENSE = "other_expense"


class CommissionDirection(str, Enum):
    """Fee-schedule axis used to pick a commission value."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class FeeMode(str, Enum):
    """How a fee schedule computes commissions."""

    FLAT = "flat"
    TIERED = "tiered"


class SessionStatus(str, Enum):
    """Cash-register session state."""

    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class CategoryConfig:
    """Static metadata for an operation category."""

    id: OperationCategory
    name: str
    short_name: str
    type: TransactionType
    requires_channel: bool
    requires_reference: bool
    icon: str = ""
    color: str = ""


@dataclass(frozen=True)
class FlatFees:
    """Fixed commission per direction."""

    deposit_fee: Decimal
    withdrawal_fee: Decimal


@dataclass(frozen=True)
class FeeTier:
    """Half-open amount range ``[min_amount, max_amount)`` with its own fees."""

    id: str
    min_amount: Decimal
    max_amount: Decimal
    deposit_fee: Decimal
    withdrawal_fee: Decimal

    @property
    def unbounded(self) -> bool:
        return self.max_amount == UNBOUNDED


@dataclass(frozen=True)
class FeeSchedule:
    """Commission configuration.

    Both the flat fees and the tiers are kept so switching ``mode`` back and
    forth does not lose either configuration.
    """

    mode: FeeMode
    flat: FlatFees
    tiers: tuple[FeeTier, ...] = ()


@dataclass(frozen=True)
class Channel:
    """Bank, wallet or payment rail through which operations flow."""

    id: str
    name: str
    active: bool = True
    is_default: bool = False
    use_custom_fees: bool = False
    fee_schedule: Optional[FeeSchedule] = None


@dataclass(frozen=True)
class ChannelOpeningBalance:
    """Channel balance snapshotted when a session opens."""

    channel_id: str
    channel_name: str
    balance: Decimal


@dataclass(frozen=True)
class Transaction:
    """Operation recorded against a cash-register session."""

    id: int
    session_id: int
    type: TransactionType
    amount: Decimal
    category: OperationCategory
    concept: str
    commission: Decimal
    created_at: datetime
    user_id: str
    channel_name: Optional[str] = None
    reference_number: Optional[str] = None
    voided: bool = False


@dataclass(frozen=True)
class ChannelBalance:
    """Reconciled balance of one channel for a session."""

    channel_id: str
    channel_name: str
    opening_balance: Decimal
    inflow: Decimal
    outflow: Decimal
    expected_balance: Decimal

    @property
    def deposits(self) -> Decimal:
        """Client deposits leave the business account at the channel."""
        return self.outflow

    @property
    def withdrawals(self) -> Decimal:
        """Client withdrawals land in the business account at the channel."""
        return self.inflow


@dataclass(frozen=True)
class ChannelCount:
    """Counted vs expected balance of a channel at close."""

    channel_name: str
    expected: Decimal
    counted: Optional[Decimal]
    difference: Decimal


@dataclass(frozen=True)
class SessionTotals:
    """Aggregates over the non-voided operations of a session."""

    opening_cash: Decimal
    income_total: Decimal
    expense_total: Decimal
    deposit_total: Decimal
    withdrawal_total: Decimal
    other_income_total: Decimal
    other_expense_total: Decimal
    commission_total: Decimal
    expected_balance: Decimal
    operation_count: int

    @property
    def commission_rate(self) -> Decimal:
        """Commissions as a fraction of the moved volume."""
        volume = self.income_total + self.expense_total
        if volume == 0:
            return ZERO
        return self.commission_total / volume


@dataclass(frozen=True)
class CashSession:
    """Cash-register session (open-to-close working period)."""

    id: int
    user_id: str
    status: SessionStatus
    opening_cash: Decimal
    opened_at: datetime
    opening_balances: tuple[ChannelOpeningBalance, ...] = ()
    closed_at: Optional[datetime] = None
    counted_balance: Optional[Decimal] = None
    expected_balance: Optional[Decimal] = None
    difference: Optional[Decimal] = None
    totals: Optional[SessionTotals] = None
    channel_counts: tuple[ChannelCount, ...] = field(default=())
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status == SessionStatus.OPEN
