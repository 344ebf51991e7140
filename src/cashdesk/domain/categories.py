"""Operation category table and channel-effect classification.

Two independent lookups live here:

- ``CATEGORIES``: cash-drawer metadata (income/expense, required fields).
- ``CHANNEL_EFFECTS``: how an operation moves the business's own balance at
  the channel (bank side). A withdrawal is an expense for the drawer but
  increases the bank-side balance, so neither table is derived from the
  other.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from cashdesk.domain.entities import (
    CategoryConfig,
    CommissionDirection,
    OperationCategory,
    TransactionType,
)


class ChannelEffect(str, Enum):
    """Effect of an operation category on a channel balance."""

    INCREASES = "increases"
    DECREASES = "decreases"
    NEUTRAL = "neutral"


CATEGORIES: tuple[CategoryConfig, ...] = (
    CategoryConfig(
        id=OperationCategory.DEPOSIT,
        name="Bank Deposit",
        short_name="Deposit",
        type=TransactionType.INCOME,
        requires_channel=True,
        requires_reference=True,
        icon="arrow.down.circle.fill",
        color="#34C759",
    ),
    CategoryConfig(
        id=OperationCategory.WITHDRAWAL,
        name="Bank Withdrawal",
        short_name="Withdrawal",
        type=TransactionType.EXPENSE,
        requires_channel=True,
        requires_reference=True,
        icon="arrow.up.circle.fill",
        color="#FF3B30",
    ),
    CategoryConfig(
        id=OperationCategory.BILL_PAYMENT,
        name="Bill Payment",
        short_name="Bills",
        type=TransactionType.INCOME,
        requires_channel=False,
        requires_reference=True,
        icon="doc.text.fill",
        color="#007AFF",
    ),
    CategoryConfig(
        id=OperationCategory.PHONE_TOPUP,
        name="Phone Top-up",
        short_name="Top-up",
        type=TransactionType.INCOME,
        requires_channel=False,
        requires_reference=False,
        icon="phone.fill",
        color="#5856D6",
    ),
    CategoryConfig(
        id=OperationCategory.MONEY_ORDER_SENT,
        name="Money Order Sent",
        short_name="MO Sent",
        type=TransactionType.INCOME,
        requires_channel=False,
        requires_reference=True,
        icon="paperplane.fill",
        color="#FF9500",
    ),
    CategoryConfig(
        id=OperationCategory.MONEY_ORDER_RECEIVED,
        name="Money Order Received",
        short_name="MO Recv.",
        type=TransactionType.EXPENSE,
        requires_channel=False,
        requires_reference=True,
        icon="tray.and.arrow.down.fill",
        color="#FF9500",
    ),
    CategoryConfig(
        id=OperationCategory.OTHER_INCOME,
        name="Other Income",
        short_name="Other +",
        type=TransactionType.INCOME,
        requires_channel=False,
        requires_reference=False,
        icon="plus.circle.fill",
        color="#34C759",
    ),
    CategoryConfig(
        id=OperationCategory.OTHER_EXPENSE,
        name="Other Expense",
        short_name="Other -",
        type=TransactionType.EXPENSE,
        requires_channel=False,
        requires_reference=False,
        icon="minus.circle.fill",
        color="#FF3B30",
    ),
)

_CATEGORY_INDEX = {config.id: config for config in CATEGORIES}

CHANNEL_EFFECTS: Mapping[OperationCategory, ChannelEffect] = MappingProxyType(
    {
        # Client takes cash out; the business is credited at the channel.
        OperationCategory.WITHDRAWAL: ChannelEffect.INCREASES,
        OperationCategory.MONEY_ORDER_RECEIVED: ChannelEffect.INCREASES,
        # Client hands over cash; the business pays out at the channel.
        OperationCategory.DEPOSIT: ChannelEffect.DECREASES,
        OperationCategory.BILL_PAYMENT: ChannelEffect.DECREASES,
        OperationCategory.PHONE_TOPUP: ChannelEffect.DECREASES,
    }
)


def get_category(category: OperationCategory | str) -> Optional[CategoryConfig]:
    """Get category metadata by ID.

    Args:
        category: Category enum member or its string value

    Returns:
        CategoryConfig or None if the ID is unknown
    """
    try:
        return _CATEGORY_INDEX[OperationCategory(category)]
    except ValueError:
        return None


def categories_by_type(transaction_type: TransactionType) -> list[CategoryConfig]:
    """List categories of one cash-drawer type, in table order."""
    return [config for config in CATEGORIES if config.type == transaction_type]


def channel_effect(
    category: OperationCategory,
    effects: Mapping[OperationCategory, ChannelEffect] = CHANNEL_EFFECTS,
) -> ChannelEffect:
    """Classify a category against a channel balance; unknown is neutral."""
    return effects.get(category, ChannelEffect.NEUTRAL)


def commission_direction_for(category: OperationCategory) -> CommissionDirection:
    """Map a category to the fee-schedule axis used to price it.

    Income operations are priced as deposits, expense operations as
    withdrawals.
    """
    config = _CATEGORY_INDEX[category]
    if config.type == TransactionType.INCOME:
        return CommissionDirection.DEPOSIT
    return CommissionDirection.WITHDRAWAL
