"""Commission engine.

Pure functions: every call computes from its arguments alone. Amount sign is
not validated here; rejecting non-positive amounts is the caller's job.
"""

from decimal import Decimal
from typing import Iterable, Optional

from cashdesk.domain.entities import (
    ZERO,
    Channel,
    CommissionDirection,
    FeeMode,
    FeeSchedule,
    FeeTier,
    FlatFees,
    UNBOUNDED,
)

DEFAULT_FLAT_FEES = FlatFees(deposit_fee=Decimal("0.50"), withdrawal_fee=Decimal("0.50"))

DEFAULT_TIERS: tuple[FeeTier, ...] = (
    FeeTier("r1", Decimal("0"), Decimal("100"), Decimal("0.25"), Decimal("0.25")),
    FeeTier("r2", Decimal("100"), Decimal("200"), Decimal("0.50"), Decimal("0.50")),
    FeeTier("r3", Decimal("200"), Decimal("500"), Decimal("0.75"), Decimal("0.75")),
    FeeTier("r4", Decimal("500"), Decimal("1000"), Decimal("1.00"), Decimal("1.00")),
    FeeTier("r5", Decimal("1000"), UNBOUNDED, Decimal("1.50"), Decimal("1.50")),
)

DEFAULT_FEE_SCHEDULE = FeeSchedule(
    mode=FeeMode.FLAT, flat=DEFAULT_FLAT_FEES, tiers=DEFAULT_TIERS
)


def tier_matches(tier: FeeTier, amount: Decimal) -> bool:
    """Return True if ``amount`` falls in ``[min_amount, max_amount)``."""
    if amount < tier.min_amount:
        return False
    return tier.unbounded or amount < tier.max_amount


def find_tier(tiers: Iterable[FeeTier], amount: Decimal) -> Optional[FeeTier]:
    """Return the first tier containing ``amount``, in the order given."""
    for tier in tiers:
        if tier_matches(tier, amount):
            return tier
    return None


def calculate_commission(
    amount: Decimal, direction: CommissionDirection, schedule: FeeSchedule
) -> Decimal:
    """Calculate the commission to charge for an operation.

    Args:
        amount: Operation amount
        direction: Fee-schedule axis (deposit or withdrawal)
        schedule: Flat or tiered fee schedule

    Returns:
        Commission amount; ``0`` when no tier matches
    """
    if schedule.mode == FeeMode.FLAT:
        if direction == CommissionDirection.DEPOSIT:
            return schedule.flat.deposit_fee
        return schedule.flat.withdrawal_fee

    if schedule.mode != FeeMode.TIERED:
        return ZERO

    tier = find_tier(schedule.tiers, amount)
    if tier is None:
        return ZERO
    if direction == CommissionDirection.DEPOSIT:
        return tier.deposit_fee
    return tier.withdrawal_fee


def resolve_fee_schedule(
    channel: Optional[Channel], default_schedule: FeeSchedule
) -> FeeSchedule:
    """Pick the schedule that applies to an operation on ``channel``."""
    if channel is not None and channel.use_custom_fees and channel.fee_schedule is not None:
        return channel.fee_schedule
    return default_schedule


def commission_for_channel(
    amount: Decimal,
    direction: CommissionDirection,
    channel: Optional[Channel],
    default_schedule: FeeSchedule,
) -> Decimal:
    """Calculate a commission using the channel's schedule or the default one."""
    schedule = resolve_fee_schedule(channel, default_schedule)
    return calculate_commission(amount, direction, schedule)


def sort_tiers(tiers: Iterable[FeeTier]) -> tuple[FeeTier, ...]:
    """Order tiers by lower bound, the convention used when editing them."""
    return tuple(sorted(tiers, key=lambda tier: tier.min_amount))
