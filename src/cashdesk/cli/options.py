"""CLI helpers for amount, key=value and fee tier options."""

from decimal import Decimal
from typing import Iterable, Optional

from cashdesk.domain.entities import (
    FeeMode,
    FeeSchedule,
    FeeTier,
    FlatFees,
    UNBOUNDED,
)
from cashdesk.domain.errors import ValidationError
from cashdesk.utils.amount_parser import require_amount


def parse_channel_amounts(values: Iterable[str], field: str) -> dict[str, Decimal]:
    """Parse repeated ``NAME=AMOUNT`` options into a dict."""
    amounts: dict[str, Decimal] = {}
    for value in values:
        name, sep, amount = value.rpartition("=")
        if not sep or not name.strip():
            raise ValidationError(f"Expected CHANNEL=AMOUNT for {field}, got '{value}'")
        amounts[name.strip()] = require_amount(amount, field)
    return amounts


def parse_tier(value: str, index: int) -> FeeTier:
    """Parse ``MIN:MAX:DEPOSIT_FEE:WITHDRAWAL_FEE``; MAX ``*`` means no upper limit."""
    parts = value.split(":")
    if len(parts) != 4:
        raise ValidationError(f"Expected MIN:MAX:DEPOSIT:WITHDRAWAL for --tier, got '{value}'")
    min_str, max_str, deposit_str, withdrawal_str = parts
    max_amount = UNBOUNDED if max_str.strip() == "*" else require_amount(max_str, "tier maximum")
    return FeeTier(
        id=f"r{index}",
        min_amount=require_amount(min_str, "tier minimum"),
        max_amount=max_amount,
        deposit_fee=require_amount(deposit_str, "tier deposit fee"),
        withdrawal_fee=require_amount(withdrawal_str, "tier withdrawal fee"),
    )


def build_fee_schedule(
    base: FeeSchedule,
    mode: Optional[str],
    deposit: Optional[str],
    withdrawal: Optional[str],
    tiers: Iterable[str],
) -> FeeSchedule:
    """Apply CLI edits on top of an existing schedule."""
    flat = FlatFees(
        deposit_fee=require_amount(deposit, "deposit fee") if deposit is not None else base.flat.deposit_fee,
        withdrawal_fee=(
            require_amount(withdrawal, "withdrawal fee")
            if withdrawal is not None
            else base.flat.withdrawal_fee
        ),
    )
    tier_values = list(tiers)
    parsed_tiers = (
        tuple(parse_tier(value, i) for i, value in enumerate(tier_values, start=1))
        if tier_values
        else base.tiers
    )
    return FeeSchedule(
        mode=FeeMode(mode) if mode is not None else base.mode,
        flat=flat,
        tiers=parsed_tiers,
    )


def format_fee_schedule(schedule: FeeSchedule) -> list[str]:
    """Render a schedule as display lines."""
    lines = [f"Mode: {schedule.mode.value}"]
    lines.append(
        f"Flat: deposit ${schedule.flat.deposit_fee:,.2f} | "
        f"withdrawal ${schedule.flat.withdrawal_fee:,.2f}"
    )
    if schedule.tiers:
        lines.append("Tiers:")
        for tier in schedule.tiers:
            upper = "and up" if tier.unbounded else f"to ${tier.max_amount:,.2f}"
            lines.append(
                f"  ${tier.min_amount:,.2f} {upper}: deposit ${tier.deposit_fee:,.2f} | "
                f"withdrawal ${tier.withdrawal_fee:,.2f}"
            )
    return lines
