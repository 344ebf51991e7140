"""Closed-session history grouping and statistics."""

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from cashdesk.domain.entities import ZERO, CashSession


@dataclass(frozen=True)
class HistorySummary:
    """Totals over a set of closed sessions."""

    session_count: int
    commission_total: Decimal
    income_total: Decimal
    expense_total: Decimal
    difference_total: Decimal

    @property
    def average_commission(self) -> Decimal:
        """Commission earned per closed session."""
        if self.session_count == 0:
            return ZERO
        return self.commission_total / self.session_count


def group_sessions_by_day(sessions: Sequence[CashSession]) -> dict[str, list[CashSession]]:
    """Group sessions by close date (``YYYY-MM-DD``).

    Sessions that were never closed are skipped.
    """
    groups: dict[str, list[CashSession]] = defaultdict(list)
    for session in sessions:
        if session.closed_at is None:
            continue
        groups[session.closed_at.strftime("%Y-%m-%d")].append(session)
    return dict(groups)


def group_sessions_by_month(sessions: Sequence[CashSession]) -> dict[str, list[CashSession]]:
    """Group sessions by close month (``YYYY-MM``)."""
    groups: dict[str, list[CashSession]] = defaultdict(list)
    for session in sessions:
        if session.closed_at is None:
            continue
        groups[session.closed_at.strftime("%Y-%m")].append(session)
    return dict(groups)


def summarize_sessions(sessions: Sequence[CashSession]) -> HistorySummary:
    """Sum stored close totals over closed sessions."""
    count = 0
    commissions = income = expense = differences = ZERO

    for session in sessions:
        if session.closed_at is None:
            continue
        count += 1
        if session.totals is not None:
            commissions += session.totals.commission_total
            income += session.totals.income_total
            expense += session.totals.expense_total
        if session.difference is not None:
            differences += session.difference

    return HistorySummary(
        session_count=count,
        commission_total=commissions,
        income_total=income,
        expense_total=expense,
        difference_total=differences,
    )
