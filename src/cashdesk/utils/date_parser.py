"""Date parsing utilities for history filters."""

from datetime import date, timedelta
from typing import Callable, Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("today", "this-week", "this-month", "this-year", "last-week", "last-month", "last-year")


def _week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def _month_start(day: date) -> date:
    return day.replace(day=1)


def _year_start(day: date) -> date:
    return day.replace(month=1, day=1)


_PERIOD_RANGES: dict[str, Callable[[date], tuple[date, date]]] = {
    "today": lambda today: (today, today),
    "this-week": lambda today: (_week_start(today), today),
    "this-month": lambda today: (_month_start(today), today),
    "this-year": lambda today: (_year_start(today), today),
    "last-week": lambda today: (
        _week_start(today) - timedelta(days=7),
        _week_start(today) - timedelta(days=1),
    ),
    "last-month": lambda today: (
        _month_start(today) - relativedelta(months=1),
        _month_start(today) - timedelta(days=1),
    ),
    "last-year": lambda today: (
        _year_start(today) - relativedelta(years=1),
        _year_start(today) - timedelta(days=1),
    ),
}


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "Jan 15 2024") and the relative
    words "today", "yesterday" and "this/last week|month|year" (the first day
    of that period).

    Args:
        date_str: Date string
        today: Reference day, defaults to the current date

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    today = today or date.today()
    text = date_str.strip().lower()

    if text == "today":
        return today
    if text == "yesterday":
        return today - timedelta(days=1)

    period = text.replace(" ", "-")
    if period in _PERIOD_RANGES and period != "today":
        return _PERIOD_RANGES[period](today)[0]

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates (inclusive) for a named period.

    Raises:
        ValueError: If period string is not recognized
    """
    today = today or date.today()
    key = period.strip().lower()
    if key not in _PERIOD_RANGES:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
    return _PERIOD_RANGES[key](today)
