"""Utility functions for cashdesk."""

from cashdesk.utils.amount_parser import (
    is_valid_amount,
    normalize,
    parse_amount,
    parse_amount_or_default,
)
from cashdesk.utils.date_parser import get_date_range, parse_date

__all__ = [
    "normalize",
    "parse_amount",
    "parse_amount_or_default",
    "is_valid_amount",
    "parse_date",
    "get_date_range",
]
