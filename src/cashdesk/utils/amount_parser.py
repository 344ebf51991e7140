"""Amount parsing utilities.

Amounts typed on a device keyboard may use ``,`` as the decimal separator
depending on the locale. Everything here is total: invalid input is signalled
with ``Decimal("NaN")`` or ``False``, never with an exception.
"""

from decimal import Decimal
import re

from cashdesk.domain.errors import ValidationError, invalid_amount

NAN = Decimal("NaN")

# Longest numeric prefix, the way a lenient float parser reads input.
_NUMBER_PREFIX = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _require_str(value) -> None:
    if not isinstance(value, str):
        raise TypeError(f"Amount input must be a string, got {type(value).__name__}")


def normalize(amount_str: str) -> str:
    """Replace every comma with a period.

    Args:
        amount_str: Raw input

    Returns:
        Input with ``,`` replaced by ``.``
    """
    _require_str(amount_str)
    return amount_str.replace(",", ".")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles:
    - "12.50"
    - "12,50"
    - "-3" (sign is kept; range checks belong to the caller)
    - "12.5abc" (leading number is used, as in "12.5")

    Only ASCII digits are read. "Infinity" and "NaN" are rejected: a cash
    amount is always finite.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount, or ``Decimal("NaN")`` when the input is empty or
        has no leading number
    """
    _require_str(amount_str)
    if not amount_str.strip():
        return NAN

    match = _NUMBER_PREFIX.match(normalize(amount_str).lstrip())
    if match is None:
        return NAN
    return Decimal(match.group(0))


def parse_amount_or_default(amount_str: str, default: Decimal = Decimal("0")) -> Decimal:
    """Parse an amount, substituting ``default`` for invalid input."""
    parsed = parse_amount(amount_str)
    return default if parsed.is_nan() else parsed


def is_valid_amount(amount_str: str) -> bool:
    """Return True if ``parse_amount`` would succeed."""
    return not parse_amount(amount_str).is_nan()


def require_amount(amount_str: str, field: str = "amount") -> Decimal:
    """Parse an amount for a command handler, rejecting invalid input.

    Raises:
        ValidationError: If the amount cannot be parsed
    """
    parsed = parse_amount(amount_str)
    if parsed.is_nan():
        raise ValidationError(invalid_amount(field, amount_str))
    return parsed
