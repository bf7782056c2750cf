"""Amount parsing utilities.

The whole stripped value must be a number: trailing signs ("45.20-") and
repeated separators ("1.2.3") are rejected rather than cut to a numeric prefix.
"""

from decimal import Decimal, InvalidOperation
import re

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def strip_amount(amount_str: str) -> str:
    """Remove every character that is not a digit, a period or a minus sign.

    "$1,234.56" -> "1234.56", "-$45.20 " -> "-45.20"
    """
    return _NON_NUMERIC.sub("", amount_str)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "USD 1 234.56"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If nothing numeric remains or the remainder is not a number
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = strip_amount(amount_str)
    if not cleaned:
        raise ValueError(f"No digits in amount '{amount_str}'")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount
