"""Date parsing utilities."""

import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Pattern tokens used in institution maps (e.g. "MM/dd/yyyy") and their
# strptime equivalents. Longer tokens must be tried first.
_FORMAT_TOKENS = {
    "yyyy": "%Y",
    "MMMM": "%B",
    "MMM": "%b",
    "yy": "%y",
    "MM": "%m",
    "dd": "%d",
    "HH": "%H",
    "mm": "%M",
    "ss": "%S",
    "M": "%m",
    "d": "%d",
    "H": "%H",
}
_TOKEN_RE = re.compile("|".join(sorted(_FORMAT_TOKENS, key=len, reverse=True)))


def translate_date_format(pattern: str) -> str:
    """Translate an institution date pattern into a strptime format.

    Patterns that already contain ``%`` directives are returned unchanged.

    Examples:
        "MM/dd/yyyy" -> "%m/%d/%Y"
        "yyyy-MM-dd" -> "%Y-%m-%d"
        "dd MMM yyyy" -> "%d %b %Y"
    """
    if "%" in pattern:
        return pattern
    return _TOKEN_RE.sub(lambda m: _FORMAT_TOKENS[m.group(0)], pattern)


def parse_date(date_str: str, pattern: Optional[str] = None) -> date:
    """Parse a date string into a date object.

    With a pattern the string must match it exactly, so impossible dates
    such as "01/32/2024" are rejected. Without one the string is parsed
    leniently.

    Args:
        date_str: Date string from a statement
        pattern: Optional institution date pattern (see translate_date_format)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip()
    if not date_str:
        raise ValueError("Empty date string")

    if pattern:
        try:
            return datetime.strptime(date_str, translate_date_format(pattern)).date()
        except ValueError as e:
            raise ValueError(f"Could not parse date '{date_str}' with format '{pattern}': {e}")

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_month_range(month: str) -> tuple[date, date]:
    """Get start and end dates for a month given as "YYYY-MM".

    Returns:
        Tuple of (first_day, first_day_of_next_month); the end is exclusive

    Raises:
        ValueError: If month string is not in YYYY-MM form
    """
    month = month.strip()
    if not re.fullmatch(r"\d{4}-\d{2}", month):
        raise ValueError(f"Invalid month '{month}'. Expected YYYY-MM")
    try:
        start_date = datetime.strptime(month, "%Y-%m").date()
    except ValueError:
        raise ValueError(f"Invalid month '{month}'. Expected YYYY-MM")
    return (start_date, start_date + relativedelta(months=1))
