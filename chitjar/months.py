"""
Month-key helpers.

Funds and their monthly entries are keyed by ``YYYY-MM`` strings. These
helpers convert between month keys and dates and walk month ranges.
"""

import re
from datetime import date, datetime
from typing import List, Optional

from dateutil.relativedelta import relativedelta

MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")
MIN_YEAR = 1900
MAX_YEAR = 2100


def parse_month_key(value) -> date:
    """
    Parse a month key into the first day of that month.

    Args:
        value: ``YYYY-MM`` string, or a date/datetime (day is dropped).

    Returns:
        Date for the 1st of the month.

    Raises:
        ValueError: If the value is not a valid month key.
    """
    if isinstance(value, datetime):
        return value.date().replace(day=1)
    if isinstance(value, date):
        return value.replace(day=1)
    if not isinstance(value, str):
        raise ValueError(f"Invalid month key: {value!r}")

    match = MONTH_KEY_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid month key: {value!r}")

    year, month = int(match.group(1)), int(match.group(2))
    if not (MIN_YEAR <= year <= MAX_YEAR) or not (1 <= month <= 12):
        raise ValueError(f"Invalid month key: {value!r}")
    return date(year, month, 1)


def is_valid_month_key(value) -> bool:
    """Check whether a value parses as a month key."""
    try:
        parse_month_key(value)
    except ValueError:
        return False
    return True


def to_month_key(d: date) -> str:
    """Format a date as its ``YYYY-MM`` month key."""
    return f"{d.year:04d}-{d.month:02d}"


def normalize_month_key(value) -> str:
    """Parse and re-format, e.g. ``' 2024-01 '`` -> ``'2024-01'``."""
    return to_month_key(parse_month_key(value))


def add_months(month_key: str, count: int) -> str:
    """Shift a month key by ``count`` months (may be negative)."""
    return to_month_key(parse_month_key(month_key) + relativedelta(months=count))


def months_between(start_key: str, end_key: str) -> int:
    """Number of months from start to end (end - start), signed."""
    delta = relativedelta(parse_month_key(end_key), parse_month_key(start_key))
    return delta.years * 12 + delta.months


def month_range(start_key: str, end_key: str) -> List[str]:
    """
    All month keys from start through end, inclusive.

    Returns an empty list when start is after end.
    """
    count = months_between(start_key, end_key)
    if count < 0:
        return []
    start = parse_month_key(start_key)
    return [to_month_key(start + relativedelta(months=i)) for i in range(count + 1)]


def latest_month_key(keys) -> Optional[str]:
    """Latest month key in an iterable, or None if empty."""
    keys = list(keys)
    if not keys:
        return None
    return max(keys, key=parse_month_key)
