"""
Single-field validators.

Every function here looks at one value (occasionally a sibling for context)
and answers with a bool or an optional violation message. Nothing in this
module raises for bad input; rule sets in ``rules.py`` decide what to report.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta, timezone
from numbers import Real
from typing import Any, Iterable, Optional

from .schemas import DATE_YYYY_MM_DD_PATTERN, MAX_HISTORICAL_DAYS

_DATE_RE = re.compile(DATE_YYYY_MM_DD_PATTERN)

# Looser shape used only to compare two dates, e.g. "2024-1-5", "2024/05/01",
# "2024-01-05 09:15" or "2024-01-05T09:15:00Z".
_LOOSE_DATE_RE = re.compile(
    r"^(\d{4})([-/])(\d{1,2})\2(\d{1,2})"
    r"(?:[T ](\d{1,2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?)?"
    r"\s*(Z|[+-]\d{2}:?\d{2})?$"
)

_SECONDS_PER_DAY = 24 * 60 * 60


def is_present(value: Any) -> bool:
    """None, empty strings and empty containers count as absent."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) > 0
    return True


def is_number(value: Any) -> bool:
    # bool is an int subclass, but True is not a quantity.
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return not math.isnan(value)


def is_positive_number(value: Any) -> bool:
    return is_number(value) and value > 0


def is_non_negative_number(value: Any) -> bool:
    return is_number(value) and value >= 0


def is_positive_integer(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return value > 0


def is_member(value: Any, allowed: Iterable[str]) -> bool:
    """Exact, case-sensitive membership."""
    return isinstance(value, str) and value in tuple(allowed)


def enum_violation(field: str, value: Any, allowed: Iterable[str]) -> Optional[str]:
    allowed = tuple(allowed)
    if is_member(value, allowed):
        return None
    return f"Invalid {field}. Must be one of: {', '.join(allowed)}"


def is_valid_date(value: Any) -> bool:
    """True for a ``yyyy-MM-dd`` string naming a real calendar date."""
    if not isinstance(value, str) or not _DATE_RE.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def read_datetime(value: Any) -> Optional[datetime]:
    """
    Best-effort read of a date-like value for range comparisons.

    Range checks must still fire when the strict format check fails
    (``2024-1-5`` is readable, just not well formatted), so this accepts
    unpadded parts, ``/`` separators, an optional time of day and a UTC
    offset. Results are naive UTC so any two of them compare. Unreadable
    values give None.
    """
    if isinstance(value, datetime):
        return _as_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    match = _LOOSE_DATE_RE.match(value.strip())
    if not match:
        return None
    year, _sep, month, day, hour, minute, second, offset = match.groups()
    parts = [int(p) if p is not None else 0 for p in (year, month, day, hour, minute, second)]
    try:
        parsed = datetime(*parts)
    except ValueError:
        return None
    if offset and offset != "Z":
        sign = -1 if offset[0] == "-" else 1
        digits = offset[1:].replace(":", "")
        parsed -= sign * timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
    return parsed


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def day_span(from_value: Any, to_value: Any) -> Optional[int]:
    """
    Whole-day length of the range, rounded up.

    A range touching any part of day N+1 counts as N+1 days. Returns None when
    either end cannot be read.
    """
    start = read_datetime(from_value)
    end = read_datetime(to_value)
    if start is None or end is None:
        return None
    return math.ceil((end - start).total_seconds() / _SECONDS_PER_DAY)


def date_range_violation(
    from_value: Any,
    to_value: Any,
    max_days: int = MAX_HISTORICAL_DAYS,
) -> Optional[str]:
    """Order and length check with a specific message for each failure."""
    start = read_datetime(from_value)
    end = read_datetime(to_value)
    if start is None or end is None:
        return None
    if start > end:
        return "fromDate must be before toDate"
    span = day_span(start, end)
    if span is not None and span > max_days:
        return f"Date range cannot exceed {max_days} days"
    return None


def is_date_range_within(
    from_value: Any,
    to_value: Any,
    max_days: int = MAX_HISTORICAL_DAYS,
) -> bool:
    """Pass/fail variant: ordered and no longer than ``max_days`` days."""
    start = read_datetime(from_value)
    end = read_datetime(to_value)
    if start is None or end is None:
        # Unreadable dates are reported by the format checks.
        return True
    if start > end:
        return False
    return (end - start) <= timedelta(days=max_days)
