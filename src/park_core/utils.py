"""Shared date utilities for the reporting engine.

This module provides the date handling used across normalization, filtering
and aggregation:

- Timestamp parsing: lenient parsing of backend date values into naive
  local datetimes
- Day arithmetic: inclusive day spans and end-of-day bounds
- Month arithmetic: calendar month spans for per-month rates

Examples:
    >>> from datetime import date
    >>> from park_core.utils import days_inclusive, month_span
    >>> days_inclusive(date(2025, 1, 1), date(2025, 1, 10))
    10
    >>> month_span(date(2025, 1, 15), date(2025, 3, 2))
    3

"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

import pandas as pd

# Values missing a date sort and compare as the epoch
EPOCH = datetime(1970, 1, 1)

# Inclusive end-of-day bound (23:59:59.999)
END_OF_DAY = time(23, 59, 59, 999000)


def parse_date(s: str) -> date:
    """Parse a date string in YYYY-MM-DD format.

    Args:
        s: Date string in ISO format (YYYY-MM-DD).

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the date string is not in YYYY-MM-DD format.

    Examples:
        >>> parse_date("2025-01-15")
        datetime.date(2025, 1, 15)

    """
    return datetime.strptime(s, "%Y-%m-%d").date()


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a backend date value into a naive local datetime.

    Accepts datetime/date objects, ISO strings (with or without time and
    offset) and pandas Timestamps. Timezone-aware values are converted to the
    local timezone and made naive, so that calendar-day and calendar-month
    arithmetic follows local-date semantics.

    Args:
        value: Raw date value from a source record.

    Returns:
        Naive datetime, or None when the value is missing or unparsable.

    Examples:
        >>> parse_timestamp("2025-01-15T10:30:00")
        datetime.datetime(2025, 1, 15, 10, 30)
        >>> parse_timestamp("not a date") is None
        True

    """
    if value is None or value == "":
        return None
    if not isinstance(value, (str, date)):
        return None
    if isinstance(value, datetime):
        ts = pd.Timestamp(value)
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    else:
        ts = pd.to_datetime(value, errors="coerce")

    if ts is None or pd.isna(ts):
        return None

    result = ts.to_pydatetime()
    if result.tzinfo is not None:
        result = result.astimezone().replace(tzinfo=None)
    return result


def as_date(value: date | datetime) -> date:
    """Return the calendar date of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_day(d: date | datetime) -> datetime:
    """Return midnight of the given calendar day."""
    return datetime.combine(as_date(d), time.min)


def end_of_day(d: date | datetime) -> datetime:
    """Return 23:59:59.999 of the given calendar day.

    Used as the inclusive upper bound of date-range filters so that records
    later on the end day are not excluded by a truncated time component.
    """
    return datetime.combine(as_date(d), END_OF_DAY)


def days_inclusive(start: date | datetime, end: date | datetime) -> int:
    """Count whole calendar days from start to end, both inclusive.

    Returns 0 or a negative number when end precedes start; callers treat a
    non-positive span as "not applicable".
    """
    return (as_date(end) - as_date(start)).days + 1


def month_span(first: date | datetime, last: date | datetime) -> int:
    """Count calendar months touched between two dates, both inclusive.

    ``(year difference * 12 + month difference) + 1``. January to March of
    the same year spans 3 months; two dates in the same month span 1.
    """
    return (last.year - first.year) * 12 + (last.month - first.month) + 1

