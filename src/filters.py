"""
filters.py - date period filtering of expense rows

The current date is always passed in by the caller so the same rows and the
same period give the same result regardless of when the code runs.
Dates are compared as ISO "YYYY-MM-DD" strings, whose lexical order is the
chronological order.
"""

import calendar
import datetime
from typing import Iterable, List, Optional, Tuple

from src.models import CustomRange, ExpenseRow, FilterPeriod

Bounds = Tuple[Optional[str], Optional[str]]


def subtract_month(d: datetime.date) -> datetime.date:
    """Same day one calendar month earlier, clamped to the length of that month."""
    year, month = (d.year - 1, 12) if d.month == 1 else (d.year, d.month - 1)
    last_day = calendar.monthrange(year, month)[1]
    return datetime.date(year, month, min(d.day, last_day))


def period_bounds(
    period: FilterPeriod,
    today: datetime.date,
    custom_range: Optional[CustomRange] = None,
) -> Bounds:
    """
    Return the inclusive (start, end) ISO bounds of a period.
    (None, None) means no filtering.
    """
    today_iso = today.isoformat()
    if period == FilterPeriod.TODAY:
        return today_iso, today_iso
    if period == FilterPeriod.WEEK:
        return (today - datetime.timedelta(days=7)).isoformat(), today_iso
    if period == FilterPeriod.MONTH:
        return subtract_month(today).isoformat(), today_iso
    if period == FilterPeriod.CUSTOM:
        # a missing bound leaves the rows unfiltered
        if custom_range is not None and custom_range.is_complete:
            return custom_range.start, custom_range.end
    return None, None


def filter_rows(
    rows: Iterable[ExpenseRow],
    period: FilterPeriod,
    today: datetime.date,
    custom_range: Optional[CustomRange] = None,
) -> List[ExpenseRow]:
    """Return the rows whose date falls inside the period, in their original order."""
    start, end = period_bounds(period, today, custom_range)
    if start is None or end is None:
        return list(rows)
    return [r for r in rows if r.date and start <= r.date <= end]
