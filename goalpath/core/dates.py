"""Calendar arithmetic on plain ``datetime.date`` values."""

from __future__ import annotations

import datetime as dt


def months_between(start: dt.date, end: dt.date) -> int:
    """Whole calendar months from ``start`` to ``end`` (day of month ignored)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def same_month(a: dt.date, b: dt.date) -> bool:
    return a.year == b.year and a.month == b.month


def add_years(day: dt.date, years: int) -> dt.date:
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        # 29 February in a non-leap target year rolls over to 1 March
        return day.replace(year=day.year + years, month=3, day=1)


def days_between(start: dt.date, end: dt.date) -> float:
    """Fractional days between two dates or datetimes."""
    return (_as_datetime(end) - _as_datetime(start)).total_seconds() / 86400.0


def _as_datetime(value: dt.date) -> dt.datetime:
    if isinstance(value, dt.datetime):
        return value.replace(tzinfo=None)
    return dt.datetime(value.year, value.month, value.day)


__all__ = ["months_between", "same_month", "add_years", "days_between"]
