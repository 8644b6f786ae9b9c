"""Calendar arithmetic on bare ``datetime.date`` values.

No timezone handling happens here: dates are calendar values and every helper
is pure.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta


def subtract_months(day: date, months: int) -> date:
    """Return ``day`` moved back by ``months`` calendar months.

    The day-of-month is clamped to the last valid day of the target month, so
    ``subtract_months(date(2024, 3, 31), 1) == date(2024, 2, 29)`` and
    ``subtract_months(date(2023, 3, 31), 1) == date(2023, 2, 28)``.
    Negative ``months`` move forward with the same clamping.
    """

    if isinstance(months, bool) or not isinstance(months, int):
        raise TypeError("months must be an int")

    # Work in a zero-based month index to let divmod handle year rollover.
    index = day.year * 12 + (day.month - 1) - months
    year, month0 = divmod(index, 12)
    if not date.min.year <= year <= date.max.year:
        raise ValueError(f"subtracting {months} months from {day} leaves the supported range")
    month = month0 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def iso_week_anchor(day: date) -> date:
    """Monday of the ISO week containing ``day``."""

    return day - timedelta(days=day.weekday())


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days from ``start`` to ``end`` counting both ends.

    Returns ``0`` when ``start`` is after ``end``.
    """

    return max(0, (end - start).days + 1)


__all__ = ["inclusive_days", "iso_week_anchor", "subtract_months"]
