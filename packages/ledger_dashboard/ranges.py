"""Range selector resolution.

Maps a :class:`~ledger_dashboard.models.RangeSelector` and a reference date to
a concrete :class:`~ledger_dashboard.models.ResolvedInterval`. The reference
date is always passed in by the caller; nothing here reads the clock.
"""

from __future__ import annotations

from datetime import date, timedelta

from .calendar_math import subtract_months
from .models import Granularity, RangeSelector, ResolvedInterval

# selector -> (days back, calendar months back, granularity). Exactly one of
# the two offsets is set for bounded ranges; ALL has neither.
_RULES: dict[RangeSelector, tuple[int | None, int | None, Granularity]] = {
    RangeSelector.WEEK: (6, None, Granularity.DAY),
    RangeSelector.MONTH: (None, 1, Granularity.DAY),
    RangeSelector.QUARTER: (None, 3, Granularity.WEEK),
    RangeSelector.HALF_YEAR: (None, 6, Granularity.WEEK),
    RangeSelector.YEAR: (None, 12, Granularity.MONTH),
    RangeSelector.ALL: (None, None, Granularity.MONTH),
}


def parse_selector(value: RangeSelector | str) -> RangeSelector:
    """Coerce ``value`` to a :class:`RangeSelector` (case-insensitive)."""

    if isinstance(value, RangeSelector):
        return value
    try:
        return RangeSelector(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(s.value for s in RangeSelector)
        raise ValueError(f"Unknown range selector {value!r}; expected one of: {allowed}") from None


def resolve_range(selector: RangeSelector | str, *, today: date) -> ResolvedInterval:
    """Resolve ``selector`` into an interval ending on ``today``.

    | selector | start                     | granularity |
    |----------|---------------------------|-------------|
    | 1W       | today - 6 days            | day         |
    | 1M       | today - 1 calendar month  | day         |
    | 3M       | today - 3 calendar months | week        |
    | 6M       | today - 6 calendar months | week        |
    | 1Y       | today - 12 calendar months| month       |
    | ALL      | unbounded                 | month       |

    Calendar-month offsets clamp the day-of-month (see
    :func:`~ledger_dashboard.calendar_math.subtract_months`).
    """

    sel = parse_selector(selector)
    days_back, months_back, granularity = _RULES[sel]

    start: date | None
    if days_back is not None:
        start = today - timedelta(days=days_back)
    elif months_back is not None:
        start = subtract_months(today, months_back)
    else:
        start = None

    return ResolvedInterval(start=start, end=today, granularity=granularity)


__all__ = ["parse_selector", "resolve_range"]
