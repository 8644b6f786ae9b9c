"""Bucket keys for the spending series.

``bucket_key`` is pure and timezone-agnostic: it sees only the calendar date.
Month abbreviations are passed in so callers can localize labels without this
module consulting any process-wide locale.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from .calendar_math import iso_week_anchor
from .models import BucketKey, Granularity

ENGLISH_MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def _month_abbr(month_names: Sequence[str], month: int) -> str:
    if len(month_names) != 12:
        raise ValueError(f"month_names must hold 12 entries, got {len(month_names)}")
    return month_names[month - 1]


def bucket_key(
    day: date,
    granularity: Granularity | str,
    *,
    month_names: Sequence[str] = ENGLISH_MONTH_ABBREVIATIONS,
) -> BucketKey:
    """Return the bucket ``day`` falls into for ``granularity``.

    - ``day``: key ``YYYY-MM-DD``, label ``"Jun 1"``, sort key = ordinal.
    - ``week``: anchored on the Monday of the ISO week; key/label/sort key are
      those of the anchor.
    - ``month``: key ``YYYY-MM``, label ``"Jun 24"``, sort key ``YYYYMM``.
    """

    g = Granularity(granularity)
    if g is Granularity.DAY:
        return BucketKey(
            key=day.isoformat(),
            label=f"{_month_abbr(month_names, day.month)} {day.day}",
            sort_key=day.toordinal(),
        )
    if g is Granularity.WEEK:
        anchor = iso_week_anchor(day)
        return BucketKey(
            key=anchor.isoformat(),
            label=f"{_month_abbr(month_names, anchor.month)} {anchor.day}",
            sort_key=anchor.toordinal(),
        )
    return BucketKey(
        key=f"{day.year:04d}-{day.month:02d}",
        label=f"{_month_abbr(month_names, day.month)} {day.year % 100:02d}",
        sort_key=day.year * 100 + day.month,
    )


__all__ = ["ENGLISH_MONTH_ABBREVIATIONS", "bucket_key"]
