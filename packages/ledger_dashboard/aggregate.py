"""Single-pass aggregation of a ledger snapshot into dashboard views.

``aggregate`` walks the entries once and fills every view at the same time:

- KPI summary (spend, count, top category, average per day),
- the sparse bucketed spending series,
- the per-category breakdown with resolved colours,
- the recent-activity list,
- income/expense cash-flow totals.

Only expense entries feed the spend views. Every entry inside the interval,
income and uncategorized included, counts toward ``transaction_count`` and can
appear in the recent list. The function keeps no state between calls: colour
assignment uses a fresh :class:`~ledger_dashboard.colors.ColorAssigner` so the
same snapshot always yields an identical report.
"""

from __future__ import annotations

import heapq
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from .buckets import bucket_key
from .calendar_math import inclusive_days
from .colors import ColorAssigner
from .config import EngineSettings
from .logging_setup import get_logger
from .models import (
    Bucket,
    BucketKey,
    CashFlowTotals,
    CategoryRef,
    CategoryShare,
    DashboardReport,
    KpiSummary,
    Known,
    LedgerEntry,
    LedgerSnapshot,
    ResolvedInterval,
    Uncategorized,
)

_logger = get_logger("ledger_dashboard.aggregate")

NO_TOP_CATEGORY = "—"
UNCATEGORIZED_NAME = "Uncategorized"
# Internal key for the synthetic share; prefixed so it cannot collide with a
# store id.
_UNCATEGORIZED_KEY = "__uncategorized__"

_ZERO = Decimal(0)
_CENT = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class _SpendSlot:
    key: str
    category_id: str | None
    name: str
    stored_color: str | None


def _spend_slot(ref: CategoryRef, *, count_uncategorized: bool) -> _SpendSlot | None:
    """Where an entry's amount lands in the spend views, or ``None`` if nowhere."""

    match ref:
        case Known(category=cat) if cat.is_expense:
            return _SpendSlot(cat.id, cat.id, cat.name, cat.color)
        case Uncategorized() if count_uncategorized:
            return _SpendSlot(_UNCATEGORIZED_KEY, None, UNCATEGORIZED_NAME, None)
    return None


def _is_income(ref: CategoryRef) -> bool:
    match ref:
        case Known(category=cat):
            return not cat.is_expense
    return False


def aggregate(
    snapshot: LedgerSnapshot | Iterable[LedgerEntry],
    interval: ResolvedInterval,
    *,
    settings: EngineSettings | None = None,
) -> DashboardReport:
    """Compute every dashboard view for ``snapshot`` within ``interval``.

    Parameters
    ----------
    snapshot:
        A :class:`LedgerSnapshot` (its ``skipped_rows`` count is carried into
        the report) or any iterable of entries. Order does not matter for
        correctness; it only breaks ties for the top category and the recent
        list.
    interval:
        The resolved reporting window. Entries outside it are ignored; an
        inverted interval (start after end) is treated as empty.
    settings:
        Engine settings; defaults to :class:`EngineSettings()` (not the
        environment, to keep the function pure).
    """

    cfg = settings or EngineSettings()
    if isinstance(snapshot, LedgerSnapshot):
        entries, skipped_rows = snapshot.entries, snapshot.skipped_rows
    else:
        entries, skipped_rows = tuple(snapshot), 0

    if interval.is_inverted:
        _logger.debug(
            "Interval %s..%s is inverted; treating it as empty", interval.start, interval.end
        )

    colors = ColorAssigner(cfg.palette)
    total_spend = _ZERO
    income = _ZERO
    count = 0
    outside = 0
    earliest: date | None = None

    bucket_keys: dict[str, BucketKey] = {}
    bucket_totals: dict[str, Decimal] = {}
    share_slots: dict[str, tuple[_SpendSlot, str]] = {}
    share_totals: dict[str, Decimal] = {}
    top_key: str | None = None
    top_total: Decimal | None = None
    in_range: list[tuple[int, LedgerEntry]] = []

    for pos, entry in enumerate(entries):
        if interval.is_inverted or not interval.contains(entry.occurred_on):
            outside += 1
            continue

        count += 1
        in_range.append((pos, entry))
        if earliest is None or entry.occurred_on < earliest:
            earliest = entry.occurred_on

        slot = _spend_slot(entry.category, count_uncategorized=cfg.count_uncategorized_as_spend)
        if slot is None:
            if _is_income(entry.category):
                income += entry.amount
            continue

        total_spend += entry.amount

        bk = bucket_key(entry.occurred_on, interval.granularity, month_names=cfg.month_names)
        bucket_keys.setdefault(bk.key, bk)
        bucket_totals[bk.key] = bucket_totals.get(bk.key, _ZERO) + entry.amount

        if slot.key not in share_slots:
            share_slots[slot.key] = (slot, colors.color_for(slot.key, slot.stored_color))
        running = share_totals.get(slot.key, _ZERO) + entry.amount
        share_totals[slot.key] = running

        # Strictly greater: the first category to reach the maximum keeps it.
        if top_total is None or running > top_total:
            top_key, top_total = slot.key, running

    if outside:
        _logger.debug("Ignored %d entr(ies) outside %s..%s", outside, interval.start, interval.end)

    series = tuple(
        Bucket(key=k.key, label=k.label, sort_key=k.sort_key, total=bucket_totals[k.key])
        for k in sorted(bucket_keys.values(), key=lambda b: b.sort_key)
    )
    breakdown = tuple(
        CategoryShare(
            category_id=slot.category_id,
            category_name=slot.name,
            color=color,
            total=share_totals[key],
        )
        for key, (slot, color) in share_slots.items()
    )

    period_start = interval.start if interval.start is not None else earliest
    elapsed = inclusive_days(period_start, interval.end) if period_start is not None else 1
    average = (total_spend / max(1, elapsed)).quantize(_CENT, rounding=ROUND_HALF_UP)

    kpis = KpiSummary(
        total_spend=total_spend,
        transaction_count=count,
        top_category_name=share_slots[top_key][0].name if top_key is not None else NO_TOP_CATEGORY,
        average_per_day=average,
    )

    recent = tuple(
        entry
        for _pos, entry in heapq.nlargest(
            cfg.recent_limit, in_range, key=lambda p: (p[1].occurred_on, p[0])
        )
    )

    _logger.debug(
        "Aggregated %d entr(ies): spend=%s buckets=%d categories=%d",
        count,
        total_spend,
        len(series),
        len(breakdown),
    )

    return DashboardReport(
        interval=interval,
        kpis=kpis,
        series=series,
        breakdown=breakdown,
        recent=recent,
        cash_flow=CashFlowTotals(income=income, expense=total_spend),
        skipped_rows=skipped_rows,
    )


__all__ = ["NO_TOP_CATEGORY", "UNCATEGORIZED_NAME", "aggregate"]
