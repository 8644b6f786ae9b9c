"""Public API for the ``ledger_dashboard`` package.

These functions wire the pure pieces together:

- :func:`report_for_snapshot`: aggregate an already-parsed snapshot, optionally
  through a :class:`~ledger_dashboard.cache.ReportCache`.
- :func:`build_report`: resolve a range selector, validate raw rows and
  aggregate them (used for CSV exports and for callers that fetch rows
  themselves).
- :func:`report_from_store`: the same, reading rows from the SQL store via
  :mod:`ledger_dashboard.persistence`.

``today`` is always an explicit argument; nothing in this module reads the
clock.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from .aggregate import aggregate
from .cache import ReportCache, compute_snapshot_id
from .config import EngineSettings
from .models import DashboardReport, LedgerSnapshot, RangeSelector, ResolvedInterval
from .ranges import resolve_range
from .snapshot import parse_rows


def report_for_snapshot(
    snapshot: LedgerSnapshot,
    interval: ResolvedInterval,
    *,
    settings: EngineSettings | None = None,
    cache: ReportCache | None = None,
) -> DashboardReport:
    """Aggregate ``snapshot`` over ``interval``, reusing a cached report when possible."""

    cfg = settings or EngineSettings()
    if cache is None:
        return aggregate(snapshot, interval, settings=cfg)
    key = compute_snapshot_id(snapshot, interval, cfg)
    return cache.get_or_compute(key, lambda: aggregate(snapshot, interval, settings=cfg))


def build_report(
    rows: Iterable[Mapping[str, Any]],
    selector: RangeSelector | str,
    *,
    today: date,
    settings: EngineSettings | None = None,
    cache: ReportCache | None = None,
) -> DashboardReport:
    """Build the dashboard report for ``selector`` from raw ``rows``.

    Rows may cover more than the selected range; entries outside the resolved
    interval are ignored by the aggregation.
    """

    interval = resolve_range(selector, today=today)
    return report_for_snapshot(parse_rows(rows), interval, settings=settings, cache=cache)


def report_from_store(
    selector: RangeSelector | str,
    *,
    today: date,
    database_url: str | None = None,
    settings: EngineSettings | None = None,
    cache: ReportCache | None = None,
) -> DashboardReport:
    """Fetch the selected range from the SQL store and aggregate it.

    Raises :class:`~ledger_dashboard.persistence.SnapshotFetchError` when the
    store cannot be read.
    """

    # Local import keeps SQLAlchemy/db off the import path of pure callers.
    from .persistence import load_snapshot

    interval = resolve_range(selector, today=today)
    snapshot = load_snapshot(interval, database_url=database_url)
    return report_for_snapshot(snapshot, interval, settings=settings, cache=cache)


__all__ = ["build_report", "report_for_snapshot", "report_from_store"]
