"""Report cache keyed by snapshot identity.

Because :func:`~ledger_dashboard.aggregate.aggregate` is pure, a report can be
reused whenever the same snapshot is aggregated over the same interval with
the same settings. This module provides:

- ``compute_snapshot_id``: a stable SHA-256 over the canonical JSON form of
  those three inputs (entry order included, since it breaks ties).
- ``ReportCache``: a small thread-safe LRU of ``DashboardReport`` values.

Nothing is written to disk: reports are ephemeral and recomputed whenever the
snapshot changes.
"""

from __future__ import annotations

import hashlib
import json
import threading
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from .config import EngineSettings
from .logging_setup import get_logger
from .models import DashboardReport, Known, LedgerEntry, LedgerSnapshot, ResolvedInterval

# Bump when the canonical payload shape below changes.
SCHEMA_VERSION: int = 1

_logger = get_logger("ledger_dashboard.cache")


def _entry_payload(e: LedgerEntry) -> list[Any]:
    cat: list[Any] | None = None
    if isinstance(e.category, Known):
        c = e.category.category
        cat = [c.id, c.name, c.kind.value, c.color]
    return [e.id, str(e.amount), e.occurred_on.isoformat(), e.note, cat]


def compute_snapshot_id(
    snapshot: LedgerSnapshot,
    interval: ResolvedInterval,
    settings: EngineSettings,
) -> str:
    """Return a 64-char hex digest identifying one aggregation's inputs."""

    payload: dict[str, object] = {
        "schema_version": SCHEMA_VERSION,
        "interval": [
            interval.start.isoformat() if interval.start else None,
            interval.end.isoformat(),
            interval.granularity.value,
        ],
        "settings": {
            "recent_limit": settings.recent_limit,
            "palette": list(settings.palette),
            "count_uncategorized_as_spend": settings.count_uncategorized_as_spend,
            "month_names": list(settings.month_names),
        },
        "skipped_rows": snapshot.skipped_rows,
        "entries": [_entry_payload(e) for e in snapshot.entries],
    }
    s = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


class ReportCache:
    """Bounded LRU mapping snapshot ids to reports.

    ``max_entries == 0`` disables caching (every lookup misses and nothing is
    stored).
    """

    def __init__(self, max_entries: int = 32) -> None:
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self._max = max_entries
        self._items: OrderedDict[str, DashboardReport] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def get(self, key: str) -> DashboardReport | None:
        with self._lock:
            report = self._items.get(key)
            if report is None:
                self.misses += 1
                return None
            self._items.move_to_end(key)
            self.hits += 1
            return report

    def put(self, key: str, report: DashboardReport) -> None:
        if self._max == 0:
            return
        with self._lock:
            self._items[key] = report
            self._items.move_to_end(key)
            while len(self._items) > self._max:
                evicted, _ = self._items.popitem(last=False)
                _logger.debug("Evicted cached report %s", evicted[:12])

    def get_or_compute(self, key: str, compute: Callable[[], DashboardReport]) -> DashboardReport:
        """Return the cached report for ``key`` or compute and store it."""

        cached = self.get(key)
        if cached is not None:
            _logger.debug("Report cache hit %s", key[:12])
            return cached
        report = compute()
        self.put(key, report)
        return report

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


__all__ = ["SCHEMA_VERSION", "ReportCache", "compute_snapshot_id"]
