"""Fetch-and-aggregate cycles with last-request-wins publication.

The engine itself is pure; this module is the thin application-side loop
around it. Each :meth:`DashboardRefresher.request` resolves the selector
against the injected clock, then fetches, parses and aggregates on a worker
thread. A finished cycle is published only if no newer request was issued in
the meantime, so a slow response for an old selector can never overwrite the
report for a newer one. Publication swaps one reference to an immutable
:class:`~ledger_dashboard.models.DashboardReport`, so readers of
:attr:`DashboardRefresher.current` always see a complete report.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import date
from typing import Any

from .api import report_for_snapshot
from .cache import ReportCache
from .config import EngineSettings
from .errors import SnapshotFetchError
from .logging_setup import get_logger
from .models import DashboardReport, RangeSelector, ResolvedInterval
from .ranges import parse_selector, resolve_range
from .snapshot import parse_rows

_logger = get_logger("ledger_dashboard.refresh")

type FetchRows = Callable[[ResolvedInterval], Iterable[Mapping[str, Any]]]


class DashboardRefresher:
    """Run dashboard refresh cycles and keep the latest published report.

    Parameters
    ----------
    fetch:
        Called on a worker thread with the resolved interval; returns the raw
        rows for it. Any exception it raises is reported as a
        :class:`SnapshotFetchError`.
    today:
        Clock used to resolve selectors (``date.today`` by default).
    settings / cache:
        Passed through to the aggregation. Without an explicit cache, one of
        ``settings.cache_size`` entries is created (none when the size is 0).
    on_publish:
        Optional callback invoked with each published report, in publication
        order. It runs while the publication lock is held, so keep it short.
    max_workers:
        Size of the worker pool.
    """

    def __init__(
        self,
        fetch: FetchRows,
        *,
        today: Callable[[], date] = date.today,
        settings: EngineSettings | None = None,
        cache: ReportCache | None = None,
        on_publish: Callable[[DashboardReport], None] | None = None,
        max_workers: int = 2,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be a positive integer")
        self._fetch = fetch
        self._today = today
        self._settings = settings or EngineSettings()
        if cache is None and self._settings.cache_size > 0:
            cache = ReportCache(self._settings.cache_size)
        self._cache = cache
        self._on_publish = on_publish
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ld-refresh")
        self._lock = threading.RLock()
        self._generation = 0
        self._selector: RangeSelector | None = None
        self._pending: Future[DashboardReport | None] | None = None
        self._current: DashboardReport | None = None
        self._last_error: SnapshotFetchError | None = None

    # ---- state -----------------------------------------------------------

    @property
    def current(self) -> DashboardReport | None:
        """The most recently published report (``None`` before the first)."""

        with self._lock:
            return self._current

    @property
    def last_error(self) -> SnapshotFetchError | None:
        """Fetch failure of the latest request, cleared by the next publication."""

        with self._lock:
            return self._last_error

    @property
    def cache(self) -> ReportCache | None:
        return self._cache

    @property
    def selector(self) -> RangeSelector | None:
        with self._lock:
            return self._selector

    # ---- cycles ----------------------------------------------------------

    def request(self, selector: RangeSelector | str) -> Future[DashboardReport | None]:
        """Start a cycle for ``selector`` and supersede any outstanding one.

        The returned future resolves to the published report, or ``None`` if a
        newer request superseded this one before it finished. A superseded
        cycle that has not started yet is cancelled outright.
        """

        sel = parse_selector(selector)
        interval = resolve_range(sel, today=self._today())
        with self._lock:
            self._generation += 1
            gen = self._generation
            self._selector = sel
            stale = self._pending
            fut = self._executor.submit(self._run_cycle, gen, interval)
            self._pending = fut
        if stale is not None and stale.cancel():
            _logger.debug("Cancelled queued refresh superseded by generation %d", gen)
        return fut

    def invalidate(self) -> Future[DashboardReport | None] | None:
        """Refetch the current selector (e.g., after a ledger mutation)."""

        with self._lock:
            sel = self._selector
        if sel is None:
            return None
        return self.request(sel)

    def _run_cycle(self, gen: int, interval: ResolvedInterval) -> DashboardReport | None:
        try:
            rows = list(self._fetch(interval))
        except Exception as e:
            err = e if isinstance(e, SnapshotFetchError) else SnapshotFetchError(str(e))
            with self._lock:
                if gen == self._generation:
                    self._last_error = err
            _logger.warning("Refresh generation %d failed to fetch: %s", gen, err)
            if err is e:
                raise
            raise err from e

        report = report_for_snapshot(
            parse_rows(rows), interval, settings=self._settings, cache=self._cache
        )
        return self._publish(gen, report)

    def _publish(self, gen: int, report: DashboardReport) -> DashboardReport | None:
        with self._lock:
            if gen != self._generation:
                _logger.info(
                    "Discarding refresh generation %d; generation %d is newer",
                    gen,
                    self._generation,
                )
                return None
            self._current = report
            self._last_error = None
            if self._on_publish is not None:
                self._on_publish(report)
        _logger.debug("Published refresh generation %d", gen)
        return report

    # ---- lifecycle -------------------------------------------------------

    def close(self) -> None:
        self._executor.shutdown(wait=True, cancel_futures=True)

    def __enter__(self) -> DashboardRefresher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["DashboardRefresher", "FetchRows"]
