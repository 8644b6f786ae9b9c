import threading
from datetime import date

import pytest

from ledger_dashboard.config import EngineSettings
from ledger_dashboard.errors import SnapshotFetchError
from ledger_dashboard.models import Granularity, RangeSelector
from ledger_dashboard.refresh import DashboardRefresher

ROWS = [
    {
        "id": "1",
        "amount": "100",
        "occurred_on": "2024-06-01",
        "category": {"id": "c-food", "name": "Food", "kind": "expense"},
    },
    {"id": "2", "amount": "50", "occurred_on": "2024-06-01"},
]


def _today() -> date:
    return date(2024, 6, 2)


def test_request_publishes_report():
    published = []
    with DashboardRefresher(lambda iv: ROWS, today=_today, on_publish=published.append) as r:
        report = r.request("1m").result(timeout=5)

    assert report is not None
    assert r.current is report
    assert r.selector is RangeSelector.MONTH
    assert r.last_error is None
    assert report.kpis.total_spend == 100
    assert published == [report]


def test_last_request_wins():
    started = threading.Event()
    release = threading.Event()

    def fetch(interval):
        if interval.granularity is Granularity.MONTH:
            started.set()
            assert release.wait(5)
        return ROWS

    with DashboardRefresher(fetch, today=_today, max_workers=2) as r:
        slow = r.request("1Y")
        assert started.wait(5)
        fast = r.request("1W")
        newest = fast.result(timeout=5)
        release.set()

        assert slow.result(timeout=5) is None
        assert newest is not None
        assert r.current is newest
        assert r.current.interval.start == date(2024, 5, 27)
        assert r.selector is RangeSelector.WEEK


def test_fetch_failure_keeps_previous_report():
    fail = threading.Event()

    def fetch(interval):
        if fail.is_set():
            raise OSError("connection reset")
        return ROWS

    with DashboardRefresher(fetch, today=_today) as r:
        good = r.request("1M").result(timeout=5)
        fail.set()
        with pytest.raises(SnapshotFetchError, match="connection reset"):
            r.invalidate().result(timeout=5)

        assert r.current is good
        assert isinstance(r.last_error, SnapshotFetchError)

        fail.clear()
        assert r.invalidate().result(timeout=5) is not None
        assert r.last_error is None


def test_invalidate_without_selector_is_noop():
    with DashboardRefresher(lambda iv: ROWS, today=_today) as r:
        assert r.invalidate() is None
        assert r.current is None


def test_selector_resolved_with_injected_clock():
    seen = []

    def fetch(interval):
        seen.append(interval)
        return []

    with DashboardRefresher(fetch, today=lambda: date(2024, 3, 31)) as r:
        r.request(RangeSelector.MONTH).result(timeout=5)
    assert seen[0].start == date(2024, 2, 29)
    assert seen[0].end == date(2024, 3, 31)


def test_unknown_selector_is_rejected_up_front():
    with DashboardRefresher(lambda iv: ROWS, today=_today) as r:
        with pytest.raises(ValueError):
            r.request("2W")
        assert r.selector is None


def test_invalid_worker_count():
    with pytest.raises(ValueError):
        DashboardRefresher(lambda iv: ROWS, max_workers=0)


def test_repeat_request_reuses_cached_report():
    with DashboardRefresher(lambda iv: ROWS, today=_today) as r:
        first = r.request("1M").result(timeout=5)
        second = r.invalidate().result(timeout=5)

        assert second is first
        assert r.cache is not None
        assert r.cache.hits == 1


def test_cache_sized_from_settings():
    with DashboardRefresher(
        lambda iv: ROWS, settings=EngineSettings.from_env({"LEDGER_DASHBOARD_CACHE_SIZE": "0"})
    ) as r:
        assert r.cache is None
    with DashboardRefresher(
        lambda iv: ROWS, settings=EngineSettings.from_env({"LEDGER_DASHBOARD_CACHE_SIZE": "5"})
    ) as r:
        assert r.cache is not None
        a = r.request("1W").result(timeout=5)
        b = r.request("1W").result(timeout=5)
        assert a is b
        assert len(r.cache) == 1
