from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.dialects import sqlite

from ledger_dashboard.api import report_from_store
from ledger_dashboard.errors import SnapshotFetchError
from ledger_dashboard.models import UNCATEGORIZED, Granularity, Known, ResolvedInterval
from ledger_dashboard.persistence import build_snapshot_query, load_snapshot
from ledger_dashboard.ranges import resolve_range
from tests.helpers.db import bootstrap_sqlite_db, d, seed_categories, seed_transactions

CATEGORIES = [
    {"id": "c-food", "name": "Food", "kind": "expense", "color": "#ef4444"},
    {"id": "c-salary", "name": "Salary", "kind": "income"},
]


@pytest.fixture
def ledger_url(tmp_path: Path) -> str:
    url = bootstrap_sqlite_db(tmp_path / "ledger.sqlite3")
    seed_categories(url, CATEGORIES)
    seed_transactions(
        url,
        [
            {"amount": "100.00", "occurred_on": d("2024-06-01"), "category_id": "c-food"},
            {"amount": "50.00", "occurred_on": d("2024-06-01"), "note": "cash"},
            {"amount": "200.00", "occurred_on": d("2024-06-02"), "category_id": "c-salary"},
            {"amount": None, "occurred_on": d("2024-05-20"), "category_id": "c-food"},
            {"amount": "9.99", "occurred_on": d("2023-01-15"), "category_id": "c-food"},
        ],
    )
    return url


def test_load_snapshot_orders_and_joins(ledger_url):
    snap = load_snapshot(resolve_range("1M", today=d("2024-06-02")), database_url=ledger_url)

    assert [e.id for e in snap.entries] == ["1", "2", "3"]
    assert snap.skipped_rows == 1
    first, second, third = snap.entries
    assert isinstance(first.category, Known)
    assert first.category.category.color == "#ef4444"
    assert first.amount == Decimal("100.00")
    assert second.category == UNCATEGORIZED
    assert second.note == "cash"
    assert third.category.category.name == "Salary"


def test_same_day_rows_follow_insertion_order(tmp_path):
    url = bootstrap_sqlite_db(tmp_path / "order.sqlite3")
    seed_transactions(
        url,
        [
            {"amount": "1", "occurred_on": d("2024-06-05"), "note": "later"},
            {"amount": "1", "occurred_on": d("2024-06-01"), "note": "earlier day"},
            {"amount": "1", "occurred_on": d("2024-06-05"), "note": "latest"},
        ],
    )
    snap = load_snapshot(resolve_range("1W", today=d("2024-06-07")), database_url=url)
    assert [e.note for e in snap.entries] == ["earlier day", "later", "latest"]


def test_all_range_includes_old_rows(ledger_url):
    snap = load_snapshot(resolve_range("ALL", today=d("2024-06-02")), database_url=ledger_url)
    assert [e.id for e in snap.entries] == ["5", "1", "2", "3"]


def test_query_bounds_only_when_interval_is_bounded():
    dialect = sqlite.dialect()
    bounded = str(build_snapshot_query(resolve_range("1M", today=d("2024-06-02"))).compile(dialect=dialect))
    unbounded = str(build_snapshot_query(resolve_range("ALL", today=d("2024-06-02"))).compile(dialect=dialect))

    assert "transactions.occurred_on <=" in bounded
    assert "transactions.occurred_on >=" in bounded
    assert "transactions.occurred_on >=" not in unbounded
    assert "LEFT OUTER JOIN categories" in unbounded


def test_inverted_interval_returns_empty_snapshot(ledger_url):
    iv = ResolvedInterval(date(2024, 6, 10), date(2024, 6, 1), Granularity.DAY)
    snap = load_snapshot(iv, database_url=ledger_url)
    assert snap.entries == ()
    assert snap.skipped_rows == 0


def test_missing_schema_raises_fetch_error(tmp_path):
    url = f"sqlite+pysqlite:///{tmp_path / 'empty.sqlite3'}"
    with pytest.raises(SnapshotFetchError):
        load_snapshot(resolve_range("1M", today=d("2024-06-02")), database_url=url)


def test_missing_database_url_raises_fetch_error():
    with pytest.raises(SnapshotFetchError, match="DATABASE_URL"):
        load_snapshot(resolve_range("1M", today=d("2024-06-02")))


def test_report_from_store_end_to_end(ledger_url, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", ledger_url)
    report = report_from_store("1M", today=d("2024-06-02"))

    assert report.kpis.total_spend == Decimal("100.00")
    assert report.kpis.transaction_count == 3
    assert report.kpis.top_category_name == "Food"
    assert report.kpis.average_per_day == Decimal("3.13")
    assert report.cash_flow.income == Decimal("200.00")
    assert report.skipped_rows == 1
    assert [e.id for e in report.recent] == ["3", "2", "1"]
