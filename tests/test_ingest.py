import csv
import io

import pytest

from ledger_dashboard.ingest import load_rows_from_csv, rows_from_csv
from ledger_dashboard.snapshot import parse_rows


def test_rows_are_store_shaped():
    f = io.StringIO(
        "id,amount,occurred_on,note,category_id,category_name,category_kind,category_color\n"
        "a1,12.50,2024-06-01,lunch,c-food,Food,expense,#EF4444\n"
        ",3.00,2024-06-02,,c-food,,expense,\n"
    )
    first, second = list(rows_from_csv(f))

    assert first == {
        "id": "a1",
        "amount": "12.50",
        "occurred_on": "2024-06-01",
        "note": "lunch",
        "category_id": "c-food",
        "category": {"id": "c-food", "name": "Food", "kind": "expense", "color": "#EF4444"},
    }
    # Blank id falls back to the data line number; a nameless category is dropped.
    assert second["id"] == "2"
    assert second["category"] is None
    assert second["category_id"] == "c-food"


def test_minimal_header_is_enough():
    rows = list(rows_from_csv(io.StringIO("amount,occurred_on\n5,2024-01-02\n")))
    snap = parse_rows(rows)
    assert snap.skipped_rows == 0
    assert snap.entries[0].id == "1"


@pytest.mark.parametrize("text", ["", "id,note\n1,x\n"])
def test_bad_header_raises_csv_error(text):
    with pytest.raises(csv.Error):
        list(rows_from_csv(io.StringIO(text)))


def test_load_rows_from_csv(tmp_path):
    p = tmp_path / "ledger.csv"
    p.write_text("amount,occurred_on\n,2024-01-02\n1,\n", encoding="utf-8")
    rows = load_rows_from_csv(p)
    assert [r["amount"] for r in rows] == [None, "1"]
    assert parse_rows(rows).skipped_rows == 2
