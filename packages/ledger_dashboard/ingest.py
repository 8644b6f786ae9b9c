"""CSV intake for ledger exports.

Reads a flat CSV (one transaction per line, the category denormalized into
``category_*`` columns) and yields row mappings shaped like the store rows
that :func:`ledger_dashboard.snapshot.parse_rows` validates.

Expected header::

    id,amount,occurred_on,note,category_id,category_name,category_kind,category_color

Only ``amount`` and ``occurred_on`` are required columns. A blank ``id`` falls
back to the 1-based line number of the data row; a row whose ``category_id``
is blank, or whose category name/kind are blank, is uncategorized.
"""

from __future__ import annotations

import csv
from collections.abc import Iterator, Mapping
from os import PathLike
from pathlib import Path
from typing import IO, Any

REQUIRED_HEADERS = frozenset({"amount", "occurred_on"})


def _blank(v: str | None) -> bool:
    return v is None or not v.strip()


def rows_from_csv(f: IO[str]) -> Iterator[dict[str, Any]]:
    """Yield store-shaped row mappings from an open CSV stream."""

    reader = csv.DictReader(f)
    headers = set(reader.fieldnames or [])
    if not headers:
        raise csv.Error("CSV appears to have no header row")
    missing = sorted(REQUIRED_HEADERS - headers)
    if missing:
        raise csv.Error("CSV header mismatch. Missing columns: " + ", ".join(missing))

    for line_no, rec in enumerate(reader, start=1):
        yield _to_row(rec, line_no)


def _to_row(rec: Mapping[str, str | None], line_no: int) -> dict[str, Any]:
    cat_id = rec.get("category_id")
    category = None
    if not (_blank(cat_id) or _blank(rec.get("category_name")) or _blank(rec.get("category_kind"))):
        category = {
            "id": cat_id,
            "name": rec.get("category_name"),
            "kind": rec.get("category_kind"),
            "color": None if _blank(rec.get("category_color")) else rec.get("category_color"),
        }
    raw_id = rec.get("id")
    return {
        "id": str(line_no) if _blank(raw_id) else raw_id,
        "amount": None if _blank(rec.get("amount")) else rec.get("amount"),
        "occurred_on": None if _blank(rec.get("occurred_on")) else rec.get("occurred_on"),
        "note": rec.get("note"),
        "category_id": None if _blank(cat_id) else cat_id,
        "category": category,
    }


def load_rows_from_csv(csv_path: str | PathLike[str]) -> list[dict[str, Any]]:
    """Read ``csv_path`` and return its rows (see :func:`rows_from_csv`)."""

    p = Path(csv_path)
    with p.open(encoding="utf-8", newline="") as f:
        return list(rows_from_csv(f))


__all__ = ["REQUIRED_HEADERS", "load_rows_from_csv", "rows_from_csv"]
