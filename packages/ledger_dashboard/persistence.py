# ruff: noqa: I001
"""Read-side integration with the ledger store.

The dashboard only reads: it queries the ``transactions`` table (joined with
``categories``) owned by ``libs/db`` for one resolved interval and hands the
rows to :func:`ledger_dashboard.snapshot.parse_rows`. Mutations belong to
whatever application owns the store.

Fetch failures are raised as :class:`SnapshotFetchError` so callers can tell
them apart from anything the engine itself reports (skipped rows, empty
results).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.client import session_scope
from db.models.ledger import LedgerCategory, LedgerTransaction
from .errors import SnapshotFetchError
from .logging_setup import get_logger
from .models import LedgerSnapshot, ResolvedInterval
from .snapshot import parse_rows

_logger = get_logger("ledger_dashboard.persistence")


def build_snapshot_query(interval: ResolvedInterval) -> Select[Any]:
    """Return the SELECT for all ledger rows inside ``interval``.

    Filters ``occurred_on <= end`` and, when the interval is bounded,
    ``occurred_on >= start``. Rows come back oldest first, with insertion
    order (``created_at`` then ``id``) breaking ties within a day.
    """

    tx = LedgerTransaction
    cat = LedgerCategory
    stmt = (
        select(
            tx.id,
            tx.amount,
            tx.occurred_on,
            tx.note,
            tx.category_id,
            cat.id.label("cat_id"),
            cat.name.label("cat_name"),
            cat.kind.label("cat_kind"),
            cat.color.label("cat_color"),
        )
        .select_from(tx)
        .outerjoin(cat, tx.category_id == cat.id)
        .where(tx.occurred_on <= interval.end)
    )
    if interval.start is not None:
        stmt = stmt.where(tx.occurred_on >= interval.start)
    return stmt.order_by(tx.occurred_on.asc(), tx.created_at.asc(), tx.id.asc())


def _row_to_mapping(row: Any) -> dict[str, Any]:
    category = None
    if row.cat_id is not None:
        category = {
            "id": row.cat_id,
            "name": row.cat_name,
            "kind": row.cat_kind,
            "color": row.cat_color,
        }
    return {
        "id": row.id,
        "amount": row.amount,
        "occurred_on": row.occurred_on,
        "note": row.note,
        "category_id": row.category_id,
        "category": category,
    }


def fetch_ledger_rows(session: Session, interval: ResolvedInterval) -> list[dict[str, Any]]:
    """Execute :func:`build_snapshot_query` and return plain row mappings.

    An inverted interval short-circuits to an empty list without touching the
    database.
    """

    if interval.is_inverted:
        return []
    try:
        result = session.execute(build_snapshot_query(interval))
        rows = [_row_to_mapping(r) for r in result]
    except SQLAlchemyError as e:
        raise SnapshotFetchError(f"failed to read ledger rows: {e}") from e
    _logger.debug("Fetched %d ledger row(s) for %s..%s", len(rows), interval.start, interval.end)
    return rows


def load_snapshot(
    interval: ResolvedInterval, *, database_url: str | None = None
) -> LedgerSnapshot:
    """Open a short session, fetch ``interval`` and parse it into a snapshot.

    ``database_url`` overrides ``DATABASE_URL``. A missing URL and connection
    errors surface as :class:`SnapshotFetchError` as well.
    """

    try:
        with session_scope(database_url=database_url) as session:
            rows = fetch_ledger_rows(session, interval)
    except SnapshotFetchError:
        raise
    except (SQLAlchemyError, RuntimeError) as e:
        raise SnapshotFetchError(f"failed to open ledger store session: {e}") from e
    return parse_rows(rows)


__all__ = [
    "SnapshotFetchError",
    "build_snapshot_query",
    "fetch_ledger_rows",
    "load_snapshot",
]
