"""DB helpers for tests: bootstrap a temporary SQLite ledger and seed rows."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from pathlib import Path

from db import Base
from db.client import get_engine, session_scope
from db.models.ledger import LedgerCategory, LedgerTransaction
from sqlalchemy import event

# Fixed base so created_at ordering is deterministic across runs.
_BASE_TS = datetime(2024, 1, 1, tzinfo=UTC)


def bootstrap_sqlite_db(db_file: Path) -> str:
    """Create a SQLite database file, initialize the ledger schema, return the URL.

    Using a file-backed SQLite DB ensures multiple SQLAlchemy connections share
    the same state (in-memory DBs are per-connection by default).
    """

    url = f"sqlite+pysqlite:///{db_file}"
    db_file.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(database_url=url)

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, _):  # pragma: no cover - tiny bridge
        dbapi_conn.execute("PRAGMA foreign_keys = ON")

    Base.metadata.create_all(bind=engine)
    return url


def seed_categories(database_url: str, categories: list[dict]) -> None:
    """Insert ``{"id", "name", "kind", "color"}`` dicts into ``categories``."""

    with session_scope(database_url=database_url) as session:
        for i, c in enumerate(categories):
            session.add(
                LedgerCategory(
                    id=c["id"],
                    name=c["name"],
                    kind=c["kind"],
                    color=c.get("color"),
                    created_at=_BASE_TS + timedelta(seconds=i),
                )
            )


def seed_transactions(database_url: str, transactions: list[dict]) -> None:
    """Insert transactions in list order; ``created_at`` increases with position.

    Each dict takes ``amount`` (str/Decimal/None), ``occurred_on`` (date/None),
    and optional ``note``/``category_id``. An explicit ``created_at`` overrides
    the positional timestamp.
    """

    with session_scope(database_url=database_url) as session:
        for i, t in enumerate(transactions):
            amount = t.get("amount")
            session.add(
                LedgerTransaction(
                    amount=Decimal(str(amount)) if amount is not None else None,
                    occurred_on=t.get("occurred_on"),
                    note=t.get("note"),
                    category_id=t.get("category_id"),
                    created_at=t.get("created_at", _BASE_TS + timedelta(minutes=i)),
                )
            )


def d(s: str) -> date:
    return date.fromisoformat(s)
