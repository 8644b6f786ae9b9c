"""Centralized SQLAlchemy engine/session helpers for the workspace.

Usage
-----
from db.client import session_scope

with session_scope() as s:
    s.execute(...)

The engine is created lazily from ``DATABASE_URL`` (or an explicit override)
and shared for the life of the process. ``reset_engine()`` disposes it so a
test or a host application can point the process at another database.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

_LOCK = threading.Lock()
_ENGINE: Engine | None = None
_SESSION_MAKER: sessionmaker[Session] | None = None
_DB_URL: str | None = None


def _database_url(override: str | None = None) -> str:
    url = override or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set; cannot initialize database client")
    return url


def get_engine(*, database_url: str | None = None) -> Engine:
    """Return the shared SQLAlchemy engine, creating it on first use."""

    global _ENGINE, _SESSION_MAKER, _DB_URL
    url = _database_url(database_url)
    with _LOCK:
        if _ENGINE is None:
            engine = create_engine(url, pool_pre_ping=True)
            _SESSION_MAKER = sessionmaker(bind=engine, expire_on_commit=False, class_=Session)
            _ENGINE = engine
            _DB_URL = url
            return engine
        # Guard against silently reading from a different database.
        if _DB_URL is not None and url != _DB_URL:
            raise RuntimeError(
                "get_engine() already initialized with a different DATABASE_URL; "
                "call reset_engine() first"
            )
        return _ENGINE


def reset_engine() -> None:
    """Dispose the shared engine (no-op when none was created)."""

    global _ENGINE, _SESSION_MAKER, _DB_URL
    with _LOCK:
        if _ENGINE is not None:
            _ENGINE.dispose()
        _ENGINE = None
        _SESSION_MAKER = None
        _DB_URL = None


def get_session(*, database_url: str | None = None) -> Session:
    """Return a new SQLAlchemy session bound to the shared engine."""

    get_engine(database_url=database_url)
    assert _SESSION_MAKER is not None  # bound by get_engine
    return _SESSION_MAKER()


@contextmanager
def session_scope(*, database_url: str | None = None) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = get_session(database_url=database_url)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "get_engine",
    "get_session",
    "reset_engine",
    "session_scope",
]
