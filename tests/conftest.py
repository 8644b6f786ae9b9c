"""Pytest configuration for test isolation.

Settings are read from ``LEDGER_DASHBOARD_*`` environment variables and the
database client keeps one process-wide engine. Either can leak between tests
(a developer's shell or ``.env`` may set the variables; an earlier test may
have bound the engine to its own SQLite file), so an autouse fixture scrubs
both around every test.
"""

from __future__ import annotations

import os

import pytest
from db.client import reset_engine

from ledger_dashboard.logging_setup import reset_logging


@pytest.fixture(autouse=True)
def _isolate_env_and_engine(monkeypatch: pytest.MonkeyPatch):
    """Drop dashboard env settings and dispose any shared engine."""

    for name in list(os.environ):
        if name.startswith("LEDGER_DASHBOARD_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    reset_engine()
    yield
    reset_engine()
    reset_logging()
