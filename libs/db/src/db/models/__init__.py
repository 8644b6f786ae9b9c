"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the ledger models read by ``ledger_dashboard``.
"""

from .ledger import Base, LedgerCategory, LedgerTransaction

__all__ = [
    "Base",
    "LedgerCategory",
    "LedgerTransaction",
]
