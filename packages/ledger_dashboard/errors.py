"""Exception types raised at the engine's boundaries."""

from __future__ import annotations


class SnapshotFetchError(RuntimeError):
    """The ledger store could not be read.

    Raised by collaborators that fetch rows, never by the aggregation itself,
    so callers can report it separately from empty or partially skipped data.
    """


__all__ = ["SnapshotFetchError"]
