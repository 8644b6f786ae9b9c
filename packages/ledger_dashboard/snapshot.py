"""Turn raw ledger rows into an immutable :class:`LedgerSnapshot`.

Rows that fail validation (missing or unparsable amount/date, negative amount,
a joined category with an unknown kind, ...) are skipped and counted rather
than aborting the whole computation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from .logging_setup import get_logger
from .models import LedgerEntry, LedgerRow, LedgerSnapshot

_logger = get_logger("ledger_dashboard.snapshot")


def parse_rows(rows: Iterable[Mapping[str, Any]]) -> LedgerSnapshot:
    """Validate ``rows`` in order and return the resulting snapshot.

    The input order is preserved; the store hands rows over sorted by date and
    insertion order, and the recent-activity view relies on that tie-break.
    """

    entries: list[LedgerEntry] = []
    skipped = 0
    for pos, row in enumerate(rows):
        try:
            entries.append(LedgerRow.model_validate(row).to_entry())
        except ValidationError as e:
            skipped += 1
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            _logger.debug(
                "Skipping malformed ledger row at position %d (id=%r): invalid %s",
                pos,
                row.get("id") if isinstance(row, Mapping) else None,
                ", ".join(fields) or "row",
            )

    if skipped:
        _logger.info("Skipped %d malformed ledger row(s) out of %d", skipped, skipped + len(entries))
    return LedgerSnapshot(entries=tuple(entries), skipped_rows=skipped)


__all__ = ["parse_rows"]
