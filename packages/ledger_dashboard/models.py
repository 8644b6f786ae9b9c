"""Data models for ``ledger_dashboard``.

Two families live here:

- Frozen ``dataclass`` value objects that flow through the engine and out to
  the presentation layer (entries, intervals, buckets, KPI summaries, shares
  and the assembled :class:`DashboardReport`). Every sequence field is a
  ``tuple`` so two reports built from the same snapshot compare equal.
- Pydantic DTOs (:class:`LedgerRow`, :class:`LedgerRowCategory`) that validate
  raw rows handed over by the ledger store before they become entries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class CategoryKind(StrEnum):
    EXPENSE = "expense"
    INCOME = "income"


class RangeSelector(StrEnum):
    """Dashboard range choices, valued by their on-screen codes."""

    WEEK = "1W"
    MONTH = "1M"
    QUARTER = "3M"
    HALF_YEAR = "6M"
    YEAR = "1Y"
    ALL = "ALL"


class Granularity(StrEnum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


# ---------------------------------------------------------------------------
# Categories and ledger entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Category:
    """A user-owned label grouping transactions.

    ``color`` is a lowercase ``#rrggbb`` string or ``None`` when the user never
    picked one; the breakdown then falls back to the palette.
    """

    id: str
    name: str
    kind: CategoryKind
    color: str | None = None

    @property
    def is_expense(self) -> bool:
        return self.kind is CategoryKind.EXPENSE


@dataclass(frozen=True, slots=True)
class Known:
    """Category reference for an entry whose category resolved in the store."""

    category: Category


@dataclass(frozen=True, slots=True)
class Uncategorized:
    """Category reference for an entry with no (or a dangling) category."""


UNCATEGORIZED = Uncategorized()

type CategoryRef = Known | Uncategorized


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """One recorded transaction as seen by the engine.

    Attributes
    ----------
    id:
        Store identifier, kept as a string regardless of the backing column.
    amount:
        Non-negative amount. Direction (spend vs. income) comes from the
        category kind, never from the sign.
    occurred_on:
        Calendar date of the transaction; there is no time component.
    note:
        Optional free text.
    category:
        ``Known(Category)`` or ``UNCATEGORIZED``.
    """

    id: str
    amount: Decimal
    occurred_on: date
    note: str | None
    category: CategoryRef


@dataclass(frozen=True, slots=True)
class LedgerSnapshot:
    """An immutable batch of entries fetched for one computation."""

    entries: tuple[LedgerEntry, ...] = ()
    skipped_rows: int = 0

    def __len__(self) -> int:
        return len(self.entries)


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ResolvedInterval:
    """A concrete reporting window.

    ``start`` of ``None`` means unbounded (the "ALL" range). ``end`` is
    inclusive.
    """

    start: date | None
    end: date
    granularity: Granularity

    @property
    def is_inverted(self) -> bool:
        return self.start is not None and self.start > self.end

    def contains(self, day: date) -> bool:
        if day > self.end:
            return False
        return self.start is None or day >= self.start


@dataclass(frozen=True, slots=True)
class BucketKey:
    key: str
    label: str
    sort_key: int


@dataclass(frozen=True, slots=True)
class Bucket:
    key: str
    label: str
    sort_key: int
    total: Decimal


@dataclass(frozen=True, slots=True)
class KpiSummary:
    """Headline figures. ``average_per_day`` is ``total_spend / max(1, elapsed days)``
    quantized to cents (ROUND_HALF_UP); the other amounts are exact."""

    total_spend: Decimal
    transaction_count: int
    top_category_name: str
    average_per_day: Decimal


@dataclass(frozen=True, slots=True)
class CategoryShare:
    """Expense total of one category; ``category_id`` is ``None`` for the
    synthetic "Uncategorized" share."""

    category_id: str | None
    category_name: str
    color: str
    total: Decimal


@dataclass(frozen=True, slots=True)
class CashFlowTotals:
    """Income and expense sums over entries with a known category."""

    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True, slots=True)
class DashboardReport:
    """Everything the dashboard shows for one range, replaced as a unit."""

    interval: ResolvedInterval
    kpis: KpiSummary
    series: tuple[Bucket, ...]
    breakdown: tuple[CategoryShare, ...]
    recent: tuple[LedgerEntry, ...]
    cash_flow: CashFlowTotals
    skipped_rows: int = 0


# ---------------------------------------------------------------------------
# DTOs for raw store rows
# ---------------------------------------------------------------------------

_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def _coerce_id(v: Any) -> Any:
    # Store ids may be integers (autoincrement) or UUID strings.
    if isinstance(v, bool):
        return v
    if isinstance(v, int):
        return str(v)
    return v


class LedgerRowCategory(BaseModel):
    """The category half of a joined ledger row."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    kind: CategoryKind = Field(validation_alias=AliasChoices("kind", "type"))
    color: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("kind", mode="before")
    @classmethod
    def _kind_lower(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("color", mode="before")
    @classmethod
    def _normalize_color(cls, v: Any) -> str | None:
        # Anything that is not #rrggbb is treated as "no colour saved".
        if not isinstance(v, str):
            return None
        s = v.strip()
        return s.lower() if _COLOR_RE.fullmatch(s) else None

    def to_category(self) -> Category:
        return Category(id=self.id, name=self.name, kind=self.kind, color=self.color)


class LedgerRow(BaseModel):
    """A transaction row joined with its category, as returned by the store."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, frozen=True)

    id: str = Field(min_length=1)
    amount: Decimal = Field(ge=0)
    occurred_on: date
    note: str | None = None
    category_id: str | None = None
    category: LedgerRowCategory | None = None

    @field_validator("id", "category_id", mode="before")
    @classmethod
    def _ids_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_from_float(cls, v: Any) -> Any:
        # Go through str() so 0.1 stays 0.1 rather than its binary expansion.
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_validator("note", mode="before")
    @classmethod
    def _blank_note_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_entry(self) -> LedgerEntry:
        ref: CategoryRef = Known(self.category.to_category()) if self.category else UNCATEGORIZED
        return LedgerEntry(
            id=self.id,
            amount=self.amount,
            occurred_on=self.occurred_on,
            note=self.note,
            category=ref,
        )


__all__ = [
    "UNCATEGORIZED",
    "Bucket",
    "BucketKey",
    "CashFlowTotals",
    "Category",
    "CategoryKind",
    "CategoryRef",
    "CategoryShare",
    "DashboardReport",
    "Granularity",
    "KpiSummary",
    "Known",
    "LedgerEntry",
    "LedgerRow",
    "LedgerRowCategory",
    "LedgerSnapshot",
    "RangeSelector",
    "ResolvedInterval",
    "Uncategorized",
]
