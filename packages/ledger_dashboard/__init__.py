"""Public interface for the ``ledger_dashboard`` package.

This module re-exports the package's API functions and value types as the
stable import surface. There is no runtime logic here, only symbol
re-exports. The SQL-backed helpers in :mod:`ledger_dashboard.persistence` are
left out so that importing the package does not import the ``db`` library.
"""

from .aggregate import NO_TOP_CATEGORY, UNCATEGORIZED_NAME, aggregate
from .api import build_report, report_for_snapshot, report_from_store
from .buckets import ENGLISH_MONTH_ABBREVIATIONS, bucket_key
from .cache import ReportCache, compute_snapshot_id
from .calendar_math import inclusive_days, iso_week_anchor, subtract_months
from .colors import DEFAULT_PALETTE, ColorAssigner
from .config import EngineSettings
from .errors import SnapshotFetchError
from .models import (
    UNCATEGORIZED,
    Bucket,
    BucketKey,
    CashFlowTotals,
    Category,
    CategoryKind,
    CategoryShare,
    DashboardReport,
    Granularity,
    KpiSummary,
    Known,
    LedgerEntry,
    LedgerRow,
    LedgerSnapshot,
    RangeSelector,
    ResolvedInterval,
    Uncategorized,
)
from .ranges import parse_selector, resolve_range
from .refresh import DashboardRefresher
from .snapshot import parse_rows

__all__ = [
    # API
    "aggregate",
    "build_report",
    "report_for_snapshot",
    "report_from_store",
    "resolve_range",
    "parse_selector",
    "parse_rows",
    "bucket_key",
    "subtract_months",
    "iso_week_anchor",
    "inclusive_days",
    "compute_snapshot_id",
    # Runtime helpers
    "ColorAssigner",
    "DashboardRefresher",
    "EngineSettings",
    "ReportCache",
    "SnapshotFetchError",
    # Models / types
    "UNCATEGORIZED",
    "Bucket",
    "BucketKey",
    "CashFlowTotals",
    "Category",
    "CategoryKind",
    "CategoryShare",
    "DashboardReport",
    "Granularity",
    "KpiSummary",
    "Known",
    "LedgerEntry",
    "LedgerRow",
    "LedgerSnapshot",
    "RangeSelector",
    "ResolvedInterval",
    "Uncategorized",
    # Constants
    "DEFAULT_PALETTE",
    "ENGLISH_MONTH_ABBREVIATIONS",
    "NO_TOP_CATEGORY",
    "UNCATEGORIZED_NAME",
]
