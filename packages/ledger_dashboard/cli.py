# ruff: noqa: I001
"""CLI for the ``ledger_dashboard`` package.

Typer-based console interface over :mod:`ledger_dashboard.api`. Environment
variables (``DATABASE_URL`` and the ``LEDGER_DASHBOARD_*`` settings) are loaded
from a local ``.env`` using ``python-dotenv`` before any command runs.

Commands
--------
- ``report``: print the dashboard views (KPIs, spending series, category
  breakdown, recent activity) for one range, read either from a CSV export
  (``--csv-path``) or from the SQL store (``DATABASE_URL``/``--database-url``).
- ``ranges``: print the interval every range selector resolves to.

The CLI is the application shell, so it is the one place that reads the clock
(``date.today()``) when ``--today`` is omitted.
"""

from __future__ import annotations

import dataclasses
import json
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .config import EngineSettings
from .logging_setup import configure_logging
from .models import DashboardReport, Known, LedgerEntry, RangeSelector
from .ranges import parse_selector, resolve_range


# ---- Small module-level helpers used by CLI commands -------------------------


def _parse_today(raw: str | None) -> date:
    if raw is None or not raw.strip():
        return date.today()
    return date.fromisoformat(raw.strip())


def _money(v: Decimal) -> str:
    return f"{v:.2f}"


def _entry_category(e: LedgerEntry) -> tuple[str, str | None, str | None]:
    """Return ``(name, kind, color)`` for display; uncategorized has no kind."""

    if isinstance(e.category, Known):
        c = e.category.category
        return c.name, c.kind.value, c.color
    return "Uncategorized", None, None


def _entry_to_dict(e: LedgerEntry) -> dict[str, Any]:
    name, kind, color = _entry_category(e)
    return {
        "id": e.id,
        "occurred_on": e.occurred_on.isoformat(),
        "amount": _money(e.amount),
        "note": e.note,
        "category": name,
        "kind": kind,
        "color": color,
    }


def report_to_dict(report: DashboardReport) -> dict[str, Any]:
    """JSON-friendly view of ``report`` (amounts as 2dp strings, ISO dates)."""

    iv = report.interval
    return {
        "interval": {
            "start": iv.start.isoformat() if iv.start else None,
            "end": iv.end.isoformat(),
            "granularity": iv.granularity.value,
        },
        "kpis": {
            "total_spend": _money(report.kpis.total_spend),
            "transaction_count": report.kpis.transaction_count,
            "top_category": report.kpis.top_category_name,
            "average_per_day": _money(report.kpis.average_per_day),
        },
        "series": [
            {"key": b.key, "label": b.label, "sort_key": b.sort_key, "total": _money(b.total)}
            for b in report.series
        ],
        "breakdown": [
            {
                "category_id": s.category_id,
                "name": s.category_name,
                "color": s.color,
                "total": _money(s.total),
            }
            for s in report.breakdown
        ],
        "recent": [_entry_to_dict(e) for e in report.recent],
        "cash_flow": {
            "income": _money(report.cash_flow.income),
            "expense": _money(report.cash_flow.expense),
            "net": _money(report.cash_flow.net),
        },
        "skipped_rows": report.skipped_rows,
    }


def render_report_text(report: DashboardReport) -> str:
    """Plain-text rendering: tab-separated sections, one value per line."""

    iv = report.interval
    k = report.kpis
    lines = [
        f"Range\t{iv.start.isoformat() if iv.start else '(all)'}..{iv.end.isoformat()}"
        f"\t{iv.granularity.value}",
        f"Total spend\t{_money(k.total_spend)}",
        f"Transactions\t{k.transaction_count}",
        f"Top category\t{k.top_category_name}",
        f"Avg / day\t{_money(k.average_per_day)}",
        f"Income\t{_money(report.cash_flow.income)}",
        f"Net\t{_money(report.cash_flow.net)}",
    ]
    if report.skipped_rows:
        lines.append(f"Skipped rows\t{report.skipped_rows}")

    lines.append("")
    lines.append("Spending")
    if not report.series:
        lines.append("(no expenses)")
    for b in report.series:
        lines.append(f"{b.key}\t{b.label}\t{_money(b.total)}")

    lines.append("")
    lines.append("Categories")
    if not report.breakdown:
        lines.append("(no expenses)")
    for s in report.breakdown:
        lines.append(f"{s.category_name}\t{s.color}\t{_money(s.total)}")

    lines.append("")
    lines.append("Recent")
    if not report.recent:
        lines.append("(no data)")
    for e in report.recent:
        name, _kind, _color = _entry_category(e)
        lines.append(f"{e.occurred_on.isoformat()}\t{name}\t{_money(e.amount)}\t{e.note or ''}")
    return "\n".join(lines)


def cmd_report(
    selector: RangeSelector | str,
    *,
    today: str | None = None,
    csv_path: str | None = None,
    database_url: str | None = None,
    recent: int | None = None,
    as_json: bool = False,
) -> int:
    """Build and print the dashboard report; return a process exit code.

    Errors are written to stderr as ``Error: ...`` and yield ``1``. Store
    read failures are reported separately from row-level problems, which only
    show up as the ``Skipped rows`` count.
    """

    import csv

    from .api import build_report, report_from_store
    from .errors import SnapshotFetchError
    from .ingest import load_rows_from_csv

    try:
        sel = parse_selector(selector)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    try:
        ref_day = _parse_today(today)
    except ValueError:
        print(f"Error: --today must be YYYY-MM-DD, got {today!r}", file=sys.stderr)
        return 1

    settings = EngineSettings.from_env()
    if recent is not None:
        if recent < 0:
            print("Error: --recent must be >= 0", file=sys.stderr)
            return 1
        settings = dataclasses.replace(settings, recent_limit=recent)

    if csv_path is not None:
        try:
            rows = load_rows_from_csv(csv_path)
        except FileNotFoundError:
            print(f"Error: File not found: {csv_path}", file=sys.stderr)
            return 1
        except PermissionError:
            print(f"Error: Permission denied: {csv_path}", file=sys.stderr)
            return 1
        except (csv.Error, UnicodeDecodeError) as e:
            print(f"Error: Failed to parse CSV: {e}", file=sys.stderr)
            return 1
        report = build_report(rows, sel, today=ref_day, settings=settings)
    else:
        try:
            report = report_from_store(
                sel, today=ref_day, database_url=database_url, settings=settings
            )
        except SnapshotFetchError as e:
            print(f"Error: failed to read ledger store: {e}", file=sys.stderr)
            return 1

    if as_json:
        print(json.dumps(report_to_dict(report), indent=2, ensure_ascii=False))
    else:
        print(render_report_text(report))
    return 0


def cmd_ranges(*, today: str | None = None) -> int:
    """Print ``selector<TAB>start<TAB>end<TAB>granularity`` for each selector."""

    try:
        ref_day = _parse_today(today)
    except ValueError:
        print(f"Error: --today must be YYYY-MM-DD, got {today!r}", file=sys.stderr)
        return 1

    for sel in RangeSelector:
        iv = resolve_range(sel, today=ref_day)
        start = iv.start.isoformat() if iv.start else ""
        print(f"{sel.value}\t{start}\t{iv.end.isoformat()}\t{iv.granularity.value}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Personal finance dashboard reports: KPIs, spending series and category "
        "breakdown for a date range. Loads settings from a local .env."
    ),
)


# Module-level option objects keep calls out of parameter defaults (ruff B008).
TODAY_OPTION: OptionInfo = typer.Option(
    ...,  # default comes from the parameter
    "--today",
    help="Reference date (YYYY-MM-DD) the range ends on; defaults to today.",
)
RANGE_OPTION: OptionInfo = typer.Option(
    ...,  # default comes from the parameter
    "--range",
    "-r",
    help="Range selector: 1W, 1M, 3M, 6M, 1Y or ALL.",
    case_sensitive=False,
)


@app.command("report")
def report_cmd(
    selector: Annotated[RangeSelector, RANGE_OPTION] = RangeSelector.MONTH,
    today: Annotated[str | None, TODAY_OPTION] = None,
    *,
    csv_path: Path | None = typer.Option(
        None,
        "--csv-path",
        help="Read ledger rows from a CSV export instead of the database.",
        dir_okay=False,
        file_okay=True,
        exists=False,  # the handler reports missing files itself
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
    recent: int | None = typer.Option(
        None, help="Number of recent transactions to list (default from env or 8)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit the report as JSON."),
) -> None:
    """Print the dashboard report for one range."""

    code = cmd_report(
        selector,
        today=today,
        csv_path=str(csv_path) if csv_path is not None else None,
        database_url=database_url,
        recent=recent,
        as_json=as_json,
    )
    if code:
        raise typer.Exit(code)


@app.command("ranges")
def ranges_cmd(today: Annotated[str | None, TODAY_OPTION] = None) -> None:
    """Show the interval and granularity of every range selector."""

    code = cmd_ranges(today=today)
    if code:
        raise typer.Exit(code)


@app.callback()
def _root() -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m ledger_dashboard.cli`
    app()
