"""Engine settings resolved from explicit values or the environment.

Environment variables
---------------------
- ``LEDGER_DASHBOARD_RECENT_LIMIT``: size of the recent-activity list
  (positive int, default ``8``).
- ``LEDGER_DASHBOARD_PALETTE``: comma-separated ``#rrggbb`` fallback colours.
- ``LEDGER_DASHBOARD_COUNT_UNCATEGORIZED``: ``1/true/yes`` to treat
  uncategorized entries as spend (default off).
- ``LEDGER_DASHBOARD_CACHE_SIZE``: number of reports kept by the in-memory
  report cache (``0`` disables it, default ``32``).

Invalid values are logged and replaced by the defaults rather than raised, so a
typo in a ``.env`` file never takes the dashboard down.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from .buckets import ENGLISH_MONTH_ABBREVIATIONS
from .colors import DEFAULT_PALETTE
from .logging_setup import get_logger

_logger = get_logger("ledger_dashboard.config")

DEFAULT_RECENT_LIMIT = 8
DEFAULT_CACHE_SIZE = 32

_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class EngineSettings:
    recent_limit: int = DEFAULT_RECENT_LIMIT
    palette: tuple[str, ...] = DEFAULT_PALETTE
    count_uncategorized_as_spend: bool = False
    month_names: tuple[str, ...] = field(default=ENGLISH_MONTH_ABBREVIATIONS)
    cache_size: int = DEFAULT_CACHE_SIZE

    def __post_init__(self) -> None:
        if isinstance(self.recent_limit, bool) or not isinstance(self.recent_limit, int):
            raise ValueError("recent_limit must be an int")
        if self.recent_limit < 0:
            raise ValueError("recent_limit must be >= 0")
        if not self.palette:
            raise ValueError("palette must contain at least one colour")
        if len(self.month_names) != 12:
            raise ValueError("month_names must hold 12 entries")
        if self.cache_size < 0:
            raise ValueError("cache_size must be >= 0")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineSettings:
        """Build settings from ``environ`` (defaults to ``os.environ``)."""

        env = os.environ if environ is None else environ
        return cls(
            recent_limit=_int_setting(
                env, "LEDGER_DASHBOARD_RECENT_LIMIT", DEFAULT_RECENT_LIMIT, minimum=1
            ),
            palette=_palette_setting(env, "LEDGER_DASHBOARD_PALETTE"),
            count_uncategorized_as_spend=_bool_setting(
                env, "LEDGER_DASHBOARD_COUNT_UNCATEGORIZED", False
            ),
            cache_size=_int_setting(env, "LEDGER_DASHBOARD_CACHE_SIZE", DEFAULT_CACHE_SIZE),
        )


def _int_setting(env: Mapping[str, str], name: str, default: int, *, minimum: int = 0) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        _logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value < minimum:
        _logger.warning("Ignoring %s=%r: must be >= %d", name, raw, minimum)
        return default
    return value


def _bool_setting(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    _logger.warning("Ignoring %s=%r: expected one of 1/0/true/false/yes/no", name, raw)
    return default


def _palette_setting(env: Mapping[str, str], name: str) -> tuple[str, ...]:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return DEFAULT_PALETTE
    colors: Sequence[str] = [c.strip() for c in raw.split(",") if c.strip()]
    bad = [c for c in colors if not _COLOR_RE.fullmatch(c)]
    if bad or not colors:
        _logger.warning("Ignoring %s: invalid colours %s", name, ", ".join(bad) or "(none)")
        return DEFAULT_PALETTE
    return tuple(c.lower() for c in colors)


__all__ = ["DEFAULT_CACHE_SIZE", "DEFAULT_RECENT_LIMIT", "EngineSettings"]
