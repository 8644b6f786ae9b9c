"""Fallback colours for categories that have none saved."""

from __future__ import annotations

from collections.abc import Sequence

DEFAULT_PALETTE: tuple[str, ...] = (
    "#34d399",
    "#22d3ee",
    "#a78bfa",
    "#f472b6",
    "#f59e0b",
    "#60a5fa",
)


class ColorAssigner:
    """Assign palette colours in first-seen order of uncoloured keys.

    Create one per aggregation call. A stored colour always wins and does not
    consume a palette slot.
    """

    __slots__ = ("_palette", "_order")

    def __init__(self, palette: Sequence[str] = DEFAULT_PALETTE) -> None:
        if not palette:
            raise ValueError("palette must contain at least one colour")
        self._palette: tuple[str, ...] = tuple(palette)
        self._order: dict[str, int] = {}

    def color_for(self, key: str, stored_color: str | None = None) -> str:
        if stored_color:
            return stored_color
        idx = self._order.get(key)
        if idx is None:
            idx = len(self._order)
            self._order[key] = idx
        return self._palette[idx % len(self._palette)]

    @property
    def assigned(self) -> dict[str, str]:
        """Snapshot of fallback assignments made so far, in first-seen order."""

        return {k: self._palette[i % len(self._palette)] for k, i in self._order.items()}


__all__ = ["DEFAULT_PALETTE", "ColorAssigner"]
