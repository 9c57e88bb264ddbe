"""
Grid Packer

Places cards of heterogeneous size onto a fixed-width grid without overlap.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CardSize:
    col_span: int = 1
    row_span: int = 1


@dataclass(frozen=True, slots=True)
class GridPlacement:
    """Position of one card; row and col are 1-indexed."""
    row: int
    col: int
    col_span: int
    row_span: int

    def to_wire(self) -> dict[str, int]:
        return {"row": self.row, "col": self.col, "colSpan": self.col_span, "rowSpan": self.row_span}


# Upper bound accepted from HTTP callers
MAX_COLUMNS = 24

SizeFn = Callable[[str], Any]


def _span(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 1


def _read_size(raw: Any) -> tuple[int, int]:
    if raw is None:
        return 1, 1
    if isinstance(raw, CardSize):
        return raw.col_span, raw.row_span
    if isinstance(raw, dict):
        return _span(raw.get("colSpan", 1) or 1), _span(raw.get("rowSpan", 1) or 1)
    if isinstance(raw, (tuple, list)) and len(raw) == 2:
        return _span(raw[0] or 1), _span(raw[1] or 1)
    return 1, 1


class _Occupancy:
    """Row-major bitmap that grows downward on demand."""

    def __init__(self, columns: int) -> None:
        self.columns = columns
        self._rows: list[list[bool]] = []

    def _ensure_row(self, row: int) -> None:
        while len(self._rows) <= row:
            self._rows.append([False] * self.columns)

    def can_place(self, row: int, col: int, col_span: int, row_span: int) -> bool:
        if col + col_span > self.columns:
            return False
        for r in range(row, row + row_span):
            self._ensure_row(r)
            cells = self._rows[r]
            for c in range(col, col + col_span):
                if cells[c]:
                    return False
        return True

    def place(self, row: int, col: int, col_span: int, row_span: int) -> None:
        for r in range(row, row + row_span):
            self._ensure_row(r)
            for c in range(col, col + col_span):
                self._rows[r][c] = True


def build_grid_layout(ids: Iterable[str], columns: int, size_fn: SizeFn) -> dict[str, GridPlacement]:
    """Greedy first-fit placement in input order, scanning anchors row by row, left to right.

    ``size_fn`` returns a ``CardSize``, a ``{"colSpan", "rowSpan"}`` mapping or a
    ``(col_span, row_span)`` pair. Identical input always yields identical output.
    """
    try:
        columns = int(columns)
    except (TypeError, ValueError, OverflowError):
        return {}
    if columns < 1:
        return {}

    occupancy = _Occupancy(columns)
    positions: dict[str, GridPlacement] = {}

    for card_id in ids:
        raw_col_span, raw_row_span = _read_size(size_fn(card_id))
        if raw_col_span > columns:
            logger.warning(
                "Card wider than grid, clamping | card_id=%s col_span=%s columns=%s",
                card_id,
                raw_col_span,
                columns,
            )
        col_span = max(1, min(columns, raw_col_span))
        row_span = max(1, raw_row_span)

        row = 0
        placed = False
        while not placed:
            for col in range(columns):
                if occupancy.can_place(row, col, col_span, row_span):
                    occupancy.place(row, col, col_span, row_span)
                    positions[card_id] = GridPlacement(row=row + 1, col=col + 1, col_span=col_span, row_span=row_span)
                    placed = True
                    break
            row += 1

    return positions
