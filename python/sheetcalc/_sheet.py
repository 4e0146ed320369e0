"""Spreadsheet: a fixed-size grid of cells and the editing operations on it."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from sheetcalc._cell import Cell
from sheetcalc._utils import CellRange, rowcol_to_a1
from sheetcalc.calc._evaluator import FormulaEvaluator
from sheetcalc.calc._values import Value

logger = logging.getLogger(__name__)

DEFAULT_ROWS = 999
DEFAULT_COLUMNS = 26

# References carry one column letter and at most three row digits.
MAX_ROWS = 999
MAX_COLUMNS = 26

# Sorting compares on at most this many key columns.
MAX_SORT_KEYS = 3


class PasteShapeError(ValueError):
    """Clipboard block and target range have different shapes."""


@dataclass(frozen=True)
class SortKey:
    """Sort column, relative to the left edge of the sorted range."""

    column: int
    ascending: bool = True


def _as_range(target: CellRange | str) -> CellRange:
    if isinstance(target, CellRange):
        return target
    return CellRange.parse(target)


class Spreadsheet:
    """A grid of ``rows`` x ``columns`` cells addressed by 0-based coordinates.

    Cells are created on first assignment and owned by the grid.  The grid
    is also the accessor the formula evaluator uses to resolve references.

    Usage::

        sheet = Spreadsheet()
        sheet.set_formula(0, 0, "10")
        sheet.set_formula(0, 1, "=A1*2")
        sheet.display_text(0, 1)  # "20"
    """

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        columns: int = DEFAULT_COLUMNS,
        auto_recalculate: bool = True,
        max_depth: int | None = None,
    ) -> None:
        if not 1 <= rows <= MAX_ROWS:
            raise ValueError(f"rows must be between 1 and {MAX_ROWS}, got {rows}")
        if not 1 <= columns <= MAX_COLUMNS:
            raise ValueError(f"columns must be between 1 and {MAX_COLUMNS}, got {columns}")
        self._rows = rows
        self._columns = columns
        self._cells: dict[tuple[int, int], Cell] = {}
        self._auto_recalculate = auto_recalculate
        self._listeners: list[Callable[[Spreadsheet], None]] = []
        if max_depth is None:
            max_depth = rows * columns
        self.evaluator = FormulaEvaluator(self, max_depth=max_depth)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self._rows and 0 <= column < self._columns

    def _check_bounds(self, row: int, column: int) -> None:
        if not self.in_bounds(row, column):
            raise ValueError(
                f"Cell ({row}, {column}) outside {self._rows}x{self._columns} grid"
            )

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def lookup(self, row: int, column: int) -> Cell | None:
        """Grid accessor used by the evaluator. Missing or out-of-range -> None."""
        return self._cells.get((row, column))

    def cell(self, row: int, column: int) -> Cell | None:
        self._check_bounds(row, column)
        return self._cells.get((row, column))

    def __getitem__(self, key: str) -> Cell | None:
        """``sheet["B3"]`` -> the Cell there, or None."""
        rng = CellRange.parse(key)
        return self.cell(rng.top, rng.left)

    def __setitem__(self, key: str, formula: str) -> None:
        """``sheet["B3"] = "=A1+1"``."""
        rng = CellRange.parse(key)
        self.set_formula(rng.top, rng.left, formula)

    def __len__(self) -> int:
        return len(self._cells)

    def set_formula(self, row: int, column: int, formula: str) -> None:
        """Assign formula text, creating the cell on first use."""
        self._put(row, column, formula)
        self._something_changed()

    def _put(self, row: int, column: int, formula: str) -> None:
        self._check_bounds(row, column)
        cell = self._cells.get((row, column))
        if cell is None:
            cell = Cell(self, row, column)
            self._cells[(row, column)] = cell
        cell.set_formula(formula)

    def formula(self, row: int, column: int) -> str:
        cell = self.cell(row, column)
        return cell.formula if cell is not None else ""

    def value(self, row: int, column: int) -> Value | None:
        cell = self.cell(row, column)
        return cell.value() if cell is not None else None

    def display_text(self, row: int, column: int) -> str:
        cell = self.cell(row, column)
        return cell.display_text() if cell is not None else ""

    def alignment(self, row: int, column: int) -> str:
        cell = self.cell(row, column)
        return cell.alignment if cell is not None else "left"

    def cells(self) -> Iterator[tuple[int, int, Cell]]:
        """Existing cells in row-major order."""
        for row, column in sorted(self._cells):
            yield row, column, self._cells[(row, column)]

    def records(self) -> Iterator[tuple[int, int, str]]:
        """``(row, column, formula)`` for every cell with non-empty text."""
        for row, column, cell in self.cells():
            if cell.formula:
                yield row, column, cell.formula

    def load_records(self, records: Iterable[tuple[int, int, str]]) -> int:
        """Replace the grid contents with *records*. Returns how many were set.

        Every coordinate is checked first; on ValueError the grid is unchanged.
        """
        records = list(records)
        for row, column, _ in records:
            self._check_bounds(row, column)
        self._cells.clear()
        for row, column, formula in records:
            self._put(row, column, formula)
        self._something_changed()
        return len(records)

    # ------------------------------------------------------------------
    # Recalculation
    # ------------------------------------------------------------------

    def mark_all_dirty(self) -> None:
        """Invalidate every cached value; the next read recomputes."""
        for cell in self._cells.values():
            cell.set_dirty()

    def recalculate(self) -> None:
        self.mark_all_dirty()

    recalculate_all = recalculate

    @property
    def auto_recalculate(self) -> bool:
        return self._auto_recalculate

    @auto_recalculate.setter
    def auto_recalculate(self, enabled: bool) -> None:
        self._auto_recalculate = enabled
        if enabled:
            self.recalculate()

    def add_listener(self, callback: Callable[[Spreadsheet], None]) -> None:
        """Call *callback(sheet)* after every modification."""
        self._listeners.append(callback)

    def _something_changed(self) -> None:
        if self._auto_recalculate:
            self.recalculate()
        for callback in self._listeners:
            callback(self)

    # ------------------------------------------------------------------
    # Editing operations
    # ------------------------------------------------------------------

    def clear(self) -> None:
        self._cells.clear()
        self._something_changed()

    def delete(self, target: CellRange | str) -> int:
        """Remove every cell inside *target*. Returns the number removed."""
        rng = _as_range(target)
        doomed = [key for key in self._cells if key in rng]
        for key in doomed:
            del self._cells[key]
        if doomed:
            self._something_changed()
        return len(doomed)

    def copy(self, target: CellRange | str) -> str:
        """Formulas of *target*, tab-separated columns and newline-separated rows."""
        rng = _as_range(target)
        lines = []
        for row in range(rng.top, rng.bottom + 1):
            lines.append("\t".join(
                self._formula_or_blank(row, column)
                for column in range(rng.left, rng.right + 1)
            ))
        return "\n".join(lines)

    def _formula_or_blank(self, row: int, column: int) -> str:
        cell = self._cells.get((row, column))
        return cell.formula if cell is not None else ""

    def cut(self, target: CellRange | str) -> str:
        text = self.copy(target)
        self.delete(target)
        return text

    def paste(self, target: CellRange | str, text: str) -> None:
        """Write a copied block starting at the top-left of *target*.

        *target* must be a single cell or exactly the clipboard's shape.
        Cells that would land outside the grid are dropped.
        """
        rng = _as_range(target)
        lines = text.split("\n")
        num_rows = len(lines)
        num_columns = lines[0].count("\t") + 1

        single = rng.row_count * rng.column_count == 1
        if not single and (rng.row_count != num_rows or rng.column_count != num_columns):
            raise PasteShapeError(
                f"Cannot paste {num_rows}x{num_columns} block into "
                f"{rng.row_count}x{rng.column_count} range {rng}"
            )

        for i, line in enumerate(lines):
            fields = line.split("\t")
            for j in range(num_columns):
                row = rng.top + i
                column = rng.left + j
                if not self.in_bounds(row, column):
                    continue
                self._put(row, column, fields[j] if j < len(fields) else "")
        self._something_changed()

    def sort(self, target: CellRange | str, keys: Iterable[SortKey]) -> None:
        """Stable-sort the rows of *target* by formula text on up to three keys."""
        rng = _as_range(target)
        keys = list(keys)
        if len(keys) > MAX_SORT_KEYS:
            raise ValueError(f"At most {MAX_SORT_KEYS} sort keys, got {len(keys)}")
        for key in keys:
            if not 0 <= key.column < rng.column_count:
                raise ValueError(f"Sort column {key.column} outside range {rng}")

        rows = [
            [self._formula_or_blank(row, column) for column in range(rng.left, rng.right + 1)]
            for row in range(rng.top, rng.bottom + 1)
        ]
        # Stable sort applied from the least significant key to the most.
        for key in reversed(keys):
            rows.sort(key=lambda r, c=key.column: r[c], reverse=not key.ascending)

        for i, values in enumerate(rows):
            for j, formula in enumerate(values):
                self._put(rng.top + i, rng.left + j, formula)
        self._something_changed()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def find_next(
        self, text: str, row: int, column: int, case_sensitive: bool = False,
    ) -> tuple[int, int] | None:
        """First cell after (row, column), row-major, whose display text contains *text*."""
        column += 1
        while row < self._rows:
            while column < self._columns:
                if self._display_contains(row, column, text, case_sensitive):
                    return row, column
                column += 1
            column = 0
            row += 1
        return None

    def find_previous(
        self, text: str, row: int, column: int, case_sensitive: bool = False,
    ) -> tuple[int, int] | None:
        """Like :meth:`find_next`, scanning backwards."""
        column -= 1
        while row >= 0:
            while column >= 0:
                if self._display_contains(row, column, text, case_sensitive):
                    return row, column
                column -= 1
            column = self._columns - 1
            row -= 1
        return None

    def _display_contains(
        self, row: int, column: int, text: str, case_sensitive: bool,
    ) -> bool:
        cell = self._cells.get((row, column))
        if cell is None:
            return False
        shown = cell.display_text()
        if case_sensitive:
            return text in shown
        return text.casefold() in shown.casefold()

    # ------------------------------------------------------------------

    def used_range(self) -> CellRange | None:
        """Smallest range containing every non-empty cell."""
        keys = [(r, c) for r, c, _ in self.records()]
        if not keys:
            return None
        return CellRange(
            min(r for r, _ in keys), min(c for _, c in keys),
            max(r for r, _ in keys), max(c for _, c in keys),
        )

    def __repr__(self) -> str:
        return (
            f"<Spreadsheet {rowcol_to_a1(self._rows - 1, self._columns - 1)} "
            f"cells={len(self._cells)}>"
        )
