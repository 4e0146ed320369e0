"""Protocols the evaluator uses to reach other cells."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sheetcalc.calc._values import Value


@runtime_checkable
class CellHandle(Protocol):
    """Anything that can produce an evaluated value on demand."""

    def value(self) -> Value:
        ...


@runtime_checkable
class GridAccessor(Protocol):
    """Read access to the cells of a grid, addressed by 0-based coordinates."""

    def lookup(self, row: int, column: int) -> CellHandle | None:
        """Return the cell at (row, column), or None when nothing is there."""
        ...


class EmptyGrid:
    """Accessor for formulas evaluated outside any grid: every lookup misses."""

    def lookup(self, row: int, column: int) -> CellHandle | None:
        return None
