"""Cell: formula text plus a lazily computed, cached value."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sheetcalc._utils import rowcol_to_a1
from sheetcalc.calc._evaluator import CycleDetected, DepthExceeded, FormulaEvaluator
from sheetcalc.calc._parser import parse_number
from sheetcalc.calc._values import INVALID, Number, Text, Value, alignment, display_text

if TYPE_CHECKING:
    from sheetcalc._sheet import Spreadsheet

logger = logging.getLogger(__name__)


class Cell:
    """One grid slot.

    The formula text is authoritative.  ``value()`` evaluates it on first use
    and caches the result until the cell is marked dirty again, either by a
    new formula or by :meth:`set_dirty`.
    """

    __slots__ = ("_sheet", "_row", "_col", "_formula", "_cached", "_dirty", "_evaluator")

    def __init__(
        self,
        sheet: Spreadsheet | None = None,
        row: int = 0,
        column: int = 0,
        formula: str = "",
    ) -> None:
        self._sheet = sheet
        self._row = row
        self._col = column
        self._formula = formula
        self._cached: Value = INVALID
        self._dirty = True
        # Detached cells have no neighbours; references in them read as 0.
        self._evaluator = sheet.evaluator if sheet is not None else FormulaEvaluator()

    @property
    def sheet(self) -> Spreadsheet | None:
        return self._sheet

    @property
    def row(self) -> int:
        return self._row

    @property
    def column(self) -> int:
        return self._col

    @property
    def coordinate(self) -> str:
        return rowcol_to_a1(self._row, self._col)

    @property
    def formula(self) -> str:
        return self._formula

    @property
    def dirty(self) -> bool:
        return self._dirty

    def set_formula(self, formula: str) -> None:
        """Store *formula* verbatim. Validation is deferred to ``value()``."""
        self._formula = formula
        self._dirty = True

    def set_dirty(self) -> None:
        self._dirty = True

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def value(self) -> Value:
        """Return the evaluated value, recomputing it if the cache is stale.

        Never raises.  A circular reference makes the cell INVALID and leaves
        it dirty.  A reference chain too long to evaluate in one go is
        computed from its far end first, so the result does not depend on
        which cells happened to be cached already.
        """
        if not self._dirty:
            return self._cached

        evaluator = self._evaluator
        if not evaluator.busy:
            return self._evaluate_outermost()
        try:
            return self._evaluate()
        except (DepthExceeded, RecursionError):
            # The first cell to see the abort is the deepest one reached.
            if evaluator.resume_at is None:
                evaluator.resume_at = self
            raise

    def _evaluate(self) -> Value:
        evaluator = self._evaluator
        evaluator.enter(self)
        try:
            result = self._compute()
        finally:
            evaluator.leave(self)
        self._cached = result
        self._dirty = False
        return result

    def _evaluate_outermost(self) -> Value:
        """Evaluate as the first cell on the stack, resuming overlong chains.

        Each retry starts from a dirty cell deeper in the chain and caches
        it before going back up, so the loop ends after at most one pass per
        cell.  Nothing on an aborted path is cached.
        """
        evaluator = self._evaluator
        pending: list[Cell] = [self]
        while pending:
            cell = pending[-1]
            if not cell._dirty:
                pending.pop()
                continue
            evaluator.resume_at = None
            try:
                cell._evaluate()
                continue
            except CycleDetected as exc:
                evaluator.reset()
                logger.debug("Evaluation of %s aborted: %s", self.coordinate, exc)
                return INVALID
            except (DepthExceeded, RecursionError) as exc:
                evaluator.reset()
                resume = evaluator.resume_at
                evaluator.resume_at = None
                reason = exc
            if not isinstance(resume, Cell) or any(resume is c for c in pending):
                logger.debug("Evaluation of %s aborted: %s", self.coordinate, reason)
                return INVALID
            logger.debug("Evaluating %s before retrying %s", resume.coordinate, cell.coordinate)
            pending.append(resume)
        return self._cached

    def _compute(self) -> Value:
        """Evaluate the formula text, dispatching on its first character."""
        text = self._formula
        if text.startswith("'"):
            return Text(text[1:])
        if text.startswith("="):
            return self._evaluator.evaluate_expression(text[1:])
        number = parse_number(text)
        if number is not None:
            return Number(number)
        return Text(text)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def display_text(self) -> str:
        return display_text(self.value())

    @property
    def alignment(self) -> str:
        return alignment(self.value())

    def __repr__(self) -> str:
        return f"<Cell {self.coordinate} formula={self._formula!r}>"
