"""FormulaEvaluator: recursive descent evaluator for cell expressions.

Grammar, left-to-right with the usual precedence::

    expression := term (('+' | '-') term)*
    term       := factor (('*' | '/') factor)*
    factor     := '-'? primary
    primary    := number | cell-reference | '(' expression ')'

Errors never raise: malformed syntax, arithmetic on text, division by zero
and unparsable tokens all produce the ``INVALID`` poison value, which then
propagates through any further arithmetic.

Cross-cell evaluation is on demand.  The evaluator keeps a stack of the
cells currently being computed.  Re-entering one of them aborts the whole
evaluation with :class:`CycleDetected`, which the outermost cell turns into
``INVALID``.  Nesting deeper than ``max_depth`` cells (or ``max_nesting``
parentheses) raises :class:`DepthExceeded`.  A long acyclic chain is not an
error: the deepest cell reached is recorded in ``resume_at`` so the outermost
cell can compute it first and retry from a warmer cache.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sheetcalc.calc._parser import Cursor, parse_number, parse_reference, preprocess
from sheetcalc.calc._protocol import EmptyGrid
from sheetcalc.calc._values import INVALID, Number, Value

if TYPE_CHECKING:
    from sheetcalc.calc._protocol import CellHandle, GridAccessor

logger = logging.getLogger(__name__)

DEFAULT_MAX_NESTING = 64


# ---------------------------------------------------------------------------
# Aborted evaluations
# ---------------------------------------------------------------------------


class EvaluationAborted(Exception):
    """Evaluation could not finish; the outermost cell reports INVALID."""


class CycleDetected(EvaluationAborted):
    """A cell's value depends on itself."""

    def __init__(self, chain: list[str]) -> None:
        super().__init__(f"Circular reference: {' -> '.join(chain)}")
        self.chain = chain


class DepthExceeded(EvaluationAborted):
    """Too many nested cell references or parentheses."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Evaluation nested deeper than {limit} levels")
        self.limit = limit


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------


def _binary_op(left: Value, op: str, right: Value) -> Value:
    """Apply ``+ - * /`` to two values. Anything but two Numbers is Invalid."""
    if not isinstance(left, Number) or not isinstance(right, Number):
        return INVALID
    if op == "+":
        return Number(left.value + right.value)
    if op == "-":
        return Number(left.value - right.value)
    if op == "*":
        return Number(left.value * right.value)
    if op == "/":
        if right.value == 0.0:
            return INVALID
        return Number(left.value / right.value)
    raise ValueError(f"Unknown operator: {op!r}")


def _negate(value: Value) -> Value:
    if isinstance(value, Number):
        return Number(-value.value)
    return INVALID


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------


class FormulaEvaluator:
    """Evaluates expression bodies against a grid.

    Usage::

        evaluator = FormulaEvaluator(sheet)
        evaluator.evaluate_expression("(A1+2)*B3")

    One evaluator serves a whole grid.  It is not thread-safe: the stack of
    in-progress cells assumes a single thread of control.

    ``max_depth=None`` leaves the number of nested cells unbounded; a
    spreadsheet passes its cell count, which no acyclic chain can exceed.
    """

    def __init__(
        self,
        grid: GridAccessor | None = None,
        max_depth: int | None = None,
        max_nesting: int = DEFAULT_MAX_NESTING,
    ) -> None:
        if max_depth is not None and max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        if max_nesting < 1:
            raise ValueError(f"max_nesting must be positive, got {max_nesting}")
        self._grid: GridAccessor = grid if grid is not None else EmptyGrid()
        self.max_depth = max_depth
        self.max_nesting = max_nesting
        self._active: list[CellHandle] = []
        # Deepest cell that gave up on an overly long chain, if any.
        self.resume_at: CellHandle | None = None

    @property
    def busy(self) -> bool:
        """True while some cell evaluation is in progress."""
        return bool(self._active)

    def enter(self, cell: CellHandle) -> None:
        """Push *cell* onto the in-progress stack; pair with :meth:`leave`."""
        if any(active is cell for active in self._active):
            chain = [repr(c) for c in self._active] + [repr(cell)]
            raise CycleDetected(chain)
        if self.max_depth is not None and len(self._active) >= self.max_depth:
            raise DepthExceeded(self.max_depth)
        self._active.append(cell)

    def leave(self, cell: CellHandle) -> None:
        if self._active and self._active[-1] is cell:
            self._active.pop()

    def reset(self) -> None:
        """Forget every in-progress cell, e.g. after the stack overflowed."""
        self._active.clear()

    def evaluate_expression(self, body: str) -> Value:
        """Evaluate the text after a leading ``=``.

        Whitespace is ignored.  Input left over after a complete expression
        makes the result Invalid.  May raise :class:`EvaluationAborted` when
        a referenced cell cannot finish.
        """
        cursor = Cursor(preprocess(body))
        result = self._expression(cursor)
        if not cursor.at_end:
            logger.debug("Unconsumed input at %d in %r", cursor.pos, body)
            return INVALID
        return result

    # ------------------------------------------------------------------
    # Grammar productions
    # ------------------------------------------------------------------

    def _expression(self, cursor: Cursor) -> Value:
        result = self._term(cursor)
        while not cursor.at_end:
            op = cursor.current
            if op not in ("+", "-"):
                return result
            cursor.advance()
            result = _binary_op(result, op, self._term(cursor))
        return result

    def _term(self, cursor: Cursor) -> Value:
        result = self._factor(cursor)
        while not cursor.at_end:
            op = cursor.current
            if op not in ("*", "/"):
                return result
            cursor.advance()
            result = _binary_op(result, op, self._factor(cursor))
        return result

    def _factor(self, cursor: Cursor) -> Value:
        negative = False
        if cursor.current == "-":
            negative = True
            cursor.advance()
        result = self._primary(cursor)
        if negative:
            return _negate(result)
        return result

    def _primary(self, cursor: Cursor) -> Value:
        if cursor.current == "(":
            cursor.advance()
            cursor.nesting += 1
            if cursor.nesting > self.max_nesting:
                raise DepthExceeded(self.max_nesting)
            result = self._expression(cursor)
            cursor.nesting -= 1
            if cursor.current != ")":
                result = INVALID
            cursor.advance()
            return result

        token = cursor.take_token()
        ref = parse_reference(token)
        if ref is not None:
            return self._resolve_reference(*ref)
        number = parse_number(token)
        if number is None:
            logger.debug("Cannot parse operand %r", token)
            return INVALID
        return Number(number)

    # ------------------------------------------------------------------
    # Reference resolution
    # ------------------------------------------------------------------

    def _resolve_reference(self, row: int, column: int) -> Value:
        """Value of another cell; an empty slot reads as 0."""
        cell = self._grid.lookup(row, column)
        if cell is None:
            return Number(0.0)
        return cell.value()
