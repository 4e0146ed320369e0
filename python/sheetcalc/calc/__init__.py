"""sheetcalc.calc - Formula evaluation engine for sheetcalc grids."""

from sheetcalc.calc._evaluator import (
    DEFAULT_MAX_NESTING,
    CycleDetected,
    DepthExceeded,
    EvaluationAborted,
    FormulaEvaluator,
)
from sheetcalc.calc._parser import Cursor, parse_number, parse_reference, preprocess
from sheetcalc.calc._protocol import CellHandle, EmptyGrid, GridAccessor
from sheetcalc.calc._values import (
    INVALID,
    INVALID_DISPLAY,
    Invalid,
    Number,
    Text,
    Value,
    ValueKind,
    alignment,
    display_text,
)

__all__ = [
    "CellHandle",
    "Cursor",
    "CycleDetected",
    "DEFAULT_MAX_NESTING",
    "DepthExceeded",
    "EmptyGrid",
    "EvaluationAborted",
    "FormulaEvaluator",
    "GridAccessor",
    "INVALID",
    "INVALID_DISPLAY",
    "Invalid",
    "Number",
    "Text",
    "Value",
    "ValueKind",
    "alignment",
    "display_text",
    "parse_number",
    "parse_reference",
    "preprocess",
]
