"""sheetcalc: a small spreadsheet formula engine.

Usage::

    from sheetcalc import Spreadsheet, load, save

    sheet = Spreadsheet()
    sheet["A1"] = "10"
    sheet["A2"] = "=A1*(2+3)"
    print(sheet.display_text(1, 0))   # 50

    save(sheet, "budget.sp")
    sheet = load("budget.sp")
"""

from sheetcalc._cell import Cell
from sheetcalc._io import MAGIC_NUMBER, SpreadsheetFormatError, load, read_stream, save, write_stream
from sheetcalc._sheet import (
    DEFAULT_COLUMNS,
    DEFAULT_ROWS,
    PasteShapeError,
    SortKey,
    Spreadsheet,
)
from sheetcalc._utils import CellRange, a1_to_rowcol, rowcol_to_a1
from sheetcalc.calc import INVALID, Invalid, Number, Text, Value, ValueKind

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Cell",
    "CellRange",
    "DEFAULT_COLUMNS",
    "DEFAULT_ROWS",
    "INVALID",
    "Invalid",
    "MAGIC_NUMBER",
    "Number",
    "PasteShapeError",
    "SortKey",
    "Spreadsheet",
    "SpreadsheetFormatError",
    "Text",
    "Value",
    "ValueKind",
    "a1_to_rowcol",
    "load",
    "read_stream",
    "rowcol_to_a1",
    "save",
    "write_stream",
]
