"""Binary persistence of a sheet's formulas.

Layout (big-endian)::

    uint32  magic number 0x7F51C883
    repeated until end of stream:
        uint16  row
        uint16  column
        uint32  byte length of the formula (0xFFFFFFFF = null string)
        bytes   formula text, UTF-16BE

Only formulas are stored; values are recomputed after loading.
"""

from __future__ import annotations

import logging
import os
import struct
from collections.abc import Iterator
from typing import Any, BinaryIO

from sheetcalc._sheet import Spreadsheet

logger = logging.getLogger(__name__)

MAGIC_NUMBER = 0x7F51C883

_MAGIC = struct.Struct(">I")
_COORD = struct.Struct(">HH")
_LENGTH = struct.Struct(">I")
_NULL_STRING = 0xFFFFFFFF


class SpreadsheetFormatError(ValueError):
    """The stream is not a sheet file, or it is truncated or corrupt."""


# ---------------------------------------------------------------------------
# Streams
# ---------------------------------------------------------------------------


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise SpreadsheetFormatError(f"Truncated file while reading {what}")
    return data


def _read_string(stream: BinaryIO) -> str:
    (length,) = _LENGTH.unpack(_read_exact(stream, _LENGTH.size, "string length"))
    if length == _NULL_STRING:
        return ""
    if length % 2:
        raise SpreadsheetFormatError(f"Odd UTF-16 byte length {length}")
    raw = _read_exact(stream, length, "string data")
    return raw.decode("utf-16-be", errors="surrogatepass")


def _encode_string(text: str) -> bytes:
    raw = text.encode("utf-16-be", errors="surrogatepass")
    return _LENGTH.pack(len(raw)) + raw


def write_stream(sheet: Spreadsheet, stream: BinaryIO) -> int:
    """Write the magic number and every non-empty formula. Returns the record count."""
    stream.write(_MAGIC.pack(MAGIC_NUMBER))
    count = 0
    for row, column, formula in sheet.records():
        stream.write(_COORD.pack(row, column))
        stream.write(_encode_string(formula))
        count += 1
    return count


def iter_records(stream: BinaryIO) -> Iterator[tuple[int, int, str]]:
    """Yield ``(row, column, formula)`` records after checking the magic number."""
    header = stream.read(_MAGIC.size)
    if len(header) != _MAGIC.size or _MAGIC.unpack(header)[0] != MAGIC_NUMBER:
        raise SpreadsheetFormatError("The file is not a sheetcalc file")
    while True:
        coord = stream.read(_COORD.size)
        if not coord:
            return
        if len(coord) != _COORD.size:
            raise SpreadsheetFormatError("Truncated file while reading coordinates")
        row, column = _COORD.unpack(coord)
        yield row, column, _read_string(stream)


def read_stream(stream: BinaryIO, sheet: Spreadsheet) -> int:
    """Replace the contents of *sheet* with the records in *stream*.

    The whole stream is validated before the sheet is touched, so a corrupt
    file leaves the sheet unchanged.  Returns the record count.
    """
    records = list(iter_records(stream))
    for row, column, _ in records:
        if not sheet.in_bounds(row, column):
            raise SpreadsheetFormatError(
                f"Cell ({row}, {column}) outside {sheet.rows}x{sheet.columns} grid"
            )
    return sheet.load_records(records)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def save(sheet: Spreadsheet, filename: str | os.PathLike[str]) -> None:
    """Write *sheet* to *filename*."""
    with open(filename, "wb") as fh:
        count = write_stream(sheet, fh)
    logger.info("Saved %d cells to %s", count, os.fspath(filename))


def load(filename: str | os.PathLike[str], **options: Any) -> Spreadsheet:
    """Read a sheet from *filename*.

    Keyword arguments are passed to :class:`Spreadsheet`.
    """
    sheet = Spreadsheet(**options)
    with open(filename, "rb") as fh:
        count = read_stream(fh, sheet)
    logger.info("Loaded %d cells from %s", count, os.fspath(filename))
    return sheet
