"""Tests for saving and loading sheet files."""

from __future__ import annotations

import io
import struct
from pathlib import Path

import pytest

import sheetcalc
from sheetcalc import MAGIC_NUMBER, Spreadsheet, SpreadsheetFormatError
from sheetcalc._io import iter_records, read_stream, write_stream
from sheetcalc.calc import Number


def _build_sheet() -> Spreadsheet:
    sheet = Spreadsheet()
    sheet["A1"] = "10"
    sheet["A2"] = "=A1 * 2"
    sheet["B1"] = "'quoted"
    sheet["Z999"] = "naïve ✓ 𝄞"
    sheet["C3"] = ""  # empty formulas are not written
    return sheet


def _record(row: int, column: int, text: str) -> bytes:
    raw = text.encode("utf-16-be")
    return struct.pack(">HHI", row, column, len(raw)) + raw


class TestStreamFormat:
    def test_header_and_records(self) -> None:
        sheet = Spreadsheet()
        sheet["B1"] = "hi"
        buf = io.BytesIO()
        assert write_stream(sheet, buf) == 1
        assert buf.getvalue() == (
            struct.pack(">I", 0x7F51C883) + struct.pack(">HHI", 0, 1, 4) + "hi".encode("utf-16-be")
        )

    def test_empty_sheet(self) -> None:
        buf = io.BytesIO()
        assert write_stream(Spreadsheet(), buf) == 0
        assert buf.getvalue() == struct.pack(">I", MAGIC_NUMBER)

    def test_null_string_reads_empty(self) -> None:
        data = struct.pack(">I", MAGIC_NUMBER) + struct.pack(">HHI", 2, 3, 0xFFFFFFFF)
        assert list(iter_records(io.BytesIO(data))) == [(2, 3, "")]

    def test_records_in_any_order(self) -> None:
        data = struct.pack(">I", MAGIC_NUMBER) + _record(1, 0, "=A1+1") + _record(0, 0, "4")
        sheet = Spreadsheet()
        assert read_stream(io.BytesIO(data), sheet) == 2
        assert sheet.value(1, 0) == Number(5.0)


class TestRoundTrip:
    def test_save_and_load(self, tmp_path: Path) -> None:
        path = tmp_path / "book.sp"
        original = _build_sheet()
        sheetcalc.save(original, path)
        loaded = sheetcalc.load(path)
        assert list(loaded.records()) == list(original.records())
        assert loaded.value(1, 0) == Number(20.0)
        assert loaded.formula(998, 25) == "naïve ✓ 𝄞"
        assert loaded.cell(2, 2) is None

    def test_load_options(self, tmp_path: Path) -> None:
        path = tmp_path / "book.sp"
        sheet = Spreadsheet()
        sheet["A1"] = "1"
        sheetcalc.save(sheet, path)
        loaded = sheetcalc.load(path, auto_recalculate=False, max_depth=8)
        assert not loaded.auto_recalculate
        assert loaded.evaluator.max_depth == 8

    def test_load_replaces_contents(self) -> None:
        buf = io.BytesIO()
        source = Spreadsheet()
        source["A1"] = "1"
        write_stream(source, buf)
        target = Spreadsheet()
        target["B5"] = "old"
        buf.seek(0)
        read_stream(buf, target)
        assert list(target.records()) == [(0, 0, "1")]


class TestCorruptFiles:
    def test_bad_magic(self) -> None:
        with pytest.raises(SpreadsheetFormatError, match="not a sheetcalc file"):
            read_stream(io.BytesIO(b"PK\x03\x04rest"), Spreadsheet())

    def test_empty_file(self) -> None:
        with pytest.raises(SpreadsheetFormatError):
            read_stream(io.BytesIO(b""), Spreadsheet())

    def test_truncated_coordinates(self) -> None:
        data = struct.pack(">I", MAGIC_NUMBER) + b"\x00"
        with pytest.raises(SpreadsheetFormatError, match="coordinates"):
            read_stream(io.BytesIO(data), Spreadsheet())

    def test_truncated_string(self) -> None:
        data = struct.pack(">I", MAGIC_NUMBER) + _record(0, 0, "hello")[:-3]
        with pytest.raises(SpreadsheetFormatError, match="string data"):
            read_stream(io.BytesIO(data), Spreadsheet())

    def test_odd_length(self) -> None:
        data = struct.pack(">I", MAGIC_NUMBER) + struct.pack(">HHI", 0, 0, 3) + b"abc"
        with pytest.raises(SpreadsheetFormatError, match="Odd"):
            read_stream(io.BytesIO(data), Spreadsheet())

    def test_out_of_range_cell_leaves_sheet_untouched(self) -> None:
        data = struct.pack(">I", MAGIC_NUMBER) + _record(0, 0, "1") + _record(0, 40, "2")
        sheet = Spreadsheet()
        sheet["A1"] = "keep"
        with pytest.raises(SpreadsheetFormatError, match="outside"):
            read_stream(io.BytesIO(data), sheet)
        assert sheet.formula(0, 0) == "keep"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            sheetcalc.load(tmp_path / "missing.sp")
