"""Tests for the sheetcalc command line viewer."""

from __future__ import annotations

from pathlib import Path

import pytest

import sheetcalc
from sheetcalc._cli import main


@pytest.fixture
def book(tmp_path: Path) -> Path:
    sheet = sheetcalc.Spreadsheet()
    sheet["B2"] = "3"
    sheet["C2"] = "=B2*2"
    sheet["B3"] = "=1/0"
    path = tmp_path / "book.sp"
    sheetcalc.save(sheet, path)
    return path


class TestMain:
    def test_prints_used_range(self, book: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(book)]) == 0
        assert capsys.readouterr().out == "3\t6\n####\t\n"

    def test_formulas(self, book: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(book), "--formulas"]) == 0
        assert capsys.readouterr().out == "3\t=B2*2\n=1/0\t\n"

    def test_explicit_range(self, book: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(book), "--range", "A2:C2"]) == 0
        assert capsys.readouterr().out == "\t3\t6\n"

    def test_bad_range(self, book: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(book), "--range", "nope"]) == 1
        assert "Invalid range" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(tmp_path / "missing.sp")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_corrupt_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "junk.sp"
        path.write_bytes(b"junk")
        assert main([str(path)]) == 1
        assert "not a sheetcalc file" in capsys.readouterr().err

    def test_empty_sheet_prints_nothing(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = tmp_path / "empty.sp"
        sheetcalc.save(sheetcalc.Spreadsheet(), path)
        assert main([str(path)]) == 0
        assert capsys.readouterr().out == ""
