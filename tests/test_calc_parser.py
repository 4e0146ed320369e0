"""Tests for sheetcalc.calc lexical helpers."""

from __future__ import annotations

import pytest

from sheetcalc.calc._parser import (
    SENTINEL,
    Cursor,
    parse_number,
    parse_reference,
    preprocess,
)


class TestPreprocess:
    def test_strips_all_whitespace(self) -> None:
        assert preprocess(" 1 +\t2 *\n3 ") == "1+2*3" + SENTINEL

    def test_empty_body(self) -> None:
        assert preprocess("") == SENTINEL


class TestParseNumber:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("42", 42.0),
            ("-3.5", -3.5),
            ("+2", 2.0),
            ("1.", 1.0),
            (".25", 0.25),
            ("1e3", 1000.0),
            ("2.5E-1", 0.25),
            ("  7  ", 7.0),
        ],
    )
    def test_numbers(self, text: str, expected: float) -> None:
        assert parse_number(text) == expected

    @pytest.mark.parametrize(
        "text", ["", ".", "abc", "1_000", "inf", "nan", "0x10", "1e", "1.2.3", "12abc"],
    )
    def test_not_numbers(self, text: str) -> None:
        assert parse_number(text) is None


class TestParseReference:
    def test_simple(self) -> None:
        assert parse_reference("A1") == (0, 0)

    def test_lowercase(self) -> None:
        assert parse_reference("c10") == (9, 2)

    def test_three_digit_row(self) -> None:
        assert parse_reference("Z999") == (998, 25)

    @pytest.mark.parametrize("token", ["A0", "A01", "A1000", "AA1", "1A", "A", "A1.5", ""])
    def test_not_references(self, token: str) -> None:
        assert parse_reference(token) is None


class TestCursor:
    def test_take_token_stops_at_operator(self) -> None:
        cur = Cursor(preprocess("A12+3"))
        assert cur.take_token() == "A12"
        assert cur.current == "+"

    def test_take_token_includes_dots(self) -> None:
        cur = Cursor(preprocess("3.25*2"))
        assert cur.take_token() == "3.25"

    def test_take_token_empty_at_operator(self) -> None:
        cur = Cursor(preprocess("*2"))
        assert cur.take_token() == ""
        assert cur.pos == 0

    def test_at_end(self) -> None:
        cur = Cursor(preprocess("7"))
        assert not cur.at_end
        cur.advance()
        assert cur.at_end

    def test_advance_stops_at_sentinel(self) -> None:
        cur = Cursor(preprocess(""))
        cur.advance()
        cur.advance()
        assert cur.pos == 0
        assert cur.at_end

    def test_sentinel_added_when_missing(self) -> None:
        cur = Cursor("1")
        assert cur.text == "1" + SENTINEL
