"""Lexical helpers for formula expressions: cursor, literals and references."""

from __future__ import annotations

import re

# End-of-input marker appended to every preprocessed expression so that
# lookahead never indexes past the string.
SENTINEL = "\0"

# One column letter followed by a 1-3 digit row with no leading zero: A1, z999.
_CELL_REF_RE = re.compile(r"[A-Za-z][1-9][0-9]{0,2}")

# Plain decimal floating point literal.  Deliberately narrower than float():
# no "inf"/"nan", no "_" digit separators, no hex.
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_WHITESPACE_RE = re.compile(r"\s+")


def preprocess(body: str) -> str:
    """Remove all whitespace from an expression body and append the sentinel."""
    return _WHITESPACE_RE.sub("", body) + SENTINEL


def parse_number(text: str) -> float | None:
    """Parse *text* as a float literal, tolerating surrounding whitespace.

    Returns None when the text is not a number.
    """
    stripped = text.strip()
    if not _NUMBER_RE.fullmatch(stripped):
        return None
    return float(stripped)


def parse_reference(token: str) -> tuple[int, int] | None:
    """Resolve a reference token like ``B12`` to 0-based ``(row, column)``.

    Returns None when the token does not have the shape of a reference.
    """
    if not _CELL_REF_RE.fullmatch(token):
        return None
    column = ord(token[0].upper()) - ord("A")
    row = int(token[1:]) - 1
    return row, column


def is_token_char(ch: str) -> bool:
    return ch.isalnum() or ch == "."


class Cursor:
    """Read position into one preprocessed expression.

    A cursor belongs to a single evaluation run; every grammar production
    advances the same instance.
    """

    __slots__ = ("text", "pos", "nesting")

    def __init__(self, text: str) -> None:
        self.text = text if text.endswith(SENTINEL) else text + SENTINEL
        self.pos = 0
        # Current parenthesis depth.
        self.nesting = 0

    @property
    def current(self) -> str:
        return self.text[self.pos]

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text) - 1

    def advance(self) -> None:
        # Never step past the sentinel.
        if self.pos < len(self.text) - 1:
            self.pos += 1

    def take_token(self) -> str:
        """Consume the run of alphanumeric / ``.`` characters at the cursor."""
        start = self.pos
        while is_token_char(self.text[self.pos]):
            self.pos += 1
        return self.text[start:self.pos]

    def __repr__(self) -> str:
        return f"Cursor(pos={self.pos}, text={self.text[:-1]!r})"
