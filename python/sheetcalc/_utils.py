"""Coordinate helpers: ``A1`` strings <-> 0-based ``(row, column)`` pairs."""

from __future__ import annotations

import re
from dataclasses import dataclass

_A1_RE = re.compile(r"^([A-Za-z])([1-9][0-9]*)$")
_RANGE_RE = re.compile(r"^([A-Za-z][1-9][0-9]*)(?::([A-Za-z][1-9][0-9]*))?$")


def column_letter(column: int) -> str:
    """0-based column index -> letter (0 -> ``"A"``)."""
    if not 0 <= column < 26:
        raise ValueError(f"Column index out of range: {column}")
    return chr(ord("A") + column)


def column_index(letter: str) -> int:
    """Column letter -> 0-based index, case-insensitive."""
    if len(letter) != 1 or not ("A" <= letter.upper() <= "Z"):
        raise ValueError(f"Invalid column letter: {letter!r}")
    return ord(letter.upper()) - ord("A")


def a1_to_rowcol(ref: str) -> tuple[int, int]:
    """``"B3"`` -> ``(2, 1)``."""
    m = _A1_RE.match(ref.strip())
    if not m:
        raise ValueError(f"Invalid A1 reference: {ref!r}")
    return int(m.group(2)) - 1, column_index(m.group(1))


def rowcol_to_a1(row: int, column: int) -> str:
    """``(2, 1)`` -> ``"B3"``."""
    if row < 0:
        raise ValueError(f"Row index out of range: {row}")
    return f"{column_letter(column)}{row + 1}"


@dataclass(frozen=True)
class CellRange:
    """Inclusive rectangular block of cells, 0-based."""

    top: int
    left: int
    bottom: int
    right: int

    def __post_init__(self) -> None:
        if self.top < 0 or self.left < 0:
            raise ValueError(f"Negative range origin: {self}")
        if self.bottom < self.top or self.right < self.left:
            raise ValueError(f"Empty range: {self}")

    @classmethod
    def parse(cls, text: str) -> CellRange:
        """Parse ``"A1:C3"`` (corners in any order) or a single ``"B2"``."""
        m = _RANGE_RE.match(text.strip())
        if not m:
            raise ValueError(f"Invalid range: {text!r}")
        r1, c1 = a1_to_rowcol(m.group(1))
        r2, c2 = a1_to_rowcol(m.group(2)) if m.group(2) else (r1, c1)
        return cls(min(r1, r2), min(c1, c2), max(r1, r2), max(c1, c2))

    @property
    def row_count(self) -> int:
        return self.bottom - self.top + 1

    @property
    def column_count(self) -> int:
        return self.right - self.left + 1

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        row, column = item
        return self.top <= row <= self.bottom and self.left <= column <= self.right

    def __str__(self) -> str:
        start = rowcol_to_a1(self.top, self.left)
        if self.row_count == 1 and self.column_count == 1:
            return start
        return f"{start}:{rowcol_to_a1(self.bottom, self.right)}"
