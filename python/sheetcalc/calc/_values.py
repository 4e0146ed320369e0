"""Evaluated cell values: a closed union of Number, Text and Invalid."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

INVALID_DISPLAY = "####"


class ValueKind(enum.Enum):
    NUMBER = "number"
    TEXT = "text"
    INVALID = "invalid"


@dataclass(frozen=True)
class Number:
    """A numeric result. Always stored as a float."""

    value: float

    kind = ValueKind.NUMBER

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def __str__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True)
class Text:
    """A string result, kept verbatim."""

    value: str

    kind = ValueKind.TEXT

    def __str__(self) -> str:
        return self.value


class Invalid:
    """Poison value produced by any parse or evaluation failure.

    There is exactly one instance, ``INVALID``.  It flows through arithmetic
    instead of raising: any operation with an Invalid operand yields Invalid.
    """

    __slots__ = ()
    _instance: Invalid | None = None

    kind = ValueKind.INVALID

    def __new__(cls) -> Invalid:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "INVALID"

    def __str__(self) -> str:
        return INVALID_DISPLAY

    def __reduce__(self) -> str:
        return "INVALID"


INVALID = Invalid()

Value = Union[Number, Text, Invalid]


def format_number(value: float) -> str:
    """Shortest natural rendering: ``7``, ``0.5``, ``-3.5``, ``1e+20``."""
    text = format(value, ".15g")
    if text == "-0":
        return "0"
    return text


def display_text(value: Value) -> str:
    """Text shown for *value* in a grid: Invalid renders as ``####``."""
    if isinstance(value, Invalid):
        return INVALID_DISPLAY
    if isinstance(value, Number):
        return format_number(value.value)
    if isinstance(value, Text):
        return value.value
    raise TypeError(f"Not a cell value: {value!r}")


def alignment(value: Value) -> str:
    """``"left"`` for text, ``"right"`` for everything else."""
    if isinstance(value, Text):
        return "left"
    if isinstance(value, (Number, Invalid)):
        return "right"
    raise TypeError(f"Not a cell value: {value!r}")
