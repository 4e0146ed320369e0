"""Command line viewer: print a saved sheet as a tab-separated grid."""

from __future__ import annotations

import argparse
import logging
import sys

from sheetcalc._io import SpreadsheetFormatError, load
from sheetcalc._utils import CellRange


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheetcalc", description="Evaluate and print a saved sheetcalc file",
    )
    parser.add_argument("filename", help="Path to the sheet file")
    parser.add_argument("--range", dest="cell_range", help="Block to print, e.g. A1:C10")
    parser.add_argument(
        "--formulas", action="store_true", help="Print formula text instead of values",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        sheet = load(args.filename)
    except FileNotFoundError:
        print(f"Error: File '{args.filename}' not found", file=sys.stderr)
        return 1
    except (OSError, SpreadsheetFormatError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.cell_range:
        try:
            rng = CellRange.parse(args.cell_range)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    else:
        rng = sheet.used_range()
        if rng is None:
            return 0

    show = sheet.formula if args.formulas else sheet.display_text
    for row in range(rng.top, min(rng.bottom, sheet.rows - 1) + 1):
        print("\t".join(
            show(row, column)
            for column in range(rng.left, min(rng.right, sheet.columns - 1) + 1)
        ))
    return 0
