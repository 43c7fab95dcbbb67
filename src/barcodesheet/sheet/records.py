"""
Deriving barcode records from raw spreadsheet rows.

Each row with at least five cells becomes one Record:

    primary_code   = cell0 + pad3(cell1) + "-" + cell2
    secondary_code = cell3
    description    = cell4, or "" when empty

Shorter rows are skipped without raising.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any, Iterable, Sequence

from openpyxl.utils.datetime import to_excel

from .loaders import load_rows, read_rows
from .models import Record

LOGGER = logging.getLogger(__name__)

MIN_ROW_CELLS = 5
SERIAL_WIDTH = 3


def cell_text(value: Any) -> str:
    """
    Render a cell value as the text used in a barcode.

    Empty cells become "", booleans "true"/"false", and whole-number floats
    lose their ".0" (legacy .xls files store every number as a float).
    Dates and times become their Excel serial number, which is what .xls
    files hold for the same cell.

    Example:
        >>> cell_text(7.0), cell_text("X"), cell_text(None), cell_text(date(2024, 1, 5))
        ('7', 'X', '', '45296')
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time, timedelta)):
        value = float(to_excel(value))
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def pad3(value: Any) -> str:
    """
    Left-pad a cell's text with zeros to three characters.

    Longer text is left as is; non-numeric text is padded like any other.

    Example:
        >>> pad3(7), pad3("12"), pad3("1234"), pad3("ab")
        ('007', '012', '1234', '0ab')
    """
    return cell_text(value).rjust(SERIAL_WIDTH, "0")


def row_to_record(row: Sequence[Any]) -> Record:
    """
    Map one row (at least five cells) to a Record.

    Raises:
        ValueError: If the row has fewer than five cells
    """
    if len(row) < MIN_ROW_CELLS:
        raise ValueError(f"Row has {len(row)} cell(s); need {MIN_ROW_CELLS}.")

    return Record(
        primary_code=f"{cell_text(row[0])}{pad3(row[1])}-{cell_text(row[2])}",
        secondary_code=cell_text(row[3]),
        description=cell_text(row[4]) if row[4] else "",
    )


def derive_records(rows: Iterable[Sequence[Any]]) -> list[Record]:
    """
    Derive records from raw rows, keeping sheet order.

    Rows shorter than five cells are dropped (logged at DEBUG).

    Example:
        >>> derive_records([["A", "7", "X", "S100", "Widget"], ["B", "1"]])
        [Record(primary_code='A007-X', secondary_code='S100', description='Widget')]
    """
    records: list[Record] = []
    for row_number, row in enumerate(rows, start=1):
        if len(row) < MIN_ROW_CELLS:
            LOGGER.debug(
                "sheet_row_dropped",
                extra={"row_number": row_number, "cells": len(row)},
            )
            continue
        records.append(row_to_record(row))
    return records


def records_from_bytes(data: bytes) -> list[Record]:
    """Parse spreadsheet bytes and derive records in one call."""
    return derive_records(read_rows(data))


def load_records(path: str | Path) -> list[Record]:
    """
    Load a spreadsheet from disk and derive its records.

    Raises:
        FileNotFoundError: If the path doesn't exist
        SheetParseError: If the file is not a readable workbook
    """
    return derive_records(load_rows(path))
