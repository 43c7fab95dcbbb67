"""
Reading spreadsheet files as raw rows.

Only the first worksheet is read. Rows come back as plain lists of cell
values with no header handling. Rows start at the first column used anywhere
in the sheet and end at their own last non-empty cell.
Both Office Open XML (.xlsx) and legacy BIFF (.xls) workbooks are
supported; the format is detected from the file signature rather than the
file name.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any, Iterable
from zipfile import BadZipFile

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
import xlrd
from xlrd.compdoc import CompDocError

XLSX_SIGNATURE = b"PK\x03\x04"
XLS_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


class SheetParseError(ValueError):
    """Raised when a file cannot be read as a spreadsheet."""


def _trim(row: list[Any]) -> list[Any]:
    end = len(row)
    while end > 0 and row[end - 1] is None:
        end -= 1
    return row[:end]


def _normalize(rows: Iterable[list[Any]]) -> list[list[Any]]:
    """Trim trailing empty cells and start every row at the first used column."""
    trimmed = [_trim(row) for row in rows]
    leading = [
        next(i for i, value in enumerate(row) if value is not None)
        for row in trimmed
        if row
    ]
    origin = min(leading, default=0)
    return [row[origin:] for row in trimmed]


def _read_xlsx(data: bytes) -> list[list[Any]]:
    try:
        wb = openpyxl.load_workbook(BytesIO(data), read_only=True, data_only=True)
    except (BadZipFile, InvalidFileException, KeyError, OSError) as e:
        raise SheetParseError(f"Not a readable .xlsx workbook: {e}") from e

    try:
        if not wb.worksheets:
            raise SheetParseError("Workbook has no worksheets.")
        ws = wb.worksheets[0]
        return _normalize(list(row) for row in ws.iter_rows(values_only=True))
    finally:
        wb.close()


def _xls_value(cell: xlrd.sheet.Cell) -> Any:
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    return cell.value


def _read_xls(data: bytes) -> list[list[Any]]:
    try:
        book = xlrd.open_workbook(file_contents=data, on_demand=True)
    except (xlrd.XLRDError, CompDocError) as e:
        raise SheetParseError(f"Not a readable .xls workbook: {e}") from e

    try:
        if book.nsheets == 0:
            raise SheetParseError("Workbook has no worksheets.")
        sheet = book.sheet_by_index(0)
        return _normalize(
            [_xls_value(cell) for cell in sheet.row(r)] for r in range(sheet.nrows)
        )
    finally:
        book.release_resources()


def read_rows(data: bytes) -> list[list[Any]]:
    """
    Parse spreadsheet bytes into raw rows from the first worksheet.

    Parameters:
        data: Contents of an .xlsx or .xls file

    Returns:
        One list of cell values per row, in sheet order. Interior empty
        cells are None; trailing empty cells are dropped. Columns left of
        the first used column are skipped.

    Raises:
        SheetParseError: If the bytes are not a readable workbook

    Example:
        >>> rows = read_rows(Path("serials.xlsx").read_bytes())
        >>> rows[0]
        ['A', 7, 'X', 'S100', 'Widget']
    """
    if data.startswith(XLSX_SIGNATURE):
        return _read_xlsx(data)
    if data.startswith(XLS_SIGNATURE):
        return _read_xls(data)
    raise SheetParseError("Unrecognized file format (expected .xlsx or .xls).")


def load_rows(path: str | Path) -> list[list[Any]]:
    """
    Load raw rows from a spreadsheet on disk.

    Raises:
        FileNotFoundError: If the path doesn't exist
        SheetParseError: If the file is not a readable workbook
    """
    p = Path(path).expanduser()
    return read_rows(p.read_bytes())
