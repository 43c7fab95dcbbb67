"""Shared fixtures: spreadsheets built on the fly with openpyxl (.xlsx) and xlwt (.xls)."""

from io import BytesIO
from pathlib import Path
from typing import Any

import openpyxl
import pytest
import xlwt


def xlsx_bytes(rows: list[list[Any]], *, extra_sheet: list[list[Any]] | None = None) -> bytes:
    """Build an .xlsx workbook whose first sheet holds `rows`."""
    wb = openpyxl.Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    if extra_sheet is not None:
        other = wb.create_sheet("Other")
        for row in extra_sheet:
            other.append(row)
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def xls_bytes(rows: list[list[Any]], *, extra_sheet: list[list[Any]] | None = None) -> bytes:
    """Build a legacy .xls workbook whose first sheet holds `rows`.

    None values are written as blank cells.
    """
    wb = xlwt.Workbook()
    sheets = [("Serials", rows)]
    if extra_sheet is not None:
        sheets.append(("Other", extra_sheet))
    for name, sheet_rows in sheets:
        ws = wb.add_sheet(name)
        for r, row in enumerate(sheet_rows):
            for c, value in enumerate(row):
                ws.write(r, c, value)
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


SCENARIO_ROWS = [
    ["A", "7", "X", "S100", "Widget"],
    ["B", 12, "Y", "S200", "Gadget"],
    ["C", "3", "Z"],
]


@pytest.fixture
def write_xlsx(tmp_path: Path):
    """Return a function writing rows to an .xlsx file under tmp_path."""
    def _write(rows: list[list[Any]], name: str = "serials.xlsx", **kwargs: Any) -> Path:
        path = tmp_path / name
        path.write_bytes(xlsx_bytes(rows, **kwargs))
        return path

    return _write


@pytest.fixture
def scenario_xlsx(write_xlsx) -> Path:
    return write_xlsx(SCENARIO_ROWS)


@pytest.fixture
def write_xls(tmp_path: Path):
    """Return a function writing rows to an .xls file under tmp_path."""
    def _write(rows: list[list[Any]], name: str = "serials.xls", **kwargs: Any) -> Path:
        path = tmp_path / name
        path.write_bytes(xls_bytes(rows, **kwargs))
        return path

    return _write
