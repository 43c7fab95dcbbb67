"""
Spreadsheet ingestion.

Reads the first worksheet of an .xlsx/.xls file as raw rows and derives
barcode records from them.

Basic usage:
    >>> from barcodesheet.sheet import load_records
    >>>
    >>> for record in load_records("serials.xlsx"):
    ...     print(record.primary_code, record.secondary_code)
"""

from .models import Record
from .loaders import (
    SheetParseError,
    read_rows,
    load_rows,
)
from .records import (
    cell_text,
    pad3,
    row_to_record,
    derive_records,
    records_from_bytes,
    load_records,
)

__all__ = [
    # Models
    "Record",
    # Loaders
    "SheetParseError",
    "read_rows",
    "load_rows",
    # Records
    "cell_text",
    "pad3",
    "row_to_record",
    "derive_records",
    "records_from_bytes",
    "load_records",
]
