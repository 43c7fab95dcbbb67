"""Spreadsheet to CODE39 barcode PDF tooling."""
