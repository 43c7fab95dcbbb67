"""
Export module for barcode sheets.

Provides the page grid arithmetic, the reportlab writer and the async
worker that ties rasterization and layout together.
"""

from .layout import (
    DEFAULT_FILENAME,
    DEFAULT_LAYOUT,
    LayoutConfig,
    GridPosition,
    ImagePlacement,
    TextPlacement,
    Placement,
    grid_position,
    page_count,
    place_record,
    plan_layout,
)
from .pdf import write_pdf, wrap_text
from .worker import ExportResult, export_pdf, resolve_rasters

__all__ = [
    # Layout
    "DEFAULT_FILENAME",
    "DEFAULT_LAYOUT",
    "LayoutConfig",
    "GridPosition",
    "ImagePlacement",
    "TextPlacement",
    "Placement",
    "grid_position",
    "page_count",
    "place_record",
    "plan_layout",
    # Writer
    "write_pdf",
    "wrap_text",
    # Worker
    "ExportResult",
    "export_pdf",
    "resolve_rasters",
]
