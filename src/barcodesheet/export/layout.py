"""
Page grid arithmetic and placement planning.

All lengths are millimetres with the origin at the top-left corner of the
page. Records fill a two-column grid; each cell holds the primary symbol,
the secondary symbol below it, and the record's description below both.
Rows that no longer fit on a page continue on the next one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

from barcodesheet.sheet import Record

DEFAULT_FILENAME = "barcodes.pdf"


@dataclass(frozen=True)
class LayoutConfig:
    """
    Grid and typography constants for the export document.

    Attributes:
        page_width: Page width (mm), A4 portrait by default
        page_height: Page height (mm)
        items_per_row: Records per grid row
        margin_left: Left edge of the first column
        margin_top: Top edge of the first row
        column_width: Horizontal distance between columns
        row_height: Vertical distance between rows
        image_width: Width of each placed symbol
        image_height: Height of each placed symbol
        secondary_offset: Distance from primary to secondary symbol top
        text_offset_x: Description x offset from the cell origin
        text_offset_y: Description baseline offset from the cell origin
        font_name: Description font
        font_size: Description font size (pt)
        text_max_width: Wrap width for descriptions
        line_height_factor: Line spacing as a multiple of font size
    """

    page_width: float = A4[0] / mm
    page_height: float = A4[1] / mm
    items_per_row: int = 2
    margin_left: float = 10
    margin_top: float = 10
    column_width: float = 100
    row_height: float = 70
    image_width: float = 90
    image_height: float = 30
    secondary_offset: float = 35
    text_offset_x: float = 2
    text_offset_y: float = 70
    font_name: str = "Helvetica"
    font_size: float = 10
    text_max_width: float = 90
    line_height_factor: float = 1.15

    @property
    def rows_per_page(self) -> int:
        """Grid rows whose description baseline still lands on the page."""
        usable = self.page_height - self.margin_top - self.text_offset_y
        return max(1, int(usable // self.row_height) + 1)

    @property
    def records_per_page(self) -> int:
        return self.rows_per_page * self.items_per_row

    @property
    def line_height(self) -> float:
        """Distance between wrapped description lines (mm)."""
        return self.font_size * self.line_height_factor / 72 * 25.4


DEFAULT_LAYOUT = LayoutConfig()


@dataclass(frozen=True)
class GridPosition:
    """
    Where a record lands.

    Attributes:
        page: Zero-based page number
        row: Grid row on that page
        column: Grid column
        x: Left edge of the cell (mm)
        y: Top edge of the cell (mm)
    """

    page: int
    row: int
    column: int
    x: float
    y: float


@dataclass(frozen=True)
class ImagePlacement:
    page: int
    x: float
    y: float
    width: float
    height: float
    png: bytes
    kind: Literal["image"] = "image"


@dataclass(frozen=True)
class TextPlacement:
    page: int
    x: float
    y: float
    text: str
    font_size: float
    max_width: float
    kind: Literal["text"] = "text"


Placement = ImagePlacement | TextPlacement

RasterPair = tuple[bytes | None, bytes | None]


def grid_position(index: int, config: LayoutConfig = DEFAULT_LAYOUT) -> GridPosition:
    """
    Compute the grid cell for the record at `index`.

    Example:
        >>> grid_position(1)
        GridPosition(page=0, row=0, column=1, x=110, y=10)
    """
    grid_row = index // config.items_per_row
    column = index % config.items_per_row
    page, row = divmod(grid_row, config.rows_per_page)
    return GridPosition(
        page=page,
        row=row,
        column=column,
        x=config.margin_left + column * config.column_width,
        y=config.margin_top + row * config.row_height,
    )


def page_count(record_count: int, config: LayoutConfig = DEFAULT_LAYOUT) -> int:
    """Number of pages needed for `record_count` records (at least one)."""
    if record_count <= 0:
        return 1
    return grid_position(record_count - 1, config).page + 1


def place_record(
    index: int,
    record: Record,
    rasters: RasterPair,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> list[Placement]:
    """
    Plan one record's cell.

    A missing raster leaves its slot empty; the rest of the cell is still
    placed.
    """
    pos = grid_position(index, config)
    primary, secondary = rasters
    placements: list[Placement] = []

    if primary:
        placements.append(
            ImagePlacement(
                page=pos.page,
                x=pos.x,
                y=pos.y,
                width=config.image_width,
                height=config.image_height,
                png=primary,
            )
        )
    if secondary:
        placements.append(
            ImagePlacement(
                page=pos.page,
                x=pos.x,
                y=pos.y + config.secondary_offset,
                width=config.image_width,
                height=config.image_height,
                png=secondary,
            )
        )
    if record.description:
        placements.append(
            TextPlacement(
                page=pos.page,
                x=pos.x + config.text_offset_x,
                y=pos.y + config.text_offset_y,
                text=record.description,
                font_size=config.font_size,
                max_width=config.text_max_width,
            )
        )
    return placements


def plan_layout(
    records: Sequence[Record],
    rasters: Sequence[RasterPair],
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> list[Placement]:
    """
    Plan every placement for an export, in record order.

    Parameters:
        records: Records in sheet order
        rasters: (primary, secondary) PNG bytes per record, None if missing
        config: Layout constants

    Returns:
        Flat list of image and text placements

    Raises:
        ValueError: If records and rasters differ in length
    """
    if len(records) != len(rasters):
        raise ValueError(
            f"Got {len(rasters)} raster pair(s) for {len(records)} record(s)."
        )

    placements: list[Placement] = []
    for index, (record, pair) in enumerate(zip(records, rasters)):
        placements.extend(place_record(index, record, pair, config))
    return placements
