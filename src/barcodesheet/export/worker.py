"""
Document export worker.

Rasterizes every rendered symbol concurrently, waits for all of them, lays
the results out on the page grid and saves the PDF once.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from barcodesheet.sheet import Record
from barcodesheet.symbols import RenderedSymbol, rasterize

from .layout import DEFAULT_LAYOUT, ImagePlacement, LayoutConfig, RasterPair, page_count, plan_layout
from .pdf import write_pdf

LOGGER = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """
    Result of one export.

    Attributes:
        output_path: Written PDF
        records: Number of records laid out
        images_placed: Symbols embedded in the document
        images_missing: Symbols omitted because no raster was available
        pages: Pages in the document
        elapsed_seconds: Total export time
    """

    output_path: Path
    records: int
    images_placed: int
    images_missing: int
    pages: int
    elapsed_seconds: float


async def _resolve_pair(
    primary: RenderedSymbol | None, secondary: RenderedSymbol | None
) -> RasterPair:
    first, second = await asyncio.gather(rasterize(primary), rasterize(secondary))
    return (first, second)


async def resolve_rasters(handles: Sequence[RenderedSymbol | None]) -> list[RasterPair]:
    """
    Rasterize a handle table, one task per record.

    Parameters:
        handles: Handle table where index 2*i / 2*i + 1 belong to record i

    Returns:
        (primary, secondary) PNG bytes per record; None where no image
        could be produced

    Raises:
        ValueError: If the handle table has odd length
    """
    if len(handles) % 2:
        raise ValueError(f"Handle table has odd length {len(handles)}.")

    tasks = [
        asyncio.create_task(_resolve_pair(handles[i], handles[i + 1]))
        for i in range(0, len(handles), 2)
    ]
    return list(await asyncio.gather(*tasks))


async def export_pdf(
    records: Sequence[Record],
    handles: Sequence[RenderedSymbol | None],
    output_path: Path,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> ExportResult:
    """
    Export records and their rendered symbols to a PDF.

    Parameters:
        records: Records in sheet order
        handles: Handle table, two entries per record
        output_path: Destination PDF
        config: Layout constants

    Returns:
        ExportResult with placement statistics

    Raises:
        ValueError: If the handle table doesn't hold two entries per record
        OSError: If the PDF can't be written

    Example:
        >>> result = asyncio.run(export_pdf(records, handles, Path("barcodes.pdf")))
        >>> print(f"{result.images_placed} symbols on {result.pages} page(s)")
    """
    if len(handles) != 2 * len(records):
        raise ValueError(
            f"Expected {2 * len(records)} handle(s) for {len(records)} record(s), got {len(handles)}."
        )

    start_time = time.perf_counter()
    rasters = await resolve_rasters(handles)
    placements = plan_layout(records, rasters, config)
    pages = write_pdf(placements, output_path, config, pages=page_count(len(records), config))

    images_placed = sum(1 for p in placements if isinstance(p, ImagePlacement))
    result = ExportResult(
        output_path=output_path,
        records=len(records),
        images_placed=images_placed,
        images_missing=2 * len(records) - images_placed,
        pages=pages,
        elapsed_seconds=time.perf_counter() - start_time,
    )
    LOGGER.info(
        "export_complete",
        extra={
            "output_path": str(output_path),
            "records": result.records,
            "images_placed": result.images_placed,
            "images_missing": result.images_missing,
            "pages": result.pages,
        },
    )
    return result
