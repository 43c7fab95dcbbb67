from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any, Iterable

from barcode import Code39
from barcode.errors import BarcodeError
from barcode.writer import ImageWriter, SVGWriter

from barcodesheet.sheet import Record

LOGGER = logging.getLogger(__name__)

# Display sizes are CSS pixels; python-barcode writers work in millimetres.
PX_PER_INCH = 96
MM_PER_INCH = 25.4
DEFAULT_DPI = 300


def px_to_mm(px: float) -> float:
    return px * MM_PER_INCH / PX_PER_INCH


@dataclass(frozen=True)
class SymbolOptions:
    """
    Display parameters for a CODE39 symbol.

    Attributes:
        module_width: Width of the narrowest bar, in px
        height: Bar height, in px
        display_value: Print the human-readable code under the bars
        margin: Quiet zone on each side, in px
        dpi: Resolution used when rasterizing
    """

    module_width: float = 1.5
    height: float = 50
    display_value: bool = True
    margin: float = 10
    dpi: int = DEFAULT_DPI

    def writer_options(self) -> dict[str, Any]:
        """Translate to python-barcode writer options."""
        return {
            "module_width": px_to_mm(self.module_width),
            "module_height": px_to_mm(self.height),
            "quiet_zone": px_to_mm(self.margin),
            "write_text": self.display_value,
            "dpi": self.dpi,
        }


DEFAULT_OPTIONS = SymbolOptions()


@dataclass(frozen=True)
class RenderedSymbol:
    """
    Handle to a rendered CODE39 symbol.

    Holds the encoded code (upper-cased by the symbology), the options it
    was drawn with and its SVG output.
    """

    code: str
    options: SymbolOptions
    svg: bytes = field(repr=False)


def _code39(code: str, writer: Any) -> Code39:
    return Code39(code, writer=writer, add_checksum=False)


def render_symbol(
    code: str, options: SymbolOptions = DEFAULT_OPTIONS
) -> RenderedSymbol | None:
    """
    Render a code as a CODE39 symbol.

    Returns None (and logs a warning) when the code can't be encoded,
    e.g. it is empty or contains characters outside the CODE39 set.
    """
    if not code:
        LOGGER.warning("symbol_render_failed", extra={"code": code, "error": "empty code"})
        return None

    try:
        symbol = _code39(code, SVGWriter())
        svg = symbol.render(options.writer_options())
    except BarcodeError as e:
        LOGGER.warning("symbol_render_failed", extra={"code": code, "error": str(e)})
        return None

    if isinstance(svg, str):
        svg = svg.encode("utf-8")
    return RenderedSymbol(code=symbol.get_fullcode(), options=options, svg=svg)


def render_pair(
    record: Record, options: SymbolOptions = DEFAULT_OPTIONS
) -> tuple[RenderedSymbol | None, RenderedSymbol | None]:
    """Render a record's primary and secondary codes."""
    return (
        render_symbol(record.primary_code, options),
        render_symbol(record.secondary_code, options),
    )


def render_handles(
    records: Iterable[Record], options: SymbolOptions = DEFAULT_OPTIONS
) -> tuple[RenderedSymbol | None, ...]:
    """
    Build the handle table for a record collection.

    The handle for record i's primary code sits at index 2*i and its
    secondary code at 2*i + 1.
    """
    handles: list[RenderedSymbol | None] = []
    for record in records:
        handles.extend(render_pair(record, options))
    return tuple(handles)


def raster_png(handle: RenderedSymbol) -> bytes:
    """
    Draw a rendered symbol once at its intrinsic size and encode it as PNG.

    The raster is drawn fresh from the handle's code with the Pillow writer;
    the handle's SVG output is not read.

    Raises:
        BarcodeError: If the code can't be encoded
        OSError: If the writer's font can't be loaded
    """
    symbol = _code39(handle.code, ImageWriter(format="PNG"))
    image = symbol.render(handle.options.writer_options())
    buf = BytesIO()
    image.save(buf, format="PNG", dpi=(handle.options.dpi, handle.options.dpi))
    return buf.getvalue()


async def rasterize(handle: RenderedSymbol | None) -> bytes | None:
    """
    Convert a rendered symbol into PNG bytes for embedding in a document.

    Drawing runs in a worker thread so that many conversions can be awaited
    together. An absent handle, or one that fails to draw, resolves to None
    instead of raising.
    """
    if handle is None:
        return None

    try:
        return await asyncio.to_thread(raster_png, handle)
    except (BarcodeError, OSError, ValueError) as e:
        LOGGER.warning("raster_missing", extra={"code": handle.code, "error": str(e)})
        return None


def write_symbol(handle: RenderedSymbol, path: Path) -> Path:
    """Write a symbol to disk as SVG (".svg" suffix) or PNG (anything else)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".svg":
        path.write_bytes(handle.svg)
    else:
        path.write_bytes(raster_png(handle))
    return path
