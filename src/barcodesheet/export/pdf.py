"""
Writing planned placements to a PDF with reportlab.

Placements use top-left millimetre coordinates; reportlab's origin is the
bottom-left corner in points, so every y is flipped against the page
height here and nowhere else.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Sequence

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from .layout import DEFAULT_LAYOUT, ImagePlacement, LayoutConfig, Placement, TextPlacement


def wrap_text(text: str, config: LayoutConfig = DEFAULT_LAYOUT, max_width: float | None = None) -> list[str]:
    """Split text into lines no wider than `max_width` mm in the layout font."""
    width = config.text_max_width if max_width is None else max_width
    lines: list[str] = []
    for paragraph in text.splitlines() or [""]:
        lines.extend(simpleSplit(paragraph, config.font_name, config.font_size, width * mm) or [""])
    return lines


def _draw_image(c: canvas.Canvas, p: ImagePlacement, config: LayoutConfig) -> None:
    c.drawImage(
        ImageReader(BytesIO(p.png)),
        p.x * mm,
        (config.page_height - p.y - p.height) * mm,
        width=p.width * mm,
        height=p.height * mm,
    )


def _draw_text(c: canvas.Canvas, p: TextPlacement, config: LayoutConfig) -> None:
    # p.y is the baseline of the first line
    c.setFont(config.font_name, p.font_size)
    for i, line in enumerate(wrap_text(p.text, config, p.max_width)):
        baseline = p.y + i * config.line_height
        c.drawString(p.x * mm, (config.page_height - baseline) * mm, line)


def write_pdf(
    placements: Sequence[Placement],
    output_path: Path,
    config: LayoutConfig = DEFAULT_LAYOUT,
    *,
    pages: int = 1,
) -> int:
    """
    Draw placements page by page and save the document once.

    Parameters:
        placements: Planned images and texts
        output_path: Destination PDF path (parent directories are created)
        config: Layout constants used to plan the placements
        pages: Minimum number of pages to emit

    Returns:
        Number of pages written

    Raises:
        OSError: If the output file can't be written
    """
    total_pages = max([pages, *(p.page + 1 for p in placements)])
    by_page: dict[int, list[Placement]] = {}
    for p in placements:
        by_page.setdefault(p.page, []).append(p)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    c = canvas.Canvas(
        str(output_path),
        pagesize=(config.page_width * mm, config.page_height * mm),
    )
    for page in range(total_pages):
        for p in by_page.get(page, []):
            if isinstance(p, ImagePlacement):
                _draw_image(c, p, config)
            else:
                _draw_text(c, p, config)
        c.showPage()
    c.save()
    return total_pages
