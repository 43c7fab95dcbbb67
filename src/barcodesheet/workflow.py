"""
Barcode workflow controller.

Holds the current records, their rendered symbols and the manual preview
in an immutable state object that is replaced on every change, and drives
exports from a snapshot of that state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from barcodesheet.export import DEFAULT_FILENAME, DEFAULT_LAYOUT, ExportResult, LayoutConfig, export_pdf
from barcodesheet.sheet import Record, records_from_bytes
from barcodesheet.symbols import DEFAULT_OPTIONS, RenderedSymbol, SymbolOptions, render_handles, render_symbol

LOGGER = logging.getLogger(__name__)


class NoRecordsError(ValueError):
    """Raised when exporting with no records loaded."""


class ExportInProgressError(RuntimeError):
    """Raised when an export is requested while another is still running."""


@dataclass(frozen=True)
class WorkflowState:
    """
    Snapshot of everything the workflow shows.

    Attributes:
        records: Records from the last ingested sheet, in row order
        handles: Rendered symbols; 2*i / 2*i + 1 belong to records[i]
        manual_code: Last non-blank manual entry
        preview: Rendered symbol for manual_code
        generation: Incremented on every ingestion
    """

    records: tuple[Record, ...] = ()
    handles: tuple[RenderedSymbol | None, ...] = ()
    manual_code: str | None = None
    preview: RenderedSymbol | None = None
    generation: int = 0


class BarcodeWorkflow:
    """
    Coordinates ingestion, manual preview and export.

    Example:
        >>> wf = BarcodeWorkflow()
        >>> wf.ingest_file("serials.xlsx")
        >>> result = asyncio.run(wf.export(Path("out")))
    """

    def __init__(
        self,
        *,
        symbol_options: SymbolOptions = DEFAULT_OPTIONS,
        layout: LayoutConfig = DEFAULT_LAYOUT,
    ) -> None:
        self.symbol_options = symbol_options
        self.layout = layout
        self._state = WorkflowState()
        self._exporting = False

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def can_export(self) -> bool:
        return len(self._state.records) > 0

    def ingest_bytes(self, data: bytes) -> tuple[Record, ...]:
        """
        Replace the record collection with the records in `data`.

        The manual preview is kept. On a parse failure the previous state
        is left untouched.

        Raises:
            SheetParseError: If `data` is not a readable workbook
        """
        records = tuple(records_from_bytes(data))
        handles = render_handles(records, self.symbol_options)
        self._state = replace(
            self._state,
            records=records,
            handles=handles,
            generation=self._state.generation + 1,
        )
        LOGGER.info(
            "sheet_ingested",
            extra={"records": len(records), "generation": self._state.generation},
        )
        return records

    def ingest_file(self, path: str | Path) -> tuple[Record, ...]:
        """
        Read a spreadsheet from disk and ingest it.

        Raises:
            FileNotFoundError: If the path doesn't exist
            SheetParseError: If the file is not a readable workbook
        """
        return self.ingest_bytes(Path(path).expanduser().read_bytes())

    def submit_manual(self, text: str) -> bool:
        """
        Set the manual preview code.

        Blank or whitespace-only input is ignored and returns False.
        """
        code = text.strip()
        if not code:
            return False
        self._state = replace(
            self._state,
            manual_code=code,
            preview=render_symbol(code, self.symbol_options),
        )
        return True

    async def export(
        self, output_dir: Path, filename: str = DEFAULT_FILENAME
    ) -> ExportResult:
        """
        Export the current records to `output_dir / filename`.

        The export works on the state as it was when called; ingesting a new
        sheet meanwhile doesn't affect it.

        Raises:
            NoRecordsError: If no records are loaded
            ExportInProgressError: If an export is already running
            OSError: If the PDF can't be written
        """
        if self._exporting:
            raise ExportInProgressError("An export is already running.")

        snapshot = self._state
        if not snapshot.records:
            raise NoRecordsError("No records to export.")

        self._exporting = True
        try:
            return await export_pdf(
                snapshot.records,
                snapshot.handles,
                output_dir / filename,
                self.layout,
            )
        finally:
            self._exporting = False
