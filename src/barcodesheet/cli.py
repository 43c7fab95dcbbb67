"""
barcodesheet CLI

Commands:
- records: Show the barcode records derived from a spreadsheet
- export: Render a spreadsheet's barcodes into a PDF
- preview: Render a single code to PNG or SVG
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import replace
from pathlib import Path
from typing import Any

from datetime import datetime, timezone

import typer
import logging

from barcodesheet.export import DEFAULT_FILENAME
from barcodesheet.sheet import SheetParseError, load_rows, derive_records
from barcodesheet.symbols import DEFAULT_DPI, DEFAULT_OPTIONS, write_symbol
from barcodesheet.workflow import BarcodeWorkflow, NoRecordsError

app = typer.Typer(add_completion=False, help="Spreadsheet to CODE39 barcode PDF tooling")


class JsonFormatter(logging.Formatter):
    """Simple JSON formatter for structured logs."""
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        # Include any custom attributes passed via `extra=`.
        reserved = {
            "name","msg","args","levelname","levelno","pathname","filename","module",
            "exc_info","exc_text","stack_info","lineno","funcName","created","msecs",
            "relativeCreated","thread","threadName","processName","process","taskName",
        }
        for k, v in record.__dict__.items():
            if k in reserved or k.startswith("_"):
                continue
            try:
                json.dumps(v)
                payload[k] = v
            except TypeError:
                payload[k] = repr(v)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str) -> logging.Logger:
    logger = logging.getLogger("barcodesheet")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


LOGGER = logging.getLogger("barcodesheet")


@app.command("records")
def records_cmd(
    sheet: Path = typer.Argument(..., help="Spreadsheet (.xlsx or .xls)"),
    as_json: bool = typer.Option(False, "--json", help="Print one JSON object per record"),
    log_level: str = typer.Option(
        "INFO", "--log-level", help="Logging verbosity (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """Show the barcode records derived from the first worksheet."""
    global LOGGER
    LOGGER = setup_logging(log_level)

    try:
        rows = load_rows(sheet)
    except (FileNotFoundError, SheetParseError) as e:
        typer.echo(f"❌ Could not read {sheet}: {e}", err=True)
        raise typer.Exit(code=1)

    records = derive_records(rows)
    for i, record in enumerate(records, start=1):
        if as_json:
            typer.echo(record.model_dump_json())
        else:
            line = f"{i:>4}. {record.primary_code:<20} {record.secondary_code:<20}"
            typer.echo(f"{line} {record.description}".rstrip())

    dropped = len(rows) - len(records)
    typer.echo(f"{len(records)} record(s), {dropped} row(s) skipped", err=True)


@app.command("export")
def export_cmd(
    sheet: Path = typer.Argument(..., help="Spreadsheet (.xlsx or .xls)"),
    out_dir: Path = typer.Option(Path("."), "--out-dir", help="Directory for the PDF"),
    filename: str = typer.Option(DEFAULT_FILENAME, "--filename", help="PDF file name"),
    dpi: int = typer.Option(DEFAULT_DPI, "--dpi", help="Raster resolution for embedded symbols"),
    log_level: str = typer.Option(
        "INFO", "--log-level", help="Logging verbosity (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """
    Render every record of SHEET as a pair of CODE39 barcodes in one PDF.

    Example:
        barcodesheet export serials.xlsx --out-dir out/
    """
    global LOGGER
    LOGGER = setup_logging(log_level)

    workflow = BarcodeWorkflow(symbol_options=replace(DEFAULT_OPTIONS, dpi=dpi))
    try:
        records = workflow.ingest_file(sheet)
    except (FileNotFoundError, SheetParseError) as e:
        typer.echo(f"❌ Could not read {sheet}: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"📄 {len(records)} record(s) from {sheet}")

    try:
        result = asyncio.run(workflow.export(out_dir.expanduser(), filename))
    except NoRecordsError:
        typer.echo("❌ No rows with at least five cells; nothing to export.", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"\n{'='*60}")
    typer.echo("📊 Summary:")
    typer.echo(f"  Records: {result.records}")
    typer.echo(f"  Barcodes placed: {result.images_placed}")
    typer.echo(f"  Barcodes missing: {result.images_missing}")
    typer.echo(f"  Pages: {result.pages}")
    typer.echo(f"  Output: {result.output_path}")

    if result.images_missing:
        typer.echo(f"⚠️  {result.images_missing} barcode(s) could not be rendered", err=True)
    typer.echo(f"✅ Done ({result.elapsed_seconds:.1f}s)")


@app.command("preview")
def preview_cmd(
    code: str = typer.Argument(..., help="Code to render"),
    out: Path = typer.Option(Path("preview.png"), "--out", help="Output file (.png or .svg)"),
    log_level: str = typer.Option(
        "INFO", "--log-level", help="Logging verbosity (DEBUG, INFO, WARNING, ERROR)"
    ),
) -> None:
    """Render a single code as a CODE39 barcode."""
    global LOGGER
    LOGGER = setup_logging(log_level)

    workflow = BarcodeWorkflow()
    if not workflow.submit_manual(code):
        typer.echo("Nothing to render: code is blank.", err=True)
        raise typer.Exit(code=2)

    preview = workflow.state.preview
    if preview is None:
        typer.echo(f"❌ {workflow.state.manual_code!r} can't be encoded as CODE39.", err=True)
        raise typer.Exit(code=2)

    path = write_symbol(preview, out.expanduser())
    typer.echo(f"✅ {preview.code} -> {path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
