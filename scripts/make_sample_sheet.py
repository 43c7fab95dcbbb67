#!/usr/bin/env python3
"""Write a sample serial-number spreadsheet for trying out the exporter.

Rows follow the layout the exporter expects, with no header row:
prefix, serial, suffix, secondary code, description. A few short rows are
mixed in; the exporter skips them.

Usage:
    python scripts/make_sample_sheet.py -o sample.xlsx --rows 20
"""

from pathlib import Path

import openpyxl
import typer


app = typer.Typer(
    help="Write a sample serial-number spreadsheet",
    add_completion=False,
)


@app.command()
def main(
    output: Path = typer.Option(
        Path("sample.xlsx"),
        "--output",
        "-o",
        help="Output .xlsx path",
    ),
    rows: int = typer.Option(
        20,
        "--rows",
        help="Number of barcode rows to write",
    ),
    prefix: str = typer.Option(
        "SN",
        "--prefix",
        help="Value for the first column",
    ),
) -> None:
    """
    Write ROWS barcode rows plus one short row every ten rows.

    Example:
        python scripts/make_sample_sheet.py -o sample.xlsx --rows 20
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Serials"

    for n in range(1, rows + 1):
        ws.append([prefix, n, f"R{n % 4}", f"S{1000 + n}", f"Item {n}" if n % 3 else None])
        if n % 10 == 0:
            ws.append([f"batch {n // 10}"])

    output.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output)
    typer.echo(f"Wrote {rows} row(s) to {output}")


if __name__ == "__main__":
    app()
