"""
Pydantic models for spreadsheet-derived barcode records.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Record(BaseModel):
    """
    One barcode pair derived from a spreadsheet row.

    A record carries the two codes that are rendered as CODE39 symbols
    and the free-text description printed under the pair. Records are
    immutable once derived.

    Attributes:
        primary_code: cell0 + zero-padded cell1 + "-" + cell2
        secondary_code: cell3 as text
        description: cell4 as text, or "" when the cell is empty
    """

    model_config = ConfigDict(frozen=True)

    primary_code: str
    secondary_code: str
    description: str = ""

    def codes(self) -> tuple[str, str]:
        """Return (primary_code, secondary_code) in handle-table order."""
        return (self.primary_code, self.secondary_code)
