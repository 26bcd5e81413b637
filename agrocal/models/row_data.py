from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""RawRow model for the calendar import pipeline.

A RawRow is one data row of a sheet after header detection: column label ->
raw cell value, plus the provenance needed to report warnings against the
original spreadsheet.
"""

__all__ = [
    "RawRow",
]


@dataclass(frozen=True)
class RawRow:
    """One spreadsheet row keyed by its column labels.

    The row_index refers to the spreadsheet row number (1-based), so the first
    data row under a header on row 1 has row_index=2.
    """
    values: dict[str, Any]  # Column label -> raw cell value (label order preserved)
    sheet_name: str  # Sheet the row was read from ("" for CSV input)
    row_index: int  # Spreadsheet row number (1-based)
    colors: dict[str, str] = field(default_factory=dict)  # Column label -> "#RRGGBB" fill

    @property
    def labels(self) -> list[str]:
        return list(self.values.keys())
