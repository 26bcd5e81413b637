from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..excel.reader import SheetGrid, WorkbookError, detect_header_row, grid_to_rows
from ..models import RawRow
from ..models.warning_record import SHEET_PROCESSING_ERROR, ParseWarning

"""Multi-sheet splitter.

A workbook with more than one sheet is a commodity advisory where each sheet
covers one production stage ("Land Preparation", "Planting", ...). Every
sheet is read on its own: a sheet that cannot be turned into rows is skipped
with a SHEET_PROCESSING_ERROR warning and the remaining sheets carry on.
"""

__all__ = [
    "SheetProcessingError",
    "SheetSection",
    "is_multi_sheet",
    "read_section",
    "split_workbook",
]

logger = logging.getLogger(__name__)


class SheetProcessingError(WorkbookError):
    """Raised when one sheet cannot be read into rows (recoverable: the sheet is skipped)."""


@dataclass(frozen=True)
class SheetSection:
    grid: SheetGrid
    header_index: int
    rows: tuple[RawRow, ...]

    @property
    def sheet_name(self) -> str:
        return self.grid.sheet_name


def is_multi_sheet(grids: Sequence[SheetGrid]) -> bool:
    return len(grids) > 1


def read_section(grid: SheetGrid) -> SheetSection:
    """Locate the header row of a sheet and read the rows under it."""
    try:
        header_index = detect_header_row(grid)
        rows = grid_to_rows(grid, header_index)
    except (IndexError, KeyError, TypeError, ValueError) as e:
        raise SheetProcessingError(f"sheet '{grid.sheet_name}' could not be read: {e}") from e
    if not rows:
        raise SheetProcessingError(f"sheet '{grid.sheet_name}' has no data rows")
    return SheetSection(grid=grid, header_index=header_index, rows=tuple(rows))


def split_workbook(grids: Sequence[SheetGrid], file_name: str) -> tuple[list[SheetSection], list[ParseWarning]]:
    """Read every sheet into a SheetSection, collecting a warning for each skipped sheet."""
    sections: list[SheetSection] = []
    warnings: list[ParseWarning] = []
    for grid in grids:
        try:
            section = read_section(grid)
        except SheetProcessingError as e:
            logger.warning(f"{file_name}: {e}, sheet skipped")
            warnings.append(ParseWarning.create(file_name, grid.sheet_name, -1, SHEET_PROCESSING_ERROR, str(e)))
            continue
        logger.debug(f"{file_name}: sheet '{grid.sheet_name}' -> {len(section.rows)} rows")
        sections.append(section)
    return sections, warnings
