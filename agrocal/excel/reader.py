from __future__ import annotations

import csv
import io
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

import openpyxl
import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from ..models import RawRow
from .colors import fill_to_hex

"""Workbook reader: uploaded bytes -> sheet grids -> RawRows.

Calendar sheets are not tables with a fixed header line. They carry title
rows, merged month headers, week rows and shaded cells, so every sheet is
first read as a raw grid (values + fill colors, nothing skipped) and the
header row is located afterwards.

- spreadsheet: .xlsx/.xlsm through openpyxl (values are cached results,
  data_only=True)
- csv: pandas.read_csv with every cell kept as text; short lines (an
  unpadded title line above the header) are padded to the widest line

Grid coordinates are 0-based; RawRow.row_index is the 1-based spreadsheet
row number (grid row + 1).
"""

__all__ = [
    "CSV",
    "SPREADSHEET",
    "SUPPORTED_FORMATS",
    "WorkbookError",
    "SourceFileNotFoundError",
    "UnsupportedFormatError",
    "EmptyFileError",
    "WorkbookReadError",
    "SheetGrid",
    "is_blank_cell",
    "format_for_path",
    "load_source",
    "read_workbook",
    "detect_header_row",
    "header_labels",
    "grid_to_rows",
]

logger = logging.getLogger(__name__)

CSV = "csv"
SPREADSHEET = "spreadsheet"
SUPPORTED_FORMATS = (CSV, SPREADSHEET)

HEADER_SCAN_ROWS = 10

_SUFFIX_FORMATS = {
    ".csv": CSV,
    ".xlsx": SPREADSHEET,
    ".xlsm": SPREADSHEET,
}
_OLE_MAGIC = b"\xd0\xcf\x11\xe0"  # legacy .xls container


class WorkbookError(Exception):
    """Base class for workbook parsing failures."""


class SourceFileNotFoundError(WorkbookError):
    pass


class UnsupportedFormatError(WorkbookError):
    pass


class EmptyFileError(WorkbookError):
    pass


class WorkbookReadError(WorkbookError):
    """Raised when the bytes cannot be read as the declared format (corrupt file)."""


def is_blank_cell(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


@dataclass(frozen=True)
class SheetGrid:
    """All cells of one sheet, row-major, trailing blank rows/columns trimmed."""
    sheet_name: str
    cells: tuple[tuple[Any, ...], ...]
    colors: Mapping[tuple[int, int], str] = field(default_factory=dict)  # (row, col) -> "#RRGGBB"

    @property
    def n_rows(self) -> int:
        return len(self.cells)

    @property
    def n_cols(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def cell(self, row: int, col: int) -> Any:
        if 0 <= row < self.n_rows and 0 <= col < self.n_cols:
            return self.cells[row][col]
        return None

    def color(self, row: int, col: int) -> str | None:
        return self.colors.get((row, col))

    def row(self, row: int) -> tuple[Any, ...]:
        return self.cells[row]

    def is_blank_row(self, row: int) -> bool:
        return all(is_blank_cell(v) for v in self.cells[row])

    def is_empty(self) -> bool:
        return self.n_rows == 0


def _trimmed(rows: list[list[Any]]) -> list[list[Any]]:
    """Drop trailing blank rows and pad/trim every row to the last used column."""
    while rows and all(is_blank_cell(v) for v in rows[-1]):
        rows.pop()
    width = 0
    for values in rows:
        for idx in range(len(values) - 1, -1, -1):
            if not is_blank_cell(values[idx]):
                width = max(width, idx + 1)
                break
    return [(values + [None] * width)[:width] for values in rows]


def _clean(value: Any) -> Any:
    if is_blank_cell(value):
        return None
    return value


def format_for_path(path: Path) -> str:
    fmt = _SUFFIX_FORMATS.get(path.suffix.lower())
    if fmt is None:
        raise UnsupportedFormatError(f"unsupported file extension: {path.suffix or '(none)'}")
    return fmt


def load_source(path: Path, max_bytes: int | None = None) -> bytes:
    """Read an input file into memory, enforcing the caller's size bound."""
    if not path.exists():
        raise SourceFileNotFoundError(f"file not found: {path}")
    size = path.stat().st_size
    if max_bytes is not None and size > max_bytes:
        raise WorkbookReadError(f"file too large: {size} bytes (limit {max_bytes})")
    return path.read_bytes()


def _csv_width(text: str) -> int:
    """Field count of the widest line."""
    try:
        return max((len(fields) for fields in csv.reader(io.StringIO(text))), default=0)
    except csv.Error as e:
        raise WorkbookReadError(f"unreadable csv: {e}") from e


def _read_csv(buffer: bytes) -> list[SheetGrid]:
    try:
        text = buffer.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise WorkbookReadError(f"unreadable csv: {e}") from e
    width = _csv_width(text)
    if width == 0:
        raise EmptyFileError("csv file has no content")
    try:
        df = pd.read_csv(
            io.StringIO(text),
            header=None,
            names=range(width),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
        )
    except pd.errors.EmptyDataError as e:
        raise EmptyFileError("csv file has no content") from e
    except pd.errors.ParserError as e:
        raise WorkbookReadError(f"unreadable csv: {e}") from e
    rows = [[_clean(v) for v in values] for values in df.values.tolist()]
    rows = _trimmed(rows)
    if not rows:
        raise EmptyFileError("csv file has no content")
    return [SheetGrid(sheet_name="", cells=tuple(tuple(r) for r in rows))]


def _read_spreadsheet(buffer: bytes) -> list[SheetGrid]:
    if buffer[:4] == _OLE_MAGIC:
        raise UnsupportedFormatError("legacy .xls workbooks are not supported; save as .xlsx")
    try:
        wb = openpyxl.load_workbook(io.BytesIO(buffer), data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError, ValueError) as e:
        raise WorkbookReadError(f"unreadable workbook: {e}") from e

    grids: list[SheetGrid] = []
    try:
        for ws in wb.worksheets:
            rows: list[list[Any]] = []
            colors: dict[tuple[int, int], str] = {}
            for r, row in enumerate(ws.iter_rows()):
                values = []
                for c, cell in enumerate(row):
                    values.append(_clean(cell.value))
                    color = fill_to_hex(getattr(cell, "fill", None))
                    if color:
                        colors[(r, c)] = color
                rows.append(values)
            rows = _trimmed(rows)
            if not rows:
                logger.debug(f"sheet '{ws.title}' is empty, ignored")
                continue
            width = len(rows[0])
            colors = {k: v for k, v in colors.items() if k[0] < len(rows) and k[1] < width}
            grids.append(SheetGrid(sheet_name=str(ws.title), cells=tuple(tuple(r) for r in rows), colors=colors))
    finally:
        wb.close()
    if not grids:
        raise EmptyFileError("workbook has no non-empty sheets")
    return grids


def read_workbook(buffer: bytes, file_format: str) -> list[SheetGrid]:
    """Read uploaded bytes into one SheetGrid per non-empty sheet.

    Parameters
    ----------
    buffer: raw file content
    file_format: "csv" or "spreadsheet"

    Raises
    ------
    UnsupportedFormatError, EmptyFileError, WorkbookReadError
    """
    if file_format not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(f"unsupported format: {file_format!r}")
    if not buffer:
        raise EmptyFileError("file is empty")
    if file_format == CSV:
        return _read_csv(buffer)
    return _read_spreadsheet(buffer)


def detect_header_row(grid: SheetGrid) -> int:
    """Index of the header row of a flat (non-timeline) sheet.

    The first row within the first HEADER_SCAN_ROWS rows holding at least two
    non-empty cells that are all text. Title rows (a single merged label) are
    skipped that way. Falls back to the first non-blank row.
    """
    limit = min(grid.n_rows, HEADER_SCAN_ROWS)
    for r in range(limit):
        filled = [v for v in grid.row(r) if not is_blank_cell(v)]
        if len(filled) >= 2 and all(isinstance(v, str) for v in filled):
            return r
    for r in range(grid.n_rows):
        if not grid.is_blank_row(r):
            return r
    return 0


def header_labels(grid: SheetGrid, header_index: int) -> list[str]:
    """Column labels of the header row; blanks become column_N, duplicates get a suffix."""
    labels: list[str] = []
    seen: dict[str, int] = {}
    for c, value in enumerate(grid.row(header_index)):
        label = str(value).strip() if not is_blank_cell(value) else f"column_{c + 1}"
        if label in seen:
            seen[label] += 1
            label = f"{label}_{seen[label]}"
        else:
            seen[label] = 1
        labels.append(label)
    return labels


def grid_to_rows(grid: SheetGrid, header_index: int | None = None) -> list[RawRow]:
    """Turn the rows under the header into RawRows (label -> value), skipping blank rows."""
    if grid.is_empty():
        return []
    if header_index is None:
        header_index = detect_header_row(grid)
    labels = header_labels(grid, header_index)
    rows: list[RawRow] = []
    for r in range(header_index + 1, grid.n_rows):
        if grid.is_blank_row(r):
            continue
        values = dict(zip(labels, grid.row(r), strict=False))
        colors = {}
        for c, label in enumerate(labels):
            color = grid.color(r, c)
            if color:
                colors[label] = color
        rows.append(RawRow(values=values, sheet_name=grid.sheet_name, row_index=r + 1, colors=colors))
    return rows
