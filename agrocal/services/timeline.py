from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from ..config.reference import ReferenceData
from ..excel.reader import SheetGrid, is_blank_cell
from ..models.timeline import CYCLE, SEASONAL, Timeline, TimeUnit
from .classifier import is_cycle_commodity, is_seasonal_commodity
from .dates import extract_year, month_label
from .fields import FIELD_ALIASES, cell_text

"""Timeline reconstruction from calendar header rows.

A calendar sheet lays its time axis out over up to three header rows within
the first HEADER_SCAN_ROWS rows:

    | Activity | JANUARY |     |     |     | FEBRUARY | ...   <- month row
    |          | WK1     | WK2 | WK3 | WK4 | WK1      | ...   <- week row
    | Calendar date | 1-7 | 8-14 | ...                        <- date row

Header rows are only looked for above the first row that reads as a flat
table header (two or more known field labels such as "Crop", "PlantingStart");
month names in the data rows of such a table are values, not a time axis.

Month headers are usually merged cells, so a week column belongs to the
nearest month header at or before it. Two kinds of timeline come out:

- seasonal: months and/or absolute dates present; units carry month,
  weekLabel and dateRange
- cycle: relative weeks ("Week 1".."Week n") without absolute dates, or
  production-cycle vocabulary in the sheet; units are production weeks 1..n

When both signal sets are present the commodity decides: livestock/poultry
commodities get a cycle timeline, crops a seasonal one, anything else cycle.
Rows below the last header row are the activity rows.
"""

__all__ = [
    "HEADER_SCAN_ROWS",
    "HeaderRows",
    "TimelineLayout",
    "find_field_header_row",
    "find_header_rows",
    "find_title",
    "week_label",
    "build_timeline",
    "is_text_cell",
]

logger = logging.getLogger(__name__)

HEADER_SCAN_ROWS = 10
MIN_HEADER_CELLS = 3
MIN_FIELD_LABELS = 2

_WEEK_CELL = re.compile(r"^(?:wk|week|w)\s*\.?\s*(\d+)$", re.IGNORECASE)
_DATE_RANGE_CELL = re.compile(r"^\d{1,2}\s*[-/]\s*\d{1,2}$")
_ABSOLUTE_DATE = re.compile(r"\b\d{1,2}\s*[-/]\s*\d{1,2}\b|\b\d{4}\b")
_ACTIVITY_HEADER = re.compile(r"activit|stage|task", re.IGNORECASE)
_CALENDAR_DATE = "calendar date"

LIFECYCLE_TERMS = (
    "production week",
    "cycle week",
    "brooding",
    "starter phase",
    "grower phase",
    "finisher phase",
    "layer phase",
    "breeder phase",
    "vaccination",
    "egg production",
)


def week_label(value: Any) -> int | None:
    """Week number of a week header cell ("WK3", "Week 3", "W3"), else None."""
    if not isinstance(value, str):
        return None
    m = _WEEK_CELL.match(value.strip())
    return int(m.group(1)) if m else None


def _is_date_range(value: Any) -> bool:
    return isinstance(value, str) and _DATE_RANGE_CELL.match(value.strip()) is not None


@dataclass(frozen=True)
class HeaderRows:
    month_row: int | None = None
    week_row: int | None = None
    date_row: int | None = None

    @property
    def rows(self) -> tuple[int, ...]:
        return tuple(sorted(r for r in (self.month_row, self.week_row, self.date_row) if r is not None))

    @property
    def last(self) -> int | None:
        rows = self.rows
        return rows[-1] if rows else None


@dataclass(frozen=True)
class TimelineLayout:
    """A detected timeline plus where the activity rows of the sheet are."""
    grid: SheetGrid
    timeline: Timeline
    headers: HeaderRows
    first_activity_row: int
    name_column: int | None  # None: take the first text cell left of the timeline
    title: str | None = None
    commodity: str | None = None

    @property
    def first_timeline_column(self) -> int:
        return min(u.column for u in self.timeline.units)


_KNOWN_LABELS = frozenset(alias.lower() for aliases in FIELD_ALIASES.values() for alias in aliases)


def find_field_header_row(grid: SheetGrid) -> int | None:
    """First row within HEADER_SCAN_ROWS labelling at least two known fields, else None."""
    for r in range(min(grid.n_rows, HEADER_SCAN_ROWS)):
        known = sum(1 for v in grid.row(r) if isinstance(v, str) and v.strip().lower() in _KNOWN_LABELS)
        if known >= MIN_FIELD_LABELS:
            return r
    return None


def find_header_rows(grid: SheetGrid) -> HeaderRows:
    month_row = week_row = date_row = None
    limit = min(grid.n_rows, HEADER_SCAN_ROWS)
    field_header = find_field_header_row(grid)
    if field_header is not None:
        limit = field_header
    for r in range(limit):
        cells = grid.row(r)
        if month_row is None and sum(1 for v in cells if month_label(v)) >= MIN_HEADER_CELLS:
            month_row = r
            continue
        if week_row is None and sum(1 for v in cells if week_label(v) is not None) >= MIN_HEADER_CELLS:
            week_row = r
            continue
        if date_row is None:
            has_label = any(isinstance(v, str) and _CALENDAR_DATE in v.lower() for v in cells)
            if has_label or sum(1 for v in cells if _is_date_range(v)) >= MIN_HEADER_CELLS:
                date_row = r
    return HeaderRows(month_row=month_row, week_row=week_row, date_row=date_row)


def find_title(grid: SheetGrid, headers: HeaderRows | None = None) -> str | None:
    """First text cell above the header rows (the calendar's title line)."""
    if headers is None:
        headers = find_header_rows(grid)
    first_header = headers.rows[0] if headers.rows else min(grid.n_rows, HEADER_SCAN_ROWS)
    for r in range(first_header):
        for value in grid.row(r):
            if isinstance(value, str) and value.strip():
                return value.strip()
    return None


def _has_absolute_dates(grid: SheetGrid, headers: HeaderRows) -> bool:
    if headers.date_row is not None:
        return True
    for r in headers.rows:
        for value in grid.row(r):
            if isinstance(value, (datetime, date)):
                return True
            if not isinstance(value, str) or week_label(value) is not None:
                continue
            if _ABSOLUTE_DATE.search(value):
                return True
    return False


def _has_lifecycle_vocabulary(grid: SheetGrid) -> bool:
    for row in grid.cells:
        for value in row:
            if isinstance(value, str):
                lowered = value.lower()
                if any(term in lowered for term in LIFECYCLE_TERMS):
                    return True
    return False


def _month_columns(grid: SheetGrid, headers: HeaderRows) -> list[tuple[int, str]]:
    if headers.month_row is None:
        return []
    out = []
    for c, value in enumerate(grid.row(headers.month_row)):
        month = month_label(value)
        if month:
            out.append((c, month))
    return out


def _month_at(month_columns: list[tuple[int, str]], column: int) -> str | None:
    current = None
    for c, month in month_columns:
        if c > column:
            break
        current = month
    return current


def _week_columns(grid: SheetGrid, headers: HeaderRows) -> list[int]:
    if headers.week_row is None:
        return []
    return [c for c, v in enumerate(grid.row(headers.week_row)) if week_label(v) is not None]


def _date_columns(grid: SheetGrid, headers: HeaderRows) -> list[int]:
    if headers.date_row is None:
        return []
    return [c for c, v in enumerate(grid.row(headers.date_row)) if _is_date_range(v)]


def _seasonal_units(grid: SheetGrid, headers: HeaderRows) -> list[TimeUnit]:
    months = _month_columns(grid, headers)
    columns = _week_columns(grid, headers) or _date_columns(grid, headers)
    units: list[TimeUnit] = []
    if columns:
        for c in columns:
            date_range = None
            if headers.date_row is not None:
                date_range = cell_text(grid.cell(headers.date_row, c))
            week = grid.cell(headers.week_row, c) if headers.week_row is not None else None
            units.append(TimeUnit(
                index=len(units),
                type=SEASONAL,
                column=c,
                week_label=cell_text(week),
                month=_month_at(months, c),
                date_range=date_range,
            ))
        return units
    for c, month in months:
        units.append(TimeUnit(index=len(units), type=SEASONAL, column=c, month=month))
    return units


def _cycle_units(grid: SheetGrid, headers: HeaderRows) -> list[TimeUnit]:
    units: list[TimeUnit] = []
    for c in _week_columns(grid, headers):
        units.append(TimeUnit(
            index=len(units),
            type=CYCLE,
            column=c,
            week_label=cell_text(grid.cell(headers.week_row, c)),
            production_week=len(units) + 1,
        ))
    return units


def _timeline_year(grid: SheetGrid, headers: HeaderRows, title: str | None) -> int | None:
    for r in headers.rows:
        for value in grid.row(r):
            if isinstance(value, (datetime, date)):
                return value.year
            if isinstance(value, str) and week_label(value) is None:
                year = extract_year(value)
                if year is not None:
                    return year
    return extract_year(title)


def _name_column(grid: SheetGrid, headers: HeaderRows, timeline_columns: set[int]) -> int | None:
    for r in headers.rows:
        for c, value in enumerate(grid.row(r)):
            if c in timeline_columns:
                continue
            if isinstance(value, str) and _ACTIVITY_HEADER.search(value):
                return c
    return None


def _choose_type(seasonal: bool, cycle: bool, commodity: str | None, reference: ReferenceData) -> str | None:
    if seasonal and cycle:
        if is_cycle_commodity(commodity, reference):
            return CYCLE
        if is_seasonal_commodity(commodity, reference):
            return SEASONAL
        return CYCLE
    if seasonal:
        return SEASONAL
    if cycle:
        return CYCLE
    return None


def build_timeline(
    grid: SheetGrid,
    commodity: str | None,
    reference: ReferenceData,
    title: str | None = None,
) -> TimelineLayout | None:
    """Detect the sheet's timeline. None when the sheet has no time axis (flat rows)."""
    if grid.is_empty():
        return None
    headers = find_header_rows(grid)
    if title is None:
        title = find_title(grid, headers)

    seasonal_signal = headers.month_row is not None or _has_absolute_dates(grid, headers)
    cycle_signal = headers.week_row is not None or _has_lifecycle_vocabulary(grid)
    kind = _choose_type(seasonal_signal, cycle_signal, commodity, reference)
    if kind is None:
        return None

    builders = {SEASONAL: _seasonal_units, CYCLE: _cycle_units}
    units = builders[kind](grid, headers)
    if not units:
        # the winning signal had no columns to read (e.g. vocabulary only)
        other = CYCLE if kind == SEASONAL else SEASONAL
        units = builders[other](grid, headers)
        kind = other
    if not units:
        logger.debug(f"sheet '{grid.sheet_name}': timeline signals without timeline columns")
        return None

    months: list[str] = []
    for unit in units:
        if unit.month and unit.month not in months:
            months.append(unit.month)
    timeline = Timeline(
        type=kind,
        units=tuple(units),
        months=tuple(months),
        year=_timeline_year(grid, headers, title),
    )
    timeline_columns = {u.column for u in units}
    layout = TimelineLayout(
        grid=grid,
        timeline=timeline,
        headers=headers,
        first_activity_row=headers.last + 1,
        name_column=_name_column(grid, headers, timeline_columns),
        title=title,
        commodity=commodity,
    )
    logger.debug(
        f"sheet '{grid.sheet_name}': {kind} timeline with {len(units)} units, "
        f"activities from row {layout.first_activity_row + 1}"
    )
    return layout


def is_text_cell(value: Any) -> bool:
    """Non-blank text that is not just a number (candidate activity name)."""
    if is_blank_cell(value) or not isinstance(value, str):
        return False
    try:
        float(value.strip())
    except ValueError:
        return True
    return False
