from __future__ import annotations

import logging
from numbers import Real
from typing import Any

from ..excel.reader import is_blank_cell
from ..models.timeline import Activity, ScheduleEntry, SchedulePeriod
from .fields import cell_text
from .timeline import TimelineLayout, is_text_cell

"""Activity extraction and activity-to-timeline mapping.

Authors mark the weeks an activity runs with anything at all: an "x", a
tick, a number, a shaded cell with a dot. is_cell_active() is the one place
that rule lives.
"""

__all__ = [
    "is_cell_active",
    "extract_activities",
    "build_schedule",
]

logger = logging.getLogger(__name__)


def is_cell_active(value: Any) -> bool:
    """True when a timeline cell marks its activity as running in that unit.

    Inactive: None, NaN, empty or whitespace-only text, numeric zero and the
    text "0". Everything else is active, stray punctuation included.
    """
    if is_blank_cell(value):
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, Real):
        return value != 0
    if isinstance(value, str) and value.strip() == "0":
        return False
    return True


def _activity_name(layout: TimelineLayout, row: int) -> str | None:
    grid = layout.grid
    if layout.name_column is not None:
        value = grid.cell(row, layout.name_column)
        return cell_text(value) if is_text_cell(value) else None
    for c in range(layout.first_timeline_column):
        value = grid.cell(row, c)
        if is_text_cell(value):
            return cell_text(value)
    return None


def extract_activities(layout: TimelineLayout) -> list[Activity]:
    """One Activity per named row below the timeline header rows."""
    activities: list[Activity] = []
    for r in range(layout.first_activity_row, layout.grid.n_rows):
        name = _activity_name(layout, r)
        if not name:
            continue
        activities.append(Activity(id=f"activity_{r}", name=name, source_row_index=r))
    logger.debug(f"sheet '{layout.grid.sheet_name}': {len(activities)} activities")
    return activities


def build_schedule(layout: TimelineLayout, activities: list[Activity]) -> list[ScheduleEntry]:
    """Map each activity row onto the timeline; activities with no active cell are left out."""
    grid = layout.grid
    schedule: list[ScheduleEntry] = []
    for activity in activities:
        periods = []
        for unit in layout.timeline.units:
            value = grid.cell(activity.source_row_index, unit.column)
            if not is_cell_active(value):
                continue
            periods.append(SchedulePeriod(
                unit=unit,
                value=value,
                color=grid.color(activity.source_row_index, unit.column),
            ))
        if periods:
            schedule.append(ScheduleEntry(
                activity_id=activity.id,
                activity_name=activity.name,
                periods=tuple(periods),
            ))
    return schedule
