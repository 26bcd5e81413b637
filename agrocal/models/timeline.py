from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Timeline, activity and schedule models.

A Timeline is the reconstructed time axis of a calendar sheet:
- seasonal: units anchored to calendar months/weeks
- cycle: units numbered as relative production weeks

ScheduleEntry.periods reference TimeUnits by their index in the timeline.
"""

__all__ = [
    "SEASONAL",
    "CYCLE",
    "TimeUnit",
    "Timeline",
    "Activity",
    "SchedulePeriod",
    "ScheduleEntry",
]

SEASONAL = "seasonal"
CYCLE = "cycle"


@dataclass(frozen=True)
class TimeUnit:
    """One slot of a timeline, read from one source column."""
    index: int  # position in the timeline (0-based, strictly increasing)
    type: str  # "seasonal" | "cycle"
    column: int  # source column in the sheet grid
    week_label: str | None = None  # e.g. "WK1", "Week 3"
    month: str | None = None  # seasonal only, full English month name
    date_range: str | None = None  # seasonal only, e.g. "5-11"
    production_week: int | None = None  # cycle only, 1-based

    def to_dict(self) -> dict[str, Any]:
        if self.type == CYCLE:
            return {
                "index": self.index,
                "type": self.type,
                "productionWeek": self.production_week,
                "weekLabel": self.week_label,
            }
        return {
            "index": self.index,
            "type": self.type,
            "month": self.month,
            "weekLabel": self.week_label,
            "dateRange": self.date_range,
        }


@dataclass(frozen=True)
class Timeline:
    type: str
    units: tuple[TimeUnit, ...]
    months: tuple[str, ...] = ()  # seasonal: month labels in column order
    year: int | None = None

    def __len__(self) -> int:
        return len(self.units)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "totalUnits": len(self.units),
            "months": list(self.months),
            "year": self.year,
            "units": [u.to_dict() for u in self.units],
        }


@dataclass(frozen=True)
class Activity:
    id: str
    name: str
    source_row_index: int  # grid row (0-based) the activity was read from

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "sourceRowIndex": self.source_row_index}


@dataclass(frozen=True)
class SchedulePeriod:
    """An active cell of an activity row, resolved against the timeline."""
    unit: TimeUnit
    value: Any = None  # the cell content that marked the period active
    color: str | None = None  # "#RRGGBB" fill of the cell, if styled

    def to_dict(self) -> dict[str, Any]:
        data = {"unitIndex": self.unit.index}
        data.update({k: v for k, v in self.unit.to_dict().items() if k != "index"})
        value = self.value
        if hasattr(value, "isoformat"):
            value = value.isoformat()
        elif hasattr(value, "item"):
            value = value.item()
        data["value"] = value
        data["color"] = self.color
        return data


@dataclass(frozen=True)
class ScheduleEntry:
    activity_id: str
    activity_name: str
    periods: tuple[SchedulePeriod, ...] = field(default_factory=tuple)

    @property
    def first(self) -> SchedulePeriod | None:
        return self.periods[0] if self.periods else None

    @property
    def last(self) -> SchedulePeriod | None:
        return self.periods[-1] if self.periods else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "activityId": self.activity_id,
            "activityName": self.activity_name,
            "periods": [p.to_dict() for p in self.periods],
        }
