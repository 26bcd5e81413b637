from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .record import NormalizedRecord
from .timeline import Activity, ScheduleEntry, Timeline
from .warning_record import ParseWarning

"""CalendarDocument aggregate root.

Created fresh per parse invocation and handed to the caller; nothing in the
pipeline keeps a reference to it afterwards.
"""

__all__ = [
    "DocumentMetadata",
    "CalendarDocument",
]


@dataclass(frozen=True)
class DocumentMetadata:
    original_name: str
    record_count: int
    parsed_at: str  # ISO8601 UTC
    is_multi_sheet: bool
    sheets: tuple[str, ...] | None = None  # multi-sheet workbooks only
    color_stats: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "originalName": self.original_name,
            "recordCount": self.record_count,
            "parsedAt": self.parsed_at,
            "isMultiSheet": self.is_multi_sheet,
            "colorStats": dict(self.color_stats),
        }
        if self.sheets is not None:
            data["sheets"] = list(self.sheets)
        return data


@dataclass(frozen=True)
class CalendarDocument:
    content_type: str
    records: tuple[NormalizedRecord, ...]
    metadata: DocumentMetadata
    timeline: Timeline | None = None
    activities: tuple[Activity, ...] = ()
    schedule: tuple[ScheduleEntry, ...] = ()
    warnings: tuple[ParseWarning, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "contentType": self.content_type,
            "data": [r.to_dict() for r in self.records],
            "timeline": self.timeline.to_dict() if self.timeline is not None else None,
            "activities": [a.to_dict() for a in self.activities],
            "schedule": [s.to_dict() for s in self.schedule],
            "metadata": self.metadata.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
        }
