"""Domain models for the agricultural calendar import pipeline.

This package contains the data classes that flow through the pipeline: raw
rows in, normalized records, timelines and schedules out.
"""

from .config_models import ImportConfig
from .content_type import ContentType
from .document import CalendarDocument, DocumentMetadata
from .record import CompositeIdentifier, NormalizedRecord
from .row_data import RawRow
from .timeline import Activity, ScheduleEntry, SchedulePeriod, Timeline, TimeUnit
from .warning_record import ParseWarning

__all__ = [
    # Configuration models
    "ImportConfig",
    # Input
    "RawRow",
    "ContentType",
    # Output
    "CompositeIdentifier",
    "NormalizedRecord",
    "Timeline",
    "TimeUnit",
    "Activity",
    "SchedulePeriod",
    "ScheduleEntry",
    "CalendarDocument",
    "DocumentMetadata",
    "ParseWarning",
]
