from __future__ import annotations

from enum import Enum

"""ContentType enum: which record shape an uploaded file represents."""


class ContentType(Enum):
    """Record shape decided by the content-type classifier.

    - CROP_CALENDAR: seasonal crop planting/harvest calendars
    - PRODUCTION_CALENDAR: activity-by-month production calendars
    - AGROMET_ADVISORY: weather-driven advisories
    - POULTRY_CALENDAR: poultry/livestock production cycles
    - COMMODITY_ADVISORY: per-stage commodity advisories (multi-sheet workbooks)
    - UNKNOWN: no rule matched; handled by the generic fallback parser
    """
    CROP_CALENDAR = "crop_calendar"
    PRODUCTION_CALENDAR = "production_calendar"
    AGROMET_ADVISORY = "agromet_advisory"
    POULTRY_CALENDAR = "poultry_calendar"
    COMMODITY_ADVISORY = "commodity_advisory"
    UNKNOWN = "unknown"

    @property
    def id_tag(self) -> str:
        """Prefix used for synthetic record ids."""
        return _ID_TAGS[self]


_ID_TAGS = {
    ContentType.CROP_CALENDAR: "crop",
    ContentType.PRODUCTION_CALENDAR: "production",
    ContentType.AGROMET_ADVISORY: "agromet",
    ContentType.POULTRY_CALENDAR: "poultry",
    ContentType.COMMODITY_ADVISORY: "commodity",
    ContentType.UNKNOWN: "generic",
}
