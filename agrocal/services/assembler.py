from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from typing import Any

from ..config.reference import ReferenceData
from ..excel.reader import WorkbookError, is_blank_cell
from ..models import (
    Activity,
    ContentType,
    NormalizedRecord,
    ParseWarning,
    RawRow,
    ScheduleEntry,
    SchedulePeriod,
)
from ..models.timeline import SEASONAL
from ..models.warning_record import DATE_PARSE_FAILURE, ROW_MAPPING_ERROR
from .composite_code import COMMODITY, DISTRICT, REGION, parse_composite
from .dates import (
    MONTHS,
    determine_season,
    extract_year,
    normalize_date,
    parse_month,
    parse_week_range,
    season_from_title,
)
from .fields import FIELD_ALIASES, cell_text, extract_field, extract_raw, has_placeholder_fields, is_placeholder_row
from .stages import normalize_stage
from .timeline import TimelineLayout

"""Record assembly.

RecordAssembler turns classified rows (flat documents) or scheduled
activities (timeline documents) into NormalizedRecords. The common fields
(geography, commodity, stage, timing) are built the same way for every
content type; each content type then adds its own `details`.

One assembler serves one parse invocation: it owns the id sequence and the
warnings raised while mapping rows.
"""

__all__ = [
    "RowMappingError",
    "IdFactory",
    "RecordAssembler",
    "color_stats",
]

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = "Medium"
DEFAULT_POULTRY_TYPE = "Broiler"

_DAY_RANGE = re.compile(r"^\s*(\d{1,2})\s*[-/]\s*(\d{1,2})\s*$")


class RowMappingError(WorkbookError):
    """Raised when a row cannot be mapped to a record (recoverable: the row is skipped)."""


class IdFactory:
    """Record ids "{tag}_{timestamp_ms}_{seq}_{row}", unique within one invocation."""

    def __init__(self, tag: str, stamp_ms: int | None = None):
        self.tag = tag
        self.stamp_ms = stamp_ms if stamp_ms is not None else int(time.time() * 1000)
        self._seq = 0

    def next(self, row_index: int) -> str:
        rid = f"{self.tag}_{self.stamp_ms}_{self._seq}_{row_index}"
        self._seq += 1
        return rid


def color_stats(schedule: Iterable[ScheduleEntry]) -> dict[str, Any]:
    colors: list[str] = []
    with_color = 0
    for entry in schedule:
        for period in entry.periods:
            if period.color:
                with_color += 1
                colors.append(period.color)
    return {"periodsWithColor": with_color, "uniqueColors": sorted(set(colors))}


def _text(row: RawRow, field: str, default: str | None = None) -> str | None:
    value = extract_field(row, field)
    return value if value is not None else default


def _week_details(week_range: str | None) -> dict[str, Any]:
    if not week_range:
        return {"startWeek": None, "endWeek": None}
    start, end = parse_week_range(week_range)
    return {"startWeek": start, "endWeek": end}


class RecordAssembler:
    """Build NormalizedRecords for one parse invocation."""

    def __init__(
        self,
        reference: ReferenceData,
        content_type: ContentType,
        file_name: str,
        id_factory: IdFactory | None = None,
    ):
        self.reference = reference
        self.content_type = content_type
        self.file_name = file_name
        self.ids = id_factory or IdFactory(content_type.id_tag)
        self.warnings: list[ParseWarning] = []
        self.placeholder_rows = 0
        self._details: dict[ContentType, Callable[[RawRow], dict[str, Any]]] = {
            ContentType.COMMODITY_ADVISORY: self._commodity_details,
            ContentType.CROP_CALENDAR: self._crop_details,
            ContentType.PRODUCTION_CALENDAR: self._production_details,
            ContentType.AGROMET_ADVISORY: self._agromet_details,
            ContentType.POULTRY_CALENDAR: self._poultry_details,
            ContentType.UNKNOWN: lambda row: {},
        }

    # ------------------------------------------------------------------
    # warnings
    # ------------------------------------------------------------------
    def _warn(self, row: RawRow, warning_type: str, message: str) -> None:
        logger.warning(f"{self.file_name} [{row.sheet_name or '-'}] row {row.row_index}: {message}")
        self.warnings.append(ParseWarning.create(self.file_name, row.sheet_name, row.row_index, warning_type, message))

    def _date(self, row: RawRow, field: str) -> str | None:
        raw = extract_raw(row, field)
        if raw is None:
            return None
        value = normalize_date(raw)
        if value is None:
            self._warn(row, DATE_PARSE_FAILURE, f"{field}: could not parse date {raw!r}")
        return value

    # ------------------------------------------------------------------
    # flat documents
    # ------------------------------------------------------------------
    def assemble_rows(self, rows: Sequence[RawRow], stage: str | None = None) -> list[NormalizedRecord]:
        """One record per row that survives the placeholder filter and maps cleanly.

        stage overrides the row's own stage column (multi-sheet advisories,
        where the sheet name is the stage). Unclassified content keeps every
        row.
        """
        records: list[NormalizedRecord] = []
        generic = self.content_type is ContentType.UNKNOWN
        for row in rows:
            if not generic and has_placeholder_fields(row) and is_placeholder_row(row):
                self.placeholder_rows += 1
                continue
            try:
                records.append(self.build_row_record(row, stage))
            except RowMappingError as e:
                self._warn(row, ROW_MAPPING_ERROR, f"row skipped: {e}")
        if self.placeholder_rows:
            logger.debug(f"{self.file_name}: {self.placeholder_rows} placeholder rows discarded")
        return records

    def _recognized(self, row: RawRow) -> bool:
        folded = {str(label).strip().lower() for label in row.values}
        return any(alias.lower() in folded for aliases in FIELD_ALIASES.values() for alias in aliases)

    def build_row_record(self, row: RawRow, stage: str | None = None) -> NormalizedRecord:
        generic = self.content_type is ContentType.UNKNOWN
        if not generic and self._recognized(row) and not any(extract_raw(row, f) is not None for f in FIELD_ALIASES):
            raise RowMappingError("no values under any recognized column")
        try:
            region = parse_composite(extract_field(row, "region"), REGION, self.reference)
            district = parse_composite(extract_field(row, "district"), DISTRICT, self.reference)
            crop = parse_composite(extract_field(row, "crop"), COMMODITY, self.reference)
            stage_label = stage or extract_field(row, "stage") or extract_field(row, "activity")
            month_year = _month_year_text(extract_raw(row, "month_year"))
            week_range = extract_field(row, "week_range")
            year = extract_year(month_year)
            if year is None:
                year_text = extract_field(row, "year")
                year = int(year_text) if year_text and year_text.isdigit() else None
            season = extract_field(row, "season")
            if season is None and month_year:
                season = determine_season(month_year)
            details = self._details[self.content_type](row)
        except (KeyError, TypeError, ValueError) as e:
            raise RowMappingError(str(e)) from e

        return NormalizedRecord(
            id=self.ids.next(row.row_index),
            content_type=self.content_type.value,
            zone=extract_field(row, "zone"),
            region=region.name,
            region_code=region.code,
            district=district.name,
            district_code=district.code,
            crop=crop.name,
            commodity_code=crop.code,
            production_stage=normalize_stage(stage_label, self.reference) if stage_label else None,
            month_year=month_year,
            week_range=week_range,
            start_date=self._date(row, "start_date"),
            end_date=self._date(row, "end_date"),
            year=year,
            season=season,
            sheet_name=row.sheet_name,
            row_index=row.row_index,
            details=details,
            raw_data=dict(row.values),
        )

    # ------------------------------------------------------------------
    # per content type details
    # ------------------------------------------------------------------
    def _commodity_details(self, row: RawRow) -> dict[str, Any]:
        return _week_details(extract_field(row, "week_range"))

    def _crop_details(self, row: RawRow) -> dict[str, Any]:
        return {
            "plantingStart": parse_month(extract_raw(row, "planting_start")),
            "plantingEnd": parse_month(extract_raw(row, "planting_end")),
            "harvestStart": parse_month(extract_raw(row, "harvest_start")),
            "harvestEnd": parse_month(extract_raw(row, "harvest_end")),
            "variety": _text(row, "variety"),
            "notes": _text(row, "notes"),
        }

    def _production_details(self, row: RawRow) -> dict[str, Any]:
        return {
            "activity": _text(row, "activity"),
            "month": parse_month(extract_raw(row, "month")),
            "week": _text(row, "week_range"),
            "description": _text(row, "description"),
            "tools": _text(row, "tools"),
            "priority": _text(row, "priority", DEFAULT_PRIORITY),
            "duration": _text(row, "duration"),
        }

    def _agromet_details(self, row: RawRow) -> dict[str, Any]:
        return {
            "date": self._date(row, "date"),
            "weatherCondition": _text(row, "weather_condition"),
            "advisory": _text(row, "advisory"),
            "action": _text(row, "action"),
            "priority": _text(row, "priority", DEFAULT_PRIORITY),
            "validFrom": self._date(row, "valid_from"),
            "validTo": self._date(row, "valid_to"),
            "temperature": _text(row, "temperature"),
            "rainfall": _text(row, "rainfall"),
            "humidity": _text(row, "humidity"),
            "category": _text(row, "category"),
        }

    def _poultry_details(self, row: RawRow) -> dict[str, Any]:
        details = {
            "poultryType": _text(row, "poultry_type", DEFAULT_POULTRY_TYPE),
            "activity": _text(row, "activity"),
        }
        details.update(_week_details(extract_field(row, "week_range")))
        details.update({
            "advisory": _text(row, "advisory"),
            "priority": _text(row, "priority", DEFAULT_PRIORITY),
            "duration": _text(row, "duration"),
            "notes": _text(row, "notes"),
        })
        return details

    # ------------------------------------------------------------------
    # timeline documents
    # ------------------------------------------------------------------
    def assemble_activities(
        self,
        layout: TimelineLayout,
        activities: Sequence[Activity],
        schedule: Sequence[ScheduleEntry],
    ) -> list[NormalizedRecord]:
        """One record per activity; timing comes from its first and last active periods."""
        by_activity = {entry.activity_id: entry for entry in schedule}
        return [self.build_activity_record(layout, a, by_activity.get(a.id)) for a in activities]

    def build_activity_record(
        self,
        layout: TimelineLayout,
        activity: Activity,
        entry: ScheduleEntry | None,
    ) -> NormalizedRecord:
        timeline = layout.timeline
        first = entry.first if entry else None
        last = entry.last if entry else None
        seasonal = timeline.type == SEASONAL

        month_year = None
        if seasonal and first is not None and first.unit.month:
            month_year = f"{first.unit.month} {timeline.year}" if timeline.year else first.unit.month

        week_range = None
        if first is not None:
            start_label, end_label = _period_label(first), _period_label(last)
            week_range = start_label if start_label == end_label else f"{start_label} - {end_label}"

        details: dict[str, Any] = {
            "activity": activity.name,
            "calendarType": timeline.type,
            "title": layout.title,
            "periods": len(entry.periods) if entry else 0,
            "color": first.color if first is not None else None,
        }
        if not seasonal:
            details["startWeek"] = first.unit.production_week if first is not None else None
            details["endWeek"] = last.unit.production_week if last is not None else None

        grid = layout.grid
        raw = {
            f"column_{c + 1}": value
            for c, value in enumerate(grid.row(activity.source_row_index))
            if not is_blank_cell(value)
        }
        crop = parse_composite(layout.commodity, COMMODITY, self.reference)
        return NormalizedRecord(
            id=self.ids.next(activity.source_row_index + 1),
            content_type=self.content_type.value,
            crop=crop.name,
            commodity_code=crop.code,
            production_stage=normalize_stage(activity.name, self.reference),
            month_year=month_year,
            week_range=week_range,
            start_date=_period_date(first, timeline.year, start=True) if seasonal else None,
            end_date=_period_date(last, timeline.year, start=False) if seasonal else None,
            year=timeline.year,
            season=_activity_season(layout.title, month_year),
            sheet_name=grid.sheet_name,
            row_index=activity.source_row_index + 1,
            details=details,
            raw_data=raw,
        )


def _month_year_text(value: Any) -> str | None:
    """Month/year cell as text; date cells become "March 2024"."""
    if isinstance(value, date):
        return f"{MONTHS[value.month - 1]} {value.year}"
    return cell_text(value)


def _activity_season(title: str | None, month_year: str | None) -> str | None:
    """Season named in the calendar title ("... Major Season"), else the season of the first active month."""
    named = season_from_title(title)
    if named != "main":
        return named.capitalize()
    return determine_season(month_year) if month_year else None


def _period_label(period: SchedulePeriod) -> str:
    unit = period.unit
    if unit.production_week is not None:
        return f"Week {unit.production_week}"
    parts = [p for p in (unit.month, unit.week_label or unit.date_range) if p]
    return " ".join(parts) if parts else f"Unit {unit.index + 1}"


def _period_date(period: SchedulePeriod | None, year: int | None, start: bool) -> str | None:
    """Calendar date of a seasonal period when month, year and a day range are all known."""
    if period is None or year is None:
        return None
    unit = period.unit
    if not unit.month or not unit.date_range:
        return None
    m = _DAY_RANGE.match(unit.date_range)
    if not m:
        return None
    day = int(m.group(1) if start else m.group(2))
    try:
        return date(year, MONTHS.index(unit.month) + 1, day).isoformat()
    except ValueError:
        return None
