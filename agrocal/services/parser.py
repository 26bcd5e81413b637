from __future__ import annotations

import logging
import time
from datetime import UTC, datetime

from ..config.reference import ReferenceData, load_reference_data
from ..excel.reader import (
    EmptyFileError,
    SheetGrid,
    SourceFileNotFoundError,
    UnsupportedFormatError,
    WorkbookError,
    WorkbookReadError,
    read_workbook,
)
from ..models import CalendarDocument, ContentType, DocumentMetadata, NormalizedRecord, ParseWarning
from ..models.timeline import SEASONAL
from .assembler import IdFactory, RecordAssembler, RowMappingError, color_stats
from .classifier import classify_content, detect_commodity
from .schedule import build_schedule, extract_activities
from .splitter import SheetProcessingError, is_multi_sheet, read_section, split_workbook
from .timeline import build_timeline, find_title

"""Single-invocation parse entry point.

    parse_upload(buffer, "spreadsheet", "Maize_Calendar_2024.xlsx") -> CalendarDocument

Flow: bytes -> sheet grids -> (multi-sheet: one section per sheet, sheet name
as stage) or (single sheet: timeline detection, then either activities on a
timeline or flat rows) -> classified, normalized records.

Every invocation builds its own state; the reference data is passed in (or
loaded fresh) and never cached here. File-level failures raise; row- and
sheet-level problems become warnings on the returned document.
"""

__all__ = [
    "WorkbookError",
    "SourceFileNotFoundError",
    "UnsupportedFormatError",
    "EmptyFileError",
    "WorkbookReadError",
    "RowMappingError",
    "SheetProcessingError",
    "NoValidRecordsError",
    "CalendarParser",
    "parse_upload",
]

logger = logging.getLogger(__name__)


class NoValidRecordsError(WorkbookError):
    """Raised when nothing usable is left after filtering and row mapping."""


def _utc_now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class CalendarParser:
    """Parser bound to one ReferenceData object.

    The instance holds no per-parse state, so one parser may serve any number
    of sequential parse() calls.
    """

    def __init__(self, reference: ReferenceData | None = None):
        self.reference = reference if reference is not None else load_reference_data()

    def parse(self, buffer: bytes, file_format: str, original_name: str) -> CalendarDocument:
        grids = read_workbook(buffer, file_format)
        stamp_ms = int(time.time() * 1000)
        if is_multi_sheet(grids):
            document = self._parse_multi_sheet(grids, original_name, stamp_ms)
        else:
            document = self._parse_single_sheet(grids[0], original_name, stamp_ms)
        logger.debug(
            f"{original_name}: {document.content_type}, {document.metadata.record_count} records, "
            f"{len(document.warnings)} warnings"
        )
        return document

    def _parse_multi_sheet(self, grids: list[SheetGrid], name: str, stamp_ms: int) -> CalendarDocument:
        content_type = ContentType.COMMODITY_ADVISORY
        sections, warnings = split_workbook(grids, name)
        assembler = RecordAssembler(self.reference, content_type, name, IdFactory(content_type.id_tag, stamp_ms))
        records: list[NormalizedRecord] = []
        for section in sections:
            records.extend(assembler.assemble_rows(section.rows, stage=section.sheet_name))
        warnings.extend(assembler.warnings)
        if not records:
            raise NoValidRecordsError(f"{name}: no valid records in {len(grids)} sheets")
        metadata = DocumentMetadata(
            original_name=name,
            record_count=len(records),
            parsed_at=_utc_now(),
            is_multi_sheet=True,
            sheets=tuple(g.sheet_name for g in grids),
            color_stats=color_stats(()),
        )
        return CalendarDocument(
            content_type=content_type.value,
            records=tuple(records),
            metadata=metadata,
            warnings=tuple(warnings),
        )

    def _parse_single_sheet(self, grid: SheetGrid, name: str, stamp_ms: int) -> CalendarDocument:
        title = find_title(grid)
        commodity = detect_commodity(f"{title or ''} {name}", self.reference)
        layout = build_timeline(grid, commodity, self.reference, title=title)

        if layout is not None:
            content_type = classify_content(name, [], self.reference)
            if content_type is ContentType.UNKNOWN:
                content_type = (
                    ContentType.CROP_CALENDAR if layout.timeline.type == SEASONAL else ContentType.POULTRY_CALENDAR
                )
            assembler = RecordAssembler(self.reference, content_type, name, IdFactory(content_type.id_tag, stamp_ms))
            activities = extract_activities(layout)
            schedule = build_schedule(layout, activities)
            records = assembler.assemble_activities(layout, activities, schedule)
            if not records:
                raise NoValidRecordsError(f"{name}: timeline found but no activity rows")
            return self._document(
                content_type, records, name, assembler.warnings,
                timeline=layout.timeline, activities=activities, schedule=schedule,
            )

        try:
            section = read_section(grid)
        except SheetProcessingError as e:
            raise NoValidRecordsError(f"{name}: {e}") from e
        content_type = classify_content(name, section.rows, self.reference)
        assembler = RecordAssembler(self.reference, content_type, name, IdFactory(content_type.id_tag, stamp_ms))
        records = assembler.assemble_rows(section.rows)
        if not records:
            raise NoValidRecordsError(f"{name}: no valid records ({len(section.rows)} rows read)")
        return self._document(content_type, records, name, assembler.warnings)

    def _document(
        self,
        content_type: ContentType,
        records: list[NormalizedRecord],
        name: str,
        warnings: list[ParseWarning],
        timeline=None,
        activities=(),
        schedule=(),
    ) -> CalendarDocument:
        metadata = DocumentMetadata(
            original_name=name,
            record_count=len(records),
            parsed_at=_utc_now(),
            is_multi_sheet=False,
            color_stats=color_stats(schedule),
        )
        return CalendarDocument(
            content_type=content_type.value,
            records=tuple(records),
            metadata=metadata,
            timeline=timeline,
            activities=tuple(activities),
            schedule=tuple(schedule),
            warnings=tuple(warnings),
        )


def parse_upload(
    buffer: bytes,
    file_format: str,
    original_name: str,
    reference: ReferenceData | None = None,
) -> CalendarDocument:
    """Parse one uploaded file into a CalendarDocument.

    Parameters
    ----------
    buffer: file content
    file_format: "csv" or "spreadsheet"
    original_name: the uploader's file name (used for classification)
    reference: reference data to resolve codes and stages with (None loads
        the packaged default for this call)

    Raises
    ------
    UnsupportedFormatError, EmptyFileError, WorkbookReadError, NoValidRecordsError
    """
    return CalendarParser(reference).parse(buffer, file_format, original_name)
