from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from ..config.reference import ReferenceData, ReferenceDataError, load_reference_data
from ..excel.reader import WorkbookError, format_for_path, load_source
from ..logging.warning_log import WarningLogBuffer
from ..models import CalendarDocument, ImportConfig, ParseWarning
from ..models.processing_result import FileStat, ProcessingResult
from ..models.warning_record import FILE_ERROR, SHEET_PROCESSING_ERROR
from .parser import CalendarParser
from .progress import ProgressTracker

"""Batch orchestration: parse every calendar file of a directory.

For each supported file (non-recursive, sorted by name): read it (bounded by
max_file_bytes), parse it into a CalendarDocument, write
`<output_directory>/<stem>.json`. A failing file is recorded and the run
moves on; only directory/reference-data problems abort the run.
"""

__all__ = [
    "ProcessingError",
    "SOURCE_SUFFIXES",
    "scan_source_files",
    "output_path_for",
    "write_document",
    "process_file",
    "process_all",
]

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".xlsx", ".xlsm", ".csv")


class ProcessingError(Exception):
    """Fatal batch error (missing directory, unusable reference data)."""


def scan_source_files(directory: Path) -> list[Path]:
    """Spreadsheet and CSV files directly inside directory, sorted by name.

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        files = [
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in SOURCE_SUFFIXES and not p.name.startswith("~$")
        ]
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e
    return sorted(files, key=lambda p: p.name)


def output_path_for(output_directory: Path, source: Path) -> Path:
    return output_directory / f"{source.stem}.json"


def write_document(document: CalendarDocument, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(document.to_dict(), f, ensure_ascii=False, indent=2)
        f.write("\n")


def process_file(
    file_path: Path,
    parser: CalendarParser,
    config: ImportConfig,
    warning_log: WarningLogBuffer,
) -> FileStat:
    """Parse one file and write its JSON document. Failures are returned, not raised."""
    start = datetime.now(UTC)
    try:
        buffer = load_source(file_path, config.max_file_bytes)
        document = parser.parse(buffer, format_for_path(file_path), file_path.name)
        write_document(document, output_path_for(Path(config.output_directory), file_path))
    except (WorkbookError, OSError) as e:
        elapsed = (datetime.now(UTC) - start).total_seconds()
        logger.error(f"{file_path.name}: {e}")
        warning_log.append(ParseWarning.create(file_path.name, "", -1, FILE_ERROR, str(e)))
        return FileStat(
            file_name=file_path.name,
            status="failed",
            content_type=None,
            records=0,
            warnings=0,
            skipped_sheets=0,
            elapsed_seconds=elapsed,
            error=str(e),
        )

    warning_log.extend(document.warnings)
    skipped = sum(1 for w in document.warnings if w.warning_type == SHEET_PROCESSING_ERROR)
    elapsed = (datetime.now(UTC) - start).total_seconds()
    logger.info(
        f"{file_path.name}: {document.content_type} records={document.metadata.record_count} "
        f"warnings={len(document.warnings)}"
    )
    return FileStat(
        file_name=file_path.name,
        status="success",
        content_type=document.content_type,
        records=document.metadata.record_count,
        warnings=len(document.warnings),
        skipped_sheets=skipped,
        elapsed_seconds=elapsed,
    )


def process_all(config: ImportConfig, reference: ReferenceData | None = None) -> ProcessingResult:
    """Parse all files of config.source_directory.

    Args:
        config: batch configuration
        reference: reference data to parse with (None loads config.reference_data,
            or the packaged default)

    Raises:
        ProcessingError: For fatal errors that prevent processing
    """
    start_time = datetime.now(UTC)

    if reference is None:
        try:
            reference = load_reference_data(config.reference_data)
        except ReferenceDataError as e:
            raise ProcessingError(f"reference data: {e}") from e
    parser = CalendarParser(reference)

    file_paths = scan_source_files(Path(config.source_directory))
    warning_log = WarningLogBuffer(config.log_directory)

    file_stats: list[FileStat] = []
    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.begin(file_path)
            stat = process_file(file_path, parser, config, warning_log)
            file_stats.append(stat)
            progress.record(stat)

    try:
        log_path = warning_log.flush()
    except OSError as e:
        logger.error(f"warning log could not be written: {e}")
    else:
        if log_path is not None:
            logger.info(f"warnings written to {log_path}")

    end_time = datetime.now(UTC)
    succeeded = [s for s in file_stats if s.status == "success"]
    return ProcessingResult(
        success_files=len(succeeded),
        failed_files=len(file_stats) - len(succeeded),
        total_records=sum(s.records for s in succeeded),
        skipped_sheets=sum(s.skipped_sheets for s in file_stats),
        total_warnings=sum(s.warnings for s in file_stats),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
