from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for batch imports.

ProcessingResult aggregates the per-file outcome of one CLI run and feeds the
SUMMARY output line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    content_type: str | None  # None when the file failed before classification
    records: int  # records in the output document
    warnings: int  # recoverable problems recorded while parsing
    skipped_sheets: int  # sheets dropped by the multi-sheet splitter
    elapsed_seconds: float
    error: str | None = None  # failure reason summary


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results and summary output for a batch run."""
    success_files: int
    failed_files: int
    total_records: int
    skipped_sheets: int
    total_warnings: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
