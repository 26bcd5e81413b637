from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ParseWarning model for recoverable parse problems.

Row- and sheet-level failures do not abort a parse. Each one becomes a
ParseWarning that is logged, returned with the CalendarDocument and, in batch
runs, written as a JSON line by WarningLogBuffer. row=-1 marks problems that
are not tied to a single row (a whole sheet was skipped).
"""

__all__ = [
    "ParseWarning",
    "ROW_MAPPING_ERROR",
    "SHEET_PROCESSING_ERROR",
    "DATE_PARSE_FAILURE",
    "FILE_ERROR",
]

ROW_MAPPING_ERROR = "ROW_MAPPING_ERROR"
SHEET_PROCESSING_ERROR = "SHEET_PROCESSING_ERROR"
DATE_PARSE_FAILURE = "DATE_PARSE_FAILURE"
FILE_ERROR = "FILE_ERROR"  # batch runs only: the whole file failed


@dataclass(frozen=True)
class ParseWarning:
    """Structured warning record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: original file name
        sheet: sheet name ("" for CSV input)
        row: spreadsheet row number (1-based). -1 when the warning covers a sheet
        warning_type: classification in UPPER_SNAKE_CASE format
        message: human readable description
    """
    timestamp: str
    file: str
    sheet: str
    row: int
    warning_type: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, warning_type: str, message: str) -> ParseWarning:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ParseWarning(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            warning_type=warning_type,
            message=message,
        )

    def to_dict(self) -> dict[str, object]:
        return asdict(self)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
