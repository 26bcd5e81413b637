from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.warning_record import ParseWarning

"""Warning log buffering (JSON Lines).

- one file per run: `<log_directory>/warnings-YYYYMMDD-HHMMSS.log` (UTC)
- one ParseWarning per line, fixed key set (see ParseWarning.to_dict)
- the file is only created once there is something to write
"""

__all__ = [
    "ParseWarning",
    "WarningLogBuffer",
]

DEFAULT_LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class WarningLogBuffer:
    """In-memory buffer of ParseWarnings; flush() appends them to the run's log file.

    Serial use only (one batch run at a time).
    """

    def __init__(self, logs_dir: Path | str | None = None) -> None:
        self.logs_dir = Path(logs_dir) if logs_dir is not None else DEFAULT_LOGS_DIR
        self._records: list[ParseWarning] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.logs_dir / f"warnings-{stamp}.log"
        return self._file_path

    def append(self, record: ParseWarning) -> None:
        self._records.append(record)

    def extend(self, records) -> None:
        self._records.extend(records)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered warnings; returns the log path, or None when nothing was written."""
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
