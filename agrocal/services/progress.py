from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm

from ..models.processing_result import FileStat

"""tqdm progress bar for batch parses.

One bar over the input files, with the running ok/failed/records counts as
postfix. Nothing is drawn when stdout is not a terminal, so redirected logs
stay free of control sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    stream = sys.stdout
    return hasattr(stream, "isatty") and stream.isatty()


class ProgressTracker:
    """Counts finished files; draws a bar only on a TTY."""

    def __init__(self, total_files: int, *, label: str = "Parsing calendars", enabled: bool | None = None) -> None:
        self.label = label
        self.done = 0
        self.ok = 0
        self.failed = 0
        self.records = 0
        if enabled is None:
            enabled = is_tty_enabled()
        self.bar: tqdm | None = None
        if enabled:
            self.bar = tqdm(total=total_files, desc=label, unit="file", leave=False, dynamic_ncols=True, ascii=True)

    def begin(self, file_path: Path) -> None:
        if self.bar is not None:
            self.bar.set_description_str(f"{self.label}: {file_path.name}")

    def record(self, stat: FileStat) -> None:
        self.done += 1
        if stat.status == "success":
            self.ok += 1
            self.records += stat.records
        else:
            self.failed += 1
        if self.bar is not None:
            self.bar.set_description_str(self.label)
            self.bar.set_postfix(ok=self.ok, failed=self.failed, records=self.records, refresh=False)
            self.bar.update(1)

    def close(self) -> None:
        if self.bar is not None:
            self.bar.close()
            self.bar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
