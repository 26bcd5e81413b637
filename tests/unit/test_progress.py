from __future__ import annotations

from pathlib import Path

from agrocal.models.processing_result import FileStat
from agrocal.services import progress
from agrocal.services.progress import ProgressTracker


def _stat(status: str, records: int = 0) -> FileStat:
    return FileStat(
        file_name="a.xlsx", status=status, content_type=None, records=records,
        warnings=0, skipped_sheets=0, elapsed_seconds=0.1,
    )


def test_tracker_is_silent_without_tty(monkeypatch):
    monkeypatch.setattr(progress, "is_tty_enabled", lambda: False)
    with ProgressTracker(2) as tracker:
        assert tracker.bar is None
        tracker.begin(Path("a.xlsx"))
        tracker.record(_stat("success", records=5))
        tracker.record(_stat("failed"))
    assert (tracker.done, tracker.ok, tracker.failed, tracker.records) == (2, 1, 1, 5)


def test_tracker_updates_bar_when_enabled():
    tracker = ProgressTracker(2, enabled=True)
    assert tracker.bar is not None
    tracker.begin(Path("a.xlsx"))
    tracker.record(_stat("success", records=3))
    tracker.begin(Path("b.csv"))
    tracker.record(_stat("failed"))
    assert tracker.bar.n == 2
    tracker.close()
    assert tracker.bar is None
