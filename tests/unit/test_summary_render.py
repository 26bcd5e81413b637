from __future__ import annotations

from datetime import UTC, datetime

import pytest

from agrocal.models.processing_result import ProcessingResult
from agrocal.services.summary import _format_seconds, render_summary_line


def _result(**overrides) -> ProcessingResult:
    start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=UTC)
    values = dict(
        success_files=2,
        failed_files=1,
        total_records=118,
        skipped_sheets=1,
        total_warnings=4,
        start_time=start,
        end_time=start,
        elapsed_seconds=0.42,
    )
    values.update(overrides)
    return ProcessingResult(**values)


def test_render_summary_line():
    result = _result()
    assert render_summary_line(result.total_files, result) == (
        "SUMMARY files=3/3 success=2 failed=1 records=118 skipped_sheets=1 warnings=4 elapsed_sec=0.42"
    )


def test_render_summary_empty_run():
    result = _result(success_files=0, failed_files=0, total_records=0, skipped_sheets=0, total_warnings=0, elapsed_seconds=0)
    assert render_summary_line(0, result) == (
        "SUMMARY files=0/0 success=0 failed=0 records=0 skipped_sheets=0 warnings=0 elapsed_sec=0"
    )


@pytest.mark.parametrize(
    "seconds,text",
    [(0, "0"), (2.0, "2"), (1.5, "1.5"), (0.123456, "0.12"), (0.0012, "0.0012")],
)
def test_format_seconds(seconds, text):
    assert _format_seconds(seconds) == text
