from __future__ import annotations

import pytest

from agrocal.excel.reader import SheetGrid
from agrocal.models.timeline import CYCLE, SEASONAL
from agrocal.services.timeline import (
    build_timeline,
    find_field_header_row,
    find_header_rows,
    find_title,
    is_text_cell,
    week_label,
)


def _grid(rows, name="Sheet1") -> SheetGrid:
    width = max(len(r) for r in rows)
    return SheetGrid(sheet_name=name, cells=tuple(tuple(list(r) + [None] * (width - len(r))) for r in rows))


SEASONAL_ROWS = [
    ["Maize Crop Calendar 2024 Major Season"],
    ["Activity", "JANUARY", None, "FEBRUARY", None, "MARCH", None],
    [None, "WK1", "WK2", "WK1", "WK2", "WK1", "WK2"],
    ["Calendar date", "1-7", "8-14", "1-7", "8-14", "1-7", "8-14"],
    ["Land preparation", "x", "x", None, None, None, None],
]


@pytest.mark.parametrize(
    "value,expected",
    [("WK3", 3), ("Week 10", 10), ("w 2", 2), ("wk.4", 4), ("Weekly", None), ("Week", None), (5, None)],
)
def test_week_label(value, expected):
    assert week_label(value) == expected


def test_find_header_rows_seasonal():
    headers = find_header_rows(_grid(SEASONAL_ROWS))
    assert (headers.month_row, headers.week_row, headers.date_row) == (1, 2, 3)
    assert headers.last == 3


def test_find_title():
    assert find_title(_grid(SEASONAL_ROWS)) == "Maize Crop Calendar 2024 Major Season"


def test_relative_weeks_give_cycle_timeline(reference):
    rows = [["Activity"] + [f"Week {n}" for n in range(1, 11)], ["Brooding", "x"]]
    layout = build_timeline(_grid(rows), None, reference)
    assert layout is not None
    timeline = layout.timeline
    assert timeline.type == CYCLE
    assert len(timeline) == 10
    assert [u.production_week for u in timeline.units] == list(range(1, 11))
    assert [u.index for u in timeline.units] == list(range(10))
    assert layout.first_activity_row == 1
    assert layout.name_column == 0


def test_seasonal_timeline_units(reference):
    layout = build_timeline(_grid(SEASONAL_ROWS), "maize", reference)
    assert layout is not None
    timeline = layout.timeline
    assert timeline.type == SEASONAL
    assert timeline.months == ("January", "February", "March")
    assert timeline.year == 2024
    assert len(timeline) == 6
    first, third = timeline.units[0], timeline.units[2]
    assert (first.month, first.week_label, first.date_range, first.column) == ("January", "WK1", "1-7", 1)
    assert (third.month, third.week_label) == ("February", "WK1")
    assert layout.first_activity_row == 4


def test_mixed_signals_follow_commodity(reference):
    grid = _grid(SEASONAL_ROWS)
    assert build_timeline(grid, "broiler", reference).timeline.type == CYCLE
    assert build_timeline(grid, "maize", reference).timeline.type == SEASONAL
    assert build_timeline(grid, None, reference).timeline.type == CYCLE


def test_month_row_only(reference):
    rows = [["Task", "Jan", "Feb", "Mar", "Apr"], ["Clearing", "x", None, None, None]]
    layout = build_timeline(_grid(rows), None, reference)
    assert layout.timeline.type == SEASONAL
    assert [u.month for u in layout.timeline.units] == ["January", "February", "March", "April"]
    assert layout.timeline.units[0].week_label is None


def test_flat_table_has_no_timeline(reference):
    rows = [["Crop", "Variety"], ["maize", "Obatanpa"]]
    assert build_timeline(_grid(rows), None, reference) is None


def test_lifecycle_words_without_week_columns(reference):
    rows = [["Stage", "Notes"], ["Brooding", "keep warm"]]
    assert build_timeline(_grid(rows), "broiler", reference) is None


def test_is_text_cell():
    assert is_text_cell("Weeding")
    assert not is_text_cell("12")
    assert not is_text_cell(12)
    assert not is_text_cell("  ")


def test_month_values_below_a_field_header_are_data(reference):
    rows = [
        ["Crop", "PlantingStart", "PlantingEnd", "HarvestStart", "HarvestEnd"],
        ["maize", "March", "April", "July", "August"],
        ["rice", "May", "June", "September", "October"],
    ]
    grid = _grid(rows)
    assert find_field_header_row(grid) == 0
    assert find_header_rows(grid).rows == ()
    assert build_timeline(grid, "maize", reference) is None


def test_calendar_header_is_not_a_field_header():
    assert find_field_header_row(_grid(SEASONAL_ROWS)) is None
