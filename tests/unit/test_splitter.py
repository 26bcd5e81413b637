from __future__ import annotations

import pytest

from agrocal.excel.reader import SheetGrid
from agrocal.models.warning_record import SHEET_PROCESSING_ERROR
from agrocal.services.splitter import SheetProcessingError, is_multi_sheet, read_section, split_workbook


def _sheet(name, rows):
    return SheetGrid(sheet_name=name, cells=tuple(tuple(r) for r in rows))


def test_is_multi_sheet():
    one = _sheet("A", [("x", "y")])
    assert not is_multi_sheet([one])
    assert is_multi_sheet([one, _sheet("B", [("x", "y")])])


def test_read_section():
    section = read_section(_sheet("Harvesting", [("[REGION]", "[WEEK]"), ("REG02", "1 - 2")]))
    assert section.sheet_name == "Harvesting"
    assert section.header_index == 0
    assert len(section.rows) == 1
    assert section.rows[0].sheet_name == "Harvesting"


def test_header_only_sheet_fails():
    with pytest.raises(SheetProcessingError, match="no data rows"):
        read_section(_sheet("Notes", [("[REGION]", "[WEEK]")]))


def test_split_workbook_skips_bad_sheet():
    grids = [
        _sheet("Land Preparation", [("[REGION]", "[WEEK]"), ("REG02", "1 - 2")]),
        _sheet("Notes", [("Only a title",)]),
        _sheet("Harvesting", [("[REGION]", "[WEEK]"), ("REG03", "3 - 4")]),
    ]
    sections, warnings = split_workbook(grids, "rice_advisory.xlsx")
    assert [s.sheet_name for s in sections] == ["Land Preparation", "Harvesting"]
    assert len(warnings) == 1
    assert warnings[0].warning_type == SHEET_PROCESSING_ERROR
    assert warnings[0].sheet == "Notes"
    assert warnings[0].row == -1
