# Shared pytest fixtures
from __future__ import annotations
import io
import tempfile
from pathlib import Path
from typing import Any

import openpyxl
import pandas as pd
import pytest
from openpyxl.styles import PatternFill

from agrocal.config.reference import load_reference_data
from agrocal.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("AGROCAL_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./output
log_directory: ./logs
max_file_bytes: 1048576
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "agrocal.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def reference():
    return load_reference_data()


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


def build_workbook(sheets: dict[str, list[list[Any]]], fills: dict[tuple[str, int, int], str] | None = None) -> bytes:
    """xlsx bytes with one sheet per entry; fills maps (sheet, row, col) (1-based) -> ARGB."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    for (sheet, row, col), argb in (fills or {}).items():
        wb[sheet].cell(row=row, column=col).fill = PatternFill(fill_type="solid", fgColor=argb)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def frames_workbook(sheets: dict[str, list[list[Any]]]) -> bytes:
    """xlsx bytes written through pandas (plain values, no styling)."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return buf.getvalue()


ADVISORY_HEADER = ["[ZONE]", "[REGION]", "[DISTRICT]", "[CROP]", "[MONTH/YEAR]", "[WEEK]"]
ADVISORY_PLACEHOLDER = ["Enter Zone", "Enter Region", "Enter District", "Enter Crop", "Enter Month/Year", "Enter Week"]


def advisory_sheet(month_year: str = "March 2024", week: str = "1 - 2") -> list[list[Any]]:
    return [
        ADVISORY_HEADER,
        ["Coastal", "REG07/Volta Region", "DS225/Biakoye", "CT0000000008/Rice", month_year, week],
        ADVISORY_PLACEHOLDER,
    ]


def seasonal_calendar_rows() -> list[list[Any]]:
    return [
        ["Maize Crop Calendar 2024 Major Season"],
        ["Activity", "JANUARY", None, "FEBRUARY", None, "MARCH", None],
        [None, "WK1", "WK2", "WK1", "WK2", "WK1", "WK2"],
        ["Calendar date", "1-7", "8-14", "1-7", "8-14", "1-7", "8-14"],
        ["Land preparation", "x", "x", None, None, None, None],
        ["Planting", None, None, "x", "x", None, None],
        ["Weeding", None, None, None, None, None, None],
    ]


def cycle_calendar_rows(weeks: int = 10) -> list[list[Any]]:
    header = ["Activity"] + [f"Week {n}" for n in range(1, weeks + 1)]
    brooding = ["Brooding", "x", "x"] + [None] * (weeks - 2)
    vaccination = ["Vaccination", None, None, 1] + [None] * (weeks - 4) + ["x"]
    return [
        ["Broiler Production Cycle"],
        header,
        brooding,
        vaccination,
    ]


@pytest.fixture()
def advisory_workbook() -> bytes:
    return frames_workbook({
        "Land Preparation": advisory_sheet(),
        "Planting Sowing": advisory_sheet(week="3 - 4"),
        "Harvesting": advisory_sheet(month_year="July 2024", week="20 - 22"),
    })


@pytest.fixture()
def seasonal_workbook() -> bytes:
    return build_workbook(
        {"Calendar": seasonal_calendar_rows()},
        fills={("Calendar", 5, 2): "FF00B050", ("Calendar", 5, 3): "FF00B050", ("Calendar", 6, 4): "FFFFC000"},
    )


@pytest.fixture()
def cycle_workbook() -> bytes:
    return build_workbook({"Cycle": cycle_calendar_rows()})


@pytest.fixture()
def make_workbook():
    return build_workbook


@pytest.fixture()
def make_frames_workbook():
    return frames_workbook


@pytest.fixture()
def make_advisory_sheet():
    return advisory_sheet
