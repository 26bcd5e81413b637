#!/usr/bin/env python3
"""Sample calendar generator for manual runs.

Writes three workbooks into the output directory:
- <crop>_Crop_Calendar_<year>.xlsx: seasonal calendar (month / week / calendar
  date header rows, shaded activity cells)
- Broiler_Production_Cycle.xlsx: cycle calendar with relative production weeks
- <Crop>_Advisory_Biakoye.xlsx: multi-sheet commodity advisory, one sheet per
  production stage, with a template placeholder row left in each sheet

Point config/agrocal.yml at the directory and run `python -m agrocal.cli`.
"""
from __future__ import annotations

import argparse
import calendar
import sys
from pathlib import Path
from typing import Any

import numpy as np
import openpyxl
import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill

SEASONAL_ACTIVITIES = [
    "Site selection",
    "Land preparation",
    "Seed selection and seed treatment",
    "Planting/Sowing",
    "1st fertilizer application",
    "Weeding",
    "2nd fertilizer application",
    "Pest and disease control",
    "Harvesting",
    "Post harvest handling",
]

CYCLE_ACTIVITIES = [
    ("Brooding", 1, 2),
    ("Vaccination", 1, 3),
    ("Starter phase", 1, 3),
    ("Grower phase", 4, 5),
    ("Finisher phase", 6, 7),
    ("Litter management", 2, 7),
    ("Harvesting", 7, 8),
]

ADVISORY_STAGES = ["Land Preparation", "Planting Sowing", "1st Fertilizer", "Weeding", "Harvesting"]
ADVISORY_HEADER = ["[ZONE]", "[REGION]", "[DISTRICT]", "[CROP]", "[MONTH/YEAR]", "[WEEK]", "[ADVISORY]"]
PLACEHOLDER_ROW = ["Enter Zone", "Enter Region", "Enter District", "Enter Crop", "Enter Month/Year", "Enter Week", ""]

ACTIVE_FILL = PatternFill(fill_type="solid", fgColor="FF00B050")
HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFFFC000")


def _week_ranges(year: int, month: int) -> list[str]:
    """Day ranges of the four calendar weeks of a month ("1-7" ... "22-31")."""
    last = calendar.monthrange(year, month)[1]
    return ["1-7", "8-14", "15-21", f"22-{last}"]


def create_seasonal_calendar(output_dir: Path, crop: str, year: int, start_month: int, months: int, seed: int) -> Path:
    rng = np.random.default_rng(seed)
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Calendar"

    ws.append([f"{crop.title()} Crop Calendar {year} Major Season"])
    ws["A1"].font = Font(bold=True, size=14)

    month_row: list[Any] = ["Activity"]
    week_row: list[Any] = [None]
    date_row: list[Any] = ["Calendar date"]
    for offset in range(months):
        month = (start_month + offset - 1) % 12 + 1
        month_row.extend([calendar.month_name[month].upper(), None, None, None])
        week_row.extend(["WK1", "WK2", "WK3", "WK4"])
        date_row.extend(_week_ranges(year, month))
    ws.append(month_row)
    ws.append(week_row)
    ws.append(date_row)
    for offset in range(months):
        first = 2 + offset * 4
        ws.merge_cells(start_row=2, start_column=first, end_row=2, end_column=first + 3)
        ws.cell(row=2, column=first).alignment = Alignment(horizontal="center")
        ws.cell(row=2, column=first).fill = HEADER_FILL

    total_weeks = months * 4
    step = max(1, total_weeks // len(SEASONAL_ACTIVITIES))
    for i, activity in enumerate(SEASONAL_ACTIVITIES):
        start = min(i * step, total_weeks - 1)
        span = int(rng.integers(1, 4))
        row = [activity] + [None] * total_weeks
        for w in range(start, min(start + span, total_weeks)):
            row[1 + w] = "x"
        ws.append(row)
        for w in range(start, min(start + span, total_weeks)):
            ws.cell(row=ws.max_row, column=2 + w).fill = ACTIVE_FILL

    path = output_dir / f"{crop.title()}_Crop_Calendar_{year}.xlsx"
    wb.save(path)
    return path


def create_cycle_calendar(output_dir: Path, weeks: int) -> Path:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Cycle"
    ws.append(["Broiler Production Cycle"])
    ws.append(["Activity"] + [f"Week {n}" for n in range(1, weeks + 1)])
    for activity, first, last in CYCLE_ACTIVITIES:
        row: list[Any] = [activity] + [None] * weeks
        for w in range(first, min(last, weeks) + 1):
            row[w] = "x"
        ws.append(row)
        for w in range(first, min(last, weeks) + 1):
            ws.cell(row=ws.max_row, column=1 + w).fill = ACTIVE_FILL
    path = output_dir / "Broiler_Production_Cycle.xlsx"
    wb.save(path)
    return path


def create_advisory_workbook(output_dir: Path, crop: str, year: int, rows: int, seed: int) -> Path:
    """One sheet per stage, written through pandas like a template export."""
    rng = np.random.default_rng(seed)
    districts = [("DS225", "Biakoye"), ("DS226", "Jasikan"), ("DS227", "Kadjebi")]
    path = output_dir / f"{crop.title()}_Advisory_Biakoye.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for stage_no, stage in enumerate(ADVISORY_STAGES):
            data = [ADVISORY_HEADER]
            for _ in range(rows):
                code, name = districts[int(rng.integers(0, len(districts)))]
                month = 3 + stage_no
                first_week = int(rng.integers(1, 50))
                data.append([
                    "Transition",
                    "REG07/Volta Region",
                    f"{code}/{name}",
                    f"CT0000000008/{crop.title()}",
                    f"{calendar.month_name[month]} {year}",
                    f"{first_week} - {first_week + 1}",
                    f"{stage}: follow extension officer guidance",
                ])
            data.append(PLACEHOLDER_ROW)
            pd.DataFrame(data).to_excel(writer, sheet_name=stage, header=False, index=False)
    return path


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate sample calendar workbooks for manual parser runs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default samples into ./data
  python scripts/gen_sample_calendars.py

  # Rice calendar over six months, starting in April
  python scripts/gen_sample_calendars.py --crop rice --start-month 4 --months 6
        """,
    )
    parser.add_argument("--output-dir", type=Path, default=Path("data"), help="Directory to write into (default: data)")
    parser.add_argument("--crop", default="maize", help="Crop for the seasonal calendar and advisory (default: maize)")
    parser.add_argument("--year", type=int, default=2024, help="Calendar year (default: 2024)")
    parser.add_argument("--start-month", type=int, default=3, help="First month of the seasonal calendar (default: 3)")
    parser.add_argument("--months", type=int, default=5, help="Months covered by the seasonal calendar (default: 5)")
    parser.add_argument("--cycle-weeks", type=int, default=8, help="Weeks in the broiler cycle (default: 8)")
    parser.add_argument("--advisory-rows", type=int, default=4, help="Data rows per advisory sheet (default: 4)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if not 1 <= args.start_month <= 12:
        print("Error: --start-month must be between 1 and 12", file=sys.stderr)
        return 1
    if args.months <= 0 or args.cycle_weeks <= 0 or args.advisory_rows <= 0:
        print("Error: --months, --cycle-weeks and --advisory-rows must be positive", file=sys.stderr)
        return 1

    try:
        args.output_dir.mkdir(parents=True, exist_ok=True)
        paths = [
            create_seasonal_calendar(args.output_dir, args.crop, args.year, args.start_month, args.months, args.seed),
            create_cycle_calendar(args.output_dir, args.cycle_weeks),
            create_advisory_workbook(args.output_dir, args.crop, args.year, args.advisory_rows, args.seed),
        ]
    except OSError as e:
        print(f"Error generating samples: {e}", file=sys.stderr)
        return 1

    for path in paths:
        print(f"Created: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
