from __future__ import annotations

import re
import warnings
from datetime import date, datetime, timedelta
from numbers import Real
from typing import Any

import pandas as pd

"""Date, month, season and week-range normalization.

normalize_date() accepts whatever a spreadsheet cell may hold (ISO strings,
datetime objects, spreadsheet serial numbers, free text) and returns an ISO
date string or None. It never raises: an unparseable date is a missing date,
not a failed row.
"""

__all__ = [
    "MONTHS",
    "SERIAL_DATE_THRESHOLD",
    "normalize_date",
    "month_from_text",
    "month_label",
    "parse_month",
    "extract_year",
    "determine_season",
    "season_from_title",
    "parse_week_range",
]

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# Serial 25569 is 1970-01-01; anything at or below is treated as a plain number.
SERIAL_DATE_THRESHOLD = 25568
_SERIAL_EPOCH = datetime(1900, 1, 1)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_NUMERIC = re.compile(r"^[+-]?\d+(\.\d+)?$")
_YEAR = re.compile(r"(\d{4})")
_WEEK_NUMBER = re.compile(r"\d+")
_MONTH_WORD = re.compile(
    r"\b(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\b",
    re.IGNORECASE,
)

_MONTH_LABEL = re.compile(
    r"^(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?(?:[\s,'/-]*\d{2,4})?$",
    re.IGNORECASE,
)

_MAJOR_MONTHS = {3, 4, 5, 6, 7}
_MINOR_MONTHS = {9, 10, 11}
_DRY_MONTHS = {12, 1, 2}

MIN_WEEK = 1
MAX_WEEK = 52


def _from_serial(serial: float) -> str | None:
    if serial != serial or serial <= SERIAL_DATE_THRESHOLD:  # NaN or not a spreadsheet date
        return None
    try:
        return (_SERIAL_EPOCH + timedelta(days=serial - 2)).date().isoformat()
    except OverflowError:
        return None


def normalize_date(value: Any) -> str | None:
    """Normalize a cell value into "YYYY-MM-DD", or None when it is not a date.

    Order: ISO string as-is, datetime objects, spreadsheet serial numbers
    (> 25568, day 1 = 1900-01-01 with the leap-year offset), generic date text.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if pd.isna(value):  # NaT
            return None
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Real):
        return _from_serial(float(value))

    text = str(value).strip()
    if not text:
        return None
    if _ISO_DATE.match(text):
        return text
    if _NUMERIC.match(text):
        return _from_serial(float(text))
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return parsed.date().isoformat()


def month_from_text(value: Any) -> str | None:
    """Full English month name mentioned in value ("mar 2024" -> "March"), else None."""
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return MONTHS[value.month - 1]
    m = _MONTH_WORD.search(str(value))
    if not m:
        return None
    prefix = m.group(1)[:3].lower()
    for name in MONTHS:
        if name[:3].lower() == prefix:
            return name
    return None


def month_label(value: Any) -> str | None:
    """Month name when the whole cell is a month header ("JANUARY", "Mar", "Jan-24"), else None."""
    if isinstance(value, (datetime, date)):
        return MONTHS[value.month - 1]
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not _MONTH_LABEL.match(text):
        return None
    return month_from_text(text)


def parse_month(value: Any) -> str | None:
    """Month name for calendar detail fields.

    Month names, abbreviations and month numbers (1-12) resolve to the full
    name; other text is returned trimmed so nothing the author wrote is lost.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Real):
        if value != value:
            return None
        if float(value).is_integer() and 1 <= int(value) <= 12:
            return MONTHS[int(value) - 1]
        return str(value)
    month = month_from_text(value)
    if month:
        return month
    text = str(value).strip()
    if text.isdigit() and 1 <= int(text) <= 12:
        return MONTHS[int(text) - 1]
    return text or None


def _month_number(value: Any) -> int | None:
    month = month_from_text(value)
    return MONTHS.index(month) + 1 if month else None


def extract_year(month_year: Any) -> int | None:
    """First 4-digit year in a month/year value, or None."""
    if month_year is None:
        return None
    if isinstance(month_year, (datetime, date)):
        return month_year.year
    m = _YEAR.search(str(month_year))
    return int(m.group(1)) if m else None


def determine_season(month_year: Any) -> str:
    """Growing season of a month/year value: Major, Minor, Dry or Unknown."""
    month = _month_number(month_year)
    if month in _MAJOR_MONTHS:
        return "Major"
    if month in _MINOR_MONTHS:
        return "Minor"
    if month in _DRY_MONTHS:
        return "Dry"
    return "Unknown"


def season_from_title(title: str | None) -> str:
    if not title:
        return "main"
    lowered = title.lower()
    for season in ("major", "minor", "dry", "wet"):
        if season in lowered:
            return season
    return "main"


def _clamp_week(value: int) -> int:
    return max(MIN_WEEK, min(MAX_WEEK, value))


def parse_week_range(text: Any) -> tuple[int, int]:
    """Parse "1 - 7" / "Week 3" / "wk 10-12" into (start, end).

    Both ends are clamped to 1..52 and ordered; text without numbers gives (1, 1).
    """
    if text is None:
        return (MIN_WEEK, MIN_WEEK)
    numbers = [int(n) for n in _WEEK_NUMBER.findall(str(text))]
    if not numbers:
        return (MIN_WEEK, MIN_WEEK)
    start = _clamp_week(numbers[0])
    end = _clamp_week(numbers[1]) if len(numbers) > 1 else start
    if end < start:
        start, end = end, start
    return (start, end)
