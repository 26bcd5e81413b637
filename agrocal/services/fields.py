from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from numbers import Real
from types import MappingProxyType
from typing import Any

from ..excel.reader import is_blank_cell
from ..models import RawRow

"""Field extraction by column-label aliases and the placeholder-row filter.

Template authors spell the same column many ways ("[REGION]", "REGION",
"Region", "region"). FIELD_ALIASES declares, per canonical field, the
spellings in priority order. extract_field() takes the first non-empty value:
exact label matches first, then the same aliases compared case-insensitively.

The table is validated when the module is imported; a malformed table is a
programming error and fails loudly.
"""

__all__ = [
    "FIELD_ALIASES",
    "PLACEHOLDER_FIELDS",
    "PLACEHOLDER_TOKENS",
    "cell_text",
    "extract_raw",
    "extract_field",
    "has_placeholder_fields",
    "is_placeholder_row",
]

FIELD_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    # geography / identity
    "zone": ("[ZONE]", "ZONE", "Zone", "zone"),
    "region": ("[REGION]", "REGION", "Region", "region"),
    "district": ("[DISTRICT]", "DISTRICT", "District", "district"),
    "crop": ("[CROP]", "CROP", "Crop", "crop", "Commodity", "commodity"),
    "stage": ("[STAGE]", "STAGE", "Stage", "Production Stage", "stage"),
    # timing
    "month_year": ("[MONTH/YEAR]", "MONTH/YEAR", "Month/Year", "month_year", "MonthYear"),
    "week_range": ("[WEEK]", "WEEK", "Week", "week", "WeekRange", "Week Range"),
    "start_date": ("[START DATE]", "START DATE", "Start Date", "start_date"),
    "end_date": ("[END DATE]", "END DATE", "End Date", "end_date"),
    "season": ("Season", "season"),
    "year": ("Year", "year"),
    # crop calendar
    "planting_start": ("PlantingStart", "Planting Start"),
    "planting_end": ("PlantingEnd", "Planting End"),
    "harvest_start": ("HarvestStart", "Harvest Start"),
    "harvest_end": ("HarvestEnd", "Harvest End"),
    "variety": ("Variety", "variety"),
    "notes": ("Notes", "notes"),
    # production calendar
    "activity": ("Activity", "activity", "Activities", "Task"),
    "month": ("Month", "month"),
    "description": ("Description", "description"),
    "tools": ("Tools", "tools"),
    "priority": ("Priority", "priority"),
    "duration": ("Duration", "duration"),
    # agromet advisory
    "date": ("Date", "date"),
    "weather_condition": ("WeatherCondition", "Weather Condition", "Weather"),
    "advisory": ("Advisory", "advisory"),
    "action": ("Action", "Recommended Action", "action"),
    "valid_from": ("ValidFrom", "Valid From"),
    "valid_to": ("ValidTo", "Valid To"),
    "temperature": ("Temperature", "temperature"),
    "rainfall": ("Rainfall", "rainfall"),
    "humidity": ("Humidity", "humidity"),
    "category": ("Category", "category"),
    # poultry calendar
    "poultry_type": ("PoultryType", "Poultry Type", "Bird Type"),
})

# Geographic/temporal fields consulted by the placeholder filter.
PLACEHOLDER_FIELDS = ("zone", "region", "district", "month_year", "week_range")

PLACEHOLDER_TOKENS = frozenset({
    "enter zone",
    "enter region",
    "enter district",
    "enter month/year",
    "enter week",
    "zone",
    "region",
    "district",
    "month/year",
    "week",
})


def _validate_aliases(table: Mapping[str, tuple[str, ...]]) -> None:
    for name, aliases in table.items():
        if not isinstance(aliases, tuple) or not aliases:
            raise ValueError(f"field '{name}' must declare a non-empty tuple of aliases")
        if any(not isinstance(a, str) or not a.strip() for a in aliases):
            raise ValueError(f"field '{name}' has an empty alias")
        if len(set(aliases)) != len(aliases):
            raise ValueError(f"field '{name}' lists an alias twice")
    missing = [f for f in PLACEHOLDER_FIELDS if f not in table]
    if missing:
        raise ValueError(f"placeholder fields without aliases: {missing}")


_validate_aliases(FIELD_ALIASES)


def cell_text(value: Any) -> str | None:
    """Trimmed text of a cell, None when blank. Whole floats lose their ".0"."""
    if is_blank_cell(value):
        return None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, Real) and float(value).is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.date().isoformat() if value.time() == datetime.min.time() else value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def extract_raw(row: RawRow, field: str) -> Any:
    """First non-blank raw value among the aliases of field, or None."""
    aliases = FIELD_ALIASES[field]
    values = row.values
    for alias in aliases:
        if alias in values and not is_blank_cell(values[alias]):
            return values[alias]
    folded: dict[str, str] = {}
    for label in values:
        folded.setdefault(str(label).strip().lower(), label)
    for alias in aliases:
        label = folded.get(alias.lower())
        if label is not None and not is_blank_cell(values[label]):
            return values[label]
    return None


def extract_field(row: RawRow, field: str) -> str | None:
    """First non-empty trimmed value among the aliases of field, or None."""
    return cell_text(extract_raw(row, field))


def has_placeholder_fields(row: RawRow) -> bool:
    """True when at least one column of the row aliases a geographic/temporal field."""
    folded = {str(label).strip().lower() for label in row.values}
    for field in PLACEHOLDER_FIELDS:
        if any(alias.lower() in folded for alias in FIELD_ALIASES[field]):
            return True
    return False


def is_placeholder_row(row: RawRow) -> bool:
    """True when every geographic/temporal field is empty or template text."""
    for field in PLACEHOLDER_FIELDS:
        value = extract_field(row, field)
        if value is None:
            continue
        if value.lower() not in PLACEHOLDER_TOKENS:
            return False
    return True
