from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

"""Normalized output records.

NormalizedRecord is the canonical output unit of the pipeline. Field names in
to_dict() are the stable camelCase names the persistence collaborator reads.
"""

__all__ = [
    "CompositeIdentifier",
    "NormalizedRecord",
    "json_safe",
]


def json_safe(value: Any) -> Any:
    """Convert spreadsheet cell values into JSON-serializable scalars."""
    if value is None:
        return None
    if isinstance(value, float) and value != value:  # NaN
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if hasattr(value, "isoformat"):  # pandas Timestamp / time
        return value.isoformat()
    if hasattr(value, "item"):  # numpy scalar
        return value.item()
    return value


@dataclass(frozen=True)
class CompositeIdentifier:
    """A "CODE/Name" spreadsheet value split into its two halves."""
    code: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class NormalizedRecord:
    """Canonical record produced for one source row (or one calendar activity).

    Identifier pairs (region/regionCode, district/districtCode,
    crop/commodityCode) are always either resolved or None.
    """
    id: str
    content_type: str
    zone: str | None = None
    region: str | None = None
    region_code: str | None = None
    district: str | None = None
    district_code: str | None = None
    crop: str | None = None
    commodity_code: str | None = None
    production_stage: str | None = None
    month_year: str | None = None
    week_range: str | None = None
    start_date: str | None = None  # ISO date
    end_date: str | None = None  # ISO date
    year: int | None = None
    season: str | None = None
    sheet_name: str | None = None
    row_index: int | None = None
    details: dict[str, Any] = field(default_factory=dict)  # content-type specific fields
    raw_data: dict[str, Any] = field(default_factory=dict)  # original row, kept for audit

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "contentType": self.content_type,
            "zone": self.zone,
            "region": self.region,
            "regionCode": self.region_code,
            "district": self.district,
            "districtCode": self.district_code,
            "crop": self.crop,
            "commodityCode": self.commodity_code,
            "productionStage": self.production_stage,
            "monthYear": self.month_year,
            "weekRange": self.week_range,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "year": self.year,
            "season": self.season,
            "sheetName": self.sheet_name,
            "rowIndex": self.row_index,
            "details": {k: json_safe(v) for k, v in self.details.items()},
            "rawData": {k: json_safe(v) for k, v in self.raw_data.items()},
        }

    def content_key(self) -> tuple:
        """Everything except the synthetic id; equal for re-parses of the same bytes."""
        data = self.to_dict()
        data.pop("id")
        return tuple(sorted((k, repr(v)) for k, v in data.items()))
