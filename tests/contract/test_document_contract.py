from __future__ import annotations

from agrocal.services.parser import parse_upload

"""Output document field names read by the persistence side."""

DOCUMENT_KEYS = {"contentType", "data", "timeline", "activities", "schedule", "metadata", "warnings"}
RECORD_KEYS = {
    "id", "contentType", "zone", "region", "regionCode", "district", "districtCode",
    "crop", "commodityCode", "productionStage", "monthYear", "weekRange", "startDate",
    "endDate", "year", "season", "sheetName", "rowIndex", "details", "rawData",
}
METADATA_KEYS = {"originalName", "recordCount", "parsedAt", "isMultiSheet", "colorStats"}


def test_flat_document_keys(advisory_workbook, reference):
    doc = parse_upload(advisory_workbook, "spreadsheet", "rice_advisory.xlsx", reference).to_dict()
    assert set(doc) == DOCUMENT_KEYS
    assert set(doc["metadata"]) == METADATA_KEYS | {"sheets"}
    assert doc["metadata"]["parsedAt"].endswith("Z")
    for record in doc["data"]:
        assert set(record) == RECORD_KEYS
    assert doc["timeline"] is None
    assert doc["metadata"]["colorStats"] == {"periodsWithColor": 0, "uniqueColors": []}


def test_timeline_document_keys(seasonal_workbook, cycle_workbook, reference):
    seasonal = parse_upload(seasonal_workbook, "spreadsheet", "maize_calendar.xlsx", reference).to_dict()
    assert set(seasonal["metadata"]) == METADATA_KEYS
    assert set(seasonal["timeline"]) == {"type", "totalUnits", "months", "year", "units"}
    assert set(seasonal["timeline"]["units"][0]) == {"index", "type", "month", "weekLabel", "dateRange"}
    assert set(seasonal["activities"][0]) == {"id", "name", "sourceRowIndex"}
    period = seasonal["schedule"][0]["periods"][0]
    assert {"unitIndex", "value", "color"} <= set(period)

    cycle = parse_upload(cycle_workbook, "spreadsheet", "broiler_cycle.xlsx", reference).to_dict()
    assert set(cycle["timeline"]["units"][0]) == {"index", "type", "productionWeek", "weekLabel"}
    assert cycle["data"][0]["details"]["startWeek"] == 1
