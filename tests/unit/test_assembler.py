from __future__ import annotations

from agrocal.models import ContentType, RawRow
from agrocal.models.warning_record import DATE_PARSE_FAILURE, ROW_MAPPING_ERROR
from agrocal.services.assembler import IdFactory, RecordAssembler, color_stats


def _row(values: dict, row_index: int = 2, sheet: str = "") -> RawRow:
    return RawRow(values=values, sheet_name=sheet, row_index=row_index)


def _assembler(reference, content_type: ContentType) -> RecordAssembler:
    return RecordAssembler(reference, content_type, "upload.xlsx", IdFactory(content_type.id_tag, 1700000000000))


def test_id_factory_sequence():
    ids = IdFactory("crop", 123)
    assert ids.next(2) == "crop_123_0_2"
    assert ids.next(5) == "crop_123_1_5"


def test_commodity_advisory_record(reference):
    assembler = _assembler(reference, ContentType.COMMODITY_ADVISORY)
    row = _row({
        "[ZONE]": "Coastal",
        "[REGION]": "REG07/Volta Region",
        "[DISTRICT]": "DS225",
        "[CROP]": "CT0000000008/Rice",
        "[MONTH/YEAR]": "March 2024",
        "[WEEK]": "1 - 2",
    }, sheet="Land Preparation")
    record = assembler.build_row_record(row, stage="Land Preparation")
    assert record.id == "commodity_1700000000000_0_2"
    assert (record.region, record.region_code) == ("Volta Region", "REG07")
    assert (record.district, record.district_code) == ("Biakoye", "DS225")
    assert (record.crop, record.commodity_code) == ("Rice", "CT0000000008")
    assert record.production_stage == "Land Preparation"
    assert record.year == 2024
    assert record.season == "Major"
    assert record.details == {"startWeek": 1, "endWeek": 2}
    assert record.raw_data["[ZONE]"] == "Coastal"


def test_placeholder_rows_are_dropped(reference):
    assembler = _assembler(reference, ContentType.COMMODITY_ADVISORY)
    rows = [
        _row({"[REGION]": "Enter Region", "[WEEK]": "Enter Week", "[CROP]": "Rice"}, 2),
        _row({"[REGION]": "REG02", "[WEEK]": "Enter Week", "[CROP]": "Rice"}, 3),
    ]
    records = assembler.assemble_rows(rows)
    assert [r.row_index for r in records] == [3]
    assert assembler.placeholder_rows == 1
    assert assembler.warnings == []


def test_crop_calendar_details(reference):
    assembler = _assembler(reference, ContentType.CROP_CALENDAR)
    record = assembler.build_row_record(_row({
        "Crop": "Maize",
        "PlantingStart": "mar",
        "PlantingEnd": 4,
        "HarvestStart": "July",
        "HarvestEnd": "Aug",
        "Variety": "Obatanpa",
    }))
    assert record.crop == "maize"
    assert record.details == {
        "plantingStart": "March",
        "plantingEnd": "April",
        "harvestStart": "July",
        "harvestEnd": "August",
        "variety": "Obatanpa",
        "notes": None,
    }


def test_production_and_poultry_defaults(reference):
    production = _assembler(reference, ContentType.PRODUCTION_CALENDAR)
    record = production.build_row_record(_row({"Activity": "Weeding", "Month": "June"}))
    assert record.details["priority"] == "Medium"
    assert record.details["month"] == "June"
    assert record.production_stage == "Weeding"

    poultry = _assembler(reference, ContentType.POULTRY_CALENDAR)
    record = poultry.build_row_record(_row({"Activity": "Brooding", "Week": "1-3"}))
    assert record.details["poultryType"] == "Broiler"
    assert (record.details["startWeek"], record.details["endWeek"]) == (1, 3)


def test_agromet_dates_and_parse_failure(reference):
    assembler = _assembler(reference, ContentType.AGROMET_ADVISORY)
    records = assembler.assemble_rows([
        _row({"Date": 45000, "Weather": "Rain", "Advisory": "Delay planting", "Region": "REG02"}, 2),
        _row({"Date": "TBD", "Weather": "Dry", "Region": "REG03"}, 3),
    ])
    assert len(records) == 2
    assert records[0].details["date"] == "2023-03-15"
    assert records[0].details["weatherCondition"] == "Rain"
    assert records[0].region == "Ashanti Region"
    assert records[1].details["date"] is None
    assert [w.warning_type for w in assembler.warnings] == [DATE_PARSE_FAILURE]
    assert assembler.warnings[0].row == 3


def test_row_without_recognized_values_is_skipped(reference):
    assembler = _assembler(reference, ContentType.CROP_CALENDAR)
    records = assembler.assemble_rows([
        _row({"Crop": "maize", "PlantingStart": "March", "Extra": None}, 2),
        _row({"Crop": None, "PlantingStart": None, "Extra": "stray note"}, 3),
    ])
    assert [r.row_index for r in records] == [2]
    assert len(assembler.warnings) == 1
    assert assembler.warnings[0].warning_type == ROW_MAPPING_ERROR
    assert assembler.warnings[0].row == 3


def test_generic_rows_are_kept_as_is(reference):
    assembler = _assembler(reference, ContentType.UNKNOWN)
    rows = [_row({"name": "a", "value": "1"}, 2), _row({"name": "Region", "value": None}, 3)]
    records = assembler.assemble_rows(rows)
    assert len(records) == 2
    assert records[0].id.startswith("generic_")
    assert records[0].details == {}
    assert records[1].raw_data == {"name": "Region", "value": None}


def test_color_stats_empty():
    assert color_stats(()) == {"periodsWithColor": 0, "uniqueColors": []}
