from __future__ import annotations

from pathlib import Path

import pytest

from agrocal.config.reference import ReferenceDataError, load_reference_data


def test_default_reference_data_loads():
    ref = load_reference_data()
    assert ref.version
    assert ref.regions["REG02"] == "Ashanti Region"
    assert ref.code_table("DS")["DS225"] == "Biakoye"
    assert "broiler" in ref.cycle_commodities
    assert "maize" in ref.seasonal_commodities
    assert all(key == key.lower() for key in ref.stages)


def test_reference_data_is_read_only():
    ref = load_reference_data()
    with pytest.raises(TypeError):
        ref.regions["REG99"] = "Nowhere"


def test_unknown_code_family():
    with pytest.raises(ValueError):
        load_reference_data().code_table("XX")


def test_alternate_reference_file(tmp_path: Path):
    p = tmp_path / "ref.yml"
    p.write_text(
        """version: "test-1"
regions: {REG01: North}
districts: {DS001: Hill}
commodities: {CT0001: millet}
stages: {Clearing: Land Preparation}
seasonal_commodities: [Millet]
cycle_commodities: [goat]
""",
        encoding="utf-8",
    )
    ref = load_reference_data(p)
    assert ref.version == "test-1"
    assert ref.stages == {"clearing": "Land Preparation"}
    assert ref.seasonal_commodities == ("millet",)
    assert ref.advisory_filename_tokens == ()


def test_invalid_reference_files(tmp_path: Path):
    with pytest.raises(ReferenceDataError, match="not found"):
        load_reference_data(tmp_path / "missing.yml")

    bad_yaml = tmp_path / "bad.yml"
    bad_yaml.write_text("regions: [unclosed", encoding="utf-8")
    with pytest.raises(ReferenceDataError, match="invalid yaml"):
        load_reference_data(bad_yaml)

    bad_code = tmp_path / "code.yml"
    bad_code.write_text(
        """version: "x"
regions: {R1: North}
districts: {}
commodities: {}
stages: {}
seasonal_commodities: []
cycle_commodities: []
""",
        encoding="utf-8",
    )
    with pytest.raises(ReferenceDataError, match="validation failed"):
        load_reference_data(bad_code)
