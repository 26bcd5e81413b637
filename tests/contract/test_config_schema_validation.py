from __future__ import annotations

import json

import jsonschema
import pytest
import yaml

from agrocal.config.loader import SCHEMA_PATH
from agrocal.config.reference import DEFAULT_REFERENCE_PATH
from agrocal.config.reference import SCHEMA_PATH as REFERENCE_SCHEMA_PATH


def _schema(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_config_schema_accepts_minimal_config():
    jsonschema.validate({"source_directory": "./data", "output_directory": "./out"}, _schema(SCHEMA_PATH))


def test_config_schema_rejects_unknown_keys():
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(
            {"source_directory": "./data", "output_directory": "./out", "database": {}},
            _schema(SCHEMA_PATH),
        )


def test_packaged_reference_data_matches_schema():
    data = yaml.safe_load(DEFAULT_REFERENCE_PATH.read_text(encoding="utf-8"))
    jsonschema.validate(data, _schema(REFERENCE_SCHEMA_PATH))
