from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft7Validator

from ..models.config_models import DEFAULT_MAX_FILE_BYTES, ImportConfig

"""Batch configuration loader.

config/agrocal.yml is checked against config_schema.json (next to this
module) and turned into an ImportConfig. Every schema violation is reported
at once, ordered by key, so a broken file can be fixed in one pass.
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/agrocal.yml")


class ConfigError(Exception):
    pass


def _validator() -> Draft7Validator:
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    return Draft7Validator(schema)


def _check(data: dict[str, Any]) -> None:
    errors = sorted(_validator().iter_errors(data), key=lambda err: list(map(str, err.path)))
    if errors:
        details = "; ".join(
            f"{'.'.join(map(str, err.path))}: {err.message}" if err.path else err.message
            for err in errors
        )
        raise ConfigError(f"config validation failed: {details}")


def load_config(path: Path) -> ImportConfig:
    if not path.is_file():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _check(data)

    return ImportConfig(
        source_directory=data["source_directory"],
        output_directory=data["output_directory"],
        max_file_bytes=data.get("max_file_bytes", DEFAULT_MAX_FILE_BYTES),
        reference_data=data.get("reference_data"),
        log_directory=data.get("log_directory", "./logs"),
    )
