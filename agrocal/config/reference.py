from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Reference-data loader (region/district/commodity codes, stage synonyms).

The lookup tables consulted by the composite-code parser, the stage
normalizer and the classifier live in a versioned YAML file so they can be
updated without touching the parser. The packaged default is
reference_data.yml next to this module; callers may point at another file.

The loaded ReferenceData is immutable and owned by the caller. Nothing here
caches it: pass the same object to as many parse calls as you like.
"""

__all__ = [
    "ReferenceData",
    "ReferenceDataError",
    "DEFAULT_REFERENCE_PATH",
    "load_reference_data",
]

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PATH = Path(__file__).with_name("reference_data.yml")
SCHEMA_PATH = Path(__file__).with_name("reference_schema.json")


class ReferenceDataError(Exception):
    pass


def _frozen(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class ReferenceData:
    version: str
    regions: Mapping[str, str]  # REGnn -> region name
    districts: Mapping[str, str]  # DSnnn -> district name
    commodities: Mapping[str, str]  # CTnnnnnnnnnn -> commodity name
    stages: Mapping[str, str]  # lower-cased stage label -> canonical stage
    seasonal_commodities: tuple[str, ...]
    cycle_commodities: tuple[str, ...]
    commodity_patterns: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    advisory_filename_tokens: tuple[str, ...] = ()

    def code_table(self, family: str) -> Mapping[str, str]:
        """Lookup table for a composite-code prefix family (REG, DS, CT)."""
        tables = {"REG": self.regions, "DS": self.districts, "CT": self.commodities}
        try:
            return tables[family]
        except KeyError:
            raise ValueError(f"unknown code family: {family}") from None


def _validate(data: Any, source: Path) -> None:
    if not SCHEMA_PATH.exists():
        raise ReferenceDataError(f"reference schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ReferenceDataError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ReferenceDataError(f"reference data validation failed ({source.name}): {e.message}") from e


def load_reference_data(path: Path | str | None = None) -> ReferenceData:
    """Load and validate a reference-data YAML file.

    Parameters
    ----------
    path: YAML file to load. None loads the packaged default.
    """
    source = Path(path) if path is not None else DEFAULT_REFERENCE_PATH
    if not source.exists():
        raise ReferenceDataError(f"reference data not found: {source}")
    try:
        data = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ReferenceDataError(f"invalid yaml: {e}") from e

    _validate(data, source)

    stages = {str(k).strip().lower(): v for k, v in data["stages"].items()}
    patterns = {
        name: tuple(p.lower() for p in words)
        for name, words in (data.get("commodity_patterns") or {}).items()
    }
    ref = ReferenceData(
        version=str(data["version"]),
        regions=_frozen(data["regions"]),
        districts=_frozen(data["districts"]),
        commodities=_frozen(data["commodities"]),
        stages=_frozen(stages),
        seasonal_commodities=tuple(c.lower() for c in data["seasonal_commodities"]),
        cycle_commodities=tuple(c.lower() for c in data["cycle_commodities"]),
        commodity_patterns=_frozen(patterns),
        advisory_filename_tokens=tuple(t.lower() for t in data.get("advisory_filename_tokens") or ()),
    )
    logger.debug(f"reference data {ref.version} loaded from {source}")
    return ref
