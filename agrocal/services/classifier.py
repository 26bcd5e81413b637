from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from ..config.reference import ReferenceData
from ..models import ContentType, RawRow

"""Content-type classification and commodity detection.

classify_content() decides which record shape an upload represents from its
file name first and from the header labels of its first row second. Rules
are evaluated in order and the first match wins; no match yields
ContentType.UNKNOWN, which the assembler handles with the generic builder.
"""

__all__ = [
    "classify_content",
    "classify_by_filename",
    "classify_by_headers",
    "detect_commodity",
    "is_cycle_commodity",
    "is_seasonal_commodity",
]

logger = logging.getLogger(__name__)

_POULTRY_WORDS = ("poultry", "chicken", "bird")


def classify_by_filename(filename: str, reference: ReferenceData) -> ContentType | None:
    name = (filename or "").lower()
    if "western" in name and "calendar" in name:
        return ContentType.CROP_CALENDAR
    if "western" in name and "advisory" in name:
        return ContentType.COMMODITY_ADVISORY
    if "advisory" in name and any(token in name for token in reference.advisory_filename_tokens):
        return ContentType.COMMODITY_ADVISORY
    if "crop" in name and "calendar" in name:
        return ContentType.CROP_CALENDAR
    if "production" in name and "calendar" in name:
        return ContentType.PRODUCTION_CALENDAR
    if "poultry" in name and "calendar" in name:
        return ContentType.POULTRY_CALENDAR
    if "agromet" in name or ("advisory" in name and "weather" in name):
        return ContentType.AGROMET_ADVISORY
    return None


def classify_by_headers(labels: Iterable[str]) -> ContentType | None:
    folded = [str(label).strip().lower() for label in labels]
    if not folded:
        return None
    headers = " ".join(folded)
    if all(tag in headers for tag in ("[zone]", "[region]", "[district]", "[crop]")):
        return ContentType.COMMODITY_ADVISORY
    if "plant" in headers and "harvest" in headers:
        return ContentType.CROP_CALENDAR
    if "activity" in headers and "month" in headers:
        return ContentType.PRODUCTION_CALENDAR
    if "weather" in headers or "advisory" in headers:
        return ContentType.AGROMET_ADVISORY
    if "poultry" in headers or "bird" in headers:
        return ContentType.POULTRY_CALENDAR
    return None


def classify_content(filename: str, sample_rows: Sequence[RawRow], reference: ReferenceData) -> ContentType:
    """Classify an upload by file name, then by the labels of its first sample row."""
    by_name = classify_by_filename(filename, reference)
    if by_name is not None:
        logger.debug(f"{filename}: classified as {by_name.value} by file name")
        return by_name
    if sample_rows:
        by_headers = classify_by_headers(sample_rows[0].labels)
        if by_headers is not None:
            logger.debug(f"{filename}: classified as {by_headers.value} by header labels")
            return by_headers
    return ContentType.UNKNOWN


def _mentions(text: str, word: str) -> bool:
    return re.search(rf"\b{re.escape(word)}s?\b", text) is not None


def detect_commodity(text: str | None, reference: ReferenceData) -> str | None:
    """Commodity named in a title or file name ("Broiler Production Cycle" -> "broiler").

    Poultry patterns are tried first, then the seasonal and cycle commodity
    lists; text that is clearly about poultry but names no breed gives "layer".
    """
    if not text:
        return None
    lowered = text.lower().replace("_", " ").replace("-", " ")
    for commodity, patterns in reference.commodity_patterns.items():
        if any(_mentions(lowered, p) for p in patterns):
            return commodity
    for commodity in (*reference.seasonal_commodities, *reference.cycle_commodities):
        if _mentions(lowered, commodity):
            return commodity
    if any(_mentions(lowered, w) for w in _POULTRY_WORDS):
        return "layer"
    return None


def is_cycle_commodity(commodity: str | None, reference: ReferenceData) -> bool:
    return bool(commodity) and commodity.lower() in reference.cycle_commodities


def is_seasonal_commodity(commodity: str | None, reference: ReferenceData) -> bool:
    return bool(commodity) and commodity.lower() in reference.seasonal_commodities
