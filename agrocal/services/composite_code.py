from __future__ import annotations

import re
from typing import Any

from ..config.reference import ReferenceData
from ..models import CompositeIdentifier

"""Composite "CODE/Name" value parsing.

Advisory templates carry identifiers such as "REG03/Ashanti Region",
"DS179/Biakoye" or "CT0000000008/Rice". The value is split at the first "/"
only, so names that contain a slash survive intact. A bare code resolves its
name from the reference data; anything else is a name without a code.
"""

__all__ = [
    "REGION",
    "DISTRICT",
    "COMMODITY",
    "parse_composite",
]

REGION = "REG"
DISTRICT = "DS"
COMMODITY = "CT"

_COMPOSITE = {family: re.compile(rf"^({family}\d+)/(.+)$", re.DOTALL) for family in (REGION, DISTRICT, COMMODITY)}
_BARE = {family: re.compile(rf"^{family}\d+$") for family in (REGION, DISTRICT, COMMODITY)}


def parse_composite(value: Any, family: str, reference: ReferenceData | None = None) -> CompositeIdentifier:
    """Split a composite identifier of the given family (REG, DS or CT).

    Commodity names that come without a code are lower-cased, matching how
    commodity names are keyed everywhere else.
    """
    if family not in _COMPOSITE:
        raise ValueError(f"unknown code family: {family}")
    if value is None:
        return CompositeIdentifier()
    text = str(value).strip()
    if not text:
        return CompositeIdentifier()

    m = _COMPOSITE[family].match(text)
    if m:
        name = m.group(2).strip()
        return CompositeIdentifier(code=m.group(1), name=name or m.group(1))

    if _BARE[family].match(text):
        name = text
        if reference is not None:
            name = reference.code_table(family).get(text, text)
        return CompositeIdentifier(code=text, name=name)

    if family == COMMODITY:
        return CompositeIdentifier(code=None, name=text.lower())
    return CompositeIdentifier(code=None, name=text)
