from __future__ import annotations

import re
from typing import Any

from ..config.reference import ReferenceData

"""Production-stage label normalization.

Stage labels arrive as sheet names, activity names or a [STAGE] column and
are frequently truncated or misspelled ("Seed selection and seed treatme",
"2nd fertilizer applciation"). The reference stage dictionary carries those
variants as keys, so lookup is: exact key, then substring containment in
either direction (longest key first), then the label itself tidied up.
"""

__all__ = [
    "UNKNOWN_STAGE",
    "normalize_stage",
]

UNKNOWN_STAGE = "Unknown Stage"

_SPACES = re.compile(r"\s+")


def _fold(label: str) -> str:
    return _SPACES.sub(" ", label.strip().lower())


def _capitalized(label: str) -> str:
    text = _SPACES.sub(" ", label.strip())
    return text[:1].upper() + text[1:]


def normalize_stage(label: Any, reference: ReferenceData) -> str:
    """Canonical stage name for label. Never raises and never returns None."""
    if label is None:
        return UNKNOWN_STAGE
    text = str(label)
    folded = _fold(text)
    if not folded:
        return UNKNOWN_STAGE

    stages = reference.stages
    if folded in stages:
        return stages[folded]

    for key in sorted(stages, key=len, reverse=True):
        if key in folded or folded in key:
            return stages[key]

    return _capitalized(text)
