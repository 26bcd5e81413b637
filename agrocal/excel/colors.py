from __future__ import annotations

from typing import Any

from openpyxl.styles.colors import COLOR_INDEX

"""Cell fill color resolution.

Calendar authors mark active weeks by shading cells, so the fill color is
read alongside the value. openpyxl exposes a fill color in one of three
forms; all of them are resolved to "#RRGGBB":

- rgb: "AARRGGBB" (alpha dropped) or "RRGGBB"
- indexed: legacy 64-entry palette, plus 64/65 for system fore/background
- theme: Office default theme slot with an optional tint
"""

__all__ = [
    "THEME_COLORS",
    "fill_to_hex",
    "color_to_hex",
    "apply_tint",
]

# Office default theme, slot order as stored in styles.xml
THEME_COLORS = (
    "FFFFFF",  # lt1
    "000000",  # dk1
    "E7E6E6",  # lt2
    "44546A",  # dk2
    "5B9BD5",  # accent1
    "70AD47",
    "FFC000",
    "F79646",
    "C5504B",
    "9F4F96",  # accent6
    "0563C1",  # hyperlink
    "954F72",  # followed hyperlink
)

_SYSTEM_INDEXED = {64: "000000", 65: "FFFFFF"}


def apply_tint(rgb: str, tint: float) -> str:
    """Darken (tint < 0) or lighten (tint > 0) an "RRGGBB" string."""
    if not tint:
        return rgb.upper()
    out = []
    for i in (0, 2, 4):
        channel = int(rgb[i:i + 2], 16)
        if tint < 0:
            channel = channel * (1.0 + tint)
        else:
            channel = channel + (255 - channel) * tint
        out.append(max(0, min(255, round(channel))))
    return "".join(f"{c:02X}" for c in out)


def _rgb_value(raw: Any) -> str | None:
    if not isinstance(raw, str):
        return None
    value = raw.strip().lstrip("#")
    if len(value) == 8:
        value = value[2:]
    if len(value) != 6:
        return None
    try:
        int(value, 16)
    except ValueError:
        return None
    return value.upper()


def color_to_hex(color: Any) -> str | None:
    """Resolve an openpyxl Color to "#RRGGBB" (None when it cannot be resolved)."""
    if color is None:
        return None
    ctype = getattr(color, "type", None)
    rgb: str | None = None
    if ctype == "rgb":
        rgb = _rgb_value(color.rgb)
    elif ctype == "indexed":
        idx = color.indexed
        if idx in _SYSTEM_INDEXED:
            rgb = _SYSTEM_INDEXED[idx]
        elif isinstance(idx, int) and 0 <= idx < len(COLOR_INDEX):
            rgb = _rgb_value(COLOR_INDEX[idx])
    elif ctype == "theme":
        idx = color.theme
        if isinstance(idx, int) and 0 <= idx < len(THEME_COLORS):
            rgb = apply_tint(THEME_COLORS[idx], float(color.tint or 0.0))
    return f"#{rgb}" if rgb else None


def fill_to_hex(fill: Any) -> str | None:
    """Fill color of a cell, or None for unfilled cells.

    Solid and pattern fills keep their visible color in fgColor.
    """
    if fill is None:
        return None
    if getattr(fill, "fill_type", None) in (None, "none"):
        return None
    return color_to_hex(getattr(fill, "fgColor", None))
