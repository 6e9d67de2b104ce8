"""Conversions from spreadsheet-native colors and units to display values."""

from __future__ import annotations

import math
from typing import Any

DEFAULT_COLUMN_WIDTH = 8.5
"""Column width in character units used when a column declares none."""

DEFAULT_ROW_HEIGHT = 15.0
"""Row height in points used when a row declares none."""

COLUMN_WIDTH_PX = 7.5
ROW_HEIGHT_PX = 1.333

DEFAULT_BORDER = "1px solid #d0d0d0"
DEFAULT_BORDER_COLOR = "#000"

BORDER_WIDTHS = {"medium": "2px", "thick": "3px"}

# Office 2016 default theme palette, indices 0..9 (lt1, dk1, lt2, dk2, accents)
OFFICE_THEME_COLORS: dict[int, tuple[int, int, int]] = {
    0: (0xFF, 0xFF, 0xFF),
    1: (0x00, 0x00, 0x00),
    2: (0xE7, 0xE6, 0xE6),
    3: (0x44, 0x54, 0x6A),
    4: (0x44, 0x72, 0xC4),
    5: (0xED, 0x7D, 0x31),
    6: (0x70, 0xAD, 0x47),
    7: (0xFF, 0xC0, 0x00),
    8: (0x5B, 0x9B, 0xD5),
    9: (0x26, 0x44, 0x78),
}


def color_to_hex(native: str | None) -> str | None:
    """Convert an ``AARRGGBB`` or ``RRGGBB`` token to ``#RRGGBB``.

    Returns None when the token is missing or shorter than six characters.
    """
    if not native or len(native) < 6:
        return None
    hex_value = native[2:] if len(native) == 8 else native
    return f"#{hex_value}"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (82.5 -> 83)."""
    return math.floor(value + 0.5)


def column_width_to_px(width: float | None) -> int:
    """Convert a column width in character units to pixels."""
    width = width if width is not None else DEFAULT_COLUMN_WIDTH
    return round_half_up(width * COLUMN_WIDTH_PX)


def row_height_to_px(height: float | None) -> int:
    """Convert a row height in points to pixels."""
    height = height if height is not None else DEFAULT_ROW_HEIGHT
    return round_half_up(height * ROW_HEIGHT_PX)


def apply_tint(rgb: tuple[int, int, int], tint: float) -> tuple[int, int, int]:
    """Lighten (tint > 0) toward white or darken (tint < 0) toward black."""
    def channel(c: int) -> int:
        if tint >= 0:
            return round_half_up(c + (255 - c) * tint)
        return round_half_up(c * (1 + tint))

    r, g, b = rgb
    return channel(r), channel(g), channel(b)


def theme_to_hex(theme: int | None, tint: float | None = 0.0) -> str | None:
    """Resolve a theme color index against the default Office palette."""
    base = OFFICE_THEME_COLORS.get(theme) if theme is not None else None
    if base is None:
        return None
    r, g, b = apply_tint(base, tint or 0.0)
    return f"#{r:02x}{g:02x}{b:02x}"


def argb_of(color: Any) -> str | None:
    """Return the ARGB token of an openpyxl color, or None for other kinds.

    openpyxl answers ``.rgb`` with a descriptor error string for theme and
    indexed colors, so the color type has to be checked first.
    """
    if color is None or getattr(color, "type", None) != "rgb":
        return None
    rgb = getattr(color, "rgb", None)
    return rgb if isinstance(rgb, str) else None


def resolve_color(color: Any) -> str | None:
    """Resolve an explicit RGB or theme openpyxl color to ``#RRGGBB``."""
    if color is None:
        return None
    if getattr(color, "type", None) == "theme":
        return theme_to_hex(getattr(color, "theme", None), getattr(color, "tint", 0.0))
    return color_to_hex(argb_of(color))


def border_side_to_css(side: Any) -> str:
    """Render one openpyxl border side as a CSS border shorthand."""
    style = getattr(side, "style", None) if side is not None else None
    if not style or style == "none":
        return DEFAULT_BORDER
    width = BORDER_WIDTHS.get(style, "1px")
    color = color_to_hex(argb_of(getattr(side, "color", None))) or DEFAULT_BORDER_COLOR
    return f"{width} solid {color}"
