"""Normalized visual style of a single cell."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from sheet_layout.services.converters import (
    DEFAULT_BORDER,
    argb_of,
    border_side_to_css,
    color_to_hex,
    resolve_color,
)

FONT_FALLBACK = "'Apple SD Gothic Neo',sans-serif"
DEFAULT_FONT_FAMILY = f"'Calibri',{FONT_FALLBACK}"

HORIZONTAL_ALIGN = {"center": "center", "right": "right", "left": "left"}
MIDDLE_ALIGN = {"middle", "center"}


def _css_name(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass
class CellStyle:
    """Enumerated CSS-like properties of a rendered cell.

    Optional properties left as None are omitted from ``to_css``.
    """

    font_family: str = DEFAULT_FONT_FAMILY
    font_size: str = "11pt"
    font_weight: str | None = None
    font_style: str | None = None
    text_decoration: str | None = None
    color: str = "#111827"
    background_color: str = "#ffffff"
    text_align: str | None = None
    vertical_align: str = "bottom"
    white_space: str = "nowrap"
    overflow: str = "hidden"
    border_top: str = DEFAULT_BORDER
    border_bottom: str = DEFAULT_BORDER
    border_left: str = DEFAULT_BORDER
    border_right: str = DEFAULT_BORDER
    padding: str = "2px 4px"
    box_sizing: str = "border-box"

    def to_css(self) -> dict[str, str]:
        """Return the camelCase property map, skipping unset properties."""
        return {
            _css_name(f.name): getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


def _point_size(size: Any) -> str:
    if isinstance(size, float) and size.is_integer():
        size = int(size)
    return f"{size}pt"


def apply_font(style: CellStyle, font: Any) -> None:
    if font is None:
        return
    if font.bold:
        style.font_weight = "bold"
    if font.italic:
        style.font_style = "italic"
    if font.underline:
        style.text_decoration = "underline"
    if font.size:
        style.font_size = _point_size(font.size)
    if font.name:
        style.font_family = f"'{font.name}',{FONT_FALLBACK}"
    color = color_to_hex(argb_of(font.color))
    if color:
        style.color = color


def apply_fill(style: CellStyle, fill: Any) -> None:
    # cell.fill is a StyleProxy; gradients have no fill_type
    if getattr(fill, "fill_type", None) != "solid":
        return
    background = resolve_color(fill.fgColor)
    if background:
        style.background_color = background


def apply_alignment(style: CellStyle, alignment: Any) -> None:
    if alignment is None:
        return
    horizontal = alignment.horizontal
    if horizontal in HORIZONTAL_ALIGN:
        style.text_align = HORIZONTAL_ALIGN[horizontal]

    vertical = str(alignment.vertical or "").lower()
    if vertical in MIDDLE_ALIGN:
        style.vertical_align = "middle"
    elif vertical == "top":
        style.vertical_align = "top"

    if alignment.wrap_text:
        style.white_space = "pre-wrap"
        style.overflow = "visible"


def apply_border(style: CellStyle, border: Any) -> None:
    if border is None:
        return
    for side in ("top", "bottom", "left", "right"):
        source = getattr(border, side, None)
        if source is not None:
            setattr(style, f"border_{side}", border_side_to_css(source))


def build_style(cell: Any) -> CellStyle:
    """Build the ``CellStyle`` of an openpyxl cell.

    Each of font, fill, alignment and border may be missing; a missing part
    leaves the matching defaults untouched.
    """
    style = CellStyle()
    apply_font(style, getattr(cell, "font", None))
    apply_fill(style, getattr(cell, "fill", None))
    apply_alignment(style, getattr(cell, "alignment", None))
    apply_border(style, getattr(cell, "border", None))
    return style


def extract_style(cell: Any) -> dict[str, str]:
    """Return the CSS-like style map of an openpyxl cell."""
    return build_style(cell).to_css()
