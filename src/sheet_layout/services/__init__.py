"""Services for sheet layout extraction."""

from sheet_layout.services.layout_groups import normalize_layout_groups
from sheet_layout.services.sheet_builder import (
    LayoutParseOptions,
    SheetBuilder,
    WorkbookLayoutParser,
)

__all__ = [
    "LayoutParseOptions",
    "SheetBuilder",
    "WorkbookLayoutParser",
    "normalize_layout_groups",
]
