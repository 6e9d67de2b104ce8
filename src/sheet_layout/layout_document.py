"""Dataclasses representing the grid layout extracted from a workbook."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MergeSpan:
    """Size of a merged range, keyed elsewhere by its top-left cell."""

    row_span: int = 1
    col_span: int = 1


@dataclass(frozen=True)
class PrintArea:
    """First print range of a worksheet, 1-based and inclusive."""

    r1: int
    c1: int
    r2: int
    c2: int


@dataclass
class CellModel:
    """One grid position of a worksheet.

    A suppressed cell is covered by a merge anchored elsewhere; it always
    has an empty value, an empty style and a unit span.
    """

    value: str = ""
    style: dict[str, str] = field(default_factory=dict)
    row_span: int = 1
    col_span: int = 1
    suppressed: bool = False

    @classmethod
    def covered(cls) -> CellModel:
        """Cell hidden by a merge anchored at another coordinate."""
        return cls(suppressed=True)

    @classmethod
    def blank(cls) -> CellModel:
        """Visible empty cell used to pad short rows."""
        return cls()


@dataclass
class RowModel:
    """A worksheet row with one cell per column."""

    height_px: int
    cells: list[CellModel]


@dataclass
class SheetModel:
    """A worksheet rendered as a dense row/column grid."""

    name: str
    rows: list[RowModel]
    col_widths_px: list[int]
    print_area: PrintArea | None = None

    @property
    def col_count(self) -> int:
        return len(self.col_widths_px)
