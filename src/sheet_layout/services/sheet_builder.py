"""Workbook parser producing dense, styled grids for every worksheet."""

from __future__ import annotations

import contextvars
import io
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from openpyxl import Workbook, load_workbook
from openpyxl.utils import column_index_from_string, range_boundaries
from openpyxl.worksheet.worksheet import Worksheet

from sheet_layout.layout_document import (
    CellModel,
    PrintArea,
    RowModel,
    SheetModel,
)
from sheet_layout.services.cell_style import extract_style
from sheet_layout.services.cell_value import (
    DEFAULT_DATE_FORMAT,
    classify_cell,
    extract_value,
)
from sheet_layout.services.converters import column_width_to_px, row_height_to_px
from sheet_layout.services.layout_groups import normalize_layout_groups
from sheet_layout.services.merge_map import build_merge_map
from sheet_layout.utils.exceptions import WorkbookParseError
from sheet_layout.utils.logging import get_logger, timed_operation

logger = get_logger(__name__)


@dataclass
class LayoutParseOptions:
    """Options controlling workbook layout extraction."""

    layout_groups: Sequence[Sequence[int]] = field(default_factory=list)
    date_format: str = DEFAULT_DATE_FORMAT
    max_workers: int = 1


def parse_print_area(print_area: str | Sequence[str] | None) -> PrintArea | None:
    """Parse the first range of a print area such as ``'Sheet1'!$A$2:$H$31``.

    Some openpyxl releases report several ranges as a list instead of one
    comma separated string.
    """
    if not print_area:
        return None
    if isinstance(print_area, (list, tuple)):
        print_area = ",".join(print_area)
    print_area = str(print_area)
    first = print_area.split(",")[0].strip()
    ref = first.rsplit("!", 1)[-1].replace("$", "")
    if ":" not in ref:
        return None
    try:
        min_col, min_row, max_col, max_row = range_boundaries(ref)
    except (TypeError, ValueError):
        return None
    # Whole-row or whole-column ranges leave one axis unbounded
    if None in (min_col, min_row, max_col, max_row):
        return None
    return PrintArea(r1=min_row, c1=min_col, r2=max_row, c2=max_col)


class SheetBuilder:
    """Build the grid model of one worksheet."""

    def __init__(self, date_format: str = DEFAULT_DATE_FORMAT) -> None:
        self.date_format = date_format

    def build_sheet(
        self,
        sheet: Worksheet,
        computed_sheet: Worksheet | None = None,
    ) -> SheetModel:
        """Build the grid for ``sheet``.

        Every row ``1..max_row`` and column ``1..max_column`` is visited,
        including positions without authored cells. A worksheet without any
        cells gives an empty grid.

        Args:
            sheet: Worksheet loaded with formulas and rich text preserved.
            computed_sheet: Same worksheet loaded with cached formula results.

        Returns:
            SheetModel with one cell per column in every row.
        """
        row_count, col_count = self._extent(sheet)
        merge_map = build_merge_map(str(rng) for rng in sheet.merged_cells.ranges)

        declared_widths = self._declared_widths(sheet)
        col_widths = [
            column_width_to_px(declared_widths.get(col))
            for col in range(1, col_count + 1)
        ]

        # iter_rows treats a zero bound as "up to max_row", so skip it entirely
        row_iter = (
            sheet.iter_rows(min_row=1, max_row=row_count, min_col=1, max_col=col_count)
            if row_count
            else ()
        )
        rows: list[RowModel] = []
        for row_idx, row_cells in enumerate(row_iter, start=1):
            cells: list[CellModel] = []
            for col_idx, cell in enumerate(row_cells, start=1):
                if merge_map.is_covered(row_idx, col_idx):
                    cells.append(CellModel.covered())
                    continue
                span = merge_map.span_at(row_idx, col_idx)
                cells.append(
                    CellModel(
                        value=self._cell_value(cell, computed_sheet, row_idx, col_idx),
                        style=extract_style(cell),
                        row_span=span.row_span,
                        col_span=span.col_span,
                    )
                )
            rows.append(
                RowModel(
                    height_px=row_height_to_px(self._declared_height(sheet, row_idx)),
                    cells=cells,
                )
            )

        return SheetModel(
            name=sheet.title,
            rows=rows,
            col_widths_px=col_widths,
            print_area=parse_print_area(sheet.print_area),
        )

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _extent(sheet: Worksheet) -> tuple[int, int]:
        # openpyxl reports max_row == max_column == 1 for a sheet with no cells
        if not sheet._cells:
            return 0, 0
        return sheet.max_row, sheet.max_column

    def _cell_value(
        self,
        cell: Any,
        computed_sheet: Worksheet | None,
        row_idx: int,
        col_idx: int,
    ) -> str:
        cached = None
        if cell.data_type == "f" and computed_sheet is not None:
            cached = computed_sheet.cell(row=row_idx, column=col_idx).value
        return extract_value(classify_cell(cell, cached), self.date_format)

    @staticmethod
    def _declared_widths(sheet: Worksheet) -> dict[int, float]:
        """Map column index to declared width; one entry may span min..max."""
        widths: dict[int, float] = {}
        for key, dim in sheet.column_dimensions.items():
            if dim.width is None:
                continue
            low = dim.min or column_index_from_string(key)
            high = dim.max or low
            for col in range(low, high + 1):
                widths[col] = dim.width
        return widths

    @staticmethod
    def _declared_height(sheet: Worksheet, row_idx: int) -> float | None:
        # .get avoids creating a dimension entry for undeclared rows
        dim = sheet.row_dimensions.get(row_idx)
        return dim.height if dim is not None else None


class WorkbookLayoutParser:
    """Parse an uploaded workbook buffer into normalized sheet grids."""

    def parse_bytes(
        self, content: bytes, options: LayoutParseOptions | None = None
    ) -> list[SheetModel]:
        """Parse a workbook buffer.

        Sheets are built independently, optionally on a thread pool, then
        the layout groups are applied across the finished collection.

        Args:
            content: Raw bytes of an xlsx workbook.
            options: Layout groups, date format and worker count.

        Returns:
            One SheetModel per worksheet in workbook order.

        Raises:
            WorkbookParseError: If the buffer is not a readable workbook.
        """
        opts = options or LayoutParseOptions()
        workbook, computed_wb = self._load(content)
        pairs = list(zip(workbook.worksheets, computed_wb.worksheets, strict=True))
        builder = SheetBuilder(date_format=opts.date_format)

        with timed_operation(logger, "parse_workbook") as metrics:
            sheets = self._build_all(builder, pairs, opts.max_workers)
            logger.info(
                "Parsed sheets",
                sheets=[
                    f"{idx}:{sheet.name}({sheet.col_count}cols)"
                    for idx, sheet in enumerate(sheets)
                ],
            )
            sheets = normalize_layout_groups(sheets, opts.layout_groups)

            metrics.sheets_processed = len(sheets)
            metrics.rows_processed = sum(len(sheet.rows) for sheet in sheets)
            metrics.cells_processed = sum(
                len(row.cells) for sheet in sheets for row in sheet.rows
            )
            metrics.merges_applied = sum(
                1
                for sheet in sheets
                for row in sheet.rows
                for cell in row.cells
                if cell.row_span > 1 or cell.col_span > 1
            )

        return sheets

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _load(content: bytes) -> tuple[Workbook, Workbook]:
        """Load the buffer twice: formulas and rich text, then cached values."""
        try:
            workbook = load_workbook(
                io.BytesIO(content), data_only=False, rich_text=True
            )
            computed_wb = load_workbook(io.BytesIO(content), data_only=True)
        except Exception as e:
            logger.warning(
                "Workbook could not be decoded",
                error_type=type(e).__name__,
                size_bytes=len(content),
            )
            raise WorkbookParseError(reason=f"{type(e).__name__}: {e}") from e
        return workbook, computed_wb

    @staticmethod
    def _build_all(
        builder: SheetBuilder,
        pairs: list[tuple[Worksheet, Worksheet]],
        max_workers: int,
    ) -> list[SheetModel]:
        total = len(pairs)
        if max_workers > 1 and total > 1:
            with ThreadPoolExecutor(max_workers=min(max_workers, total)) as executor:
                # Each task runs in a copy of the caller's context so log
                # lines keep the request id
                futures = [
                    executor.submit(
                        contextvars.copy_context().run,
                        builder.build_sheet,
                        sheet,
                        computed,
                    )
                    for sheet, computed in pairs
                ]
                sheets = []
                for idx, future in enumerate(futures, start=1):
                    sheets.append(future.result())
                    logger.log_progress("build_sheets", idx, total, sheets[-1].name)
                return sheets

        sheets = []
        for idx, (sheet, computed) in enumerate(pairs, start=1):
            sheets.append(builder.build_sheet(sheet, computed))
            logger.log_progress("build_sheets", idx, total, sheet.title)
        return sheets
