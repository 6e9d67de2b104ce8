"""Cross-sheet normalization for worksheets that share one layout."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from sheet_layout.layout_document import CellModel, RowModel, SheetModel
from sheet_layout.utils.logging import get_logger

logger = get_logger(__name__)


def _fit_row(row: RowModel, col_count: int) -> RowModel:
    cells = row.cells[:col_count]
    cells.extend(CellModel.blank() for _ in range(col_count - len(cells)))
    return replace(row, cells=cells)


def normalize_layout_groups(
    sheets: Sequence[SheetModel],
    layout_groups: Sequence[Sequence[int]],
) -> list[SheetModel]:
    """Make follower sheets adopt their reference sheet's layout.

    For each group the first index names the reference sheet. Every other
    sheet of the group receives a copy of the reference column widths and
    has each row truncated or padded with blank cells to the reference
    column count. Row order and heights are kept. Groups whose reference is
    out of range, and followers that are out of range, are skipped.

    Applying the same groups twice gives the same result as applying them
    once.

    Args:
        sheets: Sheets in workbook order.
        layout_groups: Groups of zero-based sheet indices.

    Returns:
        New list of sheets; sheets outside every group are returned as is.
    """
    result = list(sheets)
    total = len(result)

    for group in layout_groups:
        if not group or not 0 <= group[0] < total:
            logger.warning(
                "Skipping layout group with unknown reference sheet",
                group=list(group),
                sheet_count=total,
            )
            continue
        reference = result[group[0]]
        col_count = reference.col_count

        for idx in group[1:]:
            if not 0 <= idx < total:
                logger.warning(
                    "Skipping unknown layout group follower",
                    index=idx,
                    reference=group[0],
                    sheet_count=total,
                )
                continue
            follower = result[idx]
            result[idx] = replace(
                follower,
                col_widths_px=list(reference.col_widths_px),
                rows=[_fit_row(row, col_count) for row in follower.rows],
            )
            logger.debug(
                "Applied layout group",
                reference=reference.name,
                follower=follower.name,
                from_cols=follower.col_count,
                to_cols=col_count,
            )

    return result
