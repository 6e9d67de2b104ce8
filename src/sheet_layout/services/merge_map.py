"""Lookup tables describing the merged ranges of a worksheet."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from openpyxl.utils.cell import coordinate_to_tuple
from openpyxl.utils.exceptions import CellCoordinatesException

from sheet_layout.layout_document import MergeSpan
from sheet_layout.utils.logging import get_logger

logger = get_logger(__name__)

Coordinate = tuple[int, int]


@dataclass
class MergeMap:
    """Spans keyed by merge anchor plus every coordinate the merges hide.

    Attributes:
        spans: ``(row, col)`` of each merge's top-left cell to its size.
        covered: ``(row, col)`` of every merged cell except the anchors.
    """

    spans: dict[Coordinate, MergeSpan] = field(default_factory=dict)
    covered: set[Coordinate] = field(default_factory=set)

    def span_at(self, row: int, col: int) -> MergeSpan:
        return self.spans.get((row, col), MergeSpan())

    def is_covered(self, row: int, col: int) -> bool:
        return (row, col) in self.covered


def _parse_range(ref: str) -> tuple[Coordinate, Coordinate] | None:
    start, _, end = ref.partition(":")
    if not start or not end:
        return None
    try:
        first = coordinate_to_tuple(start)
        last = coordinate_to_tuple(end)
    except (CellCoordinatesException, KeyError, ValueError):
        return None
    # Normalise so the first corner is always the top-left one
    return (
        (min(first[0], last[0]), min(first[1], last[1])),
        (max(first[0], last[0]), max(first[1], last[1])),
    )


def build_merge_map(ranges: Iterable[str]) -> MergeMap:
    """Build the merge lookup tables from ``"A1:C3"`` style references.

    References missing either endpoint, or with an endpoint that is not a
    cell coordinate, are skipped.

    Args:
        ranges: Merge references of one worksheet.

    Returns:
        MergeMap with anchor spans and covered coordinates.
    """
    merge_map = MergeMap()
    for ref in ranges:
        bounds = _parse_range(ref)
        if bounds is None:
            logger.debug("Skipping malformed merge range", ref=ref)
            continue
        (top, left), (bottom, right) = bounds
        merge_map.spans[(top, left)] = MergeSpan(
            row_span=bottom - top + 1, col_span=right - left + 1
        )
        for row in range(top, bottom + 1):
            for col in range(left, right + 1):
                if (row, col) != (top, left):
                    merge_map.covered.add((row, col))
    return merge_map
