"""Workbook builders shared by the tests.

Example usage:
    from tests.fixtures import sized_workbook, workbook_bytes

    content = workbook_bytes(sized_workbook([5, 8]))
"""

import io

from openpyxl import Workbook


def workbook_bytes(wb: Workbook) -> bytes:
    """Serialize a workbook the way an upload would arrive."""
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def sized_workbook(col_counts: list[int], rows: int = 3) -> Workbook:
    """Workbook with one sheet per entry, each ``rows`` x ``col_count``.

    Column A of sheet ``i`` is ``10 + i`` characters wide so reference and
    follower widths can be told apart.
    """
    wb = Workbook()
    wb.remove(wb.active)
    for idx, col_count in enumerate(col_counts):
        ws = wb.create_sheet(f"Sheet{idx}")
        for row in range(1, rows + 1):
            for col in range(1, col_count + 1):
                ws.cell(row=row, column=col, value=f"{idx}-{row}-{col}")
        ws.column_dimensions["A"].width = 10 + idx
    return wb
