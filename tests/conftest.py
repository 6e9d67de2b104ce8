from __future__ import annotations

import pytest
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from tests.fixtures import workbook_bytes


@pytest.fixture
def report_workbook() -> Workbook:
    """Small styled report with a merged title, totals and a second sheet."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Report"

    ws["A1"] = "Quarterly Report"
    ws.merge_cells("A1:C2")
    ws["A1"].font = Font(name="Arial", size=14, bold=True, color="FF1F4E79")
    ws["A1"].alignment = Alignment(horizontal="center", vertical="center")
    ws["A1"].fill = PatternFill(fill_type="solid", fgColor="FFDDEBF7")

    ws["A3"] = "Item"
    ws["B3"] = "Amount"
    ws["C3"] = "Date"
    ws["A4"] = "Widgets"
    ws["B4"] = 1234567
    ws["B4"].number_format = "#,##0"
    ws["C4"] = "=B4*2"
    ws["A5"] = "Note"
    ws["A5"].alignment = Alignment(wrap_text=True)
    ws["B5"].border = Border(bottom=Side(style="thick", color="FFFF0000"))

    ws.column_dimensions["A"].width = 20
    ws.row_dimensions[3].height = 30

    other = wb.create_sheet("Other")
    other["A1"] = "Secondary"
    other["B2"] = True
    return wb


@pytest.fixture
def report_bytes(report_workbook: Workbook) -> bytes:
    return workbook_bytes(report_workbook)
