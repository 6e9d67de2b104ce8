"""Tests for the workbook layout parser."""

from __future__ import annotations

from datetime import date

import pytest
from openpyxl import Workbook

from sheet_layout.layout_document import CellModel, PrintArea
from sheet_layout.services.sheet_builder import (
    LayoutParseOptions,
    SheetBuilder,
    WorkbookLayoutParser,
    parse_print_area,
)
from sheet_layout.utils.exceptions import ErrorCode, WorkbookParseError
from tests.fixtures import sized_workbook, workbook_bytes


class TestSheetBuilder:
    """Tests for building one worksheet grid."""

    def test_grid_is_dense(self, report_workbook: Workbook) -> None:
        sheet = SheetBuilder().build_sheet(report_workbook["Report"])

        assert sheet.name == "Report"
        assert len(sheet.rows) == 5
        assert sheet.col_count == 3
        assert all(len(row.cells) == sheet.col_count for row in sheet.rows)

    def test_merge_anchor_and_covered_cells(self, report_workbook: Workbook) -> None:
        sheet = SheetBuilder().build_sheet(report_workbook["Report"])

        anchor = sheet.rows[0].cells[0]
        assert anchor.value == "Quarterly Report"
        assert (anchor.row_span, anchor.col_span) == (2, 3)
        assert anchor.style["fontWeight"] == "bold"
        assert anchor.style["backgroundColor"] == "#DDEBF7"
        assert anchor.style["textAlign"] == "center"
        assert anchor.style["verticalAlign"] == "middle"

        covered = [
            sheet.rows[0].cells[1],
            sheet.rows[0].cells[2],
            sheet.rows[1].cells[0],
            sheet.rows[1].cells[1],
            sheet.rows[1].cells[2],
        ]
        assert all(cell == CellModel.covered() for cell in covered)
        assert all(cell.value == "" and cell.style == {} for cell in covered)

    def test_values(self, report_workbook: Workbook) -> None:
        sheet = SheetBuilder().build_sheet(report_workbook["Report"])

        assert [cell.value for cell in sheet.rows[2].cells] == [
            "Item",
            "Amount",
            "Date",
        ]
        assert sheet.rows[3].cells[1].value == "1,234,567"
        # Never opened by a spreadsheet application, so no cached result
        assert sheet.rows[3].cells[2].value == ""

    def test_formula_uses_computed_sheet(self) -> None:
        wb = Workbook()
        ws = wb.active
        ws["A1"] = 2
        ws["B1"] = "=A1*21"
        computed = Workbook().active
        computed["A1"] = 2
        computed["B1"] = 42

        sheet = SheetBuilder().build_sheet(ws, computed)

        assert sheet.rows[0].cells[1].value == "42"

    def test_widths_and_heights(self, report_workbook: Workbook) -> None:
        sheet = SheetBuilder().build_sheet(report_workbook["Report"])

        assert sheet.col_widths_px == [150, 64, 64]
        assert [row.height_px for row in sheet.rows] == [20, 20, 40, 20, 20]

    def test_width_range_applies_to_every_column(self) -> None:
        wb = Workbook()
        ws = wb.active
        ws["D1"] = "x"
        ws.column_dimensions.group("A", "C", hidden=False)
        ws.column_dimensions["A"].width = 11

        sheet = SheetBuilder().build_sheet(ws)

        assert sheet.col_widths_px == [83, 83, 83, 64]

    def test_wrap_and_border_styles(self, report_workbook: Workbook) -> None:
        sheet = SheetBuilder().build_sheet(report_workbook["Report"])

        assert sheet.rows[4].cells[0].style["whiteSpace"] == "pre-wrap"
        assert sheet.rows[4].cells[1].style["borderBottom"] == "3px solid #FF0000"

    def test_empty_sheet_has_no_rows_or_columns(self) -> None:
        sheet = SheetBuilder().build_sheet(Workbook().active)

        assert sheet.rows == []
        assert sheet.col_widths_px == []
        assert sheet.col_count == 0

    def test_single_value_sheet_is_one_cell(self) -> None:
        ws = Workbook().active
        ws["A1"] = "only"

        sheet = SheetBuilder().build_sheet(ws)

        assert [[cell.value for cell in row.cells] for row in sheet.rows] == [["only"]]
        assert sheet.col_widths_px == [64]
        assert sheet.col_widths_px == [64]

    def test_print_area(self) -> None:
        ws = Workbook().active
        ws["H31"] = "end"
        ws.print_area = "A2:H31"

        sheet = SheetBuilder().build_sheet(ws)

        assert sheet.print_area == PrintArea(r1=2, c1=1, r2=31, c2=8)

    def test_no_print_area(self, report_workbook: Workbook) -> None:
        assert SheetBuilder().build_sheet(report_workbook["Other"]).print_area is None


class TestParsePrintArea:
    """Tests for parse_print_area."""

    def test_sheet_qualified_absolute_range(self) -> None:
        assert parse_print_area("'Sheet 1'!$A$2:$H$31") == PrintArea(2, 1, 31, 8)

    def test_first_of_several_ranges(self) -> None:
        assert parse_print_area("Sheet1!$B$2:$C$3,Sheet1!$E$5:$F$6") == PrintArea(
            2, 2, 3, 3
        )
        assert parse_print_area(["B2:C3", "E5:F6"]) == PrintArea(2, 2, 3, 3)

    def test_unusable_values(self) -> None:
        assert parse_print_area(None) is None
        assert parse_print_area("") is None
        assert parse_print_area("A1") is None
        assert parse_print_area("Sheet1!$A:$C") is None


class TestWorkbookLayoutParser:
    """Tests for whole-workbook parsing."""

    def test_parses_every_sheet_in_order(self, report_bytes: bytes) -> None:
        sheets = WorkbookLayoutParser().parse_bytes(report_bytes)

        assert [sheet.name for sheet in sheets] == ["Report", "Other"]
        other = sheets[1]
        assert other.rows[0].cells[0].value == "Secondary"
        assert other.rows[1].cells[1].value == "true"

    def test_round_trip_keeps_styles(self, report_bytes: bytes) -> None:
        report = WorkbookLayoutParser().parse_bytes(report_bytes)[0]

        anchor = report.rows[0].cells[0]
        assert anchor.style["color"] == "#1F4E79"
        assert anchor.style["fontFamily"].startswith("'Arial'")
        assert anchor.style["fontSize"] == "14pt"
        assert report.col_widths_px[0] == 150

    def test_layout_groups_are_applied(self) -> None:
        content = workbook_bytes(sized_workbook([5, 8, 3]))

        sheets = WorkbookLayoutParser().parse_bytes(
            content, LayoutParseOptions(layout_groups=[[0, 1, 2]])
        )

        reference_widths = sheets[0].col_widths_px
        assert reference_widths[0] == 75
        for follower in sheets[1:]:
            assert follower.col_widths_px == reference_widths
            assert all(len(row.cells) == 5 for row in follower.rows)

    def test_empty_reference_sheet_empties_followers(self) -> None:
        wb = Workbook()
        wb.active.title = "Blank"
        follower = wb.create_sheet("Data")
        for col in range(1, 4):
            follower.cell(row=1, column=col, value=col)

        sheets = WorkbookLayoutParser().parse_bytes(
            workbook_bytes(wb), LayoutParseOptions(layout_groups=[[0, 1]])
        )

        assert sheets[0].rows == []
        assert sheets[1].col_widths_px == []
        assert [row.cells for row in sheets[1].rows] == [[]]

    def test_threaded_matches_sequential(self) -> None:
        content = workbook_bytes(sized_workbook([2, 4, 6, 3]))

        sequential = WorkbookLayoutParser().parse_bytes(content)
        threaded = WorkbookLayoutParser().parse_bytes(
            content, LayoutParseOptions(max_workers=4)
        )

        assert threaded == sequential

    def test_custom_date_format(self) -> None:
        wb = Workbook()
        wb.active["A1"] = date(2024, 1, 15)
        content = workbook_bytes(wb)

        sheets = WorkbookLayoutParser().parse_bytes(
            content, LayoutParseOptions(date_format="{year}-{month:02d}-{day:02d}")
        )

        assert sheets[0].rows[0].cells[0].value == "2024-01-15"

    def test_undecodable_buffer(self) -> None:
        with pytest.raises(WorkbookParseError) as exc_info:
            WorkbookLayoutParser().parse_bytes(b"not a workbook")

        assert exc_info.value.error_code == ErrorCode.WORKBOOK_PARSE_FAILED
        assert exc_info.value.http_status == 500
        assert "reason" in exc_info.value.details
