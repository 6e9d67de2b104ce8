"""Pydantic models for API requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from sheet_layout.layout_document import (
    CellModel,
    PrintArea,
    RowModel,
    SheetModel,
)
from sheet_layout.utils.exceptions import ErrorCode


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: str
    version: str


class CellResponse(BaseModel):
    """One grid cell as sent to the renderer."""

    model_config = ConfigDict(populate_by_name=True)

    value: str = Field(..., description="Display string of the cell")
    style: dict[str, str] = Field(
        default_factory=dict, description="CSS-like style properties"
    )
    row_span: int = Field(default=1, ge=1, alias="rowSpan")
    col_span: int = Field(default=1, ge=1, alias="colSpan")
    suppressed: bool = Field(
        default=False,
        description="True when the cell is hidden by a merge anchored elsewhere",
    )

    @classmethod
    def from_cell(cls, cell: CellModel) -> "CellResponse":
        return cls(
            value=cell.value,
            style=cell.style,
            row_span=cell.row_span,
            col_span=cell.col_span,
            suppressed=cell.suppressed,
        )


class RowResponse(BaseModel):
    """One grid row."""

    model_config = ConfigDict(populate_by_name=True)

    height_px: int = Field(..., alias="heightPx", description="Row height in pixels")
    cells: list[CellResponse]

    @classmethod
    def from_row(cls, row: RowModel) -> "RowResponse":
        return cls(
            height_px=row.height_px,
            cells=[CellResponse.from_cell(cell) for cell in row.cells],
        )


class PrintAreaResponse(BaseModel):
    """Print range of a worksheet, 1-based and inclusive."""

    r1: int
    c1: int
    r2: int
    c2: int

    @classmethod
    def from_area(cls, area: PrintArea) -> "PrintAreaResponse":
        return cls(r1=area.r1, c1=area.c1, r2=area.r2, c2=area.c2)


class SheetResponse(BaseModel):
    """A worksheet rendered as a row/column grid."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Worksheet name")
    rows: list[RowResponse]
    col_widths_px: list[int] = Field(
        ..., alias="colWidthsPx", description="Column widths in pixels"
    )
    print_area: PrintAreaResponse | None = Field(default=None, alias="printArea")

    @classmethod
    def from_sheet(cls, sheet: SheetModel) -> "SheetResponse":
        return cls(
            name=sheet.name,
            rows=[RowResponse.from_row(row) for row in sheet.rows],
            col_widths_px=sheet.col_widths_px,
            print_area=(
                PrintAreaResponse.from_area(sheet.print_area)
                if sheet.print_area is not None
                else None
            ),
        )


class ParseResponse(BaseModel):
    """Response model for the workbook parse endpoint."""

    sheets: list[SheetResponse] = Field(
        ..., description="One grid per worksheet in workbook order"
    )


class ErrorDetail(BaseModel):
    """Error detail model for API error responses.

    This model provides structured error responses with:
    - Human-readable error message
    - Machine-readable error code
    - Optional additional details for debugging
    - Optional request ID for correlation
    """

    detail: str = Field(..., description="Human-readable error message")
    error_code: str | None = Field(
        default=None,
        description="Machine-readable error code (e.g., 'E4010')",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details for debugging",
    )
    request_id: str | None = Field(
        default=None,
        description="Request ID for error correlation",
    )

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        detail: str,
        details: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> "ErrorDetail":
        """Create an ErrorDetail from an ErrorCode enum value."""
        return cls(
            detail=detail,
            error_code=error_code.value,
            details=details,
            request_id=request_id,
        )
