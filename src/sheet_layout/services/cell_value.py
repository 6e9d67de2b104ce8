"""Display-string extraction for polymorphic cell values.

A stored cell value is first classified into one of the ``CellValue``
variants, then rendered by ``extract_value``. Classification looks at the
openpyxl cell loaded with formulas and rich text preserved, plus the cached
value of the same cell from the ``data_only`` copy of the workbook.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, time
from typing import Any

from openpyxl.cell.rich_text import CellRichText, TextBlock

DEFAULT_DATE_FORMAT = "{year}. {month}. {day}."
THOUSANDS_MARKER = "#,##"


@dataclass(frozen=True)
class EmptyValue:
    """Cell with no stored value."""


@dataclass(frozen=True)
class RichTextValue:
    """Cell made of formatted text runs."""

    runs: tuple[str, ...]


@dataclass(frozen=True)
class FormulaValue:
    """Formula cell with the result cached by the authoring application."""

    formula: str
    result: Any = None


@dataclass(frozen=True)
class DateValue:
    """Cell holding a date or datetime."""

    value: date


@dataclass(frozen=True)
class HyperlinkValue:
    """Cell whose display text links to a target."""

    text: Any
    target: str | None = None


@dataclass(frozen=True)
class NumberValue:
    """Numeric cell together with its number format string."""

    value: int | float
    number_format: str = "General"


@dataclass(frozen=True)
class ScalarValue:
    """Any other stored value (text, boolean, error code, time)."""

    value: Any


CellValue = (
    EmptyValue
    | RichTextValue
    | FormulaValue
    | DateValue
    | HyperlinkValue
    | NumberValue
    | ScalarValue
)


def _run_text(run: str | TextBlock) -> str:
    return run.text if isinstance(run, TextBlock) else str(run)


def classify_cell(cell: Any, cached: Any = None) -> CellValue:
    """Build the value variant for an openpyxl cell.

    Args:
        cell: Cell from the workbook loaded with ``data_only=False``.
        cached: Value of the same cell in the ``data_only=True`` workbook.

    Returns:
        The matching ``CellValue`` variant.
    """
    value = cell.value
    if value is None:
        return EmptyValue()
    if isinstance(value, CellRichText):
        return RichTextValue(tuple(_run_text(run) for run in value))
    if cell.data_type == "f":
        # ArrayFormula keeps its source in .text
        formula = getattr(value, "text", None) or str(value)
        return FormulaValue(formula=formula, result=cached)
    if isinstance(value, date):
        return DateValue(value)
    hyperlink = getattr(cell, "hyperlink", None)
    if hyperlink is not None:
        return HyperlinkValue(text=value, target=getattr(hyperlink, "target", None))
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return NumberValue(value, cell.number_format or "General")
    return ScalarValue(value)


def format_date(value: date, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Render a date with the configured short-date template."""
    return date_format.format(year=value.year, month=value.month, day=value.day)


def format_grouped(value: int | float) -> str:
    """Render a number with thousands separators.

    Floats keep at most three fraction digits with trailing zeros trimmed.
    """
    if isinstance(value, int):
        return f"{value:,}"
    if not math.isfinite(value):
        return str(value)
    text = f"{value:,.3f}"
    return text.rstrip("0").rstrip(".")


def stringify(value: Any, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Plain display form of a scalar."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    if isinstance(value, date):
        return format_date(value, date_format)
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    return str(value)


def extract_value(value: CellValue, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Render a classified cell value as its display string.

    The variants are checked in a fixed priority order so that rich text
    and formula results are unwrapped before any generic stringification.

    Args:
        value: Classified cell value.
        date_format: Template applied to dates.

    Returns:
        Display string, never None.
    """
    if isinstance(value, EmptyValue):
        return ""
    if isinstance(value, RichTextValue):
        return "".join(value.runs)
    if isinstance(value, FormulaValue):
        if value.result is None:
            return ""
        return stringify(value.result, date_format)
    if isinstance(value, DateValue):
        return format_date(value.value, date_format)
    if isinstance(value, HyperlinkValue):
        if value.text is None:
            return ""
        return stringify(value.text, date_format)
    if isinstance(value, NumberValue):
        if THOUSANDS_MARKER in value.number_format:
            return format_grouped(value.value)
        return stringify(value.value, date_format)
    return stringify(value.value, date_format)
