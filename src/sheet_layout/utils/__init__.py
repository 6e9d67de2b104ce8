"""Utilities package for sheet layout extraction.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

from sheet_layout.utils.exceptions import (
    ErrorCode,
    ExtractionError,
    FileError,
    FileTooLargeError,
    HTTPStatusMixin,
    MissingFileError,
    SheetLayoutError,
    ValidationError,
    WorkbookParseError,
)
from sheet_layout.utils.logging import (
    LogContext,
    StructuredLogger,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Exceptions
    "ErrorCode",
    "ExtractionError",
    "FileError",
    "FileTooLargeError",
    "HTTPStatusMixin",
    "MissingFileError",
    "SheetLayoutError",
    "ValidationError",
    "WorkbookParseError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
