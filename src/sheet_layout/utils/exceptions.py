"""Centralized exception classes for sheet layout extraction.

This module provides a hierarchy of custom exceptions with error codes,
HTTP status code mapping, and structured error details for consistent
error handling throughout the application.

Exception Hierarchy:
    SheetLayoutError (base)
    ├── FileError
    │   ├── MissingFileError
    │   └── FileTooLargeError
    ├── ValidationError
    └── ExtractionError
        └── WorkbookParseError

Only workbook-level and request-level problems are raised. Anomalies inside a
single cell, merge range or layout group are absorbed by the services with
safe defaults and never surface as exceptions.

Error Codes:
    All errors have a unique error code (e.g., "E1007") that can be used
    for programmatic error handling and documentation.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used in the application.

    Error codes are grouped by category:
    - E1xxx: Upload/file errors
    - E2xxx: Request validation errors
    - E4xxx: Workbook extraction errors
    - E9xxx: Internal/unexpected errors
    """

    # File errors (E1xxx)
    FILE_TOO_LARGE = "E1002"
    FILE_READ_ERROR = "E1004"
    FILE_MISSING = "E1007"

    # Validation errors (E2xxx)
    INVALID_REQUEST = "E2001"

    # Extraction errors (E4xxx)
    EXTRACTION_FAILED = "E4001"
    WORKBOOK_PARSE_FAILED = "E4010"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"


class HTTPStatusMixin:
    """Mixin that provides HTTP status code for exceptions.

    Subclasses should set the `http_status` class attribute.
    """

    http_status: int = 500

    def get_http_status(self) -> int:
        """Get the HTTP status code for this exception.

        Returns:
            HTTP status code appropriate for this error.
        """
        return self.http_status


class SheetLayoutError(Exception, HTTPStatusMixin):
    """Base exception for all sheet layout errors.

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
        http_status: HTTP status code for API responses (default 500).
    """

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary for API responses.

        Returns:
            Dictionary with error information.
        """
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# File Errors (E1xxx)
# =============================================================================


class FileError(SheetLayoutError):
    """Base class for upload-related errors."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.FILE_READ_ERROR,
        filename: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the uploaded filename.

        Args:
            message: Error message.
            error_code: Error code.
            filename: Name of the problematic upload.
            details: Additional details.
        """
        details = details or {}
        if filename:
            details["filename"] = filename
        super().__init__(message, error_code, details)
        self.filename = filename


class MissingFileError(FileError):
    """Raised when a request carries no workbook upload."""

    def __init__(
        self,
        message: str = "No file supplied",
        field: str = "file",
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["field"] = field
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_MISSING,
            details=details,
        )
        self.field = field


class FileTooLargeError(FileError):
    """Raised when an upload exceeds the maximum allowed size."""

    http_status: int = 413

    def __init__(
        self,
        file_size: int,
        max_size: int,
        filename: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with size information.

        Args:
            file_size: Actual upload size in bytes.
            max_size: Maximum allowed size in bytes.
            filename: Optional upload name.
            details: Additional details.
        """
        details = details or {}
        details["file_size_bytes"] = file_size
        details["max_size_bytes"] = max_size
        message = (
            f"File size ({file_size} bytes) exceeds maximum "
            f"allowed size ({max_size} bytes)"
        )
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_TOO_LARGE,
            filename=filename,
            details=details,
        )
        self.file_size = file_size
        self.max_size = max_size


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================


class ValidationError(SheetLayoutError):
    """Raised when a request field is present but malformed."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with validation details.

        Args:
            message: Main error message.
            field: Field that failed validation.
            errors: List of validation errors.
            details: Additional details.
        """
        details = details or {}
        if field:
            details["field"] = field
        if errors:
            details["validation_errors"] = errors
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_REQUEST,
            details=details,
        )
        self.field = field
        self.errors = errors or []


# =============================================================================
# Extraction Errors (E4xxx)
# =============================================================================


class ExtractionError(SheetLayoutError):
    """Base class for extraction-related errors."""

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.EXTRACTION_FAILED,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with extraction stage.

        Args:
            message: Error message.
            error_code: Error code.
            stage: The extraction stage where the error occurred.
            details: Additional details.
        """
        details = details or {}
        if stage:
            details["extraction_stage"] = stage
        super().__init__(message, error_code, details)
        self.stage = stage


class WorkbookParseError(ExtractionError):
    """Raised when an uploaded buffer cannot be decoded as a workbook.

    This is fatal for the whole request: no sheet is returned when the
    workbook itself fails to load.
    """

    def __init__(
        self,
        message: str = "Workbook parse failure",
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the underlying decode failure.

        Args:
            message: Error message.
            reason: Text of the exception raised by the workbook reader.
            details: Additional details.
        """
        details = details or {}
        if reason:
            details["reason"] = reason
        super().__init__(
            message=message,
            error_code=ErrorCode.WORKBOOK_PARSE_FAILED,
            stage="workbook_load",
            details=details,
        )
        self.reason = reason
