"""FastAPI application for sheet layout extraction."""

import json
import uuid
from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import (
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sheet_layout import __version__
from sheet_layout.config import settings, validate_settings_on_startup
from sheet_layout.models import (
    ErrorDetail,
    HealthResponse,
    ParseResponse,
    SheetResponse,
)
from sheet_layout.services.sheet_builder import (
    LayoutParseOptions,
    WorkbookLayoutParser,
)
from sheet_layout.utils.exceptions import (
    ErrorCode,
    FileTooLargeError,
    MissingFileError,
    SheetLayoutError,
    ValidationError,
)
from sheet_layout.utils.logging import (
    LogContext,
    clear_context,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

configure_logging(
    level=settings.log_level_int,
    use_structured_formatter=True,
)
logger = get_logger(__name__)


def parse_layout_groups_field(raw: str) -> list[list[int]]:
    """Parse the ``layout_groups`` form field.

    Args:
        raw: JSON text such as ``[[6, 3, 4, 7]]``.

    Returns:
        Groups of zero-based sheet indices.

    Raises:
        ValidationError: If the text is not a JSON list of integer lists.
    """
    try:
        groups = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(
            message=f"Invalid JSON in layout_groups: {e}",
            field="layout_groups",
        ) from e

    if not isinstance(groups, list) or not all(
        isinstance(group, list)
        and all(isinstance(idx, int) and not isinstance(idx, bool) for idx in group)
        for group in groups
    ):
        raise ValidationError(
            message="layout_groups must be a list of lists of sheet indices",
            field="layout_groups",
        )
    return groups


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Sheet Layout API",
        description=(
            "Converts uploaded spreadsheet workbooks into styled row/column "
            "grids that can be rendered as HTML tables."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    validate_settings_on_startup(settings)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next: Any) -> Any:
        """Assign a request ID, expose it in logs and echo it back."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        set_request_id(request_id)
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()

    @app.exception_handler(SheetLayoutError)
    async def sheet_layout_exception_handler(
        request: Request, exc: SheetLayoutError
    ) -> JSONResponse:
        """Return structured error bodies for the application's exceptions."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.error(
            f"Sheet layout error: {exc.message}",
            error_code=exc.error_code.value,
            http_status=exc.http_status,
        )
        details = exc.details if exc.details else None
        return JSONResponse(
            status_code=exc.http_status,
            content=ErrorDetail(
                detail=exc.message,
                error_code=exc.error_code.value,
                details=details,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        """Custom exception handler for HTTP exceptions."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.warning(
            f"HTTP Error: {exc.detail}",
            status_code=exc.status_code,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorDetail(
                detail=str(exc.detail),
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all handler that hides internals unless debug is on."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.exception(
            f"Unexpected error: {type(exc).__name__}",
            error_type=type(exc).__name__,
        )
        if settings.debug:
            detail = f"Internal server error: {type(exc).__name__}: {exc}"
        else:
            detail = "Internal server error. Please try again later."

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorDetail.from_error_code(
                ErrorCode.INTERNAL_ERROR,
                detail=detail,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> dict[str, Any]:
        """Check the health status of the service."""
        logger.debug("Health check requested")
        return {
            "status": "healthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "version": __version__,
        }

    @app.post(
        "/parse-excel",
        response_model=ParseResponse,
        tags=["Parsing"],
        responses={
            400: {"model": ErrorDetail, "description": "No file supplied"},
            413: {"model": ErrorDetail, "description": "File too large"},
            500: {"model": ErrorDetail, "description": "Workbook parse failure"},
        },
    )
    async def parse_excel(
        file: Annotated[
            UploadFile | None, File(description="Workbook (.xlsx) to convert")
        ] = None,
        layout_groups: Annotated[
            str | None,
            Form(description="JSON list of sheet index groups sharing one layout"),
        ] = None,
    ) -> ParseResponse:
        """Convert an uploaded workbook into per-sheet grid layouts.

        Args:
            file: The workbook to convert
            layout_groups: Optional override of the configured layout groups

        Returns:
            ParseResponse: One grid per worksheet, after layout normalization

        Raises:
            MissingFileError: 400 if no file was uploaded
            ValidationError: 400 if layout_groups is malformed
            FileTooLargeError: 413 if the file exceeds the size limit
            WorkbookParseError: 500 if the workbook cannot be decoded
        """
        if file is None or not file.filename:
            logger.warning("Parse request missing file")
            raise MissingFileError()

        groups = (
            parse_layout_groups_field(layout_groups)
            if layout_groups is not None
            else settings.layout_groups
        )

        content = await file.read()
        if len(content) > settings.max_file_size_bytes:
            logger.warning(
                "File too large",
                file_size=len(content),
                max_size=settings.max_file_size_bytes,
            )
            raise FileTooLargeError(
                file_size=len(content),
                max_size=settings.max_file_size_bytes,
                filename=file.filename,
            )

        options = LayoutParseOptions(
            layout_groups=groups,
            date_format=settings.date_format,
            max_workers=settings.max_workers,
        )
        with LogContext(workbook=file.filename):
            logger.info("Parsing workbook", size_bytes=len(content))
            sheets = await run_in_threadpool(
                WorkbookLayoutParser().parse_bytes, content, options
            )

        return ParseResponse(sheets=[SheetResponse.from_sheet(s) for s in sheets])

    return app


app = create_app()
