"""Sheet Layout - spreadsheet workbooks converted to renderable grid layouts."""

__version__ = "0.1.0"

from sheet_layout.api import app, create_app  # noqa: E402

__all__ = ["app", "create_app"]


def main() -> None:
    """Run the FastAPI server using uvicorn."""
    import uvicorn

    from sheet_layout.config import settings

    uvicorn.run(
        "sheet_layout.api:app",
        host=settings.server_host,
        port=settings.server_port,
    )
