"""Configuration management for sheet layout extraction.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
SHEET_LAYOUT_ prefix, or via a .env file in the project root.

Environment Variables:
    SHEET_LAYOUT_MAX_FILE_SIZE_MB: Maximum upload size in MB (default: 10)
    SHEET_LAYOUT_LAYOUT_GROUPS: JSON list of worksheet index groups sharing one
        layout, the first index of each group being the reference
        (default: [])
    SHEET_LAYOUT_DATE_FORMAT: Template for date cells using {year}, {month}
        and {day} (default: "{year}. {month}. {day}.")
    SHEET_LAYOUT_MAX_WORKERS: Threads used to build worksheets (default: 1)
    SHEET_LAYOUT_LOG_LEVEL: Logging level (default: INFO)
    SHEET_LAYOUT_DEBUG: Enable debug mode (default: false)
    SHEET_LAYOUT_CORS_ORIGINS: Comma-separated allowed origins (default: *)
    SHEET_LAYOUT_SERVER_HOST: Server bind host (default: 0.0.0.0)
    SHEET_LAYOUT_SERVER_PORT: Server bind port (default: 8000)
"""

import logging
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Example .env file:
        SHEET_LAYOUT_LAYOUT_GROUPS=[[6, 3, 4, 7]]
        SHEET_LAYOUT_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="SHEET_LAYOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Upload Settings
    # =========================================================================

    max_file_size_mb: int = 10
    """Maximum upload size in megabytes."""

    # =========================================================================
    # Layout Settings
    # =========================================================================

    layout_groups: list[list[int]] = []
    """Groups of zero-based worksheet indices sharing one layout.

    The first index of each group is the reference worksheet; the others
    adopt its column widths and per-row cell count. Indices are opaque
    deployment knowledge and are never inferred from workbook content.
    """

    date_format: str = "{year}. {month}. {day}."
    """Display template for date cells."""

    max_workers: int = 1
    """Worker threads used to build worksheets; 1 builds them in order."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode with additional error details."""

    # =========================================================================
    # Server Settings
    # =========================================================================

    cors_origins: str = "*"
    """Comma-separated list of allowed CORS origins, or * for all."""

    server_host: str = "0.0.0.0"
    """Host address for the server to bind to."""

    server_port: int = 8000
    """Port for the server to listen on."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_file_size(cls, v: int) -> int:
        """Validate file size is positive and reasonable."""
        if not 1 <= v <= 500:
            raise ValueError(f"max_file_size_mb must be between 1 and 500, got {v}")
        return v

    @field_validator("layout_groups")
    @classmethod
    def validate_layout_groups(cls, v: list[list[int]]) -> list[list[int]]:
        """Validate every layout group is a non-empty list of indices >= 0."""
        for group in v:
            if not group:
                raise ValueError("layout_groups must not contain empty groups")
            negative = [idx for idx in group if idx < 0]
            if negative:
                raise ValueError(
                    f"layout_groups indices must be >= 0, got {negative}"
                )
        return v

    @field_validator("date_format")
    @classmethod
    def validate_date_format(cls, v: str) -> str:
        """Validate the date template renders with year, month and day."""
        try:
            v.format(year=2000, month=1, day=1)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"Invalid date_format template: {v!r} ({e})") from e
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        """Validate worker count is in a sane range."""
        if not 1 <= v <= 32:
            raise ValueError(f"max_workers must be between 1 and 32, got {v}")
        return v

    @field_validator("server_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"server_port must be between 1 and 65535, got {v}")
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert settings to a dictionary suitable for logging."""
        return {
            "max_file_size_mb": self.max_file_size_mb,
            "layout_groups": self.layout_groups,
            "date_format": self.date_format,
            "max_workers": self.max_workers,
            "log_level": self.log_level,
            "debug": self.debug,
            "cors_origins": self.cors_origins,
            "server_host": self.server_host,
            "server_port": self.server_port,
        }


def validate_settings_on_startup(s: Settings) -> None:
    """Log a configuration summary and warn about risky values.

    Args:
        s: Settings instance to validate.
    """
    logger = logging.getLogger(__name__)

    if s.cors_origins == "*" and not s.debug:
        logger.warning(
            "CORS is configured to allow all origins (*). "
            "Consider restricting this in production."
        )

    if not s.layout_groups:
        logger.info("No layout groups configured; sheets keep their own layout.")

    summary = ", ".join(f"{key}={value}" for key, value in s.to_safe_dict().items())
    logger.info(f"Configuration loaded: {summary}")


settings = Settings()
