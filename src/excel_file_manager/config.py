"""Configuration management for the Excel file manager engine.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
EFM_ prefix, or via a .env file in the project root.

Environment Variables:
    EFM_MAX_FILE_SIZE_MB: Maximum input size in MB (default: 10)
    EFM_PARSE_MAX_WORKERS: Threads used to decode multiple uploads (default: 1)
    EFM_JSON_INDENT: Indentation of JSON exports (default: 2)
    EFM_PDF_PAGE_SIZE: PDF page size, A4 or letter (default: A4)
    EFM_PDF_FONT_SIZE: PDF table font size (default: 10)
    EFM_PDF_TITLE_FONT_SIZE: PDF sheet title font size (default: 16)
    EFM_PDF_HEADER_COLOR: PDF table head fill color (default: #2980B9)
    EFM_LOG_LEVEL: Logging level (default: INFO)
    EFM_DEBUG: Enable debug mode (default: false)
"""

import logging
import re
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from excel_file_manager.utils.logging import get_logger

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    Example .env file:
        EFM_MAX_FILE_SIZE_MB=50
        EFM_PDF_PAGE_SIZE=letter
        EFM_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="EFM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Input Settings
    # =========================================================================

    max_file_size_mb: int = 10
    """Maximum size of an input buffer in megabytes."""

    parse_max_workers: int = 1
    """Worker threads for decoding several uploads. 1 parses sequentially."""

    # =========================================================================
    # Export Settings
    # =========================================================================

    json_indent: int = 2
    """Indentation used for JSON exports."""

    pdf_page_size: str = "A4"
    """PDF page size: A4 or letter."""

    pdf_font_size: int = 10
    """Font size of PDF table cells."""

    pdf_title_font_size: int = 16
    """Font size of the sheet title on each PDF page."""

    pdf_header_color: str = "#2980B9"
    """Fill color of the PDF table head row."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode with additional logging."""

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

    @field_validator("parse_max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        if not 1 <= v <= 32:
            raise ValueError(f"parse_max_workers must be between 1 and 32, got {v}")
        return v

    @field_validator("json_indent")
    @classmethod
    def validate_json_indent(cls, v: int) -> int:
        if not 0 <= v <= 8:
            raise ValueError(f"json_indent must be between 0 and 8, got {v}")
        return v

    @field_validator("pdf_page_size")
    @classmethod
    def validate_page_size(cls, v: str) -> str:
        """Normalize the page size name."""
        normalized = v.strip().lower()
        if normalized == "a4":
            return "A4"
        if normalized == "letter":
            return "letter"
        raise ValueError(f"pdf_page_size must be A4 or letter, got {v}")

    @field_validator("pdf_font_size", "pdf_title_font_size")
    @classmethod
    def validate_font_size(cls, v: int) -> int:
        if not 4 <= v <= 48:
            raise ValueError(f"Font size must be between 4 and 48, got {v}")
        return v

    @field_validator("pdf_header_color")
    @classmethod
    def validate_header_color(cls, v: str) -> str:
        if not _HEX_COLOR.match(v):
            raise ValueError(f"pdf_header_color must look like #RRGGBB, got {v}")
        return v.upper()

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert settings to a plain dictionary for logging."""
        return {
            "max_file_size_mb": self.max_file_size_mb,
            "parse_max_workers": self.parse_max_workers,
            "json_indent": self.json_indent,
            "pdf_page_size": self.pdf_page_size,
            "pdf_font_size": self.pdf_font_size,
            "pdf_title_font_size": self.pdf_title_font_size,
            "pdf_header_color": self.pdf_header_color,
            "log_level": self.log_level,
            "debug": self.debug,
        }


def validate_settings_on_startup(s: Settings) -> None:
    """Log warnings for settings that are valid but unusual.

    Args:
        s: Settings instance to validate.
    """
    logger = get_logger(__name__)

    if s.parse_max_workers > 1 and s.debug:
        logger.warning(
            "Parallel parsing is enabled in debug mode; log lines from "
            "different uploads will interleave."
        )

    logger.info("Configuration loaded", **s.to_safe_dict())


# Create the global settings instance
settings = Settings()
