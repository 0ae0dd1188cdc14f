"""Tests for configuration management module."""

import logging
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from excel_file_manager.config import Settings, validate_settings_on_startup


class TestSettings:
    """Tests for the Settings class."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.max_file_size_mb == 10
        assert settings.parse_max_workers == 1
        assert settings.json_indent == 2
        assert settings.pdf_page_size == "A4"
        assert settings.pdf_font_size == 10
        assert settings.pdf_title_font_size == 16
        assert settings.pdf_header_color == "#2980B9"
        assert settings.log_level == "INFO"
        assert settings.debug is False

    def test_environment_variable_prefix(self) -> None:
        """Test that environment variables use EFM_ prefix."""
        env_vars = {
            "EFM_MAX_FILE_SIZE_MB": "25",
            "EFM_PDF_PAGE_SIZE": "Letter",
            "EFM_LOG_LEVEL": "debug",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            settings = Settings(_env_file=None)

        assert settings.max_file_size_mb == 25
        assert settings.pdf_page_size == "letter"
        assert settings.log_level == "DEBUG"

    def test_max_file_size_bytes(self) -> None:
        settings = Settings(_env_file=None, max_file_size_mb=2)
        assert settings.max_file_size_bytes == 2 * 1024 * 1024

    def test_log_level_int(self) -> None:
        settings = Settings(_env_file=None, log_level="warning")
        assert settings.log_level_int == logging.WARNING

    def test_header_color_is_uppercased(self) -> None:
        settings = Settings(_env_file=None, pdf_header_color="#ab12cd")
        assert settings.pdf_header_color == "#AB12CD"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("max_file_size_mb", 0),
            ("max_file_size_mb", 501),
            ("parse_max_workers", 0),
            ("json_indent", 9),
            ("pdf_page_size", "A3"),
            ("pdf_font_size", 2),
            ("pdf_header_color", "blue"),
            ("log_level", "VERBOSE"),
        ],
    )
    def test_invalid_values_rejected(self, field: str, value: object) -> None:
        """Out-of-range values fail validation."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_to_safe_dict(self) -> None:
        settings = Settings(_env_file=None)
        result = settings.to_safe_dict()
        assert result["pdf_page_size"] == "A4"
        assert result["parse_max_workers"] == 1
        assert set(result) >= {"max_file_size_mb", "json_indent", "log_level"}


class TestValidateSettingsOnStartup:
    """Tests for startup validation logging."""

    def test_logs_configuration(self, caplog: pytest.LogCaptureFixture) -> None:
        settings = Settings(_env_file=None)
        with caplog.at_level(logging.INFO, logger="excel_file_manager.config"):
            validate_settings_on_startup(settings)
        assert "Configuration loaded" in caplog.text
        assert "pdf_page_size=A4" in caplog.text
        assert "json_indent=2" in caplog.text

    def test_warns_on_parallel_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        settings = Settings(_env_file=None, parse_max_workers=4, debug=True)
        with caplog.at_level(logging.INFO, logger="excel_file_manager.config"):
            validate_settings_on_startup(settings)
        assert any(r.levelno == logging.WARNING for r in caplog.records)
