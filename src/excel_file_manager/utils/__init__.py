"""Utilities package for the Excel file manager engine.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

from excel_file_manager.utils.exceptions import (
    ColumnIndexError,
    EngineError,
    ErrorCode,
    ExportError,
    FileTooLargeError,
    HeaderMismatchError,
    InsufficientInputsError,
    MergeError,
    ParseError,
    RowIndexError,
    SheetEditError,
    SheetNotFoundError,
    UnsupportedFormatError,
)
from excel_file_manager.utils.logging import (
    LogContext,
    StructuredLogger,
    get_logger,
    get_workbook_id,
    set_workbook_id,
)

__all__ = [
    # Exceptions
    "ColumnIndexError",
    "EngineError",
    "ErrorCode",
    "ExportError",
    "FileTooLargeError",
    "HeaderMismatchError",
    "InsufficientInputsError",
    "MergeError",
    "ParseError",
    "RowIndexError",
    "SheetEditError",
    "SheetNotFoundError",
    "UnsupportedFormatError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "get_logger",
    "get_workbook_id",
    "set_workbook_id",
]
