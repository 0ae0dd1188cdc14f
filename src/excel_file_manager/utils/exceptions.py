"""Centralized exception classes for the Excel file manager engine.

This module provides a hierarchy of custom exceptions with error codes and
structured error details so callers can surface consistent messages for
every failed parse, merge, edit or export.

Exception Hierarchy:
    EngineError (base)
    ├── ParseError
    │   └── FileTooLargeError
    ├── UnsupportedFormatError
    ├── MergeError
    │   ├── InsufficientInputsError
    │   └── HeaderMismatchError
    ├── SheetEditError
    │   ├── SheetNotFoundError
    │   ├── RowIndexError
    │   └── ColumnIndexError
    └── ExportError

Error Codes:
    All errors have a unique error code (e.g., "E1001") that can be used
    for programmatic error handling and documentation.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used by the engine.

    Error codes are grouped by category:
    - E1xxx: Input decoding errors
    - E2xxx: Merge errors
    - E3xxx: Sheet editing errors
    - E4xxx: Export errors
    - E9xxx: Internal/unexpected errors
    """

    # Parse errors (E1xxx)
    PARSE_FAILED = "E1001"
    FILE_TOO_LARGE = "E1002"
    UNSUPPORTED_FORMAT = "E1003"
    EMPTY_WORKSHEET = "E1004"
    NO_WORKSHEETS = "E1005"

    # Merge errors (E2xxx)
    MERGE_FAILED = "E2001"
    INSUFFICIENT_INPUTS = "E2002"
    HEADER_MISMATCH = "E2003"

    # Edit errors (E3xxx)
    INVALID_EDIT = "E3001"
    SHEET_NOT_FOUND = "E3002"
    ROW_INDEX_OUT_OF_RANGE = "E3003"
    COLUMN_INDEX_OUT_OF_RANGE = "E3004"

    # Export errors (E4xxx)
    EXPORT_FAILED = "E4001"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"
    CONFIGURATION_ERROR = "E9002"


class EngineError(Exception):
    """Base exception for all engine errors.

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
    """

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
        """Convert the exception to a dictionary for callers to display.

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
# Parse Errors (E1xxx)
# =============================================================================


class ParseError(EngineError):
    """Raised when an input buffer cannot be turned into a workbook.

    Covers undecodable containers, empty worksheets and workbooks without
    any usable worksheet. Terminal for that input only.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.PARSE_FAILED,
        file_name: str | None = None,
        sheet_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file and sheet information.

        Args:
            message: Error message.
            error_code: Error code.
            file_name: Name of the file being parsed.
            sheet_name: Worksheet that caused the failure.
            details: Additional details.
        """
        details = details or {}
        if file_name:
            details["file_name"] = file_name
        if sheet_name is not None:
            details["sheet_name"] = sheet_name
        super().__init__(message, error_code, details)
        self.file_name = file_name
        self.sheet_name = sheet_name


class FileTooLargeError(ParseError):
    """Raised when an input exceeds the maximum allowed size."""

    def __init__(
        self,
        file_size: int,
        max_size: int,
        file_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with size information.

        Args:
            file_size: Actual size in bytes.
            max_size: Maximum allowed size in bytes.
            file_name: Optional file name.
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
            file_name=file_name,
            details=details,
        )
        self.file_size = file_size
        self.max_size = max_size


class UnsupportedFormatError(EngineError):
    """Raised when an export format tag or input container is not recognized."""

    def __init__(
        self,
        message: str,
        requested_format: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with format information.

        Args:
            message: Error message.
            requested_format: The format tag that was requested.
            details: Additional details.
        """
        details = details or {}
        if requested_format is not None:
            details["requested_format"] = requested_format
        super().__init__(message, ErrorCode.UNSUPPORTED_FORMAT, details)
        self.requested_format = requested_format


# =============================================================================
# Merge Errors (E2xxx)
# =============================================================================


class MergeError(EngineError):
    """Base class for merge errors. No partial merge is ever produced."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.MERGE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)


class InsufficientInputsError(MergeError):
    """Raised when fewer than two sheets are given to merge."""

    def __init__(self, count: int, details: dict[str, Any] | None = None) -> None:
        """Initialize with the number of sheets supplied.

        Args:
            count: Number of sheets that were supplied.
            details: Additional details.
        """
        details = details or {}
        details["input_count"] = count
        super().__init__(
            f"Merging requires at least 2 sheets, got {count}",
            ErrorCode.INSUFFICIENT_INPUTS,
            details,
        )
        self.count = count


class HeaderMismatchError(MergeError):
    """Raised when a sheet's headers differ from the first sheet's headers."""

    def __init__(
        self,
        index: int,
        expected: Sequence[str],
        actual: Sequence[str],
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with both header sequences.

        Args:
            index: Position of the mismatching sheet in the merge input.
            expected: Headers of the first sheet.
            actual: Headers of the mismatching sheet.
            details: Additional details.
        """
        details = details or {}
        details["input_index"] = index
        details["expected_headers"] = list(expected)
        details["actual_headers"] = list(actual)
        super().__init__(
            f"Headers of input {index} do not match the headers of input 0",
            ErrorCode.HEADER_MISMATCH,
            details,
        )
        self.index = index
        self.expected = list(expected)
        self.actual = list(actual)


# =============================================================================
# Sheet Edit Errors (E3xxx)
# =============================================================================


class SheetEditError(EngineError):
    """Base class for rejected structural edits."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INVALID_EDIT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)


class SheetNotFoundError(SheetEditError):
    """Raised when a workbook has no sheet with the requested name."""

    def __init__(self, sheet_name: str, available: Sequence[str]) -> None:
        super().__init__(
            f"Sheet '{sheet_name}' not found in workbook",
            ErrorCode.SHEET_NOT_FOUND,
            {"sheet_name": sheet_name, "available_sheets": list(available)},
        )
        self.sheet_name = sheet_name


class RowIndexError(SheetEditError):
    """Raised when a row index is outside the sheet body."""

    def __init__(self, index: int, row_count: int) -> None:
        super().__init__(
            f"Row index {index} is out of range for {row_count} rows",
            ErrorCode.ROW_INDEX_OUT_OF_RANGE,
            {"index": index, "row_count": row_count},
        )
        self.index = index


class ColumnIndexError(SheetEditError):
    """Raised when a column index is outside the header range."""

    def __init__(self, index: int, column_count: int) -> None:
        super().__init__(
            f"Column index {index} is out of range for {column_count} columns",
            ErrorCode.COLUMN_INDEX_OUT_OF_RANGE,
            {"index": index, "column_count": column_count},
        )
        self.index = index


# =============================================================================
# Export Errors (E4xxx)
# =============================================================================


class ExportError(EngineError):
    """Raised when serializing a workbook fails. No partial output is returned."""

    def __init__(
        self,
        message: str,
        export_format: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if export_format:
            details["format"] = export_format
        super().__init__(message, ErrorCode.EXPORT_FAILED, details)
        self.export_format = export_format
