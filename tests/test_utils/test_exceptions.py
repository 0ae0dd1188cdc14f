"""Tests for the centralized exception classes."""

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


class TestErrorCode:
    """Tests for ErrorCode enumeration."""

    def test_error_codes_are_unique(self) -> None:
        """All error codes should have unique values."""
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))

    def test_error_code_format(self) -> None:
        """Error codes should follow Exxxx format."""
        for code in ErrorCode:
            assert code.value.startswith("E")
            assert len(code.value) == 5
            assert code.value[1:].isdigit()

    def test_parse_errors_start_with_e1(self) -> None:
        parse_codes = [
            ErrorCode.PARSE_FAILED,
            ErrorCode.FILE_TOO_LARGE,
            ErrorCode.UNSUPPORTED_FORMAT,
            ErrorCode.EMPTY_WORKSHEET,
            ErrorCode.NO_WORKSHEETS,
        ]
        for code in parse_codes:
            assert code.value.startswith("E1")

    def test_merge_errors_start_with_e2(self) -> None:
        merge_codes = [
            ErrorCode.MERGE_FAILED,
            ErrorCode.INSUFFICIENT_INPUTS,
            ErrorCode.HEADER_MISMATCH,
        ]
        for code in merge_codes:
            assert code.value.startswith("E2")

    def test_edit_errors_start_with_e3(self) -> None:
        edit_codes = [
            ErrorCode.INVALID_EDIT,
            ErrorCode.SHEET_NOT_FOUND,
            ErrorCode.ROW_INDEX_OUT_OF_RANGE,
            ErrorCode.COLUMN_INDEX_OUT_OF_RANGE,
        ]
        for code in edit_codes:
            assert code.value.startswith("E3")


class TestEngineError:
    """Tests for base EngineError class."""

    def test_basic_initialization(self) -> None:
        """Test basic error initialization."""
        error = EngineError("Test error message")
        assert str(error) == "[E9001] Test error message"
        assert error.message == "Test error message"
        assert error.error_code == ErrorCode.INTERNAL_ERROR
        assert error.details == {}

    def test_with_custom_error_code(self) -> None:
        error = EngineError("Custom error", error_code=ErrorCode.PARSE_FAILED)
        assert str(error) == "[E1001] Custom error"

    def test_to_dict(self) -> None:
        """Test to_dict conversion."""
        error = EngineError(
            "Test error",
            error_code=ErrorCode.EXPORT_FAILED,
            details={"format": "pdf"},
        )
        result = error.to_dict()
        assert result["error_code"] == "E4001"
        assert result["message"] == "Test error"
        assert result["details"]["format"] == "pdf"

    def test_to_dict_without_details(self) -> None:
        error = EngineError("Test error")
        assert "details" not in error.to_dict()


class TestParseErrors:
    """Tests for parse-related exceptions."""

    def test_parse_error_records_file_and_sheet(self) -> None:
        error = ParseError(
            "Sheet is empty",
            ErrorCode.EMPTY_WORKSHEET,
            file_name="book.xlsx",
            sheet_name="Data",
        )
        assert error.details["file_name"] == "book.xlsx"
        assert error.details["sheet_name"] == "Data"
        assert error.error_code == ErrorCode.EMPTY_WORKSHEET

    def test_file_too_large_error(self) -> None:
        error = FileTooLargeError(file_size=20_000_000, max_size=10_000_000)
        assert isinstance(error, ParseError)
        assert error.error_code == ErrorCode.FILE_TOO_LARGE
        assert error.details["file_size_bytes"] == 20_000_000
        assert error.details["max_size_bytes"] == 10_000_000

    def test_unsupported_format_error(self) -> None:
        error = UnsupportedFormatError("Unknown format", requested_format="docx")
        assert error.requested_format == "docx"
        assert error.error_code == ErrorCode.UNSUPPORTED_FORMAT
        assert error.details["requested_format"] == "docx"


class TestMergeErrors:
    """Tests for merge-related exceptions."""

    def test_insufficient_inputs(self) -> None:
        error = InsufficientInputsError(1)
        assert isinstance(error, MergeError)
        assert error.count == 1
        assert error.error_code == ErrorCode.INSUFFICIENT_INPUTS
        assert error.details["input_count"] == 1

    def test_header_mismatch_lists_both_headers(self) -> None:
        error = HeaderMismatchError(2, ("A", "B"), ("A", "C"))
        assert isinstance(error, MergeError)
        assert error.details == {
            "input_index": 2,
            "expected_headers": ["A", "B"],
            "actual_headers": ["A", "C"],
        }
        assert str(error).startswith("[E2003]")


class TestSheetEditErrors:
    """Tests for sheet editing exceptions."""

    def test_sheet_not_found(self) -> None:
        error = SheetNotFoundError("Missing", ["Sheet1", "Sheet2"])
        assert isinstance(error, SheetEditError)
        assert error.sheet_name == "Missing"
        assert error.details["available_sheets"] == ["Sheet1", "Sheet2"]

    def test_row_index_error(self) -> None:
        error = RowIndexError(5, 3)
        assert error.error_code == ErrorCode.ROW_INDEX_OUT_OF_RANGE
        assert error.details == {"index": 5, "row_count": 3}

    def test_column_index_error(self) -> None:
        error = ColumnIndexError(-1, 2)
        assert error.error_code == ErrorCode.COLUMN_INDEX_OUT_OF_RANGE
        assert error.index == -1


class TestExportError:
    def test_export_error(self) -> None:
        error = ExportError("Writer failed", export_format="pdf")
        assert isinstance(error, EngineError)
        assert error.error_code == ErrorCode.EXPORT_FAILED
        assert error.details["format"] == "pdf"
