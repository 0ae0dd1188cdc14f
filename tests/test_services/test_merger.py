"""Tests for header-checked sheet merging."""

import pytest

from excel_file_manager.services.merger import (
    MERGED_SHEET_NAME,
    merge,
    merge_sheets,
    merge_workbooks,
)
from excel_file_manager.services.table_editor import create_table
from excel_file_manager.utils.exceptions import (
    ErrorCode,
    HeaderMismatchError,
    InsufficientInputsError,
    MergeError,
)
from excel_file_manager.workbook import Sheet


def _sheet(headers: tuple[str, ...], count: int, tag: str = "r") -> Sheet:
    return Sheet(headers, tuple((f"{tag}{i}",) * len(headers) for i in range(count)))


class TestMergeSheets:
    def test_row_count_is_sum(self) -> None:
        merged = merge_sheets([_sheet(("A", "B"), 3, "x"), _sheet(("A", "B"), 5, "y")])
        assert merged.headers == ("A", "B")
        assert merged.row_count == 8
        assert merged.rows[0][0].value == "x0"
        assert merged.rows[3][0].value == "y0"

    def test_duplicates_are_kept(self) -> None:
        sheet = _sheet(("A",), 2)
        assert merge_sheets([sheet, sheet]).row_count == 4

    def test_header_mismatch(self) -> None:
        with pytest.raises(HeaderMismatchError) as exc_info:
            merge_sheets([_sheet(("A", "B"), 1), _sheet(("A", "C"), 1)])
        error = exc_info.value
        assert error.error_code == ErrorCode.HEADER_MISMATCH
        assert error.details["input_index"] == 1
        assert error.details["expected_headers"] == ["A", "B"]
        assert error.details["actual_headers"] == ["A", "C"]

    def test_header_order_matters(self) -> None:
        with pytest.raises(HeaderMismatchError):
            merge_sheets([_sheet(("A", "B"), 1), _sheet(("B", "A"), 1)])

    def test_header_length_matters(self) -> None:
        with pytest.raises(HeaderMismatchError):
            merge_sheets([_sheet(("A", "B"), 1), _sheet(("A", "B", ""), 1)])

    @pytest.mark.parametrize("count", [0, 1])
    def test_insufficient_inputs(self, count: int) -> None:
        with pytest.raises(InsufficientInputsError):
            merge_sheets([_sheet(("A",), 1)] * count)


class TestMerge:
    def test_result_workbook(self) -> None:
        result = merge([_sheet(("A",), 1), _sheet(("A",), 2)], "combined.xlsx")
        assert result.name == "combined.xlsx"
        assert result.sheet_names == [MERGED_SHEET_NAME]
        assert result.active_sheet_name == MERGED_SHEET_NAME
        assert result.active_sheet.row_count == 3
        assert result.modified is False

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(MergeError):
            merge([_sheet(("A",), 1), _sheet(("A",), 1)], "   ")

    @pytest.mark.parametrize("count", [0, 1])
    def test_input_count_checked_before_name(self, count: int) -> None:
        with pytest.raises(InsufficientInputsError) as exc_info:
            merge([_sheet(("A",), 1)] * count, "")
        assert exc_info.value.error_code == ErrorCode.INSUFFICIENT_INPUTS

    def test_mismatch_takes_precedence_over_nothing_written(self) -> None:
        with pytest.raises(HeaderMismatchError):
            merge([_sheet(("A",), 1), _sheet(("A",), 1), _sheet(("Z",), 1)], "out")


class TestMergeWorkbooks:
    def test_merges_active_sheets_in_order(self) -> None:
        first = create_table("one", headers=["Name"], rows=[["a"]])
        second = create_table("two", headers=["Name"], rows=[["b"], ["c"]])
        result = merge_workbooks([first, second], "both")
        assert [row[0].value for row in result.active_sheet.rows] == ["a", "b", "c"]

    def test_needs_two_workbooks(self) -> None:
        with pytest.raises(InsufficientInputsError):
            merge_workbooks([create_table("one")], "out")
