"""Header-checked concatenation of sheets."""

from __future__ import annotations

from collections.abc import Sequence

from excel_file_manager.utils.exceptions import (
    HeaderMismatchError,
    InsufficientInputsError,
    MergeError,
)
from excel_file_manager.utils.logging import LogContext, get_logger, timed_operation
from excel_file_manager.workbook import Sheet, Workbook

logger = get_logger(__name__)

MERGED_SHEET_NAME = "Sheet1"


def merge_sheets(sheets: Sequence[Sheet]) -> Sheet:
    """Concatenate sheet bodies under the first sheet's headers.

    All inputs are validated before any output is built; duplicate rows
    are kept.

    Raises:
        InsufficientInputsError: If fewer than two sheets are given.
        HeaderMismatchError: If any sheet's headers differ from the first.
    """
    if len(sheets) < 2:
        raise InsufficientInputsError(len(sheets))

    expected = sheets[0].headers
    for idx, sheet in enumerate(sheets[1:], start=1):
        if sheet.headers != expected:
            raise HeaderMismatchError(idx, expected, sheet.headers)

    rows = [row for sheet in sheets for row in sheet.rows]
    return Sheet(expected, tuple(rows))


def merge(sheets: Sequence[Sheet], result_name: str) -> Workbook:
    """Merge sheets into a new single-sheet workbook named ``result_name``.

    Raises:
        InsufficientInputsError: If fewer than two sheets are given.
        MergeError: If ``result_name`` is blank.
        HeaderMismatchError: If any sheet's headers differ from the first.
    """
    if len(sheets) < 2:
        raise InsufficientInputsError(len(sheets))
    if not result_name or not result_name.strip():
        raise MergeError("A name is required for the merged file")

    with LogContext(operation="merge"):
        with timed_operation(logger, "merge") as metrics:
            merged = merge_sheets(sheets)
            metrics.sheets_processed = len(sheets)
            metrics.rows_processed = merged.row_count

    return Workbook(
        sheets={MERGED_SHEET_NAME: merged},
        active_sheet_name=MERGED_SHEET_NAME,
        name=result_name.strip(),
    )


def merge_workbooks(workbooks: Sequence[Workbook], result_name: str) -> Workbook:
    """Merge the active sheet of each workbook, in the order given."""
    if len(workbooks) < 2:
        raise InsufficientInputsError(len(workbooks))
    return merge([wb.active_sheet for wb in workbooks], result_name)
