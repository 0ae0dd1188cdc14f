"""Structural edits on sheets and creation of new tables.

Every function returns a new Sheet or Workbook; inputs are never changed.
Row and column counts stay consistent with the headers after each edit.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from excel_file_manager.services.normalizer import normalize_rows
from excel_file_manager.utils.exceptions import (
    ColumnIndexError,
    RowIndexError,
    SheetEditError,
)
from excel_file_manager.workbook import Cell, Sheet, Workbook, fold_text

DEFAULT_TABLE_SHEET_NAME = "Sheet 1"
DEFAULT_TABLE_HEADERS = ("Column 1",)


def create_table(
    name: str,
    headers: Sequence[str] | None = None,
    rows: Sequence[Sequence[Any]] | None = None,
) -> Workbook:
    """Create a single-sheet workbook from scratch.

    Without arguments the table has one ``"Column 1"`` column and one blank
    row, the same starting point as the interactive table creator.

    Args:
        name: Table name; blank names fall back to ``"New Table"``.
        headers: Column titles.
        rows: Initial body rows, padded to the header width. Values are
            stored as typed; numbers are never read as date serials.
    """
    header_values = list(headers) if headers is not None else list(DEFAULT_TABLE_HEADERS)
    if rows is None:
        rows = [[""] * len(header_values)]
    sheet = normalize_rows(rows, headers=header_values, coerce=Cell.from_raw)
    return Workbook(
        sheets={DEFAULT_TABLE_SHEET_NAME: sheet},
        active_sheet_name=DEFAULT_TABLE_SHEET_NAME,
        name=name.strip() or "New Table",
    )


def _check_row(sheet: Sheet, index: int) -> None:
    if not 0 <= index < sheet.row_count:
        raise RowIndexError(index, sheet.row_count)


def _check_column(sheet: Sheet, index: int) -> None:
    if not 0 <= index < sheet.column_count:
        raise ColumnIndexError(index, sheet.column_count)


def set_cell(sheet: Sheet, row: int, column: int, value: Any) -> Sheet:
    """Replace one cell, storing the value as typed."""
    _check_row(sheet, row)
    _check_column(sheet, column)
    cells = list(sheet.rows[row])
    cells[column] = Cell.from_raw(value)
    rows = list(sheet.rows)
    rows[row] = tuple(cells)
    return sheet.with_rows(rows)


def rename_header(sheet: Sheet, column: int, title: str) -> Sheet:
    _check_column(sheet, column)
    headers = list(sheet.headers)
    headers[column] = title
    return Sheet(tuple(headers), sheet.rows)


def add_row(
    sheet: Sheet,
    values: Sequence[Any] | None = None,
    index: int | None = None,
) -> Sheet:
    """Insert a row at ``index`` (appended when None).

    A missing ``values`` adds a row of empty strings. Short rows are padded
    with empty cells; rows wider than the sheet are rejected.
    """
    if values is None:
        cells = [Cell.from_text("")] * sheet.column_count
    else:
        if len(values) > sheet.column_count:
            raise SheetEditError(
                f"Row has {len(values)} values but the sheet has "
                f"{sheet.column_count} columns",
                details={"row_length": len(values), "column_count": sheet.column_count},
            )
        cells = [Cell.from_raw(v) for v in values]
        cells.extend([Cell.empty()] * (sheet.column_count - len(cells)))

    position = sheet.row_count if index is None else index
    if not 0 <= position <= sheet.row_count:
        raise RowIndexError(position, sheet.row_count)

    rows = list(sheet.rows)
    rows.insert(position, tuple(cells))
    return sheet.with_rows(rows)


def remove_row(sheet: Sheet, index: int) -> Sheet:
    _check_row(sheet, index)
    rows = list(sheet.rows)
    del rows[index]
    return sheet.with_rows(rows)


def add_column(
    sheet: Sheet,
    title: str | None = None,
    index: int | None = None,
) -> Sheet:
    """Insert a column of empty strings, titled ``"Column <n>"`` by default."""
    position = sheet.column_count if index is None else index
    if not 0 <= position <= sheet.column_count:
        raise ColumnIndexError(position, sheet.column_count)

    headers = list(sheet.headers)
    headers.insert(position, title if title is not None else f"Column {len(headers) + 1}")
    blank = Cell.from_text("")
    rows = [row[:position] + (blank,) + row[position:] for row in sheet.rows]
    return Sheet(tuple(headers), tuple(rows))


def remove_column(sheet: Sheet, index: int) -> Sheet:
    """Drop one column. The last remaining column cannot be removed."""
    _check_column(sheet, index)
    if sheet.column_count == 1:
        raise SheetEditError("Cannot remove the only column of a sheet")
    headers = sheet.headers[:index] + sheet.headers[index + 1 :]
    rows = [row[:index] + row[index + 1 :] for row in sheet.rows]
    return Sheet(headers, tuple(rows))


def filter_rows(sheet: Sheet, term: str) -> Sheet:
    """Keep rows where any displayed value contains ``term``.

    Matching ignores case and accents. Headers are always kept and a blank
    term returns the sheet as is.
    """
    if not term:
        return sheet
    needle = fold_text(term)
    matches = [
        row for row in sheet.rows if any(needle in fold_text(c.display()) for c in row)
    ]
    return sheet.with_rows(matches)


def edit_active_sheet(workbook: Workbook, edit: Any, *args: Any, **kwargs: Any) -> Workbook:
    """Apply a sheet edit to the active sheet and mark the workbook modified.

    Example:
        workbook = edit_active_sheet(workbook, set_cell, 0, 1, "new value")
    """
    return workbook.with_active_sheet(edit(workbook.active_sheet, *args, **kwargs))
