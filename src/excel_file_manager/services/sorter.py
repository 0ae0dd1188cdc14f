"""Stable, type-aware column sort for sheets.

Ordering rules for the sorted column:

1. Empty cells go after every non-empty cell.
2. Values that read as finite numbers (numbers or numeric text) compare
   numerically and come before everything else.
3. Values that read as dates (date cells or ``"Mar 15, 2023"`` text)
   compare chronologically when every other non-numeric value in the
   column is a date as well.
4. Everything else compares as case- and accent-insensitive text. In a
   column mixing dates with plain text, dates compare by their displayed
   text too.

The key of each cell depends only on the column's contents, so the order
is total and sorting an already sorted sheet returns it unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from excel_file_manager.utils.exceptions import ColumnIndexError
from excel_file_manager.utils.logging import get_logger
from excel_file_manager.workbook import Cell, Sheet, Workbook, fold_text

logger = get_logger(__name__)

_NON_EMPTY = 0
_EMPTY = 1

_NUMBER_RANK = 0
_OTHER_RANK = 1


def is_chronological(cells: Sequence[Cell]) -> bool:
    """Return True when every non-empty, non-numeric cell reads as a date."""
    return all(
        cell.is_empty or cell.as_number() is not None or cell.as_date() is not None
        for cell in cells
    )


def sort_key(cell: Cell, chronological: bool = False) -> tuple[Any, ...]:
    """Return the ordering key of a single cell.

    Args:
        cell: Cell to rank.
        chronological: Whether dates in this column compare by calendar day;
            see ``is_chronological``.
    """
    if cell.is_empty:
        return (_EMPTY,)
    number = cell.as_number()
    if number is not None:
        return (_NON_EMPTY, _NUMBER_RANK, number)
    moment = cell.as_date() if chronological else None
    if moment is not None:
        return (_NON_EMPTY, _OTHER_RANK, moment.toordinal())
    text = cell.display()
    return (_NON_EMPTY, _OTHER_RANK, fold_text(text), text.casefold())


def column_keys(cells: Sequence[Cell]) -> list[tuple[Any, ...]]:
    chronological = is_chronological(cells)
    return [sort_key(cell, chronological) for cell in cells]


def sort_sheet(sheet: Sheet, column_index: int) -> Sheet:
    """Return a new Sheet with rows ordered by one column.

    Headers are untouched and rows with equal keys keep their input order.

    Raises:
        ColumnIndexError: If ``column_index`` is not a column of ``sheet``.
    """
    if not 0 <= column_index < sheet.column_count:
        raise ColumnIndexError(column_index, sheet.column_count)

    keys = column_keys(sheet.column(column_index))
    order = sorted(range(sheet.row_count), key=keys.__getitem__)
    ordered = [sheet.rows[idx] for idx in order]
    logger.debug("Sorted sheet", column=column_index, rows=len(ordered))
    return sheet.with_rows(ordered)


def sort_workbook(workbook: Workbook, column_index: int) -> Workbook:
    """Sort the active sheet and mark the workbook modified."""
    return workbook.with_active_sheet(sort_sheet(workbook.active_sheet, column_index))
