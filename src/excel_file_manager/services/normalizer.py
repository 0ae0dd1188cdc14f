"""Turn jagged decoded rows into a rectangular Sheet."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from excel_file_manager.services.date_heuristic import is_serial_date, serial_to_date
from excel_file_manager.utils.exceptions import ErrorCode, ParseError
from excel_file_manager.workbook import Cell, Sheet


def header_text(value: Any) -> str:
    """Coerce a header-row value to text. Header numbers are never dates."""
    if value is None:
        return ""
    if isinstance(value, Cell):
        return value.display()
    return Cell.from_raw(value).display()


def coerce_data_value(value: Any) -> Cell:
    """Coerce a data-row value, turning serial-looking numbers into dates."""
    if isinstance(value, Cell):
        return value
    if is_serial_date(value):
        return Cell.from_date(serial_to_date(float(value)))
    return Cell.from_raw(value)


def normalize_rows(
    rows: Sequence[Sequence[Any]],
    headers: Sequence[Any] | None = None,
    coerce: Callable[[Any], Cell] = coerce_data_value,
) -> Sheet:
    """Build a Sheet from possibly ragged rows.

    When ``headers`` is None the first row becomes the header row and the
    remaining rows become the body. Every row, and the header sequence, is
    padded on the right to the widest row; nothing is ever truncated.

    Args:
        rows: Decoded rows of raw values or Cells.
        headers: Optional explicit header sequence.
        coerce: Conversion applied to every body value. Defaults to the
            parse-time coercion with serial date detection.

    Returns:
        A rectangular Sheet.

    Raises:
        ParseError: If there is no header row and no data at all.
    """
    if headers is None:
        if not rows:
            raise ParseError(
                "Cannot normalize a sheet without any rows",
                ErrorCode.EMPTY_WORKSHEET,
            )
        header_values = [header_text(v) for v in rows[0]]
        body = rows[1:]
    else:
        header_values = [header_text(v) for v in headers]
        body = rows

    width = max([len(header_values), *(len(row) for row in body)])

    header_values.extend([""] * (width - len(header_values)))
    empty = Cell.empty()
    normalized = []
    for row in body:
        cells = [coerce(v) for v in row]
        cells.extend([empty] * (width - len(cells)))
        normalized.append(tuple(cells))

    return Sheet(tuple(header_values), tuple(normalized))
