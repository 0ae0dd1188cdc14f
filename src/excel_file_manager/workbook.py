"""Value types for the in-memory grid: cells, sheets and workbooks.

All three types are immutable. Edits build new values, so a Sheet or
Workbook handed to a caller is never changed behind its back.
"""

from __future__ import annotations

import math
import re
import unicodedata
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any
from uuid import uuid4

import pandas as pd

from excel_file_manager.services.date_heuristic import (
    format_date,
    parse_formatted_date,
)
from excel_file_manager.utils.exceptions import (
    ColumnIndexError,
    ErrorCode,
    SheetEditError,
    SheetNotFoundError,
)

_NUMERIC_TEXT = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# Integral floats up to this magnitude are printed without a fraction.
_MAX_EXACT_INT = 2**53


class CellKind(str, Enum):
    """Closed set of cell variants."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    EMPTY = "empty"


@dataclass(frozen=True)
class Cell:
    """A single grid value tagged with its kind.

    ``Cell.empty()`` and ``Cell.from_text("")`` are different values and
    stay different through every transform.
    """

    kind: CellKind
    value: str | float | date | None = None

    @classmethod
    def empty(cls) -> Cell:
        return _EMPTY

    @classmethod
    def from_text(cls, value: str) -> Cell:
        return cls(CellKind.TEXT, value)

    @classmethod
    def from_number(cls, value: float) -> Cell:
        return cls(CellKind.NUMBER, float(value))

    @classmethod
    def from_date(cls, value: date) -> Cell:
        if isinstance(value, datetime):
            value = value.date()
        return cls(CellKind.DATE, value)

    @classmethod
    def from_raw(cls, value: Any) -> Cell:
        """Coerce a raw decoded value into a Cell.

        Args:
            value: A value as produced by a spreadsheet decoder or a caller.

        Returns:
            The tagged cell. Booleans become ``"TRUE"``/``"FALSE"`` text,
            datetimes become dates, times and durations become text.
        """
        if isinstance(value, Cell):
            return value
        if value is None:
            return _EMPTY
        if isinstance(value, bool):
            return cls.from_text("TRUE" if value else "FALSE")
        if isinstance(value, (int, float, Decimal)):
            return cls.from_number(float(value))
        if isinstance(value, (datetime, date)):
            return cls.from_date(value)
        if isinstance(value, time):
            return cls.from_text(value.isoformat())
        if isinstance(value, timedelta):
            return cls.from_text(str(value))
        if isinstance(value, str):
            return cls.from_text(value)
        return cls.from_text(str(value))

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    def display(self) -> str:
        """Render the cell the way CSV, PDF and search see it."""
        if self.kind is CellKind.EMPTY:
            return ""
        if self.kind is CellKind.NUMBER:
            return format_number(self.value)  # type: ignore[arg-type]
        if self.kind is CellKind.DATE:
            return format_date(self.value)  # type: ignore[arg-type]
        return str(self.value)

    def to_json_value(self) -> str | int | float | None:
        if self.kind is CellKind.EMPTY:
            return None
        if self.kind is CellKind.NUMBER:
            number = float(self.value)  # type: ignore[arg-type]
            if not math.isfinite(number):
                return None
            if number.is_integer() and abs(number) <= _MAX_EXACT_INT:
                return int(number)
            return number
        return self.display()

    def as_number(self) -> float | None:
        """Return the finite number this cell holds or spells, else None."""
        if self.kind is CellKind.NUMBER:
            number = float(self.value)  # type: ignore[arg-type]
            return number if math.isfinite(number) else None
        if self.kind is CellKind.TEXT:
            text = str(self.value).strip()
            if _NUMERIC_TEXT.match(text):
                number = float(text)
                return number if math.isfinite(number) else None
        return None

    def as_date(self) -> date | None:
        """Return the calendar date for date cells and formatted date text."""
        if self.kind is CellKind.DATE:
            return self.value  # type: ignore[return-value]
        if self.kind is CellKind.TEXT:
            return parse_formatted_date(str(self.value))
        return None


_EMPTY = Cell(CellKind.EMPTY, None)


def format_number(value: float) -> str:
    """Format a number without a trailing ``.0`` for integral values."""
    if math.isfinite(value) and value.is_integer() and abs(value) <= _MAX_EXACT_INT:
        return str(int(value))
    return repr(float(value))


def fold_text(text: str) -> str:
    """Case- and accent-insensitive form used for ordering and search."""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


@dataclass(frozen=True)
class Sheet:
    """A header sequence plus a rectangular body of cells.

    Every row has exactly ``len(headers)`` cells. Build sheets through
    ``normalize_rows`` when the input may be ragged; this constructor only
    checks row widths.
    """

    headers: tuple[str, ...]
    rows: tuple[tuple[Cell, ...], ...] = ()

    def __post_init__(self) -> None:
        headers = tuple(str(h) for h in self.headers)
        rows = tuple(tuple(Cell.from_raw(v) for v in row) for row in self.rows)
        width = len(headers)
        for idx, row in enumerate(rows):
            if len(row) != width:
                raise SheetEditError(
                    f"Row {idx} has {len(row)} cells but the sheet has {width} columns",
                    ErrorCode.INVALID_EDIT,
                    {"row_index": idx, "row_length": len(row), "column_count": width},
                )
        object.__setattr__(self, "headers", headers)
        object.__setattr__(self, "rows", rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def column(self, index: int) -> tuple[Cell, ...]:
        """Return the cells of one column, top to bottom."""
        if not 0 <= index < self.column_count:
            raise ColumnIndexError(index, self.column_count)
        return tuple(row[index] for row in self.rows)

    def with_rows(self, rows: Iterable[Sequence[Cell]]) -> Sheet:
        return Sheet(self.headers, tuple(tuple(r) for r in rows))

    def to_dataframe(self) -> pd.DataFrame:
        """Expose the sheet as a DataFrame with object columns.

        Empty cells become ``None``; dates stay ``datetime.date`` values.
        """
        data = [
            [None if cell.is_empty else cell.value for cell in row] for row in self.rows
        ]
        return pd.DataFrame(data, columns=list(self.headers), dtype=object)


@dataclass(frozen=True)
class Workbook:
    """Insertion-ordered named sheets plus the active sheet name.

    Attributes:
        sheets: Read-only mapping of sheet name to Sheet.
        active_sheet_name: Key of ``sheets`` that CSV and JSON exports use.
        name: Original file name, used to derive export file names.
        id: Caller-facing identity token.
        modified: Set once the workbook has been edited or sorted.
    """

    sheets: Mapping[str, Sheet]
    active_sheet_name: str
    name: str = "workbook.xlsx"
    id: str = field(default_factory=lambda: uuid4().hex)
    modified: bool = False

    def __post_init__(self) -> None:
        sheets = dict(self.sheets)
        if not sheets:
            raise SheetEditError("A workbook needs at least one sheet")
        if self.active_sheet_name not in sheets:
            raise SheetNotFoundError(self.active_sheet_name, list(sheets))
        object.__setattr__(self, "sheets", MappingProxyType(sheets))

    @property
    def sheet_names(self) -> list[str]:
        return list(self.sheets)

    @property
    def active_sheet(self) -> Sheet:
        return self.sheets[self.active_sheet_name]

    def sheet(self, name: str) -> Sheet:
        try:
            return self.sheets[name]
        except KeyError:
            raise SheetNotFoundError(name, self.sheet_names) from None

    def with_sheet(self, name: str, sheet: Sheet, *, mark_modified: bool = True) -> Workbook:
        """Return a copy with ``name`` replaced (or appended) by ``sheet``."""
        sheets = dict(self.sheets)
        sheets[name] = sheet
        return replace(
            self,
            sheets=sheets,
            modified=self.modified or mark_modified,
        )

    def with_active_sheet(self, sheet: Sheet) -> Workbook:
        return self.with_sheet(self.active_sheet_name, sheet)

    def select_sheet(self, name: str) -> Workbook:
        """Switch the active sheet. Does not count as a modification."""
        if name not in self.sheets:
            raise SheetNotFoundError(name, self.sheet_names)
        return replace(self, active_sheet_name=name)
