from __future__ import annotations

import io
from collections.abc import Callable, Sequence
from typing import Any

import pytest
from openpyxl import Workbook as OpenpyxlWorkbook

from excel_file_manager.config import Settings
from excel_file_manager.workbook import Cell, Sheet, Workbook

XlsxFactory = Callable[..., bytes]


def build_xlsx(
    sheets: dict[str, Sequence[Sequence[Any]]],
    number_formats: dict[tuple[str, str], str] | None = None,
) -> bytes:
    """Write rows into an in-memory .xlsx file.

    ``number_formats`` maps ``(sheet_name, coordinate)`` to a format string,
    e.g. ``{("Sheet1", "B2"): "mmm d, yyyy"}``.
    """
    book = OpenpyxlWorkbook()
    book.remove(book.active)
    for name, rows in sheets.items():
        ws = book.create_sheet(title=name)
        for row in rows:
            ws.append(list(row))
    for (sheet_name, coordinate), fmt in (number_formats or {}).items():
        book[sheet_name][coordinate].number_format = fmt
    buffer = io.BytesIO()
    book.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def xlsx_factory() -> XlsxFactory:
    """Factory building .xlsx bytes from ``{sheet_name: rows}``."""
    return build_xlsx


@pytest.fixture
def scores_xlsx() -> bytes:
    """One sheet with the Name/Score table used across scenarios."""
    return build_xlsx({"Sheet1": [["Name", "Score"], ["Bob", 7], ["Amy", 9]]})


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def scores_sheet() -> Sheet:
    return Sheet(("Name", "Score"), (("Bob", 7), ("Amy", 9)))


@pytest.fixture
def mixed_workbook() -> Workbook:
    """Two sheets covering every cell kind."""
    people = Sheet(
        ("Name", "Joined", "Score", "Note"),
        (
            (Cell.from_text("Zoë"), Cell.from_text("Mar 15, 2023"), 7, None),
            (Cell.from_text("adam"), Cell.from_text("Jan 2, 2020"), 12.5, ""),
        ),
    )
    totals = Sheet(("Metric", "Value"), (("rows", 2),))
    return Workbook(
        sheets={"People": people, "Totals": totals},
        active_sheet_name="People",
        name="people.xlsx",
        id="wb-test",
    )
