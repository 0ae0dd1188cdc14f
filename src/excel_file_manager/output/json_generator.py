"""JSON output for the active sheet.

The sheet becomes an array with one object per row, keyed by header name.
Empty cells are ``null``, integral numbers are JSON integers and dates are
written in their display form.
"""

import json
from typing import Any

from excel_file_manager.workbook import Sheet, Workbook

EMPTY_HEADER_KEY = "__EMPTY"


def unique_keys(headers: tuple[str, ...]) -> list[str]:
    """Make header names usable as object keys.

    Blank headers become ``__EMPTY`` and repeated names get ``_1``, ``_2``
    suffixes in order of appearance.

    Args:
        headers: Sheet headers.

    Returns:
        One distinct key per column.
    """
    keys: list[str] = []
    seen: set[str] = set()
    for header in headers:
        base = header if header else EMPTY_HEADER_KEY
        key = base
        suffix = 0
        while key in seen:
            suffix += 1
            key = f"{base}_{suffix}"
        seen.add(key)
        keys.append(key)
    return keys


class JsonGenerator:
    """Serialize sheets as arrays of row objects."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def to_records(self, sheet: Sheet) -> list[dict[str, Any]]:
        keys = unique_keys(sheet.headers)
        return [
            {key: cell.to_json_value() for key, cell in zip(keys, row, strict=True)}
            for row in sheet.rows
        ]

    def render(self, sheet: Sheet) -> str:
        return json.dumps(self.to_records(sheet), indent=self.indent, ensure_ascii=False)

    def generate(self, workbook: Workbook) -> bytes:
        return self.render(workbook.active_sheet).encode("utf-8")
