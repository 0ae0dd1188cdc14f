"""Tests for the JSON output generator."""

import json

from excel_file_manager.output.json_generator import JsonGenerator, unique_keys
from excel_file_manager.workbook import Cell, Sheet, Workbook


class TestUniqueKeys:
    def test_plain_headers_unchanged(self) -> None:
        assert unique_keys(("A", "B")) == ["A", "B"]

    def test_duplicates_get_suffixes(self) -> None:
        assert unique_keys(("A", "A", "B", "A")) == ["A", "A_1", "B", "A_2"]

    def test_blank_headers(self) -> None:
        assert unique_keys(("", "X", "")) == ["__EMPTY", "X", "__EMPTY_1"]


class TestJsonGenerator:
    def test_records(self, scores_sheet: Sheet) -> None:
        records = JsonGenerator().to_records(scores_sheet)
        assert records == [{"Name": "Bob", "Score": 7}, {"Name": "Amy", "Score": 9}]
        assert isinstance(records[0]["Score"], int)

    def test_cell_kinds(self) -> None:
        sheet = Sheet(
            ("When", "Empty", "Blank", "Ratio"),
            ((Cell.from_text("Mar 15, 2023"), None, "", 0.25),),
        )
        assert JsonGenerator().to_records(sheet) == [
            {"When": "Mar 15, 2023", "Empty": None, "Blank": "", "Ratio": 0.25}
        ]

    def test_indent_and_unicode(self, mixed_workbook: Workbook) -> None:
        text = JsonGenerator(indent=4).generate(mixed_workbook).decode("utf-8")
        assert "Zoë" in text
        assert '\n    {' in text
        assert json.loads(text)[0]["Name"] == "Zoë"

    def test_generate_uses_active_sheet(self, mixed_workbook: Workbook) -> None:
        data = JsonGenerator().generate(mixed_workbook.select_sheet("Totals"))
        assert json.loads(data) == [{"Metric": "rows", "Value": 2}]

    def test_header_only_sheet(self) -> None:
        assert JsonGenerator().render(Sheet(("A",))) == "[]"
