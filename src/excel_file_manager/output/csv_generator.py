"""CSV output for the active sheet."""

import csv
import io

from excel_file_manager.workbook import Sheet, Workbook


class CsvGenerator:
    """Write a sheet as comma-separated text with minimal quoting.

    Fields containing the delimiter, a quote or a line break are quoted.
    Records end with ``\\n`` and no terminator follows the last record.
    """

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8") -> None:
        self.delimiter = delimiter
        self.encoding = encoding

    def render(self, sheet: Sheet) -> str:
        buffer = io.StringIO()
        writer = csv.writer(
            buffer,
            delimiter=self.delimiter,
            quoting=csv.QUOTE_MINIMAL,
            lineterminator="\n",
        )
        writer.writerow(sheet.headers)
        for row in sheet.rows:
            writer.writerow([cell.display() for cell in row])
        text = buffer.getvalue()
        return text[:-1] if text.endswith("\n") else text

    def generate(self, workbook: Workbook) -> bytes:
        return self.render(workbook.active_sheet).encode(self.encoding)
