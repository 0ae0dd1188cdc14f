"""Native .xlsx output covering every sheet of a workbook."""

import io

from openpyxl import Workbook as OpenpyxlWorkbook
from openpyxl.cell.rich_text import CellRichText

from excel_file_manager.services.date_heuristic import (
    NATIVE_DATE_NUMBER_FORMAT,
    date_to_serial,
)
from excel_file_manager.workbook import Cell, CellKind, Workbook


class NativeGenerator:
    """Write workbooks with openpyxl.

    Date cells, and text cells spelled like ``"Mar 15, 2023"``, are written
    back as numeric serials carrying a date number format. Empty cells are
    left unwritten, while empty text is kept as an inline string so it
    reads back as text.
    """

    def generate(self, workbook: Workbook) -> bytes:
        book = OpenpyxlWorkbook()
        book.remove(book.active)

        for name, sheet in workbook.sheets.items():
            ws = book.create_sheet(title=name)
            for col, header in enumerate(sheet.headers, start=1):
                ws.cell(row=1, column=col, value=header).data_type = "s"
            for row_idx, row in enumerate(sheet.rows, start=2):
                for col, cell in enumerate(row, start=1):
                    self._write_cell(ws, row_idx, col, cell)

        book.active = book.sheetnames.index(workbook.active_sheet_name)
        buffer = io.BytesIO()
        book.save(buffer)
        return buffer.getvalue()

    @staticmethod
    def _write_cell(ws, row: int, column: int, cell: Cell) -> None:
        if cell.is_empty:
            return
        moment = cell.as_date()
        if moment is not None:
            target = ws.cell(row=row, column=column, value=date_to_serial(moment))
            target.number_format = NATIVE_DATE_NUMBER_FORMAT
            return
        if cell.kind is CellKind.NUMBER:
            ws.cell(row=row, column=column, value=cell.value)
            return
        text = cell.display()
        # openpyxl skips "" entirely, a single empty run still writes <is>.
        target = ws.cell(row=row, column=column, value=text or CellRichText(""))
        # Text starting with "=" must stay text, formulas are never evaluated.
        target.data_type = "s"
