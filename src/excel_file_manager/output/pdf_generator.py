"""PDF output: one titled grid table per sheet.

Each sheet starts on a new page with its name as the title, followed by a
table whose head row repeats on continuation pages.
"""

import io
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    Flowable,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from excel_file_manager.config import Settings, settings
from excel_file_manager.workbook import Sheet, Workbook

PAGE_SIZES = {"A4": A4, "letter": letter}
PAGE_MARGIN = 14 * mm
CELL_PADDING = 2


class PdfGenerator:
    """Render workbooks as paginated PDF tables with reportlab."""

    def __init__(self, config: Settings | None = None) -> None:
        self.config = config or settings
        self.page_size = PAGE_SIZES[self.config.pdf_page_size]

        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "SheetTitle",
            parent=styles["Heading1"],
            fontSize=self.config.pdf_title_font_size,
            leading=self.config.pdf_title_font_size + 4,
        )
        self.cell_style = ParagraphStyle(
            "GridCell",
            parent=styles["Normal"],
            fontSize=self.config.pdf_font_size,
            leading=self.config.pdf_font_size + 2,
        )
        self.head_style = ParagraphStyle(
            "GridHead",
            parent=self.cell_style,
            fontName="Helvetica-Bold",
            textColor=colors.white,
        )

    @property
    def frame_width(self) -> float:
        return self.page_size[0] - 2 * PAGE_MARGIN

    def build_story(self, workbook: Workbook) -> list[Flowable]:
        """Lay out every sheet, separated by page breaks."""
        story: list[Flowable] = []
        for index, (name, sheet) in enumerate(workbook.sheets.items()):
            if index > 0:
                story.append(PageBreak())
            story.append(Paragraph(escape(name), self.title_style))
            story.append(Spacer(1, 4 * mm))
            table = self.build_table(sheet)
            if table is not None:
                story.append(table)
        return story

    def build_table(self, sheet: Sheet) -> Table | None:
        """Build the grid for one sheet, or None for a sheet without columns."""
        if sheet.column_count == 0:
            return None

        head = [Paragraph(escape(h), self.head_style) for h in sheet.headers]
        body = [
            [Paragraph(escape(cell.display()), self.cell_style) for cell in row]
            for row in sheet.rows
        ]
        col_width = self.frame_width / sheet.column_count
        table = Table(
            [head, *body],
            colWidths=[col_width] * sheet.column_count,
            repeatRows=1,
        )
        table.setStyle(
            TableStyle(
                [
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                    (
                        "BACKGROUND",
                        (0, 0),
                        (-1, 0),
                        colors.HexColor(self.config.pdf_header_color),
                    ),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("TOPPADDING", (0, 0), (-1, -1), CELL_PADDING),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), CELL_PADDING),
                    ("LEFTPADDING", (0, 0), (-1, -1), CELL_PADDING),
                    ("RIGHTPADDING", (0, 0), (-1, -1), CELL_PADDING),
                ]
            )
        )
        return table

    def generate(self, workbook: Workbook) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self.page_size,
            leftMargin=PAGE_MARGIN,
            rightMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN,
            title=workbook.name,
        )
        doc.build(self.build_story(workbook))
        return buffer.getvalue()
