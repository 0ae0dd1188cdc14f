"""Export service dispatching workbooks to the output generators.

The native and PDF formats write every sheet; CSV and JSON write the
active sheet only. Each call is all-or-nothing: a generator failure raises
ExportError and no bytes are returned.
"""

from __future__ import annotations

from excel_file_manager.config import Settings, settings
from excel_file_manager.models import ExportArtifact, ExportFormat
from excel_file_manager.output.csv_generator import CsvGenerator
from excel_file_manager.output.json_generator import JsonGenerator
from excel_file_manager.output.native_generator import NativeGenerator
from excel_file_manager.output.pdf_generator import PdfGenerator
from excel_file_manager.utils.exceptions import EngineError, ExportError
from excel_file_manager.utils.logging import LogContext, get_logger, timed_operation
from excel_file_manager.workbook import Workbook

logger = get_logger(__name__)

MODIFIED_PREFIX = "modified_"


def export_filename(workbook: Workbook, export_format: ExportFormat) -> str:
    """Suggested download name, e.g. ``modified_sales.csv``."""
    name = workbook.name
    stem = name.rsplit(".", 1)[0] if "." in name.lstrip(".") else name
    prefix = MODIFIED_PREFIX if workbook.modified else ""
    return f"{prefix}{stem or 'workbook'}.{export_format.extension}"


class ExportService:
    """Serialize workbooks in any supported export format."""

    def __init__(
        self,
        config: Settings | None = None,
        csv_generator: CsvGenerator | None = None,
        json_generator: JsonGenerator | None = None,
        native_generator: NativeGenerator | None = None,
        pdf_generator: PdfGenerator | None = None,
    ) -> None:
        self.config = config or settings
        self.generators = {
            ExportFormat.XLSX: native_generator or NativeGenerator(),
            ExportFormat.CSV: csv_generator or CsvGenerator(),
            ExportFormat.JSON: json_generator
            or JsonGenerator(indent=self.config.json_indent),
            ExportFormat.PDF: pdf_generator or PdfGenerator(self.config),
        }

    def export(self, workbook: Workbook, fmt: ExportFormat | str) -> bytes:
        """Serialize ``workbook`` in the requested format.

        Args:
            workbook: Workbook to write.
            fmt: An ExportFormat or a tag such as ``"native"`` or ``"csv"``.

        Returns:
            The encoded file content.

        Raises:
            UnsupportedFormatError: If ``fmt`` names no known format.
            ExportError: If the underlying writer fails.
        """
        export_format = ExportFormat.from_tag(fmt)
        with LogContext(workbook_id=workbook.id, operation="export"):
            with timed_operation(logger, f"export_{export_format.value}") as metrics:
                sheets = (
                    list(workbook.sheets.values())
                    if export_format.covers_whole_workbook
                    else [workbook.active_sheet]
                )
                metrics.sheets_processed = len(sheets)
                metrics.rows_processed = sum(s.row_count for s in sheets)
                try:
                    content = self.generators[export_format].generate(workbook)
                except EngineError:
                    raise
                except Exception as exc:
                    error = ExportError(
                        f"Failed to write {export_format.value} output: {exc}",
                        export_format=export_format.value,
                    )
                    metrics.finish()
                    logger.log_operation_result(
                        "export",
                        success=False,
                        duration_seconds=metrics.duration_seconds,
                        error_code=error.error_code.value,
                        export_format=export_format.value,
                        error=str(exc),
                    )
                    raise error from exc
                metrics.bytes_out = len(content)
        return content

    def export_artifact(self, workbook: Workbook, fmt: ExportFormat | str) -> ExportArtifact:
        """Export and attach the download filename and MIME type."""
        export_format = ExportFormat.from_tag(fmt)
        content = self.export(workbook, export_format)
        return ExportArtifact(
            content=content,
            filename=export_filename(workbook, export_format),
            mime_type=export_format.mime_type,
            export_format=export_format,
        )


def export(workbook: Workbook, fmt: ExportFormat | str) -> bytes:
    """Serialize ``workbook`` with the default settings."""
    return ExportService().export(workbook, fmt)


def export_artifact(workbook: Workbook, fmt: ExportFormat | str) -> ExportArtifact:
    return ExportService().export_artifact(workbook, fmt)
