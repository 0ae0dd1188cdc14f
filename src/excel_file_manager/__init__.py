"""Excel File Manager - spreadsheet parse, sort, merge and export engine."""

from collections.abc import Sequence

from excel_file_manager.config import Settings, settings, validate_settings_on_startup
from excel_file_manager.models import (
    ContainerFormat,
    ExportArtifact,
    ExportFormat,
    ParseBatchResult,
    ParseOutcome,
)
from excel_file_manager.output.export_service import (
    ExportService,
    export,
    export_artifact,
)
from excel_file_manager.services.excel_parser import ExcelParser
from excel_file_manager.services.merger import merge, merge_workbooks
from excel_file_manager.services.sorter import sort_sheet as sort
from excel_file_manager.services.sorter import sort_workbook
from excel_file_manager.services.table_editor import create_table
from excel_file_manager.utils.logging import DEBUG_LOG_FORMAT, configure_logging
from excel_file_manager.workbook import Cell, CellKind, Sheet, Workbook

__all__ = [
    "Cell",
    "CellKind",
    "ContainerFormat",
    "ExcelParser",
    "ExportArtifact",
    "ExportFormat",
    "ExportService",
    "ParseBatchResult",
    "ParseOutcome",
    "Settings",
    "Sheet",
    "Workbook",
    "create_table",
    "export",
    "export_artifact",
    "init_logging",
    "merge",
    "merge_workbooks",
    "parse",
    "parse_many",
    "sort",
    "sort_workbook",
]
__version__ = "0.1.0"


def init_logging(config: Settings | None = None) -> None:
    """Install the structured log format at the configured level.

    Debug mode adds thread names so parallel parses can be told apart.
    The loaded configuration is logged once handlers are in place.
    """
    config = config or settings
    configure_logging(
        level=config.log_level_int,
        format_string=DEBUG_LOG_FORMAT if config.debug else None,
    )
    validate_settings_on_startup(config)


def parse(data: bytes, file_name: str = "workbook.xlsx") -> Workbook:
    """Parse a spreadsheet buffer with the default settings."""
    return ExcelParser().parse(data, file_name)


def parse_many(files: Sequence[tuple[str, bytes]]) -> ParseBatchResult:
    """Parse several ``(name, bytes)`` uploads, one outcome per file."""
    return ExcelParser().parse_many(files)
