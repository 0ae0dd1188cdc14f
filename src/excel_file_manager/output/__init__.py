"""Output generation for workbooks.

This module writes workbooks as native .xlsx, CSV, JSON and PDF, and
provides the service that picks the generator for a requested format.
"""

from excel_file_manager.output.csv_generator import CsvGenerator
from excel_file_manager.output.export_service import (
    ExportService,
    export,
    export_artifact,
    export_filename,
)
from excel_file_manager.output.json_generator import JsonGenerator
from excel_file_manager.output.native_generator import NativeGenerator
from excel_file_manager.output.pdf_generator import PdfGenerator

__all__ = [
    "CsvGenerator",
    "ExportService",
    "JsonGenerator",
    "NativeGenerator",
    "PdfGenerator",
    "export",
    "export_artifact",
    "export_filename",
]
