"""Native spreadsheet parser producing normalized workbooks.

OOXML workbooks are decoded with openpyxl and legacy workbooks with xlrd.
Both decoders feed the same normalizer, so every sheet that leaves this
module is rectangular and has its dates in display form.
"""

from __future__ import annotations

import datetime as dt
import io
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any
from uuid import uuid4

import xlrd
from openpyxl import load_workbook
from openpyxl.utils.datetime import to_excel

from excel_file_manager.config import Settings, settings
from excel_file_manager.models import ContainerFormat, ParseBatchResult, ParseOutcome
from excel_file_manager.services.date_heuristic import serial_to_date
from excel_file_manager.services.format_detector import FormatDetector
from excel_file_manager.services.normalizer import normalize_rows
from excel_file_manager.utils.exceptions import (
    EngineError,
    ErrorCode,
    FileTooLargeError,
    ParseError,
)
from excel_file_manager.utils.logging import (
    LogContext,
    ProgressTracker,
    get_logger,
    timed_operation,
)
from excel_file_manager.workbook import Sheet, Workbook

logger = get_logger(__name__)

RawRow = list[Any]

# Days between the 1900 and 1904 date systems.
DATE_1904_OFFSET = 1462


class ExcelParser:
    """Decode spreadsheet byte buffers into Workbooks."""

    def __init__(
        self,
        config: Settings | None = None,
        detector: FormatDetector | None = None,
    ) -> None:
        self.config = config or settings
        self.detector = detector or FormatDetector()

    def parse(
        self,
        data: bytes,
        file_name: str = "workbook.xlsx",
        workbook_id: str | None = None,
    ) -> Workbook:
        """Parse one spreadsheet buffer.

        Args:
            data: Raw file content.
            file_name: Original file name, kept on the workbook.
            workbook_id: Identity to assign; a fresh token when omitted.

        Returns:
            Workbook with one sheet per worksheet, the first one active.

        Raises:
            FileTooLargeError: If ``data`` exceeds the configured size limit.
            ParseError: If the buffer cannot be decoded, a worksheet is empty,
                or no worksheet is found.
        """
        workbook_id = workbook_id or uuid4().hex
        with LogContext(workbook_id=workbook_id, operation="parse"):
            with timed_operation(logger, "parse") as metrics:
                metrics.bytes_in = len(data)
                workbook = self._parse(data, file_name, workbook_id)
                metrics.sheets_processed = len(workbook.sheets)
                metrics.rows_processed = sum(
                    s.row_count for s in workbook.sheets.values()
                )
        return workbook

    def parse_many(self, files: Sequence[tuple[str, bytes]]) -> ParseBatchResult:
        """Parse several uploads, reporting one outcome per file in order.

        A failure is terminal for its own file only. With
        ``parse_max_workers > 1`` files are decoded on a thread pool and the
        outcomes are put back in submission order.
        """
        tracker = ProgressTracker(logger, "Parsing uploads", total=len(files))

        def run(item: tuple[str, bytes]) -> ParseOutcome:
            name, data = item
            started = time.perf_counter()
            try:
                outcome = ParseOutcome(file_name=name, workbook=self.parse(data, name))
            except EngineError as exc:
                outcome = ParseOutcome(file_name=name, error=exc)
            logger.log_operation_result(
                "parse",
                success=outcome.ok,
                duration_seconds=time.perf_counter() - started,
                error_code=outcome.error.error_code.value if outcome.error else None,
                file_name=name,
            )
            tracker.update(details=name, failed=not outcome.ok)
            return outcome

        workers = self.config.parse_max_workers
        if workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                outcomes = list(pool.map(run, files))
        else:
            outcomes = [run(item) for item in files]

        tracker.complete()
        return ParseBatchResult(outcomes=outcomes)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _parse(self, data: bytes, file_name: str, workbook_id: str) -> Workbook:
        max_size = self.config.max_file_size_bytes
        if len(data) > max_size:
            raise FileTooLargeError(len(data), max_size, file_name=file_name)

        container = self.detector.detect(data, file_name)
        try:
            if container is ContainerFormat.OOXML:
                raw_sheets = self._read_ooxml(data)
            else:
                raw_sheets = self._read_legacy(data)
        except EngineError:
            raise
        except Exception as exc:
            raise ParseError(
                f"Failed to read file: {exc}",
                ErrorCode.PARSE_FAILED,
                file_name=file_name,
                details={"container": container.value},
            ) from exc

        sheets: dict[str, Sheet] = {}
        for sheet_name, rows in raw_sheets:
            if not any(value is not None for row in rows for value in row):
                raise ParseError(
                    f"Sheet '{sheet_name}' is empty",
                    ErrorCode.EMPTY_WORKSHEET,
                    file_name=file_name,
                    sheet_name=sheet_name,
                )
            sheets[sheet_name] = normalize_rows(rows)

        if not sheets:
            raise ParseError(
                "No valid worksheets found",
                ErrorCode.NO_WORKSHEETS,
                file_name=file_name,
            )

        logger.info(
            "Parsed workbook",
            file_name=file_name,
            container=container.value,
            sheets=len(sheets),
        )
        return Workbook(
            sheets=sheets,
            active_sheet_name=next(iter(sheets)),
            name=file_name,
            id=workbook_id,
        )

    @classmethod
    def _read_ooxml(cls, data: bytes) -> list[tuple[str, list[RawRow]]]:
        """Read every worksheet of an .xlsx buffer as raw rows.

        ``data_only`` yields cached formula results; blank rows are kept. A
        sheet without cells still comes back as a single row of ``None``.
        """
        workbook = load_workbook(filename=io.BytesIO(data), data_only=True)
        try:
            return [
                (
                    ws.title,
                    [
                        [cls._ooxml_value(value) for value in row]
                        for row in ws.iter_rows(values_only=True)
                    ],
                )
                for ws in workbook.worksheets
            ]
        finally:
            workbook.close()

    @staticmethod
    def _ooxml_value(value: Any) -> Any:
        """Turn date-formatted cells back into dates from their stored serial.

        openpyxl shifts serials below 61 for the 1900 leap-year bug and
        returns a bare time for serials below 1. Recovering the serial keeps
        every date on the same 1899-12-30 epoch the native writer uses.
        """
        if isinstance(value, (dt.datetime, dt.date, dt.time)):
            serial = to_excel(value)
            if serial >= 0:
                return serial_to_date(serial)
        return value

    @classmethod
    def _read_legacy(cls, data: bytes) -> list[tuple[str, list[RawRow]]]:
        """Read every worksheet of an .xls buffer as raw rows."""
        book = xlrd.open_workbook(file_contents=data)
        try:
            return [
                (
                    sheet.name,
                    [
                        [cls._legacy_value(cell, book.datemode) for cell in sheet.row(r)]
                        for r in range(sheet.nrows)
                    ],
                )
                for sheet in book.sheets()
            ]
        finally:
            book.release_resources()

    @staticmethod
    def _legacy_value(cell: Any, datemode: int) -> Any:
        """Map an xlrd cell to the raw value types openpyxl would produce."""
        ctype = cell.ctype
        if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
            return None
        if ctype == xlrd.XL_CELL_DATE:
            return serial_to_date(cell.value + (DATE_1904_OFFSET if datemode else 0))
        if ctype == xlrd.XL_CELL_BOOLEAN:
            return bool(cell.value)
        if ctype == xlrd.XL_CELL_ERROR:
            return xlrd.error_text_from_code.get(cell.value, "#ERR")
        return cell.value
