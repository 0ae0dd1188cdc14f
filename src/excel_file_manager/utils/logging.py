"""Structured logging utilities for the Excel file manager engine.

This module provides:
- Workbook ID tracking using contextvars for correlation across operations
- Structured logging with consistent format and metadata
- Performance metrics logging helpers
- Progress tracking for multi-file uploads

Usage:
    from excel_file_manager.utils.logging import (
        get_logger,
        set_workbook_id,
        LogContext,
    )

    logger = get_logger(__name__)

    with LogContext(workbook_id="wb-456", operation="export"):
        logger.info("Writing workbook", format="csv")

    with timed_operation(logger, "parse") as metrics:
        metrics.sheets_processed = 3
"""

import logging
import threading
import time
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Thread names tell parallel parse workers apart.
DEBUG_LOG_FORMAT = (
    "%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s"
)

# Context variables for workbook tracking
_workbook_id_var: ContextVar[str | None] = ContextVar("workbook_id", default=None)
_extra_context_var: ContextVar[dict[str, Any] | None] = ContextVar(
    "extra_context", default=None
)


def get_workbook_id() -> str | None:
    """Get the current workbook ID from context.

    Returns:
        The current workbook ID or None if not set.
    """
    return _workbook_id_var.get()


def set_workbook_id(workbook_id: str | None) -> None:
    """Set the workbook ID in context.

    Args:
        workbook_id: The workbook ID to set, or None to clear.
    """
    _workbook_id_var.set(workbook_id)


def get_extra_context() -> dict[str, Any]:
    """Get additional context from context vars."""
    ctx = _extra_context_var.get()
    return ctx if ctx is not None else {}


def set_extra_context(context: dict[str, Any]) -> None:
    """Set additional context in context vars."""
    _extra_context_var.set(context)


@dataclass
class PerformanceMetrics:
    """Container for performance metrics of a single engine operation.

    Attributes:
        operation: Name of the operation being measured.
        start_time: When the operation started.
        end_time: When the operation ended.
        duration_seconds: Duration in seconds.
        sheets_processed: Number of worksheets touched.
        rows_processed: Number of data rows touched.
        bytes_in: Size of the input buffer, if any.
        bytes_out: Size of the produced buffer, if any.
    """

    operation: str
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    duration_seconds: float = 0.0
    sheets_processed: int = 0
    rows_processed: int = 0
    bytes_in: int = 0
    bytes_out: int = 0

    def finish(self) -> None:
        """Mark the operation as complete and calculate duration."""
        self.end_time = datetime.now(UTC)
        self.duration_seconds = (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging, omitting zero counters."""
        result: dict[str, Any] = {
            "operation": self.operation,
            "duration_seconds": self.duration_seconds,
        }
        if self.sheets_processed > 0:
            result["sheets_processed"] = self.sheets_processed
        if self.rows_processed > 0:
            result["rows_processed"] = self.rows_processed
        if self.bytes_in > 0:
            result["bytes_in"] = self.bytes_in
        if self.bytes_out > 0:
            result["bytes_out"] = self.bytes_out
        return result


class StructuredLogFormatter(logging.Formatter):
    """Log formatter that prefixes records with the current context.

    Adds workbook_id and any LogContext values as a ``[key=value ...]``
    prefix when they are set.
    """

    def format(self, record: logging.LogRecord) -> str:
        prefix_parts = []
        workbook_id = get_workbook_id()
        if workbook_id:
            prefix_parts.append(f"workbook_id={workbook_id}")

        for key, value in get_extra_context().items():
            prefix_parts.append(f"{key}={value}")

        prefix = f"[{' '.join(prefix_parts)}] " if prefix_parts else ""

        original_msg = record.msg
        record.msg = f"{prefix}{original_msg}"
        result = super().format(record)
        record.msg = original_msg

        return result


class StructuredLogger:
    """Logger wrapper that renders keyword arguments as ``key=value`` pairs."""

    def __init__(self, name: str) -> None:
        """Initialize the structured logger.

        Args:
            name: Logger name (typically __name__ of the module).
        """
        self._logger = logging.getLogger(name)
        self._name = name

    @property
    def logger(self) -> logging.Logger:
        """Access the underlying Python logger."""
        return self._logger

    def _build_message(self, message: str, **kwargs: Any) -> str:
        if not kwargs:
            return message

        parts = [f"{k}={v}" for k, v in kwargs.items()]
        return f"{message} | {', '.join(parts)}"

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._build_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._build_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._build_message(message, **kwargs))

    def log_performance(self, metrics: PerformanceMetrics) -> None:
        """Log performance metrics.

        Args:
            metrics: Performance metrics to log.
        """
        self.info(
            f"Performance: {metrics.operation}",
            **metrics.to_dict(),
        )

    def log_progress(
        self,
        stage: str,
        current: int,
        total: int,
        details: str | None = None,
    ) -> None:
        """Log progress for multi-step operations.

        Args:
            stage: Current processing stage.
            current: Current progress count.
            total: Total items to process.
            details: Optional additional details.
        """
        percentage = (current / total * 100) if total > 0 else 0
        kwargs: dict[str, Any] = {
            "current": current,
            "total": total,
            "percentage": f"{percentage:.1f}%",
        }
        if details:
            kwargs["details"] = details
        self.info(f"Progress: {stage}", **kwargs)

    def log_operation_result(
        self,
        operation: str,
        success: bool,
        duration_seconds: float,
        error_code: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Log completion of a parse, merge or export.

        Failures are logged at ERROR level with their error code.
        """
        fields: dict[str, Any] = {
            "operation": operation,
            "success": success,
            "duration_seconds": f"{duration_seconds:.3f}",
        }
        if error_code:
            fields["error_code"] = error_code
        fields.update(kwargs)

        level = logging.INFO if success else logging.ERROR
        self._logger.log(level, self._build_message("Operation completed", **fields))


class LogContext:
    """Context manager for adding temporary context to logs.

    Usage:
        with LogContext(workbook_id="123", operation="sort"):
            logger.info("Sorting...")  # Will include workbook_id and operation
    """

    def __init__(self, **kwargs: Any) -> None:
        self._new_context = kwargs
        self._old_context: dict[str, Any] = {}
        self._old_workbook_id: str | None = None

    def __enter__(self) -> "LogContext":
        """Enter the context, saving old values and setting new ones."""
        self._old_context = get_extra_context().copy()
        self._old_workbook_id = get_workbook_id()

        new_context = dict(self._new_context)
        workbook_id = new_context.pop("workbook_id", None)
        if workbook_id is not None:
            set_workbook_id(workbook_id)

        merged = self._old_context.copy()
        merged.update(new_context)
        set_extra_context(merged)

        return self

    def __exit__(self, *args: Any) -> None:
        """Exit the context, restoring old values."""
        set_extra_context(self._old_context)
        set_workbook_id(self._old_workbook_id)


@contextmanager
def timed_operation(
    logger: StructuredLogger,
    operation: str,
) -> Generator[PerformanceMetrics, None, None]:
    """Context manager for timing operations.

    Usage:
        with timed_operation(logger, "export") as metrics:
            metrics.bytes_out = len(data)

        # Automatically logs: "Performance: export | duration_seconds=..."

    Args:
        logger: Logger to use for output.
        operation: Name of the operation.

    Yields:
        PerformanceMetrics instance for tracking.
    """
    metrics = PerformanceMetrics(operation=operation)
    try:
        yield metrics
    finally:
        metrics.finish()
        logger.log_performance(metrics)


def configure_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
) -> None:
    """Install a single stream handler with the structured formatter.

    Args:
        level: Log level (int or string like "INFO").
        format_string: Custom format string (uses DEFAULT_LOG_FORMAT if None).
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    if format_string is None:
        format_string = DEFAULT_LOG_FORMAT

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)

    handler.setFormatter(StructuredLogFormatter(format_string))
    root_logger.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for a module.

    Example:
        logger = get_logger(__name__)
        logger.info("Parsed workbook", sheets=2, rows=120)
    """
    return StructuredLogger(name)


class ProgressTracker:
    """Count processed items of a batch and log progress as they finish.

    Failed items are counted separately so the completion line reports how
    many inputs were rejected.

    Usage:
        tracker = ProgressTracker(logger, "Parsing uploads", total=3)
        for name, data in files:
            try:
                parse(data, name)
                tracker.update(details=name)
            except ParseError:
                tracker.update(details=name, failed=True)
        tracker.complete()
    """

    def __init__(
        self,
        logger: StructuredLogger,
        stage: str,
        total: int,
    ) -> None:
        self._logger = logger
        self._stage = stage
        self._total = total
        self._current = 0
        self._failed = 0
        self._start_time = time.time()
        self._lock = threading.Lock()

    @property
    def current(self) -> int:
        return self._current

    @property
    def failed(self) -> int:
        return self._failed

    def update(
        self,
        increment: int = 1,
        details: str | None = None,
        failed: bool = False,
    ) -> None:
        """Record finished items. Safe to call from worker threads.

        Args:
            increment: Number of items completed.
            details: Optional details about current item.
            failed: Whether the items were rejected.
        """
        with self._lock:
            self._current += increment
            if failed:
                self._failed += increment
            current = self._current
        self._logger.log_progress(self._stage, current, self._total, details)

    def complete(self) -> float:
        """Log the completion line and return the elapsed seconds."""
        duration = time.time() - self._start_time
        self._logger.info(
            f"Completed: {self._stage}",
            total_items=self._total,
            failed_items=self._failed,
            duration_seconds=f"{duration:.2f}",
        )
        return duration
