"""Enums and result models shared across the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from excel_file_manager.utils.exceptions import EngineError, UnsupportedFormatError
from excel_file_manager.workbook import Workbook


class ContainerFormat(str, Enum):
    """Spreadsheet container families the parser can decode."""

    OOXML = "ooxml"
    LEGACY = "legacy"


class ExportFormat(str, Enum):
    """Output formats selectable per export call."""

    XLSX = "xlsx"
    CSV = "csv"
    JSON = "json"
    PDF = "pdf"

    @classmethod
    def from_tag(cls, tag: ExportFormat | str) -> ExportFormat:
        """Resolve a caller-supplied tag, accepting ``"native"`` for xlsx.

        Raises:
            UnsupportedFormatError: If the tag names no known format.
        """
        if isinstance(tag, ExportFormat):
            return tag
        normalized = str(tag).strip().lower().lstrip(".")
        if normalized == "native":
            return cls.XLSX
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedFormatError(
                f"Unsupported export format: {tag!r}. "
                f"Supported formats: native, {', '.join(f.value for f in cls)}",
                requested_format=str(tag),
            ) from None

    @property
    def extension(self) -> str:
        return self.value

    @property
    def mime_type(self) -> str:
        return EXPORT_MIME_TYPES[self]

    @property
    def covers_whole_workbook(self) -> bool:
        """True for formats that write every sheet, not just the active one."""
        return self in (ExportFormat.XLSX, ExportFormat.PDF)


EXPORT_MIME_TYPES: dict[ExportFormat, str] = {
    ExportFormat.XLSX: (
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    ),
    ExportFormat.CSV: "text/csv",
    ExportFormat.JSON: "application/json",
    ExportFormat.PDF: "application/pdf",
}


class ExportArtifact(BaseModel):
    """Bytes produced by an export together with download metadata."""

    content: bytes = Field(..., description="Serialized workbook or sheet")
    filename: str = Field(..., description="Suggested download file name")
    mime_type: str = Field(..., description="MIME type of the content")
    export_format: ExportFormat = Field(..., description="Format that was written")

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class ParseOutcome:
    """Result of parsing one uploaded file: a workbook or the error it raised."""

    file_name: str
    workbook: Workbook | None = None
    error: EngineError | None = None

    @property
    def ok(self) -> bool:
        return self.workbook is not None


@dataclass
class ParseBatchResult:
    """Outcomes of a multi-file upload, in submission order."""

    outcomes: list[ParseOutcome] = field(default_factory=list)

    @property
    def workbooks(self) -> list[Workbook]:
        return [o.workbook for o in self.outcomes if o.workbook is not None]

    @property
    def failures(self) -> list[ParseOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def active_index(self) -> int | None:
        """Index of the last successfully parsed file, which becomes active."""
        for idx in range(len(self.outcomes) - 1, -1, -1):
            if self.outcomes[idx].ok:
                return idx
        return None

    @property
    def active_workbook(self) -> Workbook | None:
        idx = self.active_index
        return None if idx is None else self.outcomes[idx].workbook
