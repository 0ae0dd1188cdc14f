"""Spreadsheet container detection.

Content is identified with libmagic; the file extension is used only when
libmagic cannot tell, e.g. for a generic ``application/octet-stream``.
"""

from pathlib import Path

import magic

from excel_file_manager.models import ContainerFormat
from excel_file_manager.utils.exceptions import ErrorCode, ParseError
from excel_file_manager.utils.logging import get_logger

logger = get_logger(__name__)

# MIME types libmagic reports for each container, lower-cased.
MIME_TO_CONTAINER: dict[str, ContainerFormat] = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": (
        ContainerFormat.OOXML
    ),
    "application/vnd.ms-excel.sheet.macroenabled.12": ContainerFormat.OOXML,
    "application/zip": ContainerFormat.OOXML,
    "application/x-zip-compressed": ContainerFormat.OOXML,
    "application/vnd.ms-excel": ContainerFormat.LEGACY,
    "application/vnd.ms-office": ContainerFormat.LEGACY,
    "application/x-ole-storage": ContainerFormat.LEGACY,
    "application/cdfv2": ContainerFormat.LEGACY,
    "application/cdfv2-corrupt": ContainerFormat.LEGACY,
}

EXTENSION_TO_CONTAINER: dict[str, ContainerFormat] = {
    ".xlsx": ContainerFormat.OOXML,
    ".xlsm": ContainerFormat.OOXML,
    ".xls": ContainerFormat.LEGACY,
}

# Answers that say nothing about the content.
INCONCLUSIVE_MIME_TYPES = frozenset({"application/octet-stream"})


class FormatDetector:
    """Identify which decoder a byte buffer needs."""

    def __init__(self) -> None:
        self._magic = magic.Magic(mime=True)

    def detect(self, data: bytes, file_name: str | None = None) -> ContainerFormat:
        """Detect the container format of ``data``.

        Priority:
        1. The MIME type libmagic reads from the content.
        2. The extension of ``file_name`` when libmagic fails or only
           reports a generic binary type.

        Args:
            data: Raw file content.
            file_name: Original name, used for the extension fallback and
                error details.

        Returns:
            The detected container format.

        Raises:
            ParseError: If the buffer is empty or is not a spreadsheet.
        """
        if not data:
            raise ParseError(
                "File is empty",
                ErrorCode.PARSE_FAILED,
                file_name=file_name,
            )

        detected_mime = self._detect_mime(data)
        container = MIME_TO_CONTAINER.get(detected_mime or "")
        extension = Path(file_name).suffix.lower() if file_name else ""

        if container is not None:
            from_extension = EXTENSION_TO_CONTAINER.get(extension)
            if from_extension is not None and from_extension is not container:
                logger.warning(
                    "File extension does not match detected content",
                    extension=extension,
                    detected_mime=detected_mime,
                )
            logger.debug(
                "Detected container",
                container=container.value,
                detected_mime=detected_mime,
                file_name=file_name,
            )
            return container

        if detected_mime is None or detected_mime in INCONCLUSIVE_MIME_TYPES:
            container = EXTENSION_TO_CONTAINER.get(extension)
            if container is not None:
                logger.debug(
                    "Detected container from extension",
                    container=container.value,
                    file_name=file_name,
                )
                return container

        raise ParseError(
            "File is not a recognized spreadsheet (expected .xlsx or .xls content)",
            ErrorCode.UNSUPPORTED_FORMAT,
            file_name=file_name,
            details={"detected_mime": detected_mime},
        )

    def _detect_mime(self, data: bytes) -> str | None:
        """Ask libmagic for the MIME type, or None when it fails."""
        try:
            return self._magic.from_buffer(data).lower()
        except Exception as e:
            logger.warning(
                "Magic detection failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
