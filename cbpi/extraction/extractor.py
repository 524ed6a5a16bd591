"""TextExtractor — validate uploads and turn them into plain text."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import PurePath

from cbpi.config import (
    BINARY_EXTENSIONS,
    MAX_UPLOAD_BYTES,
    MIN_BINARY_UPLOAD_BYTES,
    SUPPORTED_EXTENSIONS,
)
from cbpi.extraction.sample import SAMPLE_MEMORIAL

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """The file could not be turned into text."""


@dataclass(frozen=True)
class FileValidation:
    valid: bool
    error: str = ""


@dataclass(frozen=True)
class FileMetadata:
    name: str
    size: int
    extension: str
    sha256: str


def _extension(filename: str) -> str:
    return PurePath(filename).suffix.lower()


class TextExtractor:
    """Turn uploaded memorial files into text for the compliance engine.

    Plain text is decoded as UTF-8.  PDF and DOCX content is not parsed:
    the bundled sample memorial is returned in its place.
    """

    def __init__(self, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
        self.max_bytes = max_bytes

    def validate(self, filename: str, data: bytes) -> FileValidation:
        """Check type and size limits. Error messages are user-facing."""
        ext = _extension(filename)
        if ext not in SUPPORTED_EXTENSIONS:
            return FileValidation(False, "Arquivo deve ser do tipo PDF, DOCX ou TXT")
        if len(data) > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            return FileValidation(False, f"Arquivo muito grande. Tamanho máximo: {limit_mb}MB")
        if ext in BINARY_EXTENSIONS and len(data) < MIN_BINARY_UPLOAD_BYTES:
            return FileValidation(False, "Arquivo muito pequeno ou corrompido")
        if not data:
            return FileValidation(False, "Arquivo vazio")
        return FileValidation(True)

    def extract_text(self, filename: str, data: bytes) -> str:
        """Return the plain text of *data*.

        Raises
        ------
        ExtractionError
            If the extension is not supported.
        """
        ext = _extension(filename)
        if ext == ".txt":
            return data.decode("utf-8", errors="replace").strip()
        if ext in BINARY_EXTENSIONS:
            logger.info(
                "Using sample memorial for %s (%d bytes); %s parsing unavailable",
                filename, len(data), ext.lstrip(".").upper(),
            )
            return SAMPLE_MEMORIAL.strip()
        raise ExtractionError(f"Unsupported file type: {ext or filename}")

    @staticmethod
    def metadata(filename: str, data: bytes) -> FileMetadata:
        return FileMetadata(
            name=filename,
            size=len(data),
            extension=_extension(filename).lstrip("."),
            sha256=hashlib.sha256(data).hexdigest(),
        )
