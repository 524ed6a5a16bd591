"""Text extraction from uploaded memorial files."""

from cbpi.extraction.extractor import (
    ExtractionError,
    FileMetadata,
    FileValidation,
    TextExtractor,
)

__all__ = ["ExtractionError", "FileMetadata", "FileValidation", "TextExtractor"]
