"""Exceptions raised by the ingestion pipeline."""
from __future__ import annotations

from typing import Optional


class IngestionError(RuntimeError):
    """Base class for failures that abort a whole ingestion call.

    ``status_code`` is the client-facing status an HTTP layer should map the
    error to. All of these describe problems with the input, never server
    faults.
    """

    status_code = 400

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.__cause__ = cause


class UnsupportedFormat(IngestionError):
    """The declared MIME type is neither a PDF nor a supported raster image."""

    status_code = 415

    def __init__(self, mime_type: Optional[str], file_name: str) -> None:
        super().__init__(f"Unsupported file type {mime_type or 'unknown'} for {file_name}")
        self.mime_type = mime_type
        self.file_name = file_name


class CorruptInput(IngestionError):
    """The document container could not be parsed at all."""

    status_code = 422


class EmptyExtraction(IngestionError):
    """No usable text was found after every extraction strategy."""

    status_code = 422

    def __init__(self, file_name: str, characters: int, threshold: int) -> None:
        super().__init__(
            f"Could not extract text from {file_name}: {characters} usable characters "
            f"(minimum {threshold}). The document may be empty or the scan quality too low."
        )
        self.file_name = file_name
        self.characters = characters
        self.threshold = threshold


class IngestionCancelled(IngestionError):
    """The caller aborted the ingestion before it finished."""

    status_code = 499


class RenderError(RuntimeError):
    """A single page could not be rasterised."""

    def __init__(self, page_number: int, reason: str) -> None:
        super().__init__(f"Failed to render page {page_number}: {reason}")
        self.page_number = page_number


__all__ = [
    "CorruptInput",
    "EmptyExtraction",
    "IngestionCancelled",
    "IngestionError",
    "RenderError",
    "UnsupportedFormat",
]
