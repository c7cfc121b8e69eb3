"""Data models used by the ingestion pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Tuple

from .chunking import DEFAULT_MAX_CHUNK_CHARS, chunk_text


class ExtractionMethod(str, Enum):
    """How the text of a page was obtained."""

    TEXT_LAYER = "text-layer"
    OCR = "ocr"


class Difficulty(str, Enum):
    """Difficulty tag handed to the question generator."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True, slots=True)
class SourceFile:
    """An uploaded file as received from the upload handler."""

    content: bytes
    mime_type: str
    file_name: str

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True, slots=True)
class ImageBuffer:
    """Encoded raster image passed to the OCR engine."""

    data: bytes
    mime_type: str = "image/png"
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True, slots=True)
class PageText:
    """Represents text extracted from a single page of the source document."""

    page_number: int
    text: str
    method: ExtractionMethod
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Validated, normalised text produced by one ingestion call."""

    full_text: str
    page_count: Optional[int]
    word_count: int
    character_count: int
    method: ExtractionMethod
    pages: Tuple[PageText, ...] = field(default_factory=tuple)
    failed_pages: Tuple[int, ...] = field(default_factory=tuple)
    language: Optional[str] = None

    @property
    def ocr_performed(self) -> bool:
        return self.method is ExtractionMethod.OCR

    def chunks(self, max_chunk_chars: Optional[int] = None) -> Iterable[str]:
        """Return the restartable chunk sequence for :attr:`full_text`."""

        if max_chunk_chars is None:
            max_chunk_chars = DEFAULT_MAX_CHUNK_CHARS
        return chunk_text(self.full_text, max_chunk_chars)


@dataclass(frozen=True, slots=True)
class ContentProfile:
    """Lightweight statistics used to pick quiz length and difficulty."""

    word_count: int
    sentence_count: int
    estimated_difficulty: Difficulty
    suggested_question_count: int
    key_concepts_count: int
    reading_level: str
    keywords: Tuple[str, ...] = field(default_factory=tuple)
