"""Document ingestion: text-layer extraction, OCR fallback, normalisation and chunking."""
from __future__ import annotations

from .chunking import DEFAULT_MAX_CHUNK_CHARS, TextChunks, chunk_text
from .container import ParsedContainer, PdfContainer
from .errors import (
    CorruptInput,
    EmptyExtraction,
    IngestionCancelled,
    IngestionError,
    RenderError,
    UnsupportedFormat,
)
from .extractors import TextLayerExtractor
from .format_detection import DocumentFormatDetector, DocumentKind
from .models import (
    ContentProfile,
    Difficulty,
    ExtractionMethod,
    ExtractionResult,
    ImageBuffer,
    PageText,
    SourceFile,
)
from .normalization import normalize_text
from .ocr import OCREngine, OCRResult, TesseractOCREngine
from .pipeline import DocumentIngestionPipeline
from .profiling import ContentProfiler, ProfilerConfig
from .rendering import PageRenderer
from .scan_detection import ScanDetectionPolicy

__all__ = [
    "DEFAULT_MAX_CHUNK_CHARS",
    "ContentProfile",
    "ContentProfiler",
    "CorruptInput",
    "Difficulty",
    "DocumentFormatDetector",
    "DocumentIngestionPipeline",
    "DocumentKind",
    "EmptyExtraction",
    "ExtractionMethod",
    "ExtractionResult",
    "ImageBuffer",
    "IngestionCancelled",
    "IngestionError",
    "OCREngine",
    "OCRResult",
    "PageRenderer",
    "PageText",
    "ParsedContainer",
    "PdfContainer",
    "ProfilerConfig",
    "RenderError",
    "ScanDetectionPolicy",
    "SourceFile",
    "TesseractOCREngine",
    "TextChunks",
    "TextLayerExtractor",
    "UnsupportedFormat",
    "chunk_text",
    "normalize_text",
]
