"""Shared fixtures and test doubles for the ingestion tests."""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

import fitz  # PyMuPDF
import pytest

from text2quiz.config import IngestPipelineConfig
from text2quiz.ingest.container import PdfContainer
from text2quiz.ingest.errors import RenderError
from text2quiz.ingest.models import ExtractionMethod, ImageBuffer, PageText
from text2quiz.ingest.ocr import OCRResult, ProgressCallback
from text2quiz.ingest.pipeline import DocumentIngestionPipeline


class _FixedLanguageDetector:
    def detect(self, text: str) -> Optional[str]:
        return "en" if text else None


@pytest.fixture()
def make_pdf() -> Callable[..., bytes]:
    """Build a PDF with one line of embedded text per page (empty string = blank page)."""

    def _make(page_texts: Sequence[str], sizes: Optional[Sequence[Tuple[float, float]]] = None) -> bytes:
        document = fitz.open()
        try:
            for index, text in enumerate(page_texts):
                width, height = sizes[index] if sizes else (595, 842)
                page = document.new_page(width=width, height=height)
                if text:
                    page.insert_text((36, 72), text, fontsize=10, fontname="helv")
            return document.tobytes()
        finally:
            document.close()

    return _make


@dataclass
class RecordingOCREngine:
    """OCR double mapping image bytes to text and recording every call."""

    texts: Dict[bytes, str] = field(default_factory=dict)
    resolver: Optional[Callable[[ImageBuffer], str]] = None
    fail_on: Set[bytes] = field(default_factory=set)
    delay: Callable[[ImageBuffer], float] = lambda image: 0.0
    calls: List[Tuple[bytes, str]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def recognize(
        self,
        image: ImageBuffer,
        language_hint: str,
        progress: Optional[ProgressCallback] = None,
    ) -> OCRResult:
        with self._lock:
            self.calls.append((image.data, language_hint))
        time.sleep(self.delay(image))
        if progress is not None:
            progress(0.0)
        if image.data in self.fail_on:
            raise RuntimeError("simulated OCR failure")
        text = self.resolver(image) if self.resolver else self.texts.get(image.data, "")
        if progress is not None:
            progress(1.0)
        return OCRResult(text=text)


class LabelRenderer:
    """Renderer double producing ``b"page-<n>"`` buffers."""

    def __init__(self, fail_on: Iterable[int] = ()) -> None:
        self.fail_on = set(fail_on)
        self.rendered: List[int] = []
        self.scales: List[float] = []
        self._lock = threading.Lock()

    def render(self, container, page_number: int, scale: float = 2.0) -> ImageBuffer:
        with self._lock:
            self.rendered.append(page_number)
            self.scales.append(scale)
        if page_number in self.fail_on:
            raise RenderError(page_number, "malformed page tree")
        return ImageBuffer(data=f"page-{page_number}".encode())


class TrackingContainer:
    """Container double exposing per-page text-layer strings."""

    def __init__(self, page_texts: Sequence[str], broken_page_tree: bool = False) -> None:
        self.page_texts = list(page_texts)
        self.broken_page_tree = broken_page_tree
        self.lock = threading.Lock()
        self.closed = False
        self.close_calls = 0

    @property
    def page_count(self) -> int:
        if self.broken_page_tree:
            raise ValueError("page tree is missing /Kids")
        return len(self.page_texts)

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class ListTextExtractor:
    """Text-layer double reading :attr:`TrackingContainer.page_texts`."""

    def __init__(self, fail_on: Iterable[int] = ()) -> None:
        self.fail_on = set(fail_on)

    def extract_page(self, container: TrackingContainer, page_number: int) -> PageText:
        if page_number in self.fail_on:
            raise KeyError(f"/Contents missing on page {page_number}")
        return PageText(
            page_number=page_number,
            text=container.page_texts[page_number - 1],
            method=ExtractionMethod.TEXT_LAYER,
        )


class TrackingOpener:
    """Wraps container construction and remembers every container handed out."""

    def __init__(self, factory: Callable[[bytes], object] = PdfContainer.open) -> None:
        self.factory = factory
        self.containers: List[object] = []

    def __call__(self, data: bytes):
        container = self.factory(data)
        self.containers.append(container)
        return container


@pytest.fixture()
def build_pipeline() -> Callable[..., DocumentIngestionPipeline]:
    def _build(config: Optional[IngestPipelineConfig] = None, **collaborators) -> DocumentIngestionPipeline:
        collaborators.setdefault("language_detector", _FixedLanguageDetector())
        collaborators.setdefault("ocr_engine", RecordingOCREngine())
        return DocumentIngestionPipeline(config or IngestPipelineConfig(), **collaborators)

    return _build
