"""High level ingestion pipeline entry point."""
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

from ..config import IngestPipelineConfig
from .chunking import TextChunks, chunk_text
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
from .language import LanguageDetector
from .models import ExtractionMethod, ExtractionResult, ImageBuffer, PageText, SourceFile
from .normalization import count_usable_characters, normalize_text
from .ocr import OCREngine, ProgressCallback, TesseractOCREngine
from .rendering import PageRenderer
from .scan_detection import ScanDetectionPolicy

LOGGER = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"

ContainerOpener = Callable[[bytes], ParsedContainer]
_Extraction = Tuple[List[PageText], Optional[int], ExtractionMethod]


def _is_cancelled(cancel_event: Optional[threading.Event]) -> bool:
    return cancel_event is not None and cancel_event.is_set()


def _progress_logger(page_number: int) -> ProgressCallback:
    def _report(fraction: float) -> None:
        LOGGER.debug("OCR page %s: %d%%", page_number, round(fraction * 100))

    return _report


class DocumentIngestionPipeline:
    """Turn an uploaded PDF or image into validated, normalised text.

    PDFs are read through their text layer first. When that yields too little
    text the document is treated as a scan and every page is rendered and run
    through OCR on a bounded worker pool. Images go straight to OCR.

    A pipeline holds configuration and collaborators only; every
    :meth:`ingest` call owns its parsed container, so one instance can serve
    concurrent calls.
    """

    def __init__(
        self,
        config: Optional[IngestPipelineConfig] = None,
        *,
        text_extractor: Optional[TextLayerExtractor] = None,
        renderer: Optional[PageRenderer] = None,
        ocr_engine: Optional[OCREngine] = None,
        scan_policy: Optional[ScanDetectionPolicy] = None,
        container_opener: Optional[ContainerOpener] = None,
        language_detector: Optional[LanguageDetector] = None,
    ) -> None:
        self.config = config or IngestPipelineConfig()
        self.text_extractor = text_extractor or TextLayerExtractor()
        self.renderer = renderer or PageRenderer()
        self.ocr_engine = ocr_engine or TesseractOCREngine(tessdata_dir=self.config.tessdata_dir)
        self.scan_policy = scan_policy or ScanDetectionPolicy(min_chars=self.config.scan_min_chars)
        self._open_container = container_opener or PdfContainer.open
        self.language_detector = language_detector or LanguageDetector()

    def ingest(
        self,
        source: SourceFile,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> ExtractionResult:
        """Extract the text of *source*.

        Raises :class:`UnsupportedFormat`, :class:`CorruptInput`,
        :class:`EmptyExtraction` or, when *cancel_event* is set while the call
        runs, :class:`IngestionCancelled`.
        """

        started = time.perf_counter()
        kind = DocumentFormatDetector.detect(source.file_name, source.mime_type)
        LOGGER.info(
            "Processing file %s (%s, %s bytes)", source.file_name, kind.value, source.size_bytes
        )
        self._raise_if_cancelled(cancel_event, source.file_name)
        if not source.content:
            raise CorruptInput(f"{source.file_name} is empty")

        if kind is DocumentKind.CONTAINER:
            pages, page_count, method = self._extract_container(source, cancel_event)
        elif kind is DocumentKind.RASTER_IMAGE:
            pages, page_count, method = self._extract_image(source), None, ExtractionMethod.OCR
        else:  # pragma: no cover - closed enum
            raise UnsupportedFormat(source.mime_type, source.file_name)

        result = self._build_result(source, pages, page_count, method)
        LOGGER.info(
            "Extracted %s characters from %s (pages=%s, method=%s, failed_pages=%s) in %.3fs",
            result.character_count,
            source.file_name,
            result.page_count,
            result.method.value,
            len(result.failed_pages),
            time.perf_counter() - started,
        )
        return result

    def chunk(self, result: ExtractionResult) -> TextChunks:
        return chunk_text(result.full_text, self.config.max_chunk_chars)

    # Container path ---------------------------------------------------------------
    def _extract_container(
        self, source: SourceFile, cancel_event: Optional[threading.Event]
    ) -> _Extraction:
        try:
            container = self._open_container(source.content)
        except IngestionError:
            raise
        except Exception as error:
            raise CorruptInput(f"Unable to parse {source.file_name}: {error}", cause=error) from error

        try:
            try:
                page_count = container.page_count
            except Exception as error:
                raise CorruptInput(
                    f"Unable to read the page tree of {source.file_name}: {error}", cause=error
                ) from error

            pages = self._extract_text_layer(container, page_count, cancel_event)
            candidate = PAGE_SEPARATOR.join(page.text for page in pages)
            if not self.scan_policy.is_scanned(candidate):
                return pages, page_count, ExtractionMethod.TEXT_LAYER

            LOGGER.info(
                "%s appears to be scanned (%s text-layer characters); using OCR fallback on %s pages",
                source.file_name,
                len(candidate.strip()),
                page_count,
            )
            return self._ocr_pages(container, page_count, cancel_event), page_count, ExtractionMethod.OCR
        finally:
            container.close()

    def _extract_text_layer(
        self,
        container: ParsedContainer,
        page_count: int,
        cancel_event: Optional[threading.Event],
    ) -> List[PageText]:
        pages: List[PageText] = []
        for page_number in range(1, page_count + 1):
            self._raise_if_cancelled(cancel_event)
            try:
                pages.append(self.text_extractor.extract_page(container, page_number))
            except Exception as error:
                LOGGER.warning("Failed to extract text from PDF page %s: %s", page_number, error)
                pages.append(
                    PageText(
                        page_number=page_number,
                        text="",
                        method=ExtractionMethod.TEXT_LAYER,
                        error=str(error),
                    )
                )
        return pages

    def _ocr_pages(
        self,
        container: ParsedContainer,
        page_count: int,
        cancel_event: Optional[threading.Event],
    ) -> List[PageText]:
        if page_count == 0:
            return []
        workers = min(self.config.max_ocr_workers, page_count)
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="text2quiz-ocr")
        # Futures are kept in page order; results are read back in that order.
        futures: List[Future[PageText]] = []
        try:
            for page_number in range(1, page_count + 1):
                self._raise_if_cancelled(cancel_event)
                futures.append(
                    executor.submit(self._ocr_page, container, page_number, cancel_event)
                )
            return [future.result() for future in futures]
        finally:
            # Running OCR calls drain; queued pages are dropped.
            executor.shutdown(wait=True, cancel_futures=True)

    def _ocr_page(
        self,
        container: ParsedContainer,
        page_number: int,
        cancel_event: Optional[threading.Event],
    ) -> PageText:
        self._raise_if_cancelled(cancel_event)
        try:
            image = self.renderer.render(container, page_number, self.config.render_scale)
        except Exception as error:
            failure = error if isinstance(error, RenderError) else RenderError(page_number, str(error))
            LOGGER.warning("Skipping page %s: %s", page_number, failure)
            return PageText(page_number=page_number, text="", method=ExtractionMethod.OCR, error=str(failure))
        return self._recognize(image, page_number)

    # Image path -------------------------------------------------------------------
    def _extract_image(self, source: SourceFile) -> List[PageText]:
        image = ImageBuffer(data=source.content, mime_type=source.mime_type)
        return [self._recognize(image, 1)]

    def _recognize(self, image: ImageBuffer, page_number: int) -> PageText:
        LOGGER.debug("Running OCR on page %s (lang=%s)", page_number, self.config.ocr_language)
        try:
            result = self.ocr_engine.recognize(
                image,
                self.config.ocr_language,
                progress=_progress_logger(page_number),
            )
        except Exception as error:
            LOGGER.warning("OCR failed for page %s: %s", page_number, error)
            return PageText(
                page_number=page_number,
                text="",
                method=ExtractionMethod.OCR,
                error=f"OCR failed: {error}",
            )
        return PageText(page_number=page_number, text=result.text, method=ExtractionMethod.OCR)

    # Assembly ---------------------------------------------------------------------
    def _build_result(
        self,
        source: SourceFile,
        pages: Sequence[PageText],
        page_count: Optional[int],
        method: ExtractionMethod,
    ) -> ExtractionResult:
        ordered = sorted(pages, key=lambda page: page.page_number)
        normalized = tuple(replace(page, text=normalize_text(page.text)) for page in ordered)
        full_text = PAGE_SEPARATOR.join(page.text for page in normalized if page.text)

        usable = count_usable_characters(full_text)
        if usable < self.config.min_usable_chars:
            raise EmptyExtraction(source.file_name, usable, self.config.min_usable_chars)

        return ExtractionResult(
            full_text=full_text,
            page_count=page_count,
            word_count=len(full_text.split()),
            character_count=len(full_text),
            method=method,
            pages=normalized,
            failed_pages=tuple(page.page_number for page in normalized if page.failed),
            language=self.language_detector.detect(full_text),
        )

    @staticmethod
    def _raise_if_cancelled(
        cancel_event: Optional[threading.Event], file_name: Optional[str] = None
    ) -> None:
        if _is_cancelled(cancel_event):
            target = f" of {file_name}" if file_name else ""
            raise IngestionCancelled(f"Ingestion{target} was cancelled")


__all__ = ["DocumentIngestionPipeline", "PAGE_SEPARATOR"]
