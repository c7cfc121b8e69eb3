from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

from text2quiz.config import IngestPipelineConfig, ServiceConfig
from text2quiz.generation import QuestionGenerationRequest, build_generation_request
from text2quiz.ingest.errors import IngestionError
from text2quiz.ingest.format_detection import DocumentFormatDetector, DocumentKind
from text2quiz.ingest.models import ContentProfile, Difficulty, ExtractionResult, SourceFile
from text2quiz.ingest.pipeline import DocumentIngestionPipeline
from text2quiz.ingest.profiling import ContentProfiler
from text2quiz.logging_config import AUDIT_LOGGER_NAME
from text2quiz.storage import DocumentRecord, DocumentStore, InMemoryDocumentStore, build_object_key
from text2quiz.telemetry import emit_exception, emit_ingest_event, traced_duration

LOGGER = logging.getLogger(__name__)
AUDIT_LOGGER = logging.getLogger(AUDIT_LOGGER_NAME)


@dataclass(slots=True)
class UploadResult:
    """Structured result returned from :meth:`DocumentService.upload`."""

    document: DocumentRecord
    extraction: ExtractionResult
    profile: ContentProfile
    duration_seconds: float


class DocumentService:
    """Store an upload, extract its text and persist the document record."""

    def __init__(
        self,
        *,
        pipeline: DocumentIngestionPipeline | None = None,
        store: DocumentStore | None = None,
        profiler: ContentProfiler | None = None,
        config: ServiceConfig | None = None,
    ) -> None:
        self.pipeline = pipeline or DocumentIngestionPipeline(IngestPipelineConfig.from_env())
        self.store = store or InMemoryDocumentStore()
        self.profiler = profiler or ContentProfiler()
        self.config = config or ServiceConfig.from_env()

    async def upload(self, source: SourceFile, owner_id: str) -> UploadResult:
        """Process one upload.

        Unsupported files are rejected before anything is stored. Extraction
        runs in a worker thread; cancelling the awaiting task stops the
        pipeline from dispatching further pages.
        """

        start_time = time.perf_counter()
        kind = DocumentFormatDetector.detect(source.file_name, source.mime_type)

        object_key = self.store.put_object(
            build_object_key(owner_id, source.file_name), source.content, source.mime_type
        )
        LOGGER.info("Stored upload %s for %s as %s", source.file_name, owner_id, object_key)
        emit_ingest_event(
            "ingest.file.start",
            file_name=source.file_name,
            user_id=owner_id,
            size_bytes=source.size_bytes,
        )

        cancel_event = threading.Event()
        try:
            with traced_duration("ingest.extract", logger=LOGGER, file=source.file_name):
                extraction = await asyncio.to_thread(
                    self.pipeline.ingest, source, cancel_event=cancel_event
                )
        except asyncio.CancelledError:
            cancel_event.set()
            LOGGER.info("Upload %s for %s was cancelled", source.file_name, owner_id)
            raise
        except IngestionError as error:
            emit_exception(
                module=f"{__name__}.pipeline",
                error=error,
                user_id=owner_id,
                suggestion="Upload a different file or a higher quality scan",
            )
            raise

        profile = self.profiler.profile(extraction.full_text)
        record = self.store.insert_document(
            DocumentRecord(
                owner_id=owner_id,
                title=source.file_name,
                object_key=object_key,
                file_type="pdf" if kind is DocumentKind.CONTAINER else "image",
                extracted_text=extraction.full_text,
                page_count=extraction.page_count,
                word_count=extraction.word_count,
                language=extraction.language,
            )
        )

        duration = time.perf_counter() - start_time
        emit_ingest_event(
            "ingest.file.complete",
            file_name=source.file_name,
            user_id=owner_id,
            size_bytes=source.size_bytes,
            duration_ms=duration * 1000.0,
            language=extraction.language,
            pages=extraction.page_count,
            ocr=extraction.ocr_performed,
            failed_pages=len(extraction.failed_pages),
            words=extraction.word_count,
        )
        AUDIT_LOGGER.info(
            {
                "event": "ingest",
                "user_id": owner_id,
                "document_id": record.id,
                "file_name": source.file_name,
                "method": extraction.method.value,
                "pages": extraction.page_count,
                "failed_pages": list(extraction.failed_pages),
                "characters": extraction.character_count,
            }
        )
        return UploadResult(
            document=record,
            extraction=extraction,
            profile=profile,
            duration_seconds=duration,
        )

    def generation_request(
        self,
        upload: UploadResult,
        *,
        question_count: Optional[int] = None,
        difficulty: Optional[Difficulty] = None,
    ) -> QuestionGenerationRequest:
        return build_generation_request(
            upload.extraction,
            upload.profile,
            max_chars=self.config.generation_max_chars,
            question_count=question_count,
            difficulty=difficulty,
        )
