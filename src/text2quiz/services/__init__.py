"""Service layer wiring the ingestion pipeline to its collaborators."""

from .documents import DocumentService, UploadResult

__all__ = ["DocumentService", "UploadResult"]
