"""Storage collaborators for uploaded files and extracted documents."""
from __future__ import annotations

import re
import threading
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Final, List, Optional, Protocol
from uuid import uuid4

_FILENAME_SAFE_CHARS_RE: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9.-]+")
_REPEATED_UNDERSCORE_RE: Final[re.Pattern[str]] = re.compile(r"_{2,}")


def sanitize_filename(filename: str) -> str:
    """Return a lowercase, ASCII-only filename preserving the extension when possible."""

    if not filename:
        filename = "upload"
    # Remove any path components, then strip accents before replacing the rest.
    sanitized = Path(filename.replace("\\", "/")).name
    decomposed = unicodedata.normalize("NFD", sanitized)
    sanitized = "".join(char for char in decomposed if not unicodedata.combining(char))
    sanitized = _FILENAME_SAFE_CHARS_RE.sub("_", sanitized)
    sanitized = _REPEATED_UNDERSCORE_RE.sub("_", sanitized)
    sanitized = sanitized.strip("._") or "upload"
    return sanitized.lower()


def build_object_key(owner_id: str, filename: str) -> str:
    """Return a unique storage key namespaced by owner."""

    return f"{owner_id}/{uuid4().hex}_{sanitize_filename(filename)}"


@dataclass(slots=True)
class DocumentRecord:
    """Persisted view of an ingested document."""

    owner_id: str
    title: str
    object_key: str
    file_type: str
    extracted_text: str
    page_count: Optional[int]
    word_count: int
    language: Optional[str]
    status: str = "completed"
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class DocumentStore(Protocol):
    """Object storage plus document table, owned by the hosting platform."""

    def put_object(self, key: str, data: bytes, content_type: str) -> str:
        ...

    def insert_document(self, record: DocumentRecord) -> DocumentRecord:
        ...

    def get_document(self, document_id: str) -> Optional[DocumentRecord]:
        ...


class InMemoryDocumentStore:
    """Process-local :class:`DocumentStore` used for development and tests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.objects: Dict[str, bytes] = {}
        self.content_types: Dict[str, str] = {}
        self.documents: Dict[str, DocumentRecord] = {}

    def put_object(self, key: str, data: bytes, content_type: str) -> str:
        with self._lock:
            if key in self.objects:
                raise FileExistsError(f"Object {key} already exists")
            self.objects[key] = bytes(data)
            self.content_types[key] = content_type
        return key

    def insert_document(self, record: DocumentRecord) -> DocumentRecord:
        with self._lock:
            self.documents[record.id] = record
        return record

    def get_document(self, document_id: str) -> Optional[DocumentRecord]:
        with self._lock:
            return self.documents.get(document_id)

    def documents_for(self, owner_id: str) -> List[DocumentRecord]:
        with self._lock:
            records = [record for record in self.documents.values() if record.owner_id == owner_id]
        return sorted(records, key=lambda record: record.created_at, reverse=True)


__all__ = [
    "DocumentRecord",
    "DocumentStore",
    "InMemoryDocumentStore",
    "build_object_key",
    "sanitize_filename",
]
