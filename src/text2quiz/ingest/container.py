"""Parsed PDF handle owned by a single ingestion call."""
from __future__ import annotations

import io
import logging
import threading
from typing import Optional, Protocol

import fitz  # PyMuPDF
from PyPDF2 import PdfReader

from .errors import CorruptInput

LOGGER = logging.getLogger(__name__)


class ParsedContainer(Protocol):
    """What the pipeline needs from a parsed multi-page document."""

    lock: threading.Lock

    @property
    def page_count(self) -> int:
        ...

    def close(self) -> None:
        ...


class PdfContainer:
    """Owns the parsed object graph of one PDF.

    Text is read through PyPDF2 while rasterisation goes through a PyMuPDF
    document that is only opened when a page actually has to be rendered.
    Neither library is safe for concurrent use of one document, so callers
    hold :attr:`lock` around every access.
    """

    def __init__(self, data: bytes, reader: PdfReader, stream: io.BytesIO) -> None:
        self._data = data
        self._reader: Optional[PdfReader] = reader
        self._stream = stream
        self._render_document: Optional[fitz.Document] = None
        self._page_count = len(reader.pages)
        self.lock = threading.Lock()
        self.closed = False

    @classmethod
    def open(cls, data: bytes) -> "PdfContainer":
        """Parse *data* or raise :class:`CorruptInput`."""

        if not data:
            raise CorruptInput("The uploaded PDF is empty")
        stream = io.BytesIO(data)
        try:
            reader = PdfReader(stream)
            container = cls(data, reader, stream)
        except Exception as error:
            stream.close()
            raise CorruptInput(f"Unable to parse PDF: {error}", cause=error) from error
        LOGGER.debug("Opened PDF container with %s pages", container.page_count)
        return container

    @property
    def page_count(self) -> int:
        return self._page_count

    @property
    def reader(self) -> PdfReader:
        if self._reader is None:
            raise RuntimeError("PDF container has been closed")
        return self._reader

    def render_document(self) -> fitz.Document:
        """Return the PyMuPDF view of the document, opening it on first use."""

        if self.closed:
            raise RuntimeError("PDF container has been closed")
        if self._render_document is None:
            self._render_document = fitz.open(stream=self._data, filetype="pdf")
        return self._render_document

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._render_document is not None:
            self._render_document.close()
            self._render_document = None
        self._reader = None
        self._stream.close()
        LOGGER.debug("Released PDF container")

    def __enter__(self) -> "PdfContainer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
