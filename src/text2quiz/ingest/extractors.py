"""Text-layer extraction for parsed PDF containers."""
from __future__ import annotations

import logging
from typing import Any, List

from .container import PdfContainer
from .models import ExtractionMethod, PageText

LOGGER = logging.getLogger(__name__)


class TextLayerExtractor:
    """Read the embedded, machine-readable text of a PDF page."""

    def extract_page(self, container: PdfContainer, page_number: int) -> PageText:
        """Return the text items of *page_number* (1-based) joined by single spaces.

        A page without a text layer yields an empty :class:`PageText`. Errors
        reading the page itself propagate so the caller can skip the page.
        """

        items: List[str] = []

        def _collect(text: str, *_: Any) -> None:
            if text:
                items.append(text)

        with container.lock:
            page = container.reader.pages[page_number - 1]
            fallback = page.extract_text(visitor_text=_collect) or ""

        text = " ".join(items) if items else fallback
        LOGGER.debug(
            "Text layer of page %s: %s items, %s characters", page_number, len(items), len(text)
        )
        return PageText(page_number=page_number, text=text, method=ExtractionMethod.TEXT_LAYER)
