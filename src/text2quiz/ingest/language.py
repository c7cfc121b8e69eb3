"""Language tagging of extracted document text."""
from __future__ import annotations

import logging
from typing import Optional

from langdetect import DetectorFactory, LangDetectException, detect

LOGGER = logging.getLogger(__name__)
# Seeded so that re-ingesting the same document yields the same tag.
DetectorFactory.seed = 0


class LanguageDetector:
    """Tag a document's text with an ISO 639-1 code for the question generator.

    Only the first ``sample_chars`` characters are inspected; long documents
    gain nothing from a bigger sample. Text without any letters yields
    ``None`` instead of an error.
    """

    def __init__(self, sample_chars: int = 5000) -> None:
        self.sample_chars = sample_chars

    def detect(self, text: str) -> Optional[str]:
        sample = text.strip()[: self.sample_chars]
        if not sample:
            return None
        try:
            language = detect(sample)
        except LangDetectException as error:
            LOGGER.info("No language tag for %s characters of text: %s", len(text), error)
            return None
        LOGGER.debug("Document language tagged as %s", language)
        return language
