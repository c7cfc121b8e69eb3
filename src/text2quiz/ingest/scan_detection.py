"""Decide whether a PDF needs the OCR fallback."""
from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SCAN_MIN_CHARS = 50


@dataclass(frozen=True, slots=True)
class ScanDetectionPolicy:
    """Classifies text-layer output as text-based or scanned.

    ``min_chars`` is an empirically chosen default and is expected to be tuned
    per deployment.
    """

    min_chars: int = DEFAULT_SCAN_MIN_CHARS

    def is_scanned(self, candidate_text: str) -> bool:
        return len(candidate_text.strip()) < self.min_chars
