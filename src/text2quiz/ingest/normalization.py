"""Text normalisation utilities."""
from __future__ import annotations

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")
# C0/C1 control characters other than whitespace, plus zero-width marks OCR tends to emit.
_CONTROL_RE = re.compile(r"[\x00-\x08\x0e-\x1f\x7f-\x84\x86-\x9f\u200b-\u200d\ufeff]")


def normalize_text(text: str) -> str:
    """Collapse whitespace runs into single spaces and trim the result.

    Runs of newlines fold into the same single space, so the output holds no
    line breaks. The function is idempotent.
    """

    if not text:
        return ""
    normalized = _CONTROL_RE.sub("", text)
    normalized = unicodedata.normalize("NFC", normalized)
    normalized = _WHITESPACE_RE.sub(" ", normalized)
    return normalized.strip()


def count_usable_characters(text: str) -> int:
    """Return the number of non-whitespace characters in *text*."""

    return sum(1 for char in text if not char.isspace())
