"""Chunking utilities for size-limited downstream consumers."""
from __future__ import annotations

import logging
from typing import Iterator, List

DEFAULT_MAX_CHUNK_CHARS = 2000
LOGGER = logging.getLogger(__name__)


class TextChunks:
    """Finite, restartable sequence of chunks over a fixed text.

    Every call to :func:`iter` replays the same chunks from the start, so the
    object can be handed to several consumers without materialising a list.
    """

    __slots__ = ("_text", "max_chunk_chars")

    def __init__(self, text: str, max_chunk_chars: int = DEFAULT_MAX_CHUNK_CHARS) -> None:
        if max_chunk_chars <= 0:
            raise ValueError("max_chunk_chars must be a positive integer")
        self._text = text
        self.max_chunk_chars = max_chunk_chars

    def __iter__(self) -> Iterator[str]:
        current: List[str] = []
        current_length = 0
        for token in self._text.split():
            # Length of the chunk once the token and its joining space are appended.
            candidate_length = current_length + len(token) + (1 if current else 0)
            if current and candidate_length >= self.max_chunk_chars:
                yield " ".join(current)
                current = [token]
                current_length = len(token)
                continue
            current.append(token)
            current_length = candidate_length
        if current:
            yield " ".join(current)

    def __repr__(self) -> str:
        return f"TextChunks(chars={len(self._text)}, max_chunk_chars={self.max_chunk_chars})"


def chunk_text(text: str, max_chunk_chars: int = DEFAULT_MAX_CHUNK_CHARS) -> TextChunks:
    """Split *text* greedily on whitespace into chunks below ``max_chunk_chars``.

    A token starts a new chunk when appending it would bring the current chunk
    to ``max_chunk_chars`` characters or more. A single token longer than the
    budget becomes a chunk of its own. The last, possibly short, chunk is
    always included.
    """

    chunks = TextChunks(text, max_chunk_chars)
    LOGGER.debug("Prepared %r", chunks)
    return chunks
