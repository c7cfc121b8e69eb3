"""Hand-off of extracted text to the external question generator."""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from pydantic import BaseModel, Field

from text2quiz.ingest.models import ContentProfile, Difficulty, ExtractionResult

LOGGER = logging.getLogger(__name__)

DEFAULT_GENERATION_MAX_CHARS = 6000


class QuestionGenerationRequest(BaseModel):
    """Payload accepted by the LLM-backed question generator."""

    text: str = Field(..., min_length=1, description="Document text, truncated to the size budget.")
    truncated: bool = Field(False, description="Whether the text was cut to fit the budget.")
    question_count: int = Field(..., ge=1, le=50, description="Number of questions to generate.")
    difficulty: Difficulty = Field(Difficulty.MEDIUM, description="Target difficulty tag.")
    language: Optional[str] = Field(None, description="ISO 639-1 code of the document language.")


class QuestionGenerator(Protocol):
    """External service that turns a request into structured questions.

    The returned payload is passed through without validation.
    """

    def generate(self, request: QuestionGenerationRequest) -> Any:
        ...


def truncate_text(text: str, max_chars: int) -> tuple[str, bool]:
    """Cut *text* to at most *max_chars*, preferring the last word boundary."""

    if max_chars <= 0:
        raise ValueError("max_chars must be a positive integer")
    if len(text) <= max_chars:
        return text, False
    window = text[:max_chars]
    boundary = window.rfind(" ")
    if boundary > max_chars // 2:
        window = window[:boundary]
    return window.rstrip(), True


def build_generation_request(
    result: ExtractionResult,
    profile: ContentProfile,
    *,
    max_chars: int = DEFAULT_GENERATION_MAX_CHARS,
    question_count: Optional[int] = None,
    difficulty: Optional[Difficulty] = None,
) -> QuestionGenerationRequest:
    """Build the generator request, defaulting count and difficulty to the profile."""

    text, truncated = truncate_text(result.full_text, max_chars)
    if truncated:
        LOGGER.info(
            "Truncated text for question generation from %s to %s characters",
            result.character_count,
            len(text),
        )
    return QuestionGenerationRequest(
        text=text,
        truncated=truncated,
        question_count=question_count or profile.suggested_question_count,
        difficulty=difficulty or profile.estimated_difficulty,
        language=result.language,
    )


__all__ = [
    "DEFAULT_GENERATION_MAX_CHARS",
    "QuestionGenerationRequest",
    "QuestionGenerator",
    "build_generation_request",
    "truncate_text",
]
