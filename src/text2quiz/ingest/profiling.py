"""Content statistics that drive quiz length and difficulty."""
from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import List

from .models import ContentProfile, Difficulty

_SENTENCE_TERMINATOR_RE = re.compile(r"[.!?]+")
_NON_WORD_RE = re.compile(r"[^\w\s]")

# Spanish function words ignored by keyword extraction.
SPANISH_STOP_WORDS = frozenset(
    {
        "el", "la", "de", "que", "y", "a", "en", "un", "ser", "se", "no", "haber",
        "por", "con", "su", "para", "como", "estar", "tener", "le", "lo", "todo",
        "pero", "más", "hacer", "o", "poder", "decir", "este", "ir", "otro", "ese",
        "si", "me", "ya", "ver", "porque", "dar", "cuando", "él", "muy", "sin",
        "vez", "mucho", "saber", "qué", "sobre", "mi", "alguno", "mismo", "yo",
        "también", "hasta", "año", "dos", "querer", "entre", "así", "primero",
    }
)


@dataclass(frozen=True, slots=True)
class ProfilerConfig:
    easy_below_words: int = 500
    hard_above_words: int = 2000
    words_per_question: int = 200
    min_questions: int = 5
    max_questions: int = 20
    keyword_limit: int = 10


class ContentProfiler:
    """Estimate word/sentence counts and quiz parameters for a text."""

    def __init__(self, config: ProfilerConfig | None = None) -> None:
        self.config = config or ProfilerConfig()

    def profile(self, text: str) -> ContentProfile:
        word_count = len(text.split())
        # Split semantics: the segment after the last terminator counts too.
        sentence_count = len(_SENTENCE_TERMINATOR_RE.split(text))
        return ContentProfile(
            word_count=word_count,
            sentence_count=sentence_count,
            estimated_difficulty=self.estimate_difficulty(word_count),
            suggested_question_count=self.suggest_question_count(word_count),
            key_concepts_count=sentence_count // 3,
            reading_level=self.estimate_reading_level(word_count, sentence_count),
            keywords=tuple(self.extract_keywords(text, self.config.keyword_limit)),
        )

    def estimate_difficulty(self, word_count: int) -> Difficulty:
        if word_count < self.config.easy_below_words:
            return Difficulty.EASY
        if word_count > self.config.hard_above_words:
            return Difficulty.HARD
        return Difficulty.MEDIUM

    def suggest_question_count(self, word_count: int) -> int:
        suggested = word_count // self.config.words_per_question
        return min(max(suggested, self.config.min_questions), self.config.max_questions)

    @staticmethod
    def estimate_reading_level(word_count: int, sentence_count: int) -> str:
        average = word_count / max(sentence_count, 1)
        if average < 15:
            return "basic"
        if average < 20:
            return "intermediate"
        return "advanced"

    @staticmethod
    def extract_keywords(text: str, limit: int = 10) -> List[str]:
        """Return the most frequent content words, most frequent first.

        Ties keep the order in which the words first appear.
        """

        words = _NON_WORD_RE.sub("", text.lower()).split()
        frequency = Counter(
            word for word in words if len(word) > 4 and word not in SPANISH_STOP_WORDS
        )
        return [word for word, _ in frequency.most_common(limit)]
