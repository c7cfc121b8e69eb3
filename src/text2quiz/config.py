"""Environment driven configuration for the ingestion core."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

LOGGER = logging.getLogger(__name__)

_ENV_PREFIX = "TEXT2QUIZ_"


def _int_from_env(name: str, default: int, *, minimum: Optional[int] = None) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        LOGGER.warning("Invalid integer for %s: %s; using default %s", name, value, default)
        return default
    if minimum is not None and parsed < minimum:
        LOGGER.warning("%s must be at least %s, got %s; using default %s", name, minimum, parsed, default)
        return default
    return parsed


def _float_from_env(name: str, default: float, *, positive: bool = False) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        LOGGER.warning("Invalid float for %s: %s; using default %s", name, value, default)
        return default
    if positive and not parsed > 0:
        LOGGER.warning("%s must be positive, got %s; using default %s", name, parsed, default)
        return default
    return parsed


def _str_from_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass(slots=True)
class IngestPipelineConfig:
    """Tunables consumed by :class:`~text2quiz.ingest.pipeline.DocumentIngestionPipeline`.

    ``scan_min_chars`` and ``min_usable_chars`` are empirically chosen
    defaults rather than derived constants.
    """

    scan_min_chars: int = 50
    min_usable_chars: int = 10
    render_scale: float = 2.0
    max_chunk_chars: int = 2000
    ocr_language: str = "spa"
    max_ocr_workers: int = 2
    tessdata_dir: Optional[str] = None

    def __post_init__(self) -> None:
        if self.scan_min_chars < 0 or self.min_usable_chars < 0:
            raise ValueError("character thresholds must not be negative")
        if self.render_scale <= 0:
            raise ValueError("render_scale must be positive")
        if self.max_chunk_chars <= 0:
            raise ValueError("max_chunk_chars must be a positive integer")
        if self.max_ocr_workers < 1:
            raise ValueError("max_ocr_workers must be at least 1")

    @classmethod
    def from_env(cls) -> "IngestPipelineConfig":
        defaults = cls()
        return cls(
            scan_min_chars=_int_from_env(
                f"{_ENV_PREFIX}SCAN_MIN_CHARS", defaults.scan_min_chars, minimum=0
            ),
            min_usable_chars=_int_from_env(
                f"{_ENV_PREFIX}MIN_USABLE_CHARS", defaults.min_usable_chars, minimum=0
            ),
            render_scale=_float_from_env(
                f"{_ENV_PREFIX}RENDER_SCALE", defaults.render_scale, positive=True
            ),
            max_chunk_chars=_int_from_env(
                f"{_ENV_PREFIX}MAX_CHUNK_CHARS", defaults.max_chunk_chars, minimum=1
            ),
            ocr_language=_str_from_env(f"{_ENV_PREFIX}OCR_LANG", defaults.ocr_language) or defaults.ocr_language,
            max_ocr_workers=_int_from_env(
                f"{_ENV_PREFIX}MAX_OCR_WORKERS", defaults.max_ocr_workers, minimum=1
            ),
            tessdata_dir=_str_from_env(f"{_ENV_PREFIX}TESSDATA_DIR", defaults.tessdata_dir),
        )


@dataclass(slots=True)
class ServiceConfig:
    """Settings for the document service and the question generator hand-off."""

    generation_max_chars: int = 6000
    log_dir: str = "logs"

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        defaults = cls()
        return cls(
            generation_max_chars=_int_from_env(
                f"{_ENV_PREFIX}GENERATION_MAX_CHARS", defaults.generation_max_chars, minimum=1
            ),
            log_dir=_str_from_env(f"{_ENV_PREFIX}LOG_DIR", defaults.log_dir) or defaults.log_dir,
        )


__all__ = ["IngestPipelineConfig", "ServiceConfig"]
