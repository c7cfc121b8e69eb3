"""OCR engine contract and the Tesseract adapter."""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import pytesseract
from PIL import Image

from .models import ImageBuffer

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


@dataclass(frozen=True, slots=True)
class OCRResult:
    text: str
    confidence: Optional[float] = None


class OCREngine(Protocol):
    """External OCR capability consumed by the pipeline.

    Calls may take several seconds per page; callers must not assume a
    latency bound. ``progress`` receives a non-decreasing completion fraction
    in ``[0, 1]``.
    """

    def recognize(
        self,
        image: ImageBuffer,
        language_hint: str,
        progress: Optional[ProgressCallback] = None,
    ) -> OCRResult:
        ...


class TesseractOCREngine:
    """Run Tesseract through pytesseract on in-memory images.

    Tesseract options are passed on every call instead of through
    pytesseract's module globals, so engines with different settings can be
    used side by side.
    """

    def __init__(
        self,
        *,
        tessdata_dir: Optional[str] = None,
        page_segmentation_mode: Optional[int] = None,
        timeout: float = 0,
    ) -> None:
        self.tessdata_dir = tessdata_dir
        self.page_segmentation_mode = page_segmentation_mode
        self.timeout = timeout

    def _tesseract_config(self) -> str:
        options = []
        if self.tessdata_dir:
            options.append(f'--tessdata-dir "{self.tessdata_dir}"')
        if self.page_segmentation_mode is not None:
            options.append(f"--psm {self.page_segmentation_mode}")
        return " ".join(options)

    def recognize(
        self,
        image: ImageBuffer,
        language_hint: str,
        progress: Optional[ProgressCallback] = None,
    ) -> OCRResult:
        if progress is not None:
            progress(0.0)
        with Image.open(io.BytesIO(image.data)) as picture:
            picture.load()
            text = pytesseract.image_to_string(
                picture,
                lang=language_hint,
                config=self._tesseract_config(),
                timeout=self.timeout,
            )
        if progress is not None:
            progress(1.0)
        LOGGER.debug("Tesseract recognised %s characters (lang=%s)", len(text), language_hint)
        return OCRResult(text=text or "")
