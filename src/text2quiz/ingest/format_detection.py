"""Utilities for detecting the kind of uploaded documents."""
from __future__ import annotations

import mimetypes
from enum import Enum
from typing import Optional

from .errors import UnsupportedFormat


class DocumentKind(str, Enum):
    """Supported document kinds."""

    CONTAINER = "container"
    RASTER_IMAGE = "raster-image"


class DocumentFormatDetector:
    """Detects the document kind based on the declared MIME type."""

    _MIME_MAP = {
        "application/pdf": DocumentKind.CONTAINER,
        "image/png": DocumentKind.RASTER_IMAGE,
        "image/jpeg": DocumentKind.RASTER_IMAGE,
        "image/jpg": DocumentKind.RASTER_IMAGE,
        "image/pjpeg": DocumentKind.RASTER_IMAGE,
        "image/gif": DocumentKind.RASTER_IMAGE,
        "image/bmp": DocumentKind.RASTER_IMAGE,
        "image/x-ms-bmp": DocumentKind.RASTER_IMAGE,
        "image/tiff": DocumentKind.RASTER_IMAGE,
        "image/webp": DocumentKind.RASTER_IMAGE,
        "image/x-portable-pixmap": DocumentKind.RASTER_IMAGE,
    }
    _UNDECLARED = {"", "application/octet-stream", "binary/octet-stream"}

    @classmethod
    def detect(cls, file_name: str, mime_type: Optional[str] = None) -> DocumentKind:
        """Return the document kind or raise :class:`UnsupportedFormat`.

        The declared MIME type decides. Only when the uploader did not declare
        a meaningful type does the detector fall back to
        `mimetypes.guess_type` on the file name.
        """

        declared = (mime_type or "").split(";", 1)[0].strip().lower()
        if declared in cls._MIME_MAP:
            return cls._MIME_MAP[declared]
        if declared not in cls._UNDECLARED:
            raise UnsupportedFormat(mime_type, file_name)

        guessed_type, _ = mimetypes.guess_type(file_name)
        if guessed_type and guessed_type in cls._MIME_MAP:
            return cls._MIME_MAP[guessed_type]
        raise UnsupportedFormat(mime_type, file_name)
