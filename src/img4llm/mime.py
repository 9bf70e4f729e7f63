"""MIME type lookups for image paths and decoded formats."""

from __future__ import annotations

import os

from img4llm.models import ImageStrategy

RASTER_MIME_TYPE = "image/jpeg"
SVG_MIME_TYPE = "image/svg+xml"

_EXTENSION_MIME_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": SVG_MIME_TYPE,
}

_FORMAT_MIME_TYPES: dict[str, str] = {
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "gif": "image/gif",
    "svg": SVG_MIME_TYPE,
}


def get_image_mime_type(file_path: str) -> str:
    """Map a file extension to its MIME type, or ``application/octet-stream``."""
    ext = os.path.splitext(file_path)[1].lower()
    return _EXTENSION_MIME_TYPES.get(ext, "application/octet-stream")


def get_image_mime_type_from_format(image_format: str) -> str:
    """Map a decoded format name to its MIME type, defaulting to PNG."""
    return _FORMAT_MIME_TYPES.get(image_format.lower(), "image/png")


def mime_type_for_strategy(strategy: ImageStrategy, image_format: str) -> str:
    """Return the output MIME type implied by a strategy."""
    if strategy == ImageStrategy.SEMANTIC_VECTOR:
        return SVG_MIME_TYPE
    if strategy == ImageStrategy.KEEP_AS_IS:
        return get_image_mime_type_from_format(image_format)
    return RASTER_MIME_TYPE
