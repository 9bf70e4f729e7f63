"""Error codes and structured error model for the img4llm package.

``ImageErrorCode`` contains all error/warning codes raised or recorded while
optimizing an image.  ``ImageOptimizeError`` is the structured detail carried
by the package's exceptions.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ImageErrorCode(str, Enum):
    """Error codes for image optimization.

    Each value equals its name so codes are stable strings suitable for
    metrics and alerting.  ``E_`` prefix indicates fatal errors;
    ``W_`` prefix indicates non-fatal warnings.
    """

    # Decoding
    E_IMAGE_EMPTY = "E_IMAGE_EMPTY"
    E_IMAGE_CORRUPT = "E_IMAGE_CORRUPT"
    E_IMAGE_DIMENSIONS_UNKNOWN = "E_IMAGE_DIMENSIONS_UNKNOWN"

    # VLM errors
    E_IMAGE_VLM_UNAVAILABLE = "E_IMAGE_VLM_UNAVAILABLE"

    # Warnings (non-fatal)
    W_IMAGE_VLM_UNAVAILABLE = "W_IMAGE_VLM_UNAVAILABLE"
    W_IMAGE_VLM_CALL_FAILED = "W_IMAGE_VLM_CALL_FAILED"
    W_IMAGE_VLM_MALFORMED_RESPONSE = "W_IMAGE_VLM_MALFORMED_RESPONSE"
    W_IMAGE_SVG_REJECTED = "W_IMAGE_SVG_REJECTED"


class ImageOptimizeError(BaseModel):
    """Structured error with code, message, and pipeline stage."""

    code: str
    message: str
    stage: str | None = None
    recoverable: bool = False


class ImageDecodeError(Exception):
    """Raised when the input cannot be decoded into a usable image."""

    def __init__(self, error: ImageOptimizeError) -> None:
        self.error = error
        super().__init__(error.message)
