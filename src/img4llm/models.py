"""Pydantic models and enumerations for the img4llm package.

Contains the value types produced per optimization call: ``ImageMetadata``,
``ImageAnalysisResult``, ``VLMAnalysisResult``, ``OptimizeOptions``, and
``OptimizeResult``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ImageStrategy(str, Enum):
    """How the image is represented in the final output."""

    RASTER_OPTIMIZE = "RASTER_OPTIMIZE"
    SEMANTIC_VECTOR = "SEMANTIC_VECTOR"
    KEEP_AS_IS = "KEEP_AS_IS"


class ContentType(str, Enum):
    """Content classification returned by the VLM."""

    DIAGRAM = "diagram"
    TEXT = "text"
    PHOTO = "photo"
    COMPLEX = "complex"


class VLMCapability(str, Enum):
    """Auxiliary capabilities a caller can request from the VLM."""

    CAPTION = "caption"
    SEMANTIC_SVG = "semantic_svg"
    EXTRACT_TEXT = "extract_text"


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


class ImageDimensions(BaseModel):
    """Pixel dimensions of the decoded image."""

    model_config = ConfigDict(frozen=True)

    width: int
    height: int


class ImageMetadata(BaseModel):
    """Structural metadata derived once per input."""

    model_config = ConfigDict(frozen=True)

    dimensions: ImageDimensions
    format: str
    filesize: int
    distinct_colors: int
    aspect_ratio: float


class ImageAnalysisResult(BaseModel):
    """Metadata plus the strategy chosen from it."""

    metadata: ImageMetadata
    strategy: ImageStrategy
    confidence: float = 1.0


# ---------------------------------------------------------------------------
# VLM
# ---------------------------------------------------------------------------


class VLMAnalysisResult(BaseModel):
    """Validated output of one VLM round trip.

    Every field has a safe default so a missing or malformed response still
    yields a complete record.
    """

    caption: str = ""
    content_type: ContentType = ContentType.COMPLEX
    svg_candidate: bool = False
    svg_reason: str = ""
    svg_code: str | None = None
    extracted_text: str | None = None


# ---------------------------------------------------------------------------
# Options / Result
# ---------------------------------------------------------------------------


class OptimizeOptions(BaseModel):
    """Per-call options for :func:`img4llm.optimize_for_llm`.

    ``max_dimension`` and ``quality`` fall back to the configured defaults
    when left unset.
    """

    max_dimension: int | None = Field(default=None, gt=0)
    quality: int | None = Field(default=None, ge=1, le=100)
    generate_caption: bool = False
    semantic_svg: bool = False
    extract_text: bool = False
    caption_model: str | None = None

    def capabilities(self) -> set[VLMCapability]:
        """Return the set of auxiliary capabilities requested."""
        requested: set[VLMCapability] = set()
        if self.generate_caption:
            requested.add(VLMCapability.CAPTION)
        if self.semantic_svg:
            requested.add(VLMCapability.SEMANTIC_SVG)
        if self.extract_text:
            requested.add(VLMCapability.EXTRACT_TEXT)
        return requested


class OptimizeResult(BaseModel):
    """Final result of one optimization call."""

    data: bytes
    metadata: ImageMetadata
    strategy: ImageStrategy
    mime_type: str
    caption: str | None = None
    extracted_text: str | None = None
    warnings: list[str] = []
    processing_time_seconds: float = 0.0
