"""Strategy selection from image metadata."""

from __future__ import annotations

from img4llm.metadata import DEFAULT_SAMPLE_SIZE, extract_metadata
from img4llm.models import ImageAnalysisResult, ImageMetadata, ImageStrategy


def determine_strategy(metadata: ImageMetadata) -> ImageStrategy:
    """Pick the baseline strategy.

    Vector input is passed through untouched; every raster format is
    re-encoded.  The semantic SVG path is decided later from VLM output.
    """
    if metadata.format == "svg":
        return ImageStrategy.KEEP_AS_IS
    return ImageStrategy.RASTER_OPTIMIZE


def analyze_image(
    image_bytes: bytes, sample_size: int = DEFAULT_SAMPLE_SIZE
) -> ImageAnalysisResult:
    """Extract metadata and the baseline strategy for an image."""
    metadata = extract_metadata(image_bytes, sample_size)
    return ImageAnalysisResult(
        metadata=metadata,
        strategy=determine_strategy(metadata),
        confidence=1.0,
    )
