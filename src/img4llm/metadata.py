"""Metadata extraction and color-cardinality estimation.

``count_distinct_colors`` visits pixels at a fixed stride so its cost is
bounded by the sample size, not the image resolution.  The estimate is a
lower bound: exact for images with few large color regions, increasingly
approximate for photographic content.
"""

from __future__ import annotations

import logging
import re

from img4llm.codec import decode_metadata, decode_raw_samples, is_svg, parse_svg_root
from img4llm.models import ImageDimensions, ImageMetadata

logger = logging.getLogger("img4llm")

DEFAULT_SAMPLE_SIZE = 1000

_PAINT_ATTRIBUTES = ("fill", "stroke", "stop-color", "color")
_STYLE_PAINT_RE = re.compile(
    r"(?:^|;)\s*(?:fill|stroke|stop-color|color)\s*:\s*([^;]+)", re.IGNORECASE
)
_NON_COLORS = {"", "none", "transparent", "inherit", "currentcolor"}


def _count_svg_paints(image_bytes: bytes, sample_size: int) -> int:
    """Count distinct paint values declared in an SVG document."""
    root = parse_svg_root(image_bytes)
    paints: set[str] = set()
    for element in root.iter():
        for attr in _PAINT_ATTRIBUTES:
            value = element.get(attr)
            if value is not None:
                paints.add(value.strip().lower())
        style = element.get("style")
        if style:
            paints.update(m.strip().lower() for m in _STYLE_PAINT_RE.findall(style))
    paints -= _NON_COLORS
    return min(len(paints), sample_size)


def count_distinct_colors(image_bytes: bytes, sample_size: int = DEFAULT_SAMPLE_SIZE) -> int:
    """Estimate the number of distinct RGB colors by stride sampling.

    Visits every ``max(1, total_pixels // sample_size)``-th pixel, packs its
    three channels into a 24-bit key and returns the size of the key set.

    Raises
    ------
    ImageDecodeError
        If the image cannot be decoded or has no usable dimensions.
    """
    if is_svg(image_bytes):
        return _count_svg_paints(image_bytes, sample_size)

    samples, width, height = decode_raw_samples(image_bytes)
    total_pixels = width * height
    step = max(1, total_pixels // sample_size)

    colors: set[int] = set()
    for i in range(0, total_pixels, step):
        offset = i * 3
        colors.add(
            (samples[offset] << 16) | (samples[offset + 1] << 8) | samples[offset + 2]
        )
    return len(colors)


def extract_metadata(image_bytes: bytes, sample_size: int = DEFAULT_SAMPLE_SIZE) -> ImageMetadata:
    """Decode structural metadata and estimate color cardinality."""
    decoded = decode_metadata(image_bytes)
    distinct_colors = count_distinct_colors(image_bytes, sample_size)
    width, height = decoded.width, decoded.height

    metadata = ImageMetadata(
        dimensions=ImageDimensions(width=width, height=height),
        format=decoded.format,
        filesize=decoded.size,
        distinct_colors=distinct_colors,
        aspect_ratio=width / height if height > 0 else 0.0,
    )

    logger.debug(
        "img4llm | metadata | format=%s | dimensions=%dx%d | size=%d | colors=%d",
        metadata.format,
        width,
        height,
        metadata.filesize,
        distinct_colors,
    )
    return metadata
