"""Acceptance checks for VLM-generated SVG.

Model-written SVG is only shipped when it is small, self-contained and built
from basic shapes.  Any violation returns False; callers fall back to the
raster output.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger("img4llm")

DEFAULT_MAX_BYTES = 5120
DEFAULT_MAX_PATHS = 10

_EMBEDDED_IMAGE_RE = re.compile(r"<image[\s/>]", re.IGNORECASE)
_DATA_URI_IMAGE_RE = re.compile(r"data:image/", re.IGNORECASE)
_PATH_RE = re.compile(r"<path[\s/>]", re.IGNORECASE)
_PRIMITIVE_RE = re.compile(
    r"<(?:text|rect|circle|line|polyline|polygon)[\s/>]", re.IGNORECASE
)


def is_acceptable_svg(
    svg_text: str,
    max_bytes: int = DEFAULT_MAX_BYTES,
    max_paths: int = DEFAULT_MAX_PATHS,
) -> bool:
    """Return True if the SVG is safe and compact enough to use as output."""
    svg = svg_text.strip()

    if not svg.startswith("<svg"):
        reason = "missing <svg> root"
    elif len(svg.encode("utf-8")) > max_bytes:
        reason = f"size exceeds {max_bytes} bytes"
    elif _EMBEDDED_IMAGE_RE.search(svg) or _DATA_URI_IMAGE_RE.search(svg):
        reason = "embedded raster image"
    elif len(_PATH_RE.findall(svg)) > max_paths:
        reason = f"more than {max_paths} <path> elements"
    elif _PRIMITIVE_RE.search(svg) is None:
        reason = "no basic shape or text elements"
    else:
        return True

    logger.debug("img4llm | svg_validate | rejected | reason=%s", reason)
    return False
