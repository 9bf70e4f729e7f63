"""Pillow-backed image codec.

Decodes metadata and raw RGB samples from encoded image bytes and produces
size-bounded JPEG encodings.  SVG documents are recognised by their root
element and measured from their attributes; they are never rasterized.
"""

from __future__ import annotations

import io
import logging
import re
import xml.etree.ElementTree as ET

from PIL import Image
from pydantic import BaseModel

from img4llm.errors import ImageDecodeError, ImageErrorCode, ImageOptimizeError

logger = logging.getLogger("img4llm")

_SVG_SNIFF_BYTES = 4096
_SVG_ROOT_RE = re.compile(rb"<svg[\s>/]", re.IGNORECASE)
_LENGTH_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(px)?\s*$")


class DecodedImage(BaseModel):
    """Structural facts reported by the codec."""

    width: int
    height: int
    format: str
    size: int


def _decode_error(code: ImageErrorCode, message: str) -> ImageDecodeError:
    return ImageDecodeError(
        ImageOptimizeError(code=code.value, message=message, stage="decode")
    )


# ---------------------------------------------------------------------------
# SVG
# ---------------------------------------------------------------------------


def is_svg(data: bytes) -> bool:
    """Return True if the bytes look like an SVG document."""
    head = data[:_SVG_SNIFF_BYTES].lstrip(b"\xef\xbb\xbf \t\r\n")
    return head.startswith(b"<") and _SVG_ROOT_RE.search(head) is not None


def _parse_length(value: str | None) -> float | None:
    """Parse a unitless or ``px`` SVG length. Percentages are ignored."""
    if value is None:
        return None
    match = _LENGTH_RE.match(value)
    if match is None:
        return None
    return float(match.group(1))


def parse_svg_root(data: bytes) -> ET.Element:
    """Parse an SVG document and return its root element.

    Entity declarations and DOCTYPEs with an internal subset are rejected
    before parsing (billion laughs / XXE prevention).  A plain external
    DOCTYPE such as the SVG 1.1 header is allowed.
    """
    raw_upper = data.upper()
    if b"<!ENTITY" in raw_upper:
        raise _decode_error(
            ImageErrorCode.E_IMAGE_CORRUPT,
            "SVG contains <!ENTITY declaration (potential billion laughs / XXE attack)",
        )
    if b"<!DOCTYPE" in raw_upper:
        # Internal subset is indicated by '[' inside the DOCTYPE declaration
        doctype_pos = raw_upper.find(b"<!DOCTYPE")
        bracket_pos = data.find(b"[", doctype_pos)
        close_pos = data.find(b">", doctype_pos)
        if bracket_pos != -1 and (close_pos == -1 or bracket_pos < close_pos):
            raise _decode_error(
                ImageErrorCode.E_IMAGE_CORRUPT,
                "SVG contains <!DOCTYPE with internal subset (potential entity expansion attack)",
            )
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise _decode_error(
            ImageErrorCode.E_IMAGE_CORRUPT, f"SVG is not well-formed XML: {exc}"
        ) from exc

    if root.tag.rsplit("}", 1)[-1] != "svg":
        raise _decode_error(
            ImageErrorCode.E_IMAGE_CORRUPT,
            f"Root element is <{root.tag}>, expected <svg>",
        )
    return root


def _svg_dimensions(root: ET.Element) -> tuple[int, int]:
    width = _parse_length(root.get("width"))
    height = _parse_length(root.get("height"))

    if width is None or height is None:
        view_box = root.get("viewBox")
        if view_box:
            parts = view_box.replace(",", " ").split()
            if len(parts) == 4:
                try:
                    vb_width, vb_height = float(parts[2]), float(parts[3])
                except ValueError:
                    vb_width = vb_height = None
                if width is None:
                    width = vb_width
                if height is None:
                    height = vb_height

    if not width or not height:
        raise _decode_error(
            ImageErrorCode.E_IMAGE_DIMENSIONS_UNKNOWN,
            "Unable to determine image dimensions",
        )
    return round(width), round(height)


# ---------------------------------------------------------------------------
# Public codec operations
# ---------------------------------------------------------------------------


def _open(data: bytes) -> Image.Image:
    if not data:
        raise _decode_error(ImageErrorCode.E_IMAGE_EMPTY, "Image input is empty (0 bytes)")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except Exception as exc:
        raise _decode_error(
            ImageErrorCode.E_IMAGE_CORRUPT, f"Pillow cannot open image: {exc}"
        ) from exc
    return img


def decode_metadata(data: bytes) -> DecodedImage:
    """Return width, height, format and byte size of the encoded image.

    Raises
    ------
    ImageDecodeError
        If the input is empty, undecodable, or has no usable dimensions.
    """
    if data and is_svg(data):
        width, height = _svg_dimensions(parse_svg_root(data))
        return DecodedImage(width=width, height=height, format="svg", size=len(data))

    with _open(data) as img:
        width, height = img.size
        image_format = (img.format or "unknown").lower()

    if not width or not height:
        raise _decode_error(
            ImageErrorCode.E_IMAGE_DIMENSIONS_UNKNOWN,
            "Unable to determine image dimensions",
        )
    return DecodedImage(width=width, height=height, format=image_format, size=len(data))


def decode_raw_samples(data: bytes) -> tuple[bytes, int, int]:
    """Decode to packed 8-bit RGB samples with any alpha channel removed.

    Returns ``(samples, width, height)`` where ``samples`` holds
    ``width * height * 3`` bytes in row-major order.
    """
    with _open(data) as img:
        rgb = img.convert("RGB")
        width, height = rgb.size
        samples = rgb.tobytes()

    if not width or not height:
        raise _decode_error(
            ImageErrorCode.E_IMAGE_DIMENSIONS_UNKNOWN,
            "Unable to determine image dimensions",
        )
    return samples, width, height


def fit_within(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Scale ``(width, height)`` to fit a ``max_dimension`` square box.

    Preserves the aspect ratio and never enlarges.
    """
    ratio = min(max_dimension / width, max_dimension / height, 1.0)
    if ratio >= 1.0:
        return width, height
    new_width = min(max_dimension, max(1, round(width * ratio)))
    new_height = min(max_dimension, max(1, round(height * ratio)))
    return new_width, new_height


def encode_raster(data: bytes, max_dimension: int = 768, quality: int = 85) -> bytes:
    """Resize to fit ``max_dimension`` and re-encode as JPEG."""
    with _open(data) as img:
        target = fit_within(img.width, img.height, max_dimension)
        rgb = img.convert("RGB")
        if target != rgb.size:
            rgb = rgb.resize(target, Image.LANCZOS)
        buf = io.BytesIO()
        rgb.save(buf, format="JPEG", quality=quality)

    logger.debug(
        "img4llm | encode_raster | dimensions=%dx%d | quality=%d | size=%d",
        target[0],
        target[1],
        quality,
        buf.tell(),
    )
    return buf.getvalue()
