"""Shared fixtures for img4llm tests."""

from __future__ import annotations

import io
import json

import pytest
from PIL import Image

from img4llm.config import OptimizerConfig


# ---------------------------------------------------------------------------
# Image helpers
# ---------------------------------------------------------------------------


def make_solid_png(width: int, height: int, color: tuple[int, int, int]) -> bytes:
    """Encode a single-color RGB image as PNG."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=color).save(buf, format="PNG")
    return buf.getvalue()


def make_striped_png(
    width: int, height: int, colors: list[tuple[int, int, int]]
) -> bytes:
    """Encode horizontal stripes of equal height, one per color, as PNG."""
    img = Image.new("RGB", (width, height))
    stripe_height = height // len(colors)
    for index, color in enumerate(colors):
        top = index * stripe_height
        bottom = height if index == len(colors) - 1 else top + stripe_height
        img.paste(color, (0, top, width, bottom))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def make_gradient_png(width: int, height: int) -> bytes:
    """Encode an image where nearly every pixel has a different color."""
    img = Image.new("RGB", (width, height))
    img.putdata(
        [(x % 256, y % 256, (x + y) % 256) for y in range(height) for x in range(width)]
    )
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def image_size(data: bytes) -> tuple[int, int]:
    with Image.open(io.BytesIO(data)) as img:
        return img.size


SIMPLE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="120" height="60" viewBox="0 0 120 60">'
    '<rect x="10" y="10" width="40" height="40" fill="#ff0000"/>'
    '<circle cx="90" cy="30" r="20" fill="#0000ff" stroke="black"/>'
    '<text x="10" y="58">A to B</text>'
    "</svg>"
)


# ---------------------------------------------------------------------------
# Mock Backend Classes
# ---------------------------------------------------------------------------


class MockVLMBackend:
    """Mock VLM backend satisfying ImageVLMBackend protocol."""

    def __init__(
        self,
        response_text: str = '{"caption": "A red square on a white background."}',
        available: bool = True,
        raise_on_generate: Exception | None = None,
    ) -> None:
        self._response_text = response_text
        self._available = available
        self._raise_on_generate = raise_on_generate
        self.probe_calls = 0
        self.generate_calls: list[dict] = []

    def generate(
        self,
        image_bytes: bytes,
        prompt: str,
        model: str,
        timeout: float | None = None,
    ) -> str:
        self.generate_calls.append({
            "image_bytes_len": len(image_bytes),
            "prompt": prompt,
            "model": model,
            "timeout": timeout,
        })
        if self._raise_on_generate is not None:
            raise self._raise_on_generate
        return self._response_text

    def is_available(self, timeout: float | None = None) -> bool:
        self.probe_calls += 1
        return self._available


def vlm_json(**fields) -> str:
    """Serialize a VLM reply object."""
    return json.dumps(fields)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def optimizer_config() -> OptimizerConfig:
    """Return an OptimizerConfig with defaults."""
    return OptimizerConfig()


@pytest.fixture
def mock_vlm_backend() -> MockVLMBackend:
    """Return a mock VLM backend with a caption-only reply."""
    return MockVLMBackend()


@pytest.fixture
def small_png() -> bytes:
    """A 100x80 solid orange PNG."""
    return make_solid_png(100, 80, (200, 100, 50))


@pytest.fixture
def large_png() -> bytes:
    """A 2000x1000 solid grey PNG."""
    return make_solid_png(2000, 1000, (50, 50, 50))


@pytest.fixture
def svg_bytes() -> bytes:
    """A small SVG document."""
    return SIMPLE_SVG.encode("utf-8")
