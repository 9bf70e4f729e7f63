"""Tests for img4llm models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from img4llm.models import (
    ContentType,
    ImageStrategy,
    OptimizeOptions,
    VLMAnalysisResult,
    VLMCapability,
)


@pytest.mark.unit
class TestEnums:
    """Test enum values."""

    def test_strategy_values(self):
        assert {s.value for s in ImageStrategy} == {
            "RASTER_OPTIMIZE",
            "SEMANTIC_VECTOR",
            "KEEP_AS_IS",
        }

    def test_content_type_values(self):
        assert {c.value for c in ContentType} == {"diagram", "text", "photo", "complex"}


@pytest.mark.unit
class TestVLMAnalysisResult:
    """Test VLMAnalysisResult defaults."""

    def test_defaults(self):
        result = VLMAnalysisResult()

        assert result.caption == ""
        assert result.content_type == ContentType.COMPLEX
        assert result.svg_candidate is False
        assert result.svg_reason == ""
        assert result.svg_code is None
        assert result.extracted_text is None


@pytest.mark.unit
class TestOptimizeOptions:
    """Test OptimizeOptions."""

    def test_no_capabilities_by_default(self):
        assert OptimizeOptions().capabilities() == set()

    def test_all_capabilities(self):
        options = OptimizeOptions(generate_caption=True, semantic_svg=True, extract_text=True)

        assert options.capabilities() == {
            VLMCapability.CAPTION,
            VLMCapability.SEMANTIC_SVG,
            VLMCapability.EXTRACT_TEXT,
        }

    def test_quality_bounds(self):
        with pytest.raises(ValidationError):
            OptimizeOptions(quality=0)
        with pytest.raises(ValidationError):
            OptimizeOptions(quality=101)

    def test_max_dimension_positive(self):
        with pytest.raises(ValidationError):
            OptimizeOptions(max_dimension=0)
