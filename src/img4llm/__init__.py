"""img4llm -- prepare images for vision-capable LLMs."""

from img4llm.api import analyze_with_vlm, optimize_for_llm
from img4llm.backends.ollama import OllamaVLM
from img4llm.codec import decode_metadata, decode_raw_samples, encode_raster
from img4llm.config import OptimizerConfig
from img4llm.errors import ImageDecodeError, ImageErrorCode, ImageOptimizeError
from img4llm.metadata import count_distinct_colors, extract_metadata
from img4llm.mime import get_image_mime_type, get_image_mime_type_from_format
from img4llm.models import (
    ContentType,
    ImageAnalysisResult,
    ImageDimensions,
    ImageMetadata,
    ImageStrategy,
    OptimizeOptions,
    OptimizeResult,
    VLMAnalysisResult,
    VLMCapability,
)
from img4llm.optimizer import ImageOptimizer
from img4llm.protocols import ImageVLMBackend
from img4llm.strategy import analyze_image, determine_strategy
from img4llm.svg_validator import is_acceptable_svg
from img4llm.vlm import VLMAnalyzer, VLMUnavailableError, parse_vlm_response

__all__ = [
    # Entry points
    "extract_metadata",
    "determine_strategy",
    "analyze_image",
    "optimize_for_llm",
    "analyze_with_vlm",
    # Orchestration
    "ImageOptimizer",
    "VLMAnalyzer",
    # Config
    "OptimizerConfig",
    # Components
    "count_distinct_colors",
    "is_acceptable_svg",
    "parse_vlm_response",
    "decode_metadata",
    "decode_raw_samples",
    "encode_raster",
    "get_image_mime_type",
    "get_image_mime_type_from_format",
    # Models -- enums
    "ImageStrategy",
    "ContentType",
    "VLMCapability",
    "ImageErrorCode",
    # Models -- data
    "ImageDimensions",
    "ImageMetadata",
    "ImageAnalysisResult",
    "VLMAnalysisResult",
    "OptimizeOptions",
    "OptimizeResult",
    # Errors
    "ImageOptimizeError",
    "ImageDecodeError",
    "VLMUnavailableError",
    # Backends
    "ImageVLMBackend",
    "OllamaVLM",
]
