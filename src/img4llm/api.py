"""Function-style entry points for callers that do not hold an optimizer.

Each call builds its collaborators from the explicit ``config`` (and
optional ``vlm`` backend) it is given; nothing is cached between calls.
"""

from __future__ import annotations

from collections.abc import Iterable

from img4llm.backends.ollama import OllamaVLM
from img4llm.config import OptimizerConfig
from img4llm.models import (
    OptimizeOptions,
    OptimizeResult,
    VLMAnalysisResult,
    VLMCapability,
)
from img4llm.optimizer import ImageOptimizer
from img4llm.protocols import ImageVLMBackend
from img4llm.vlm import VLMAnalyzer


def optimize_for_llm(
    image_bytes: bytes,
    options: OptimizeOptions | None = None,
    config: OptimizerConfig | None = None,
    vlm: ImageVLMBackend | None = None,
) -> OptimizeResult:
    """Optimize one image for LLM vision input. See :class:`ImageOptimizer`."""
    return ImageOptimizer(vlm=vlm, config=config).optimize(image_bytes, options)


def analyze_with_vlm(
    image_bytes: bytes,
    capabilities: Iterable[VLMCapability],
    model: str | None = None,
    config: OptimizerConfig | None = None,
    vlm: ImageVLMBackend | None = None,
) -> VLMAnalysisResult:
    """Run one VLM analysis and return only the decoded result.

    Raises
    ------
    VLMUnavailableError
        If the backend does not answer its availability probe.
    """
    config = config or OptimizerConfig()
    analyzer = VLMAnalyzer(vlm or OllamaVLM(config=config), config)
    result, _warnings = analyzer.analyze(image_bytes, capabilities, model)
    return result
