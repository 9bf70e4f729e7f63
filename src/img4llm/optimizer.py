"""ImageOptimizer -- orchestrator for preparing images for LLM vision input.

Routes an image through:

1. Metadata extraction and baseline strategy selection.
2. If auxiliary capabilities were requested, one VLM analysis via
   :class:`VLMAnalyzer`.  An unreachable VLM is absorbed as a warning.
3. A fallback cascade that returns exactly one :class:`OptimizeResult`:
   accepted semantic SVG, then text content with extracted text, then the
   baseline strategy.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field

from img4llm.backends.ollama import OllamaVLM
from img4llm.codec import encode_raster
from img4llm.config import OptimizerConfig
from img4llm.errors import ImageErrorCode
from img4llm.mime import mime_type_for_strategy
from img4llm.models import (
    ContentType,
    ImageAnalysisResult,
    ImageStrategy,
    OptimizeOptions,
    OptimizeResult,
    VLMAnalysisResult,
)
from img4llm.protocols import ImageVLMBackend
from img4llm.strategy import analyze_image
from img4llm.svg_validator import is_acceptable_svg
from img4llm.vlm import VLMAnalyzer, VLMUnavailableError

logger = logging.getLogger("img4llm")


@dataclass
class _CascadeState:
    """Inputs shared by every cascade outcome of one call."""

    image_bytes: bytes
    analysis: ImageAnalysisResult
    options: OptimizeOptions
    vlm_result: VLMAnalysisResult
    started: float
    warnings: list[str] = field(default_factory=list)


class ImageOptimizer:
    """Orchestrator for the image optimization pipeline.

    Pipeline: metadata -> strategy -> (VLM analysis) -> cascade -> result
    """

    def __init__(
        self,
        vlm: ImageVLMBackend | None = None,
        config: OptimizerConfig | None = None,
    ) -> None:
        self._config = config or OptimizerConfig()
        self._vlm = vlm or OllamaVLM(config=self._config)
        self._analyzer = VLMAnalyzer(self._vlm, self._config)

    def optimize(
        self,
        image_bytes: bytes,
        options: OptimizeOptions | None = None,
    ) -> OptimizeResult:
        """Optimize a single image. Synchronous.

        Raises
        ------
        ImageDecodeError
            If the image cannot be decoded.  Nothing else is fatal.
        """
        started = time.monotonic()
        options = options or OptimizeOptions()

        # ==============================================================
        # Step 1: Metadata and baseline strategy
        # ==============================================================
        analysis = analyze_image(image_bytes, self._config.color_sample_size)
        state = _CascadeState(
            image_bytes=image_bytes,
            analysis=analysis,
            options=options,
            vlm_result=VLMAnalysisResult(),
            started=started,
        )

        # ==============================================================
        # Step 2: No auxiliary capabilities -- baseline only
        # ==============================================================
        capabilities = options.capabilities()
        if not capabilities:
            return self._baseline_result(state)

        # ==============================================================
        # Step 3: VLM analysis (graceful fallback)
        # ==============================================================
        try:
            state.vlm_result, vlm_warnings = self._analyzer.analyze(
                image_bytes, capabilities, options.caption_model
            )
            state.warnings.extend(w.code for w in vlm_warnings)
        except VLMUnavailableError as exc:
            logger.warning(
                "img4llm | optimize | code=%s | detail=%s",
                exc.error.code,
                exc.error.message,
            )
            state.warnings.append(ImageErrorCode.W_IMAGE_VLM_UNAVAILABLE.value)

        # ==============================================================
        # Step 4: Cascade, first matching outcome wins
        # ==============================================================
        svg_code = self._accepted_svg(state)
        if svg_code is not None:
            return self._semantic_svg_result(state, svg_code)

        if self._has_extracted_text(state):
            return self._extracted_text_result(state)

        return self._baseline_result(state)

    async def aoptimize(
        self,
        image_bytes: bytes,
        options: OptimizeOptions | None = None,
    ) -> OptimizeResult:
        """Async wrapper via asyncio.to_thread().

        Offloads the synchronous ``optimize()`` call to a thread so
        callers using async frameworks can ``await`` without blocking
        the event loop.
        """
        return await asyncio.to_thread(self.optimize, image_bytes, options)

    # ------------------------------------------------------------------
    # Cascade guards
    # ------------------------------------------------------------------

    def _accepted_svg(self, state: _CascadeState) -> str | None:
        """Return the model's SVG if requested, offered, and within budget."""
        vlm = state.vlm_result
        if not (state.options.semantic_svg and vlm.svg_candidate and vlm.svg_code):
            return None
        if is_acceptable_svg(
            vlm.svg_code,
            max_bytes=self._config.svg_max_bytes,
            max_paths=self._config.svg_max_paths,
        ):
            return vlm.svg_code
        state.warnings.append(ImageErrorCode.W_IMAGE_SVG_REJECTED.value)
        return None

    @staticmethod
    def _has_extracted_text(state: _CascadeState) -> bool:
        options = state.options
        vlm = state.vlm_result
        return (
            (options.extract_text or options.generate_caption)
            and vlm.content_type == ContentType.TEXT
            and vlm.extracted_text is not None
        )

    # ------------------------------------------------------------------
    # Cascade outcomes
    # ------------------------------------------------------------------

    def _semantic_svg_result(self, state: _CascadeState, svg_code: str) -> OptimizeResult:
        return self._build_result(
            state,
            data=svg_code.strip().encode("utf-8"),
            strategy=ImageStrategy.SEMANTIC_VECTOR,
        )

    def _extracted_text_result(self, state: _CascadeState) -> OptimizeResult:
        data, strategy = self._apply_baseline(state)
        extracted = state.vlm_result.extracted_text if state.options.extract_text else None
        return self._build_result(state, data=data, strategy=strategy, extracted_text=extracted)

    def _baseline_result(self, state: _CascadeState) -> OptimizeResult:
        data, strategy = self._apply_baseline(state)
        return self._build_result(state, data=data, strategy=strategy)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _apply_baseline(self, state: _CascadeState) -> tuple[bytes, ImageStrategy]:
        strategy = state.analysis.strategy
        if strategy == ImageStrategy.KEEP_AS_IS:
            return state.image_bytes, strategy
        options = state.options
        data = encode_raster(
            state.image_bytes,
            max_dimension=options.max_dimension or self._config.max_dimension,
            quality=options.quality or self._config.jpeg_quality,
        )
        return data, ImageStrategy.RASTER_OPTIMIZE

    def _build_result(
        self,
        state: _CascadeState,
        data: bytes,
        strategy: ImageStrategy,
        extracted_text: str | None = None,
    ) -> OptimizeResult:
        metadata = state.analysis.metadata
        caption = None
        if state.options.generate_caption and state.vlm_result.caption:
            caption = state.vlm_result.caption
        elapsed = time.monotonic() - state.started

        logger.info(
            "img4llm | optimize | format=%s | dimensions=%dx%d | strategy=%s | "
            "size=%d->%d | caption=%s | time=%.1fs",
            metadata.format,
            metadata.dimensions.width,
            metadata.dimensions.height,
            strategy.value,
            len(state.image_bytes),
            len(data),
            caption is not None,
            elapsed,
        )

        return OptimizeResult(
            data=data,
            metadata=metadata,
            strategy=strategy,
            mime_type=mime_type_for_strategy(strategy, metadata.format),
            caption=caption,
            extracted_text=extracted_text,
            warnings=list(state.warnings),
            processing_time_seconds=elapsed,
        )
