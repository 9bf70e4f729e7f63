"""Single-round-trip image analysis via a Vision-Language Model.

``VLMAnalyzer`` probes the backend once, sends one prompt chosen from the
requested capabilities, and decodes the free-form reply into a fully
populated ``VLMAnalysisResult``.  Only an unreachable backend raises;
failed calls and malformed replies degrade to default fields.
"""

from __future__ import annotations

import json
import logging
import re
import time
from collections.abc import Iterable
from typing import Any

from img4llm.config import OptimizerConfig
from img4llm.errors import ImageErrorCode, ImageOptimizeError
from img4llm.models import ContentType, VLMAnalysisResult, VLMCapability
from img4llm.protocols import ImageVLMBackend

logger = logging.getLogger("img4llm")

_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")


class VLMUnavailableError(Exception):
    """Raised when the VLM backend does not answer its availability probe."""

    def __init__(self, error: ImageOptimizeError) -> None:
        self.error = error
        super().__init__(error.message)


# ---------------------------------------------------------------------------
# Lenient decoding
# ---------------------------------------------------------------------------


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Find a JSON object in free-form model output.

    Tries the whole text first, then the outermost brace-delimited block.
    Returns None when neither parses to an object.
    """
    try:
        data = json.loads(text)
    except ValueError:
        data = None
    if isinstance(data, dict):
        return data

    match = _JSON_BLOCK_RE.search(text)
    if match is None:
        return None
    try:
        data = json.loads(match.group(0))
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _optional_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def validate_fields(data: dict[str, Any]) -> VLMAnalysisResult:
    """Type-check each field independently, defaulting anything unexpected."""
    caption = data.get("caption")
    svg_reason = data.get("svgReason")

    content_type = ContentType.COMPLEX
    raw_type = data.get("contentType")
    if isinstance(raw_type, str):
        try:
            content_type = ContentType(raw_type)
        except ValueError:
            pass

    return VLMAnalysisResult(
        caption=caption.strip() if isinstance(caption, str) else "",
        content_type=content_type,
        svg_candidate=data.get("svgCandidate") is True,
        svg_reason=svg_reason if isinstance(svg_reason, str) else "",
        svg_code=_optional_text(data.get("svgCode")),
        extracted_text=_optional_text(data.get("extractedText")),
    )


def parse_vlm_response(
    text: str,
    warnings: list[ImageOptimizeError] | None = None,
) -> VLMAnalysisResult:
    """Decode model output into a ``VLMAnalysisResult``. Never raises.

    If no JSON object can be recovered, the trimmed text becomes the caption
    and every other field keeps its default.  A
    ``W_IMAGE_VLM_MALFORMED_RESPONSE`` warning is appended to *warnings*
    when a list is given.
    """
    data = extract_json_object(text)
    if data is not None:
        return validate_fields(data)

    if warnings is not None:
        warnings.append(
            ImageOptimizeError(
                code=ImageErrorCode.W_IMAGE_VLM_MALFORMED_RESPONSE.value,
                message="VLM response contained no JSON object; using raw text as caption",
                stage="vlm",
                recoverable=True,
            )
        )
    return VLMAnalysisResult(caption=text.strip())


# ---------------------------------------------------------------------------
# VLMAnalyzer
# ---------------------------------------------------------------------------


class VLMAnalyzer:
    """Runs one VLM conversation for an image.

    The backend is probed once and called at most once; there are no
    retries.
    """

    def __init__(
        self,
        vlm: ImageVLMBackend,
        config: OptimizerConfig,
    ) -> None:
        self._vlm = vlm
        self._config = config

    def select_prompt(self, capabilities: Iterable[VLMCapability]) -> str:
        """Use the full analysis prompt for anything beyond captioning."""
        if set(capabilities) - {VLMCapability.CAPTION}:
            return self._config.analysis_prompt
        return self._config.caption_prompt

    def analyze(
        self,
        image_bytes: bytes,
        capabilities: Iterable[VLMCapability],
        model: str | None = None,
    ) -> tuple[VLMAnalysisResult, list[ImageOptimizeError]]:
        """Analyze an image and return (result, warnings).

        Raises
        ------
        VLMUnavailableError
            If the availability probe fails.
        """
        warnings: list[ImageOptimizeError] = []
        model = model or self._config.vision_model

        # 1. Availability probe
        if not self._vlm.is_available(timeout=self._config.vlm_probe_timeout_seconds):
            raise VLMUnavailableError(
                ImageOptimizeError(
                    code=ImageErrorCode.E_IMAGE_VLM_UNAVAILABLE.value,
                    message="VLM backend is not available",
                    stage="vlm",
                )
            )

        # 2. Prompt selection
        prompt = self.select_prompt(capabilities)

        # 3. Single invocation
        start = time.monotonic()
        try:
            text = self._vlm.generate(
                image_bytes=image_bytes,
                prompt=prompt,
                model=model,
                timeout=self._config.vlm_timeout_seconds,
            )
        except (ConnectionError, TimeoutError) as exc:
            logger.warning("img4llm | vlm | model=%s | call failed | detail=%s", model, exc)
            warnings.append(
                ImageOptimizeError(
                    code=ImageErrorCode.W_IMAGE_VLM_CALL_FAILED.value,
                    message=f"VLM call failed: {exc}",
                    stage="vlm",
                    recoverable=True,
                )
            )
            return VLMAnalysisResult(), warnings
        except Exception as exc:
            logger.warning(
                "img4llm | vlm | model=%s | backend error | detail=%s", model, exc
            )
            warnings.append(
                ImageOptimizeError(
                    code=ImageErrorCode.W_IMAGE_VLM_CALL_FAILED.value,
                    message=f"VLM backend error: {exc}",
                    stage="vlm",
                    recoverable=True,
                )
            )
            return VLMAnalysisResult(), warnings
        duration = time.monotonic() - start

        if self._config.log_responses:
            logger.debug("img4llm | vlm | model=%s | response=%r", model, text)

        # 4. Extraction and field validation
        result = parse_vlm_response(text, warnings)

        logger.debug(
            "img4llm | vlm | model=%s | content_type=%s | svg_candidate=%s | time=%.1fs",
            model,
            result.content_type.value,
            result.svg_candidate,
            duration,
        )
        if self._config.log_captions:
            logger.debug("img4llm | vlm | caption=%r", result.caption)

        return result, warnings
