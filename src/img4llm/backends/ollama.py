"""Ollama backend for the ImageVLMBackend protocol.

Provides a concrete implementation that communicates with a local Ollama
server via its HTTP API using ``httpx``.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from img4llm.config import OptimizerConfig

logger = logging.getLogger("img4llm")


class OllamaVLM:
    """Ollama-backed vision-language model.

    Satisfies :class:`~img4llm.protocols.ImageVLMBackend` via structural
    subtyping (no inheritance required).  Every method issues exactly one
    HTTP request; there are no retries.

    Parameters
    ----------
    base_url:
        Ollama server base URL (e.g. ``"http://localhost:11434"``).
    config:
        Optimizer configuration providing the default model and timeouts.
    """

    def __init__(
        self,
        base_url: str | None = None,
        config: OptimizerConfig | None = None,
    ) -> None:
        self._config = config or OptimizerConfig()
        self._base_url = (base_url or self._config.vlm_base_url).rstrip("/")

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def is_available(self, timeout: float | None = None) -> bool:
        """Return True if ``/api/tags`` answers with a 2xx status."""
        url = f"{self._base_url}/api/tags"
        effective_timeout = timeout or self._config.vlm_probe_timeout_seconds
        try:
            response = httpx.get(url, timeout=effective_timeout)
        except httpx.HTTPError as exc:
            logger.warning(
                "img4llm | vlm_probe | url=%s | detail=%s", url, exc
            )
            return False
        if not response.is_success:
            logger.warning(
                "img4llm | vlm_probe | url=%s | status=%d",
                url,
                response.status_code,
            )
            return False
        return True

    def generate(
        self,
        image_bytes: bytes,
        prompt: str,
        model: str,
        timeout: float | None = None,
    ) -> str:
        """Post one image and prompt to ``/api/generate`` and return the text.

        Posts with ``stream=False``.  A missing ``response`` field yields an
        empty string.

        Raises
        ------
        TimeoutError
            If the request times out.
        ConnectionError
            On connection failures, non-2xx statuses, or a non-JSON body.
        """
        url = f"{self._base_url}/api/generate"
        effective_timeout = timeout or self._config.vlm_timeout_seconds
        payload: dict[str, Any] = {
            "model": model,
            "prompt": prompt,
            "images": [base64.b64encode(image_bytes).decode("ascii")],
            "stream": False,
        }

        try:
            response = httpx.post(url, json=payload, timeout=effective_timeout)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise TimeoutError(f"Ollama generate timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise ConnectionError(
                f"Ollama generate failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ConnectionError(f"Ollama generate failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise ConnectionError(
                f"Ollama generate returned a non-JSON body: {exc}"
            ) from exc

        if not isinstance(data, dict):
            return ""
        text = data.get("response")
        return text if isinstance(text, str) else ""
