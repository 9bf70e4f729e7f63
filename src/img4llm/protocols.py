"""Backend protocols for the img4llm package.

Defines the ``ImageVLMBackend`` protocol for vision-language model backends.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ImageVLMBackend(Protocol):
    """Interface for Vision-Language Model backends (e.g., Ollama + qwen3-vl).

    Accepts raw image bytes and a prompt and returns the model's free-form
    text.  Transport failures surface as ``ConnectionError`` or
    ``TimeoutError``.
    """

    def generate(
        self,
        image_bytes: bytes,
        prompt: str,
        model: str,
        timeout: float | None = None,
    ) -> str:
        """Run one non-streaming generation. Returns raw response text."""
        ...

    def is_available(self, timeout: float | None = None) -> bool:
        """Probe the status endpoint once. Never raises."""
        ...


__all__ = ["ImageVLMBackend"]
