"""Concrete backend implementations for img4llm."""

from __future__ import annotations

from img4llm.backends.ollama import OllamaVLM

__all__ = ["OllamaVLM"]
