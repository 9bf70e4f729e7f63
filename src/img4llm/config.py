"""Configuration model for the img4llm optimizer.

Provides ``OptimizerConfig`` with all tunable parameters and sensible
defaults.  Supports loading overrides from YAML or JSON files via the
``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib

from pydantic import BaseModel


class OptimizerConfig(BaseModel):
    """All tunable parameters with sensible defaults.

    Override individual values via constructor kwargs or load a complete
    config from a file with ``OptimizerConfig.from_file(path)``.
    """

    # --- Raster Output ---
    max_dimension: int = 768
    jpeg_quality: int = 85
    color_sample_size: int = 1000

    # --- VLM Settings ---
    vision_model: str = "qwen3-vl:4b"
    vlm_base_url: str = "http://localhost:11434"
    vlm_probe_timeout_seconds: float = 5.0
    vlm_timeout_seconds: float = 120.0
    caption_prompt: str = (
        "Describe this image concisely. Focus on main subject, text content, "
        "purpose. Under 100 words. Respond with a JSON object: "
        '{"caption": "..."}'
    )
    analysis_prompt: str = (
        "Analyze this image and respond with a single JSON object and nothing "
        "else, using exactly these fields:\n"
        "{\n"
        '  "caption": "concise description, under 100 words",\n'
        '  "contentType": "diagram" | "text" | "photo" | "complex",\n'
        '  "svgCandidate": true | false,\n'
        '  "svgReason": "why the image can or cannot be redrawn as simple SVG",\n'
        '  "svgCode": "<svg ...>...</svg>",\n'
        '  "extractedText": "all text visible in the image"\n'
        "}\n"
        'Only include "svgCode" when contentType is "diagram". Keep it under '
        "5KB, use basic shapes (rect, circle, line, polyline, polygon, text) "
        "and no embedded images.\n"
        'Only include "extractedText" when contentType is "text".'
    )

    # --- Semantic SVG ---
    svg_max_bytes: int = 5120
    svg_max_paths: int = 10

    # --- Logging / PII Safety ---
    log_captions: bool = False
    log_responses: bool = False

    @classmethod
    def from_file(cls, path: str) -> OptimizerConfig:
        """Load configuration from a YAML or JSON file.

        File format is detected by extension: ``.yaml`` / ``.yml`` for YAML,
        ``.json`` for JSON.  Any keys present in the file override the
        corresponding defaults; keys not present retain their defaults.
        """
        file_path = pathlib.Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = file_path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            try:
                import yaml  # type: ignore[import-untyped]
            except ImportError as exc:
                raise ImportError(
                    "pyyaml is required to load YAML config files. "
                    "Install it with: pip install 'img4llm[yaml]'"
                ) from exc
            with open(file_path) as fh:
                data = yaml.safe_load(fh)
        elif suffix == ".json":
            with open(file_path) as fh:
                data = json.load(fh)
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'. "
                "Use .yaml, .yml, or .json."
            )

        if data is None:
            data = {}

        return cls(**data)
