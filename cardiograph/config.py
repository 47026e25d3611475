"""
Application configuration for CardioGraph.

Defines the :class:`AppConfig` dataclass that holds every setting the
request builder, the generation backends and the user interfaces need:
    - Generator backend and model selection
    - API credential resolution
    - Image configuration defaults (resolution tier, aspect ratio)
    - Output location for downloaded infographics
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

import yaml

DEFAULT_MODEL = "gemini-3-pro-image-preview"
DEFAULT_IMAGE_SIZE = "1K"

# Environment variables checked, in order, for each provider's key.
API_KEY_ENV_VARS: Dict[str, tuple] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY"),
    "gpt-image": ("OPENAI_API_KEY",),
}


def resolve_api_key(generator: str, explicit_key: Optional[str] = None) -> Optional[str]:
    """Resolve an API key from an explicit value or environment variables.

    Parameters:
        generator: Registered generator name (``gemini``, ``gpt-image``).
        explicit_key: An explicitly provided key (takes priority).

    Returns:
        The resolved API key, or None if unavailable.
    """
    if explicit_key:
        return explicit_key

    for var in API_KEY_ENV_VARS.get(generator.lower(), ()):
        value = os.environ.get(var)
        if value:
            return value
    return None


@dataclass
class AppConfig:
    """Complete configuration of a CardioGraph session.

    Attributes:
        generator: Registered name of the image generation backend.
        model: Model identifier sent to the provider.
        api_key: Provider API key (or use the environment).
        image_size: Resolution tier requested from the provider.
        default_aspect_ratio: Aspect ratio tag selected when a session starts.
        output_dir: Directory where downloaded infographics are written.
        generator_params: Extra keyword arguments forwarded to the backend.
    """

    # ── Generation ──────────────────────────────────────────────────────
    generator: str = "gemini"
    model: str = DEFAULT_MODEL
    api_key: Optional[str] = None
    generator_params: Dict[str, Any] = field(default_factory=dict)

    # ── Image configuration ─────────────────────────────────────────────
    image_size: str = DEFAULT_IMAGE_SIZE
    default_aspect_ratio: str = "1:1"

    # ── Output ──────────────────────────────────────────────────────────
    output_dir: str = "./cardiograph_output"

    def __post_init__(self):
        if self.api_key is None:
            self.api_key = resolve_api_key(self.generator)

    @classmethod
    def from_yaml(cls, path: str) -> "AppConfig":
        """Load configuration from a YAML file.

        Parameters:
            path: Path to the YAML configuration file.

        Returns:
            A fully initialized :class:`AppConfig`.
        """
        with open(path, "r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AppConfig":
        """Create configuration from a plain dictionary."""
        return cls(**d)

    def to_yaml(self, path: str, include_api_key: bool = False) -> None:
        """Serialize the config to a YAML file.

        The API key is left out unless ``include_api_key`` is set.
        """
        d = asdict(self)
        if not include_api_key:
            d.pop("api_key", None)
        with open(path, "w", encoding="utf-8") as fh:
            yaml.dump(d, fh, default_flow_style=False, sort_keys=False)

    def summary(self) -> str:
        """Human-readable summary of the configuration."""
        lines = [
            f"Generator  : {self.generator}",
            f"Model      : {self.model}",
            f"Image size : {self.image_size}",
            f"Aspect     : {self.default_aspect_ratio}",
            f"API key    : {'set' if self.api_key else 'missing'}",
            f"Output     : {self.output_dir}",
        ]
        return "\n".join(lines)
