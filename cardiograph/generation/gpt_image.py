"""
GPT-Image generator backend.

Uses the OpenAI ``gpt-image-1`` model via the Images API as an alternative
to Gemini. The Images API has no aspect-ratio parameter, so each format is
mapped to the closest supported size.

Reference: https://platform.openai.com/docs/guides/images
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from cardiograph.config import resolve_api_key
from cardiograph.generation.base import BaseGenerator, ResponsePart
from cardiograph.generation.registry import GeneratorRegistry
from cardiograph.request_builder import AspectRatio, GenerationRequest

SIZES: Dict[AspectRatio, str] = {
    AspectRatio.SQUARE: "1024x1024",
    AspectRatio.PORTRAIT: "1024x1536",
    AspectRatio.LANDSCAPE: "1536x1024",
}


@GeneratorRegistry.register("gpt-image")
class GPTImageGenerator(BaseGenerator):
    """Generator backend for OpenAI's GPT-Image model.

    Parameters:
        model_name: Registered name (default: ``"gpt-image"``).
        model: Ignored in favour of ``openai_model`` unless it names a
            ``gpt-image`` model.
        api_key: OpenAI API key. Falls back to ``OPENAI_API_KEY`` env var.
        openai_model: Actual OpenAI model name (``"gpt-image-1"``).
        quality: Image quality (``"low"``, ``"medium"``, ``"high"``).
    """

    def __init__(
        self,
        model_name: str = "gpt-image",
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        openai_model: str = "gpt-image-1",
        quality: str = "medium",
        **kwargs: Any,
    ):
        if model and model.startswith("gpt-image"):
            openai_model = model
        super().__init__(
            model_name=model_name,
            model=openai_model,
            api_key=resolve_api_key("gpt-image", api_key),
            **kwargs,
        )
        self.quality = quality
        self._client = None

    def setup(self) -> None:
        """Initialize the OpenAI client."""
        try:
            from openai import OpenAI
        except ImportError:
            raise ImportError(
                "openai package is required for GPTImageGenerator. "
                "Install with: pip install openai"
            )

        if not self.api_key:
            raise ValueError(
                "OpenAI API key is required. Set OPENAI_API_KEY env var "
                "or pass api_key to the generator."
            )

        self._client = OpenAI(api_key=self.api_key)
        print(f"[GPTImageGenerator] Initialized with model: {self.model}")

    def generate(self, request: GenerationRequest) -> List[ResponsePart]:
        """Generate an infographic using the OpenAI Images API.

        Parameters:
            request: The assembled generation request. ``image_size`` is
                not forwarded; the size follows the aspect ratio.

        Returns:
            One inline part per returned image (usually exactly one).
        """
        if self._client is None:
            self.setup()

        try:
            result = self._client.images.generate(
                model=self.model,
                prompt=request.prompt,
                size=SIZES[request.aspect_ratio],
                quality=self.quality,
                n=1,
                output_format="png",
            )
        except Exception as e:
            print(f"[GPTImageGenerator] Error generating image: {e}")
            raise

        parts = []
        for item in result.data or []:
            if getattr(item, "b64_json", None):
                parts.append(ResponsePart.inline(item.b64_json, "image/png"))
        return parts

    def teardown(self) -> None:
        """Clean up the client."""
        self._client = None
