"""
Gemini image generator backend.

Uses Google's Gemini image models (``gemini-3-pro-image-preview`` by
default) through the ``google-genai`` SDK's ``generate_content`` call.
The request carries the instruction text plus an ``ImageConfig`` with the
chosen aspect ratio and resolution tier; the image comes back as an
inline data part.

This is the default backend for CardioGraph.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from cardiograph.config import resolve_api_key
from cardiograph.generation.base import BaseGenerator, ResponsePart
from cardiograph.generation.registry import GeneratorRegistry
from cardiograph.request_builder import GenerationRequest


def _field(obj: Any, *names: str) -> Any:
    """Read the first present attribute or key among ``names``."""
    for name in names:
        if isinstance(obj, dict):
            value = obj.get(name)
        else:
            value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


@GeneratorRegistry.register("gemini")
class GeminiImageGenerator(BaseGenerator):
    """Generator backend for Google Gemini image models.

    Parameters:
        model_name: Registered name (default: ``"gemini"``).
        model: Gemini model identifier.
        api_key: Gemini API key. Falls back to ``GEMINI_API_KEY``,
            ``GOOGLE_API_KEY`` or ``API_KEY``.
    """

    def __init__(
        self,
        model_name: str = "gemini",
        model: Optional[str] = "gemini-3-pro-image-preview",
        api_key: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(
            model_name=model_name,
            model=model,
            api_key=resolve_api_key("gemini", api_key),
            **kwargs,
        )
        self._client = None

    def setup(self) -> None:
        """Initialize the Gemini client."""
        try:
            from google import genai
        except ImportError:
            raise ImportError(
                "google-genai package is required for GeminiImageGenerator. "
                "Install with: pip install google-genai"
            )

        if not self.api_key:
            raise ValueError(
                "Gemini API key is required. Set GEMINI_API_KEY env var "
                "or pass api_key to the generator."
            )

        self._client = genai.Client(api_key=self.api_key)
        print(f"[GeminiImageGenerator] Initialized with model: {self.model}")

    def generate(self, request: GenerationRequest) -> List[ResponsePart]:
        """Generate an infographic with ``models.generate_content``.

        Parameters:
            request: The assembled generation request.

        Returns:
            All parts of the response, in order.
        """
        if self._client is None:
            self.setup()

        from google.genai import types

        payload = request.to_payload()
        image_config = payload["config"]["image_config"]

        try:
            response = self._client.models.generate_content(
                model=payload["model"] or self.model,
                contents=payload["contents"],
                config=types.GenerateContentConfig(
                    image_config=types.ImageConfig(
                        aspect_ratio=image_config["aspect_ratio"],
                        image_size=image_config["image_size"],
                    ),
                ),
            )
        except Exception as e:
            print(f"[GeminiImageGenerator] Error generating image: {e}")
            raise

        parts = self.parse_response(response)
        print(
            f"[GeminiImageGenerator] Received {len(parts)} part(s) "
            f"({sum(1 for p in parts if p.has_inline_data)} inline)"
        )
        return parts

    @staticmethod
    def parse_response(response: Any) -> List[ResponsePart]:
        """Flatten a ``generate_content`` response into :class:`ResponsePart`.

        Accepts SDK response objects as well as plain JSON dictionaries
        (``inline_data`` or ``inlineData`` keys). Base64 strings are
        decoded; the SDK already hands back raw bytes.
        """
        parts: List[ResponsePart] = []
        candidates: Iterable[Any] = _field(response, "candidates") or []

        for candidate in candidates:
            content = _field(candidate, "content")
            for part in _field(content, "parts") or []:
                inline = _field(part, "inline_data", "inlineData")
                data = _field(inline, "data") if inline is not None else None
                if data:
                    mime = _field(inline, "mime_type", "mimeType") or "image/png"
                    parts.append(ResponsePart.inline(data, mime))
                    continue

                text = _field(part, "text")
                if text:
                    parts.append(ResponsePart(text=text))

        return parts

    def teardown(self) -> None:
        """Clean up the client."""
        self._client = None
