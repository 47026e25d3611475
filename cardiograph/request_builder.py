"""
Request Builder.

Turns the user's clinical text and the selected format into the request
sent to the image generation service. This module is responsible for:
    - The fixed infographic instruction template
    - Aspect ratio parsing and the API tag for each format
    - Rejecting blank input before anything touches the network
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from cardiograph.config import DEFAULT_IMAGE_SIZE, DEFAULT_MODEL, AppConfig
from cardiograph.errors import ValidationError


class AspectRatio(str, Enum):
    """Infographic formats offered to the user, valued by their API tag."""

    SQUARE = "1:1"
    PORTRAIT = "9:16"
    LANDSCAPE = "16:9"

    @property
    def label(self) -> str:
        return ASPECT_RATIO_LABELS[self]


ASPECT_RATIO_LABELS: Dict[AspectRatio, str] = {
    AspectRatio.LANDSCAPE: "Horizontal",
    AspectRatio.PORTRAIT: "Vertical",
    AspectRatio.SQUARE: "Quadrado",
}


# ── Instruction template ─────────────────────────────────────────────────────

PROMPT_TEMPLATE = """Atue como um especialista em cardiologia e design médico.
Crie um infográfico profissional, detalhado e visualmente rico explicando o seguinte texto:
"{text}"

Requisitos:
1. IDIOMA: Todo o texto no infográfico DEVE estar em PORTUGUÊS.
2. CONTEÚDO: Utilize terminologia médica correta, baseada em diretrizes de cardiologia. Simplifique conceitos complexos visualmente.
3. ESTILO: Design limpo, cores médicas (azuis, vermelhos, branco), diagramas claros, ícones relevantes.
4. FORMATO: O infográfico deve ser autossuficiente e explicativo."""


@dataclass(frozen=True)
class GenerationRequest:
    """A fully assembled request for one infographic.

    Attributes:
        prompt: Instruction text with the user's input embedded.
        aspect_ratio: Requested format.
        image_size: Resolution tier (e.g. ``"1K"``).
        model: Provider model identifier.
    """

    prompt: str
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    image_size: str = DEFAULT_IMAGE_SIZE
    model: str = DEFAULT_MODEL

    def image_config(self) -> Dict[str, str]:
        return {
            "aspect_ratio": self.aspect_ratio.value,
            "image_size": self.image_size,
        }

    def to_payload(self) -> Dict[str, Any]:
        """Return the request in the shape of a ``generate_content`` call."""
        return {
            "model": self.model,
            "contents": {"parts": [{"text": self.prompt}]},
            "config": {"image_config": self.image_config()},
        }


def parse_aspect_ratio(value: Union[str, AspectRatio, None]) -> AspectRatio:
    """Resolve an aspect ratio from an enum member, API tag or name.

    Example:
        ``"16:9"``, ``"landscape"`` and ``"Horizontal"`` all give
        :attr:`AspectRatio.LANDSCAPE`.

    Raises:
        ValidationError: If the value matches no known format.
    """
    if isinstance(value, AspectRatio):
        return value
    if value is None:
        return AspectRatio.SQUARE

    key = str(value).strip()
    for ratio in AspectRatio:
        if key == ratio.value:
            return ratio
        if key.lower() in (ratio.name.lower(), ratio.label.lower()):
            return ratio

    supported = ", ".join(r.value for r in AspectRatio)
    raise ValidationError(
        f"Formato desconhecido '{value}'. Suportados: {supported}.",
        details={"aspect_ratio": value},
    )


def is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def build_prompt(text: str) -> str:
    """Embed the user's text, unchanged, in the infographic template."""
    return PROMPT_TEMPLATE.format(text=text)


def build_request(
    text: Optional[str],
    aspect_ratio: Union[str, AspectRatio, None] = AspectRatio.SQUARE,
    config: Optional[AppConfig] = None,
) -> GenerationRequest:
    """Build the request for one infographic.

    Parameters:
        text: Clinical text or topic typed by the user.
        aspect_ratio: Selected format (enum, tag or name).
        config: Application config supplying model and resolution tier.

    Returns:
        A :class:`GenerationRequest`.

    Raises:
        ValidationError: If ``text`` is empty after trimming, or the aspect
            ratio is unknown.
    """
    if is_blank(text):
        raise ValidationError()

    ratio = parse_aspect_ratio(aspect_ratio)
    if config is None:
        return GenerationRequest(prompt=build_prompt(text), aspect_ratio=ratio)

    return GenerationRequest(
        prompt=build_prompt(text),
        aspect_ratio=ratio,
        image_size=config.image_size,
        model=config.model,
    )
