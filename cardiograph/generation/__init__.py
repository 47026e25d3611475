"""
Image generation backends.

Contains the abstract generator base class, the registry system for
pluggable provider backends, and the built-in Gemini and GPT-Image
implementations.
"""

from cardiograph.generation.base import BaseGenerator, ResponsePart
from cardiograph.generation.gemini_image import GeminiImageGenerator
from cardiograph.generation.gpt_image import GPTImageGenerator
from cardiograph.generation.registry import GeneratorRegistry

__all__ = [
    "BaseGenerator",
    "GeneratorRegistry",
    "GeminiImageGenerator",
    "GPTImageGenerator",
    "ResponsePart",
]
