"""
CardioGraph: clinical cardiology text to AI-generated infographics.

Type a clinical topic, pick a format (square, portrait or landscape) and
CardioGraph asks a generative image model (Gemini by default) for a
self-contained infographic in Portuguese, ready to preview and download.

Modules:
    - request_builder: Instruction template, aspect ratios, input validation
    - controller: Request lifecycle state machine (idle/loading/success/error)
    - generation: Pluggable image provider backends (Gemini, GPT-Image)
    - output: Data-URI encoding and saving of infographics
    - dashboard: Streamlit user interface

Quick Start:
    >>> from cardiograph import GenerationController
    >>> controller = GenerationController()
    >>> state = controller.generate("IAM com supra de ST", "16:9")
    >>> state.status
"""

__version__ = "0.1.0"
__author__ = "CardioGraph Team"

from cardiograph.config import AppConfig
from cardiograph.controller import GenerationController, SessionState, Status
from cardiograph.generation.registry import GeneratorRegistry
from cardiograph.request_builder import AspectRatio, build_request

__all__ = [
    "AppConfig",
    "AspectRatio",
    "GenerationController",
    "GeneratorRegistry",
    "SessionState",
    "Status",
    "build_request",
    "__version__",
]
