"""
Template for plugging another image provider into CardioGraph.

Usage:
    1. Subclass :class:`BaseGenerator` and implement ``generate()``.
    2. Register it with ``@GeneratorRegistry.register("your-provider")``.
    3. Set ``generator: your-provider`` in the YAML config.

The example below replays a PNG from disk instead of calling a provider,
which is handy for working on the Streamlit page offline.
"""

from __future__ import annotations

from typing import Any, List

from cardiograph import AppConfig, GenerationController
from cardiograph.generation import BaseGenerator, GeneratorRegistry, ResponsePart
from cardiograph.request_builder import GenerationRequest


@GeneratorRegistry.register("replay")
class ReplayGenerator(BaseGenerator):
    """Returns the same image for every request."""

    def __init__(self, image_path: str = "sample.png", **kwargs: Any):
        super().__init__(**kwargs)
        self.image_path = image_path

    def generate(self, request: GenerationRequest) -> List[ResponsePart]:
        with open(self.image_path, "rb") as fh:
            data = fh.read()
        print(f"[ReplayGenerator] {request.aspect_ratio.value}: {self.image_path}")
        return [ResponsePart(text="replayed"), ResponsePart(data=data, mime_type="image/png")]


if __name__ == "__main__":
    config = AppConfig(generator="replay", generator_params={"image_path": "sample.png"})
    state = GenerationController(config=config).generate("Teste", "9:16")
    print(state.status, state.error_message)
