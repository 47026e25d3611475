import pytest

from cardiograph.config import AppConfig
from cardiograph.generation import BaseGenerator, GeneratorRegistry, ResponsePart

# Smallest valid PNG: 1x1 transparent pixel.
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000a49444154789c63000100000500010d0a2db40000000049454e44ae426082"
)


@GeneratorRegistry.register("fake")
class FakeGenerator(BaseGenerator):
    """Simulated image service: returns canned parts or raises."""

    def __init__(self, parts=None, error=None, on_call=None, **kwargs):
        kwargs.setdefault("model_name", "fake")
        super().__init__(**kwargs)
        self.parts = [] if parts is None else list(parts)
        self.error = error
        self.on_call = on_call
        self.requests = []

    def generate(self, request):
        self.requests.append(request)
        if self.on_call is not None:
            self.on_call(request)
        if self.error is not None:
            raise self.error
        return list(self.parts)


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def image_part():
    return ResponsePart(data=PNG_BYTES, mime_type="image/png")


@pytest.fixture
def config(monkeypatch):
    for var in ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    return AppConfig(generator="fake", api_key="test-key")
