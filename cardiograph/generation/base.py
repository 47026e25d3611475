"""
Abstract base class for all image generation backends.

Any backend integrated into CardioGraph must subclass :class:`BaseGenerator`
and implement the :meth:`generate` method.

The controller calls ``generate()`` exactly once per submission and expects
the response as a list of :class:`ResponsePart` objects. Backends do not
decide whether a response "has an image"; they only translate the
provider's answer into parts.
"""

from __future__ import annotations

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from cardiograph.request_builder import GenerationRequest


@dataclass(frozen=True)
class ResponsePart:
    """One fragment of a provider response.

    Attributes:
        text: Text content, if the fragment carries any.
        data: Raw (decoded) binary content of an inline data fragment.
        mime_type: MIME type of ``data`` as reported by the provider.
    """

    text: Optional[str] = None
    data: Optional[bytes] = None
    mime_type: Optional[str] = None

    @property
    def has_inline_data(self) -> bool:
        return bool(self.data)

    @classmethod
    def inline(
        cls, data: Union[bytes, str], mime_type: Optional[str] = "image/png"
    ) -> "ResponsePart":
        """Build an inline data part from raw bytes or a base64 string."""
        if isinstance(data, str):
            data = base64.b64decode(data)
        return cls(data=data, mime_type=mime_type)


class BaseGenerator(ABC):
    """Abstract base class for text-to-image backends.

    Parameters:
        model_name: Registered backend name (e.g., ``"gemini"``).
        model: Provider model identifier.
        api_key: Provider credential.
        **kwargs: Additional backend-specific parameters.
    """

    def __init__(
        self,
        model_name: str = "",
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        **kwargs: Any,
    ):
        self.model_name = model_name
        self.model = model
        self.api_key = api_key
        self.extra_params = kwargs

    @abstractmethod
    def generate(self, request: GenerationRequest) -> List[ResponsePart]:
        """Send one request to the provider.

        Parameters:
            request: The assembled generation request.

        Returns:
            The response parts in provider order.
        """
        ...

    def setup(self) -> None:
        """Optional setup hook called before the first request.

        Override to create SDK clients, check credentials, etc.
        """
        pass

    def teardown(self) -> None:
        """Optional teardown hook. Override to release clients."""
        pass

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"model_name='{self.model_name}', model='{self.model}')"
        )
