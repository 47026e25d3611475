"""
Exception types for CardioGraph.

Three kinds of failure can end a submission:

    - :class:`ValidationError` – rejected locally, the service is never called.
    - :class:`EmptyResponseError` – the service answered without an image.
    - :class:`ServiceError` – the call itself raised (network, API, quota, ...).

None of them is fatal to the application; the controller turns each one
into an ``error`` state and the user may simply resubmit.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

VALIDATION_MESSAGE = "Por favor, insira o texto sobre cardiologia."
NO_IMAGE_MESSAGE = "Nenhuma imagem foi gerada. Tente novamente."
GENERIC_ERROR_MESSAGE = "Ocorreu um erro ao gerar o infográfico. Tente novamente."


class CardioGraphError(Exception):
    """Base exception for CardioGraph errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception to a plain error dictionary."""
        return {
            "code": self.code,
            "message": str(self),
            "details": self.details,
        }


class ValidationError(CardioGraphError):
    """Raised when user input is rejected before any network call."""

    def __init__(
        self,
        message: str = VALIDATION_MESSAGE,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class EmptyResponseError(CardioGraphError):
    """Raised when the service response carries no inline image part."""

    def __init__(
        self,
        message: str = NO_IMAGE_MESSAGE,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code="EMPTY_RESPONSE", details=details)


class ServiceError(CardioGraphError):
    """Raised when the call to the generation service fails."""

    def __init__(
        self,
        message: str = GENERIC_ERROR_MESSAGE,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code="SERVICE_ERROR", details=details)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ServiceError":
        """Wrap an arbitrary exception, keeping its message when it has one."""
        if isinstance(exc, ServiceError):
            return exc
        if exc is None:
            message = ""
        elif len(exc.args) == 1 and isinstance(exc.args[0], str):
            # str(KeyError) would quote the message
            message = exc.args[0].strip()
        else:
            message = str(exc).strip()
        return cls(
            message or GENERIC_ERROR_MESSAGE,
            details={"type": type(exc).__name__},
        )
