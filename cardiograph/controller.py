"""
Generation Controller.

The lifecycle of one infographic request, written as a state machine::

    idle ──submit──> loading ──image──> success
                        │
                        └──no image / failure──> error

    success | error ──submit──> loading

It is split in two layers:

    1. :func:`transition` – a pure function ``(state, event) -> (state, effects)``.
       It never touches the network or the filesystem, so every rule of the
       lifecycle can be tested without a UI or a provider.
    2. :class:`GenerationController` – holds the current :class:`SessionState`,
       runs ``CallService`` effects against a generator backend and feeds the
       outcome back in as events. ``TriggerDownload`` effects are handed back
       to the caller (the Streamlit page or the CLI).

Each submission is stamped with a sequence number. A response or failure
carrying an older number than the latest submission is ignored, so the most
recent submission always wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from cardiograph.config import AppConfig
from cardiograph.errors import (
    CardioGraphError,
    EmptyResponseError,
    ServiceError,
    ValidationError,
)
from cardiograph.generation import BaseGenerator, GeneratorRegistry, ResponsePart
from cardiograph.output.export import decode_data_uri, download_filename, to_data_uri
from cardiograph.request_builder import (
    AspectRatio,
    GenerationRequest,
    build_request,
    parse_aspect_ratio,
)


class Status(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class SessionState:
    """Everything the UI shows for one session.

    ``result_image`` and ``error_message`` are never both set.
    """

    input_text: str = ""
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    status: Status = Status.IDLE
    result_image: Optional[str] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    request_seq: int = 0

    @property
    def is_loading(self) -> bool:
        return self.status is Status.LOADING

    @property
    def can_submit(self) -> bool:
        """Whether the submit control should be enabled."""
        return not self.is_loading and bool(self.input_text)

    @property
    def error(self) -> Optional[CardioGraphError]:
        """The current failure as an exception, or ``None`` outside the error state."""
        if self.error_message is None:
            return None
        return CardioGraphError(self.error_message, code=self.error_code or "UNKNOWN_ERROR")

    def image_bytes(self) -> Optional[bytes]:
        if self.result_image is None:
            return None
        data, _ = decode_data_uri(self.result_image)
        return data


# ── Events ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TextChanged:
    text: str


@dataclass(frozen=True)
class AspectRatioSelected:
    aspect_ratio: Union[str, AspectRatio]


@dataclass(frozen=True)
class Submitted:
    pass


@dataclass(frozen=True)
class ResponseReceived:
    seq: int
    parts: Tuple[ResponsePart, ...] = ()


@dataclass(frozen=True)
class RequestFailed:
    seq: int
    error: BaseException


@dataclass(frozen=True)
class DownloadRequested:
    timestamp_ms: Optional[int] = None


Event = Union[
    TextChanged,
    AspectRatioSelected,
    Submitted,
    ResponseReceived,
    RequestFailed,
    DownloadRequested,
]


# ── Effects ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CallService:
    seq: int
    request: GenerationRequest


@dataclass(frozen=True)
class TriggerDownload:
    filename: str
    data: bytes = field(repr=False)
    mime_type: str = "image/png"


Effect = Union[CallService, TriggerDownload]


def find_image(parts: Sequence[ResponsePart]) -> Optional[ResponsePart]:
    """Return the first part carrying inline binary data, if any."""
    for part in parts:
        if part.has_inline_data:
            return part
    return None


def _failed(state: SessionState, error: CardioGraphError) -> SessionState:
    return replace(
        state,
        status=Status.ERROR,
        result_image=None,
        error_message=error.message,
        error_code=error.code,
    )


def transition(
    state: SessionState,
    event: Event,
    config: Optional[AppConfig] = None,
) -> Tuple[SessionState, List[Effect]]:
    """Compute the next state and the effects an event produces.

    Parameters:
        state: Current session state.
        event: The event to apply.
        config: Supplies model and resolution tier for new requests.

    Returns:
        ``(next_state, effects)``. ``effects`` holds at most one
        :class:`CallService` or one :class:`TriggerDownload`.
    """
    if isinstance(event, TextChanged):
        return replace(state, input_text=event.text), []

    if isinstance(event, AspectRatioSelected):
        try:
            ratio = parse_aspect_ratio(event.aspect_ratio)
        except ValidationError as e:
            return _failed(state, e), []
        return replace(state, aspect_ratio=ratio), []

    if isinstance(event, Submitted):
        try:
            request = build_request(state.input_text, state.aspect_ratio, config)
        except ValidationError as e:
            return _failed(state, e), []

        seq = state.request_seq + 1
        loading = replace(
            state,
            status=Status.LOADING,
            result_image=None,
            error_message=None,
            error_code=None,
            request_seq=seq,
        )
        return loading, [CallService(seq=seq, request=request)]

    if isinstance(event, (ResponseReceived, RequestFailed)):
        if event.seq != state.request_seq or not state.is_loading:
            return state, []

        if isinstance(event, RequestFailed):
            return _failed(state, ServiceError.from_exception(event.error)), []

        image = find_image(event.parts)
        if image is None:
            return _failed(state, EmptyResponseError()), []

        success = replace(
            state,
            status=Status.SUCCESS,
            result_image=to_data_uri(image.data, "image/png"),
            error_message=None,
            error_code=None,
        )
        return success, []

    if isinstance(event, DownloadRequested):
        if state.status is not Status.SUCCESS or state.result_image is None:
            return state, []
        data = state.image_bytes()
        return state, [TriggerDownload(download_filename(event.timestamp_ms), data)]

    raise TypeError(f"Unknown event: {event!r}")


class GenerationController:
    """Runs the state machine against a generator backend.

    Parameters:
        generator: Backend to call. Created from ``config`` on first use
            when omitted.
        config: Application configuration.
        state: Initial state; defaults to an idle session using the
            configured default aspect ratio.
    """

    def __init__(
        self,
        generator: Optional[BaseGenerator] = None,
        config: Optional[AppConfig] = None,
        state: Optional[SessionState] = None,
    ):
        self.config = config or AppConfig()
        self.generator = generator
        if state is None:
            state = SessionState(
                aspect_ratio=parse_aspect_ratio(self.config.default_aspect_ratio)
            )
        self.state = state

    def dispatch(self, event: Event) -> List[Effect]:
        """Apply an event and run the service calls it triggers.

        Returns:
            Effects the controller does not run itself (downloads).
        """
        pending: List[Event] = [event]
        unhandled: List[Effect] = []

        while pending:
            self.state, effects = transition(self.state, pending.pop(0), self.config)
            for effect in effects:
                if isinstance(effect, CallService):
                    pending.append(self._call_service(effect))
                else:
                    unhandled.append(effect)

        return unhandled

    def _call_service(self, effect: CallService) -> Event:
        request = effect.request
        print(
            f"[Controller] Request #{effect.seq}: "
            f"{request.aspect_ratio.value} @ {request.image_size} ({request.model})"
        )
        try:
            if self.generator is None:
                self.generator = GeneratorRegistry.from_config(self.config)
            parts = self.generator.generate(request)
        except Exception as e:
            print(f"[Controller] Request #{effect.seq} failed: {e}")
            return RequestFailed(seq=effect.seq, error=e)

        return ResponseReceived(seq=effect.seq, parts=tuple(parts))

    def generate(
        self,
        text: str,
        aspect_ratio: Union[str, AspectRatio, None] = None,
    ) -> SessionState:
        """Submit ``text`` in the given format and return the resulting state.

        Blank text ends in the error state without calling the service.
        """
        self.dispatch(TextChanged(text))
        if aspect_ratio is not None:
            selected = AspectRatioSelected(aspect_ratio)
            rejected = transition(SessionState(), selected)[0].status is Status.ERROR
            self.dispatch(selected)
            if rejected:
                return self.state
        self.dispatch(Submitted())
        return self.state

    def download(self, timestamp_ms: Optional[int] = None) -> Optional[TriggerDownload]:
        """Request a download of the current image, if there is one."""
        for effect in self.dispatch(DownloadRequested(timestamp_ms)):
            if isinstance(effect, TriggerDownload):
                return effect
        return None
