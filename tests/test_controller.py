import pytest

from cardiograph.controller import (
    AspectRatioSelected,
    CallService,
    DownloadRequested,
    GenerationController,
    RequestFailed,
    ResponseReceived,
    SessionState,
    Status,
    Submitted,
    TextChanged,
    TriggerDownload,
    find_image,
    transition,
)
from cardiograph.errors import (
    GENERIC_ERROR_MESSAGE,
    NO_IMAGE_MESSAGE,
    VALIDATION_MESSAGE,
)
from cardiograph.generation import ResponsePart
from cardiograph.output.export import decode_data_uri
from cardiograph.request_builder import AspectRatio

from tests.conftest import FakeGenerator

# --- Pure transition function ---


def test_initial_state_is_idle():
    state = SessionState()
    assert state.status is Status.IDLE
    assert state.aspect_ratio is AspectRatio.SQUARE
    assert state.result_image is None and state.error_message is None
    assert state.error is None
    assert not state.can_submit


def test_text_and_format_events_update_state():
    state, effects = transition(SessionState(), TextChanged("Síndrome coronariana aguda"))
    state, more = transition(state, AspectRatioSelected("9:16"))
    assert effects == [] and more == []
    assert state.input_text == "Síndrome coronariana aguda"
    assert state.aspect_ratio is AspectRatio.PORTRAIT
    assert state.can_submit


@pytest.mark.parametrize("text", ["", "   ", "\n"])
def test_blank_submit_yields_validation_error_without_call(text):
    previous = SessionState(
        input_text=text,
        status=Status.SUCCESS,
        result_image="data:image/png;base64,AAAA",
    )
    state, effects = transition(previous, Submitted())
    assert effects == []
    assert state.status is Status.ERROR
    assert state.error_message == VALIDATION_MESSAGE
    assert state.result_image is None
    assert state.error_code == "VALIDATION_ERROR"


def test_submit_enters_loading_and_clears_previous_outcome():
    previous = SessionState(
        input_text="Hipertensão",
        aspect_ratio=AspectRatio.LANDSCAPE,
        status=Status.ERROR,
        error_message="falhou",
        error_code="SERVICE_ERROR",
        request_seq=3,
    )
    state, effects = transition(previous, Submitted())

    assert state.status is Status.LOADING
    assert state.result_image is None
    assert state.error_code is None
    assert state.error_message is None
    assert state.request_seq == 4
    assert not state.can_submit

    assert len(effects) == 1
    call = effects[0]
    assert isinstance(call, CallService)
    assert call.seq == 4
    assert call.request.aspect_ratio is AspectRatio.LANDSCAPE
    assert '"Hipertensão"' in call.request.prompt


def test_response_with_image_part_succeeds(png_bytes):
    loading = SessionState(input_text="x", status=Status.LOADING, request_seq=1)
    parts = (
        ResponsePart(text="Aqui está o infográfico"),
        ResponsePart(data=png_bytes, mime_type="image/png"),
        ResponsePart(data=b"second", mime_type="image/png"),
    )
    state, effects = transition(loading, ResponseReceived(1, parts))

    assert effects == []
    assert state.status is Status.SUCCESS
    assert state.error_message is None
    assert state.result_image.startswith("data:image/png;base64,")
    data, mime = decode_data_uri(state.result_image)
    assert data == png_bytes
    assert mime == "image/png"


@pytest.mark.parametrize(
    "parts",
    [(), (ResponsePart(text="Não consigo gerar esta imagem."),)],
)
def test_response_without_image_part_fails(parts):
    loading = SessionState(input_text="x", status=Status.LOADING, request_seq=1)
    state, _ = transition(loading, ResponseReceived(1, parts))
    assert state.status is Status.ERROR
    assert state.error_message == NO_IMAGE_MESSAGE
    assert state.error_code == "EMPTY_RESPONSE"
    assert state.error.to_dict()["code"] == "EMPTY_RESPONSE"
    assert state.result_image is None


@pytest.mark.parametrize(
    "error, message",
    [
        (RuntimeError("429 RESOURCE_EXHAUSTED"), "429 RESOURCE_EXHAUSTED"),
        (ConnectionError(), GENERIC_ERROR_MESSAGE),
        (ValueError("   "), GENERIC_ERROR_MESSAGE),
    ],
)
def test_request_failure_surfaces_message_or_fallback(error, message):
    loading = SessionState(input_text="x", status=Status.LOADING, request_seq=2)
    state, _ = transition(loading, RequestFailed(2, error))
    assert state.status is Status.ERROR
    assert state.error_message == message
    assert state.error_code == "SERVICE_ERROR"


def test_stale_responses_are_discarded(png_bytes):
    loading = SessionState(input_text="x", status=Status.LOADING, request_seq=5)

    state, _ = transition(loading, ResponseReceived(4, (ResponsePart(data=png_bytes),)))
    assert state == loading

    state, _ = transition(loading, RequestFailed(3, RuntimeError("old")))
    assert state == loading


def test_response_after_completion_is_ignored(png_bytes):
    done = SessionState(input_text="x", status=Status.ERROR, error_message="e", request_seq=1)
    state, _ = transition(done, ResponseReceived(1, (ResponsePart(data=png_bytes),)))
    assert state == done


def test_unknown_format_is_reported():
    state, effects = transition(SessionState(), AspectRatioSelected("4:3"))
    assert effects == []
    assert state.status is Status.ERROR
    assert "4:3" in state.error_message


def test_download_only_in_success(png_bytes):
    idle = SessionState()
    assert transition(idle, DownloadRequested(1700000000000)) == (idle, [])

    loading = SessionState(input_text="x", status=Status.LOADING, request_seq=1)
    success, _ = transition(loading, ResponseReceived(1, (ResponsePart(data=png_bytes),)))
    state, effects = transition(success, DownloadRequested(1700000000000))

    assert state == success
    assert effects == [TriggerDownload("cardiograph-1700000000000.png", png_bytes)]


def test_find_image_returns_first_inline_part(png_bytes):
    first = ResponsePart(data=png_bytes)
    assert find_image([ResponsePart(text="t"), first, ResponsePart(data=b"x")]) is first
    assert find_image([ResponsePart(text="t"), ResponsePart(data=b"")]) is None


def test_unknown_event_raises():
    with pytest.raises(TypeError):
        transition(SessionState(), object())


# --- Controller ---


def test_generate_success(config, png_bytes, image_part):
    generator = FakeGenerator(parts=[ResponsePart(text="ok"), image_part])
    controller = GenerationController(generator=generator, config=config)

    state = controller.generate("Bloqueio atrioventricular", "16:9")

    assert state.status is Status.SUCCESS
    assert state.image_bytes() == png_bytes
    assert len(generator.requests) == 1
    assert generator.requests[0].aspect_ratio is AspectRatio.LANDSCAPE


def test_generate_blank_never_calls_service(config):
    generator = FakeGenerator()
    controller = GenerationController(generator=generator, config=config)

    state = controller.generate("    ", "1:1")

    assert generator.requests == []
    assert state.status is Status.ERROR
    assert state.error_message == VALIDATION_MESSAGE


def test_generate_service_error(config):
    generator = FakeGenerator(error=RuntimeError("API key not valid"))
    controller = GenerationController(generator=generator, config=config)

    state = controller.generate("Endocardite", "9:16")

    assert state.status is Status.ERROR
    assert state.error_message == "API key not valid"
    assert len(generator.requests) == 1


def test_generate_empty_response(config):
    controller = GenerationController(generator=FakeGenerator(parts=[]), config=config)
    state = controller.generate("Miocardite")
    assert state.status is Status.ERROR
    assert state.error_message == NO_IMAGE_MESSAGE


def test_new_submission_clears_previous_outcome_before_call(config, image_part):
    seen = []
    generator = FakeGenerator(parts=[image_part])
    controller = GenerationController(generator=generator, config=config)
    generator.on_call = lambda request: seen.append(controller.state)

    controller.generate("Primeiro")
    assert controller.state.status is Status.SUCCESS

    generator.error = RuntimeError("falha")
    controller.generate("Segundo")

    assert len(seen) == 2
    for during in seen:
        assert during.status is Status.LOADING
        assert during.result_image is None
        assert during.error_message is None
    assert controller.state.status is Status.ERROR
    assert controller.state.result_image is None


def test_generate_unknown_format_does_not_submit(config):
    generator = FakeGenerator()
    controller = GenerationController(generator=generator, config=config)
    state = controller.generate("Pericardite", "4:3")
    assert generator.requests == []
    assert state.status is Status.ERROR
    assert state.error_code == "VALIDATION_ERROR"


def test_generate_after_failure_still_submits_with_new_format(config, image_part):
    generator = FakeGenerator(parts=[])
    controller = GenerationController(generator=generator, config=config)
    assert controller.generate("Miocardite").status is Status.ERROR

    generator.parts = [image_part]
    state = controller.generate("Miocardite", "landscape")

    assert state.status is Status.SUCCESS
    assert len(generator.requests) == 2
    assert generator.requests[1].aspect_ratio is AspectRatio.LANDSCAPE


def test_generate_repeated_unknown_format_never_submits(config):
    generator = FakeGenerator()
    controller = GenerationController(generator=generator, config=config)
    controller.generate("Pericardite", "4:3")
    state = controller.generate("Pericardite", "4:3")
    assert generator.requests == []
    assert state.status is Status.ERROR


def test_controller_builds_generator_from_config(config, image_part, monkeypatch):
    created = FakeGenerator(parts=[image_part])
    monkeypatch.setattr(
        "cardiograph.controller.GeneratorRegistry.from_config", lambda cfg: created
    )
    controller = GenerationController(config=config)
    assert controller.generate("Valvopatia").status is Status.SUCCESS
    assert controller.generator is created


def test_controller_unknown_generator_is_a_service_error(config):
    config.generator = "does-not-exist"
    controller = GenerationController(config=config)
    state = controller.generate("Cardiomiopatia")
    assert state.status is Status.ERROR
    assert state.error_message.startswith("Generator 'does-not-exist' not found.")
    assert state.error_code == "SERVICE_ERROR"


def test_controller_default_aspect_ratio_from_config(config):
    config.default_aspect_ratio = "portrait"
    controller = GenerationController(generator=FakeGenerator(), config=config)
    assert controller.state.aspect_ratio is AspectRatio.PORTRAIT


def test_download(config, png_bytes, image_part):
    controller = GenerationController(generator=FakeGenerator(parts=[image_part]), config=config)
    assert controller.download() is None

    controller.generate("Arritmias")
    effect = controller.download(timestamp_ms=42)
    assert effect.filename == "cardiograph-42.png"
    assert effect.data == png_bytes
    assert effect.mime_type == "image/png"
