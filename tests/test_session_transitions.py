from models.session_models import GeneratedImage, GenerationFailure, UploadedImage
from services.generation.prompts import DEFAULT_INSTRUCTION
from services.generation.transitions import (
    CompleteGeneration,
    EditFeedback,
    EditInstruction,
    FailGeneration,
    FinishGeneration,
    RejectGeneration,
    ResetSession,
    StartGeneration,
    UploadImage,
    apply,
    initial_state,
)

FAILURE = GenerationFailure(kind="NoImageInResponse", message="No image generated.")


def _busy_state():
    state = initial_state("s1")
    state = apply(state, UploadImage(UploadedImage(data=b"one", media_type="image/jpeg")))
    state = apply(state, EditInstruction("add hair"))
    state = apply(state, EditFeedback("higher hairline"))
    state = apply(state, CompleteGeneration(GeneratedImage(data="R0VO"), source=state.uploaded_image))
    return apply(state, FailGeneration(FAILURE, source=state.uploaded_image))


def test_initial_state_uses_default_instruction():
    state = initial_state("s1")
    assert state.instruction == DEFAULT_INSTRUCTION
    assert state.uploaded_image is None
    assert state.in_flight is False


def test_upload_clears_result_feedback_and_error_but_keeps_instruction():
    state = apply(_busy_state(), UploadImage(UploadedImage(data=b"two")))

    assert state.uploaded_image.data == b"two"
    assert state.generated_image is None
    assert state.feedback == ""
    assert state.error is None
    assert state.instruction == "add hair"


def test_transitions_do_not_mutate_previous_state():
    before = initial_state("s1")
    after = apply(before, EditInstruction("new"))
    assert before.instruction == DEFAULT_INSTRUCTION
    assert after.instruction == "new"


def test_start_sets_in_flight_and_clears_error():
    state = apply(_busy_state(), StartGeneration())
    assert state.in_flight is True
    assert state.error is None


def test_failure_keeps_previous_generated_image():
    state = apply(initial_state("s1"), CompleteGeneration(GeneratedImage(data="R0VO")))
    state = apply(state, FailGeneration(FAILURE))
    assert state.generated_image.data == "R0VO"
    assert state.error == FAILURE


def test_reject_leaves_in_flight_false():
    state = apply(initial_state("s1"), RejectGeneration(GenerationFailure("MissingImage", "Please upload an image.")))
    assert state.in_flight is False
    assert state.error.kind == "MissingImage"


def test_finish_releases_in_flight():
    state = apply(apply(initial_state("s1"), StartGeneration()), FinishGeneration())
    assert state.in_flight is False


def test_reset_clears_everything_and_restores_default():
    state = apply(_busy_state(), ResetSession())

    assert state.uploaded_image is None
    assert state.generated_image is None
    assert state.feedback == ""
    assert state.error is None
    assert state.instruction == DEFAULT_INSTRUCTION


def test_reset_does_not_touch_in_flight():
    state = apply(apply(initial_state("s1"), StartGeneration()), ResetSession())
    assert state.in_flight is True


def test_result_for_replaced_photo_is_dropped():
    first = UploadedImage(data=b"one")
    state = apply(initial_state("s1"), UploadImage(first))
    state = apply(state, StartGeneration())
    state = apply(state, UploadImage(UploadedImage(data=b"two")))

    state = apply(state, CompleteGeneration(GeneratedImage(data="R0VO"), source=first))
    state = apply(state, FailGeneration(FAILURE, source=first))

    assert state.uploaded_image.data == b"two"
    assert state.generated_image is None
    assert state.error is None


def test_result_after_reset_is_dropped():
    first = UploadedImage(data=b"one")
    state = apply(initial_state("s1"), UploadImage(first))
    state = apply(state, ResetSession())

    state = apply(state, CompleteGeneration(GeneratedImage(data="R0VO"), source=first))

    assert state.uploaded_image is None
    assert state.generated_image is None
