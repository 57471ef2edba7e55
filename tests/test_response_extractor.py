import pytest

from models.model_messages import Candidate, InlineData, ModelResponse, Part
from services.generation import response_extractor
from services.generation.errors import NoImageInResponse


def _image(data: str) -> Part:
    return Part(inline_data=InlineData(mime_type="image/png", data=data))


def test_first_image_part_wins():
    response = ModelResponse(candidates=[Candidate(parts=[Part(text="Here you go"), _image("A"), _image("B")])])
    assert response_extractor.extract(response).data == "A"


def test_later_candidates_are_not_consulted():
    response = ModelResponse(
        candidates=[
            Candidate(parts=[Part(text="I could not edit this photo.")]),
            Candidate(parts=[_image("B")]),
        ]
    )

    assert response_extractor.find_inline_image(response) is None
    with pytest.raises(NoImageInResponse) as info:
        response_extractor.extract(response)
    assert info.value.message == "No image generated."


def test_no_candidates_signals_not_found():
    assert response_extractor.find_inline_image(ModelResponse()) is None


def test_empty_inline_data_is_skipped():
    response = ModelResponse(candidates=[Candidate(parts=[_image(""), _image("C")])])
    assert response_extractor.extract(response).data == "C"


def test_no_candidates_raises_no_image():
    with pytest.raises(NoImageInResponse):
        response_extractor.extract(ModelResponse())
