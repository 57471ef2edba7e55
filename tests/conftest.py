import asyncio
import base64
import io
from typing import List, Optional

import pytest
from PIL import Image

from models.model_messages import Candidate, InlineData, ModelRequest, ModelResponse, Part


def image_response(*payloads: str, mime_type: str = "image/png") -> ModelResponse:
    """Return a response with one candidate holding one inline part per payload."""
    parts = [Part(inline_data=InlineData(mime_type=mime_type, data=payload)) for payload in payloads]
    return ModelResponse(candidates=[Candidate(parts=parts)])


class FakeModelClient:
    """Records requests and replays a canned response or error."""

    name = "fake"
    model = "fake-image-model"

    def __init__(self, response: Optional[ModelResponse] = None, error: Optional[Exception] = None) -> None:
        self.response = response if response is not None else image_response(base64.b64encode(b"generated").decode())
        self.error = error
        self.requests: List[ModelRequest] = []
        self.gate: Optional[asyncio.Event] = None
        self.started: Optional[asyncio.Event] = None

    def hold(self) -> None:
        """Make the next calls block until ``release`` is called."""
        self.gate = asyncio.Event()
        self.started = asyncio.Event()

    def release(self) -> None:
        assert self.gate is not None
        self.gate.set()

    async def generate(self, request: ModelRequest) -> ModelResponse:
        self.requests.append(request)
        if self.gate is not None:
            self.started.set()
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def make_fake_client():
    return FakeModelClient


@pytest.fixture
def make_image_response():
    return image_response


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (32, 24), (200, 120, 40)).save(buffer, format="PNG")
    return buffer.getvalue()
