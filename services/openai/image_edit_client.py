"""Image editing via the OpenAI Images API."""

import logging
import os
import time
from typing import Any, List, Optional

from openai import AsyncOpenAI

from models.model_messages import Candidate, InlineData, ModelRequest, ModelResponse, Part
from services import media_codec
from services.generation.errors import ModelInvocationError

LOGGER = logging.getLogger(__name__)
DEFAULT_MODEL = os.getenv("OPENAI_IMAGE_MODEL", "gpt-image-1")

_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp"}


def to_model_response(response: Any) -> ModelResponse:
    """Map ``images.edit`` output onto a single candidate.

    Each returned image becomes one inline-data part, in the order returned.
    """
    parts: List[Part] = []
    for item in getattr(response, "data", None) or []:
        b64 = getattr(item, "b64_json", None)
        if b64:
            parts.append(Part(inline_data=InlineData(mime_type=media_codec.DOWNLOAD_MEDIA_TYPE, data=b64)))
        else:
            parts.append(Part(text=getattr(item, "revised_prompt", None)))
    if not parts:
        return ModelResponse(candidates=[])
    return ModelResponse(candidates=[Candidate(parts=parts)])


class OpenAIImageEditClient:
    """Send image editing requests to an OpenAI image model."""

    name = "openai"

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: str = DEFAULT_MODEL) -> None:
        """Initialize the transport.

        Args:
            client: Optional async OpenAI client instance for dependency injection.
            model: Image model used for edits.
        """
        self.client = client or AsyncOpenAI()
        self.model = model

    def _upload_tuple(self, image: InlineData) -> tuple:
        """Return the ``(filename, bytes, mime)`` triple the SDK uploads."""
        extension = _EXTENSIONS.get(image.mime_type, "png")
        return (f"reference.{extension}", media_codec.decode(image.data), image.mime_type)

    async def generate(self, request: ModelRequest) -> ModelResponse:
        """Request an edited image and normalize the result."""
        start = time.time()
        try:
            response = await self.client.images.edit(
                model=self.model,
                image=self._upload_tuple(request.image),
                prompt=request.instruction,
            )
        except Exception as exc:
            logging.error("Error during OpenAI Images API call: %s", exc)
            raise ModelInvocationError(str(exc) or None) from exc

        LOGGER.info("OpenAI image edit received in %.3fs", time.time() - start)
        return to_model_response(response)

    async def aclose(self) -> None:
        await self.client.close()
