"""Gemini image generation via the google-genai async client."""

from __future__ import annotations

import logging
import os
import time
from typing import Any, List, Optional

from google import genai
from google.genai import types

from models.model_messages import Candidate, InlineData, ModelRequest, ModelResponse, Part
from services import media_codec
from services.generation.errors import ModelInvocationError

LOGGER = logging.getLogger(__name__)
DEFAULT_MODEL = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")


def _to_sdk_contents(request: ModelRequest) -> List[types.Content]:
    """Translate a ``ModelRequest`` into google-genai content objects."""
    contents: List[types.Content] = []
    for content in request.contents:
        parts: List[types.Part] = []
        for part in content.parts:
            if part.inline_data is not None:
                parts.append(
                    types.Part(
                        inline_data=types.Blob(
                            mime_type=part.inline_data.mime_type,
                            data=media_codec.decode(part.inline_data.data),
                        )
                    )
                )
            else:
                parts.append(types.Part(text=part.text or ""))
        contents.append(types.Content(role=content.role, parts=parts))
    return contents


def to_model_response(response: Any) -> ModelResponse:
    """Convert an SDK ``GenerateContentResponse`` into a ``ModelResponse``.

    The SDK hands inline data back as raw bytes; it is re-encoded to base64 so
    every backend yields the same shape.
    """
    candidates: List[Candidate] = []
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        parts: List[Part] = []
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            data = getattr(inline, "data", None) if inline is not None else None
            if data:
                encoded = data if isinstance(data, str) else media_codec.encode(data)
                mime_type = getattr(inline, "mime_type", None) or media_codec.DOWNLOAD_MEDIA_TYPE
                parts.append(Part(inline_data=InlineData(mime_type=mime_type, data=encoded)))
            else:
                parts.append(Part(text=getattr(part, "text", None)))
        candidates.append(Candidate(parts=parts))
    return ModelResponse(candidates=candidates)


class GeminiModelClient:
    """Send image editing requests to a Gemini image model."""

    name = "gemini"

    def __init__(
        self,
        client: Optional[genai.Client] = None,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
    ) -> None:
        """Initialize the transport.

        Args:
            client: Optional preconfigured ``genai.Client`` for dependency injection.
            api_key: Gemini API key used when ``client`` is not supplied.
            model: Image model identifier placed on outgoing requests.
        """
        self.client = client or genai.Client(api_key=api_key)
        self.model = model

    async def generate(self, request: ModelRequest) -> ModelResponse:
        """Invoke ``generate_content`` restricted to the request's modalities."""
        config = types.GenerateContentConfig(response_modalities=list(request.response_modalities))
        start = time.time()
        try:
            response = await self.client.aio.models.generate_content(
                model=request.model or self.model,
                contents=_to_sdk_contents(request),
                config=config,
            )
        except Exception as exc:
            LOGGER.error("Gemini generate_content call failed: %s", exc)
            raise ModelInvocationError(str(exc) or None) from exc

        LOGGER.info("Gemini image response received in %.3fs", time.time() - start)
        return to_model_response(response)

    async def aclose(self) -> None:
        closer = getattr(self.client.aio, "aclose", None)
        if closer is not None:
            await closer()
