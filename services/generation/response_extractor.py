"""Utilities for pulling the generated image out of a model response."""

from __future__ import annotations

from typing import Optional

from models.model_messages import InlineData, ModelResponse
from services.generation.errors import NoImageInResponse


def find_inline_image(response: ModelResponse) -> Optional[InlineData]:
    """Return the first inline image of the first candidate, if present.

    Later candidates are never consulted.
    """
    if not response.candidates:
        return None

    for part in response.candidates[0].parts:
        if part.inline_data is not None and part.inline_data.data:
            return part.inline_data

    return None


def extract(response: ModelResponse) -> InlineData:
    """Return the generated image or raise when the response carries none."""
    inline = find_inline_image(response)
    if inline is None:
        raise NoImageInResponse()
    return inline
