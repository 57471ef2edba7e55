"""Build model requests from an instruction and an encoded reference image."""

from __future__ import annotations

from typing import Optional

from models.model_messages import Content, InlineData, ModelRequest, Part
from models.session_models import GenerationInstruction
from services.generation.prompts import build_feedback_block

DEFAULT_MEDIA_TYPE = "image/png"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"


def compose_instruction(instruction: GenerationInstruction, is_regeneration: bool) -> str:
    """Return the effective instruction for one attempt.

    Feedback is appended only on regeneration and only when it is not blank;
    the feedback text itself is kept verbatim.
    """
    if is_regeneration and instruction.feedback and instruction.feedback.strip():
        return instruction.base + build_feedback_block(instruction.feedback)
    return instruction.base


def build(
    instruction: GenerationInstruction,
    is_regeneration: bool,
    encoded_image: str,
    media_type: Optional[str],
    model: str = DEFAULT_IMAGE_MODEL,
) -> ModelRequest:
    """Compose the request: one text part followed by one inline image part."""
    parts = [
        Part(text=compose_instruction(instruction, is_regeneration)),
        Part(inline_data=InlineData(mime_type=media_type or DEFAULT_MEDIA_TYPE, data=encoded_image)),
    ]
    return ModelRequest(model=model, contents=[Content(role="user", parts=parts)])
