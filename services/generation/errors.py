"""Error kinds raised while producing a generated image."""

from __future__ import annotations

from models.session_models import GenerationFailure


class GenerationError(Exception):
    """Base class for failures that end a single generation attempt."""

    kind = "GenerationError"
    default_message = "Image generation failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_failure(self) -> GenerationFailure:
        """Return the value stored in the session's error slot."""
        return GenerationFailure(kind=self.kind, message=self.message)


class MissingImage(GenerationError):
    kind = "MissingImage"
    default_message = "Please upload an image."


class EmptyInstruction(GenerationError):
    kind = "EmptyInstruction"
    default_message = "Prompt is required."


class MediaReadError(GenerationError):
    """The uploaded image could not be read or encoded."""

    kind = "MediaReadFailure"
    default_message = "Unable to read the uploaded image."


class ModelInvocationError(GenerationError):
    """The model call failed; the upstream message is kept verbatim."""

    kind = "ModelInvocationFailure"
    default_message = "Image model request failed."


class NoImageInResponse(GenerationError):
    kind = "NoImageInResponse"
    default_message = "No image generated."
