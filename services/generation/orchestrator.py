"""Generation lifecycle for a single editing session.

The orchestrator owns one ``SessionState`` and is the only code that moves it
forward. A generate call runs encode, build, invoke and extract in that
order; the awaited model call is the only point where control is yielded.

Single-flight:
    The in-flight flag is checked and set before the first ``await``, so a
    second generate issued while a request is outstanding returns
    ``GenerationOutcome.DROPPED`` without touching the model. Dropped calls
    are not queued.

Error handling:
    ``GenerationError`` subclasses are recorded in the session's error slot
    and never raised to the caller. The in-flight flag is always released in
    a ``finally`` block. Any exception escaping the model client is reported
    as ``ModelInvocationFailure`` with its message unchanged.

Stale results:
    Each attempt remembers the uploaded image it started from. If the photo
    is replaced or the session reset before the model answers, the result
    (image or error) is discarded and the outcome is ``DISCARDED``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Tuple

from models.model_messages import ModelRequest, ModelResponse
from models.session_models import (
    DEFAULT_GENERATED_MIME_TYPE,
    GeneratedImage,
    GenerationInstruction,
    SessionState,
    UploadedImage,
)
from services import media_codec
from services.generation import request_builder, response_extractor
from services.generation.errors import EmptyInstruction, GenerationError, MissingImage, ModelInvocationError
from services.generation.model_client import ModelClient
from services.generation.prompts import DEFAULT_INSTRUCTION
from services.generation.transitions import (
    Action,
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

LOGGER = logging.getLogger(__name__)


class GenerationOutcome(str, Enum):
    """Result of one generate call."""

    DROPPED = "dropped"
    REJECTED = "rejected"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    DISCARDED = "discarded"


class GenerationOrchestrator:
    """Coordinate uploads, edits, and generation attempts for one session."""

    def __init__(
        self,
        session_id: str,
        model_client: ModelClient,
        default_instruction: str = DEFAULT_INSTRUCTION,
    ) -> None:
        self.model_client = model_client
        self.default_instruction = default_instruction
        self._state = initial_state(session_id, default_instruction)

    @property
    def state(self) -> SessionState:
        return self._state

    def dispatch(self, action: Action) -> SessionState:
        """Apply ``action`` to the current state and keep the result."""
        self._state = apply(self._state, action)
        return self._state

    def upload(self, data: bytes, media_type: Optional[str] = None, filename: Optional[str] = None) -> SessionState:
        """Replace the reference image, discarding any generated result."""
        return self.dispatch(UploadImage(UploadedImage(data=data, media_type=media_type, filename=filename)))

    def set_instruction(self, text: str) -> SessionState:
        return self.dispatch(EditInstruction(text))

    def set_feedback(self, text: str) -> SessionState:
        return self.dispatch(EditFeedback(text))

    def reset(self) -> SessionState:
        """Clear the session and restore the default instruction."""
        return self.dispatch(ResetSession(self.default_instruction))

    def _validate(self) -> Tuple[UploadedImage, GenerationInstruction]:
        """Return the inputs of an attempt, or raise the first validation error."""
        state = self._state
        if state.uploaded_image is None:
            raise MissingImage()
        if not state.instruction or not state.instruction.strip():
            raise EmptyInstruction()
        return state.uploaded_image, GenerationInstruction(base=state.instruction, feedback=state.feedback)

    async def _invoke(self, request: ModelRequest) -> ModelResponse:
        try:
            return await self.model_client.generate(request)
        except GenerationError:
            raise
        except Exception as exc:
            LOGGER.error("Model client %s failed: %s", getattr(self.model_client, "name", "?"), exc)
            raise ModelInvocationError(str(exc) or None) from exc

    async def _run(
        self,
        uploaded: UploadedImage,
        instruction: GenerationInstruction,
        is_regeneration: bool,
    ) -> GeneratedImage:
        encoded = media_codec.encode(uploaded.data)
        request = request_builder.build(
            instruction,
            is_regeneration,
            encoded,
            uploaded.media_type,
            model=getattr(self.model_client, "model", request_builder.DEFAULT_IMAGE_MODEL),
        )
        response = await self._invoke(request)
        inline = response_extractor.extract(response)
        return GeneratedImage(data=inline.data, mime_type=inline.mime_type or DEFAULT_GENERATED_MIME_TYPE)

    async def generate(self, is_regeneration: bool = False) -> GenerationOutcome:
        """Run one generation attempt and record its result in the session.

        Args:
            is_regeneration: Whether the current feedback text should be
                appended to the instruction.

        Returns:
            The outcome of the attempt; the image or error itself is read
            from ``state``.
        """
        session_id = self._state.session_id
        if self._state.in_flight:
            LOGGER.info("Session %s already has a generation in flight; dropping request", session_id)
            return GenerationOutcome.DROPPED

        try:
            uploaded, instruction = self._validate()
        except GenerationError as exc:
            self.dispatch(RejectGeneration(exc.as_failure()))
            return GenerationOutcome.REJECTED

        self.dispatch(StartGeneration())
        try:
            image = await self._run(uploaded, instruction, is_regeneration)
            self.dispatch(CompleteGeneration(image, source=uploaded))
            outcome = GenerationOutcome.SUCCEEDED
        except GenerationError as exc:
            LOGGER.warning("Generation failed for session %s (%s): %s", session_id, exc.kind, exc.message)
            self.dispatch(FailGeneration(exc.as_failure(), source=uploaded))
            outcome = GenerationOutcome.FAILED
        finally:
            self.dispatch(FinishGeneration())

        if self._state.uploaded_image is not uploaded:
            outcome = GenerationOutcome.DISCARDED
        LOGGER.info("Generation for session %s finished: %s (regeneration=%s)", session_id, outcome.value, is_regeneration)
        return outcome
