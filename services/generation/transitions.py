"""Session state transitions.

Every change to a ``SessionState`` goes through ``apply``, which takes the
current snapshot and an action and returns the next snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Union

from models.session_models import GeneratedImage, GenerationFailure, SessionState, UploadedImage
from services.generation.prompts import DEFAULT_INSTRUCTION


@dataclass(frozen=True)
class UploadImage:
    image: UploadedImage


@dataclass(frozen=True)
class EditInstruction:
    text: str


@dataclass(frozen=True)
class EditFeedback:
    text: str


@dataclass(frozen=True)
class RejectGeneration:
    """Validation failed before any model call."""

    error: GenerationFailure


@dataclass(frozen=True)
class StartGeneration:
    """Mark a validated attempt as in flight."""


@dataclass(frozen=True)
class CompleteGeneration:
    """Publish a result produced from ``source``."""

    image: GeneratedImage
    source: Optional[UploadedImage] = None


@dataclass(frozen=True)
class FailGeneration:
    """Record the failure of an attempt started from ``source``."""

    error: GenerationFailure
    source: Optional[UploadedImage] = None


@dataclass(frozen=True)
class FinishGeneration:
    """Release the in-flight flag; dispatched after success or failure."""


@dataclass(frozen=True)
class ResetSession:
    default_instruction: str = DEFAULT_INSTRUCTION


Action = Union[
    UploadImage,
    EditInstruction,
    EditFeedback,
    RejectGeneration,
    StartGeneration,
    CompleteGeneration,
    FailGeneration,
    FinishGeneration,
    ResetSession,
]


def initial_state(session_id: str, instruction: str = DEFAULT_INSTRUCTION) -> SessionState:
    """Return the state of a freshly created session."""
    return SessionState(session_id=session_id, instruction=instruction)


def apply(state: SessionState, action: Action) -> SessionState:
    """Return the session state that results from ``action``."""
    if isinstance(action, UploadImage):
        # Instruction text survives a new upload.
        return replace(state, uploaded_image=action.image, generated_image=None, feedback="", error=None)
    if isinstance(action, EditInstruction):
        return replace(state, instruction=action.text)
    if isinstance(action, EditFeedback):
        return replace(state, feedback=action.text)
    if isinstance(action, RejectGeneration):
        return replace(state, error=action.error)
    if isinstance(action, StartGeneration):
        return replace(state, in_flight=True, error=None)
    if isinstance(action, (CompleteGeneration, FailGeneration)) and action.source is not state.uploaded_image:
        # The photo was replaced or the session reset while the attempt ran.
        return state
    if isinstance(action, CompleteGeneration):
        return replace(state, generated_image=action.image, error=None)
    if isinstance(action, FailGeneration):
        return replace(state, error=action.error)
    if isinstance(action, FinishGeneration):
        return replace(state, in_flight=False)
    if isinstance(action, ResetSession):
        return replace(
            state,
            uploaded_image=None,
            generated_image=None,
            feedback="",
            error=None,
            instruction=action.default_instruction,
        )
    raise ValueError(f"Unsupported session action: {action!r}")
