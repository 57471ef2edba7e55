"""Interface between the orchestrator and an image-generation backend."""

from __future__ import annotations

from typing import Protocol

from models.model_messages import ModelRequest, ModelResponse
from services.generation.errors import ModelInvocationError


class ModelClient(Protocol):
    """Anything that turns a ``ModelRequest`` into a ``ModelResponse``.

    Implementations raise ``ModelInvocationError`` (or any exception, which
    the orchestrator reports the same way) when the call fails.
    """

    name: str

    async def generate(self, request: ModelRequest) -> ModelResponse:
        ...


class UnconfiguredModelClient:
    """Stand-in used when no credential was configured at startup."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason

    async def generate(self, request: ModelRequest) -> ModelResponse:
        raise ModelInvocationError(self.reason)
