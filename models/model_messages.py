"""Request and response shapes exchanged with the image-generation model.

A request holds one ``user`` content entry with a text part followed by an
inline image part. A response is made of candidates whose parts may carry
inline image data. Each model client translates these to and from its SDK.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

IMAGE_MODALITY = "IMAGE"


@dataclass(frozen=True)
class InlineData:
    """Image payload embedded directly in a part (base64 text)."""

    mime_type: str
    data: str


@dataclass(frozen=True)
class Part:
    """One content part; carries either text or inline data."""

    text: Optional[str] = None
    inline_data: Optional[InlineData] = None


@dataclass(frozen=True)
class Content:
    role: str
    parts: List[Part] = field(default_factory=list)


@dataclass(frozen=True)
class ModelRequest:
    """Structured request handed to a model client."""

    model: str
    contents: List[Content]
    response_modalities: List[str] = field(default_factory=lambda: [IMAGE_MODALITY])

    @property
    def instruction(self) -> str:
        """Return the effective instruction carried by the text part."""
        return self.contents[0].parts[0].text or ""

    @property
    def image(self) -> InlineData:
        """Return the inline image carried by the request."""
        inline = self.contents[0].parts[1].inline_data
        if inline is None:
            raise ValueError("Request has no inline image part.")
        return inline


@dataclass(frozen=True)
class Candidate:
    parts: List[Part] = field(default_factory=list)


@dataclass(frozen=True)
class ModelResponse:
    """Ordered candidates returned by the model for one request."""

    candidates: List[Candidate] = field(default_factory=list)
