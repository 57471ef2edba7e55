"""Session domain models for image editing workflows."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_GENERATED_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class UploadedImage:
	"""Reference photograph supplied by the user."""

	data: bytes
	media_type: Optional[str] = None
	filename: Optional[str] = None
	uploaded_at: float = field(default_factory=lambda: time.time())


@dataclass(frozen=True)
class GenerationInstruction:
	"""Base instruction plus the optional feedback amendment."""

	base: str
	feedback: str = ""


@dataclass(frozen=True)
class GeneratedImage:
	"""Base64 image data returned by the model."""

	data: str
	mime_type: str = DEFAULT_GENERATED_MIME_TYPE
	created_at: float = field(default_factory=lambda: time.time())


@dataclass(frozen=True)
class GenerationFailure:
	"""Content of the single error slot."""

	kind: str
	message: str


@dataclass(frozen=True)
class SessionState:
	"""Snapshot of one editing session.

	Instances are never mutated; transitions return a new snapshot.
	"""

	session_id: str
	instruction: str
	feedback: str = ""
	uploaded_image: Optional[UploadedImage] = None
	generated_image: Optional[GeneratedImage] = None
	error: Optional[GenerationFailure] = None
	in_flight: bool = False
