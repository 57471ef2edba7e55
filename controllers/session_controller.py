"""Session lifecycle helpers for image editing workflows."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, UploadFile
from fastapi.responses import Response

from models.session_models import GeneratedImage, SessionState
from services import media_codec
from services.generation.orchestrator import GenerationOrchestrator
from services.session_store import SessionStore
from services.thumbnail_generator import ThumbnailGenerator
from utils.media_validation import read_image_bytes, validate_image_upload


def _get_store(request: Request) -> SessionStore:
	store = getattr(request.app.state, "session_store", None)
	if store is None:
		raise HTTPException(status_code=500, detail="Session store unavailable")
	return store


def _get_session(request: Request, session_id: str) -> GenerationOrchestrator:
	try:
		return _get_store(request).get(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc


def session_view(state: SessionState) -> Dict[str, Any]:
	"""Return the JSON-friendly view the presentation layer renders."""
	generated = state.generated_image
	uploaded = state.uploaded_image
	return {
		"session_id": state.session_id,
		"instruction": state.instruction,
		"feedback": state.feedback,
		"has_image": uploaded is not None,
		"image_media_type": uploaded.media_type if uploaded else None,
		"image_filename": uploaded.filename if uploaded else None,
		"generated_image": media_codec.to_data_url(generated.data, generated.mime_type) if generated else None,
		"error": {"kind": state.error.kind, "message": state.error.message} if state.error else None,
		"in_flight": state.in_flight,
	}


async def start_session(request: Request) -> Dict[str, Any]:
	"""Create a new editing session and return its view."""
	orchestrator = _get_store(request).create()
	return session_view(orchestrator.state)


async def get_session(request: Request, session_id: str) -> Dict[str, Any]:
	return session_view(_get_session(request, session_id).state)


async def delete_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Discard a session."""
	try:
		_get_store(request).delete(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	return {"session_id": session_id, "deleted": True}


async def upload_image(request: Request, session_id: str, image: UploadFile) -> Dict[str, Any]:
	"""Validate an uploaded photo and make it the session's reference image."""
	orchestrator = _get_session(request, session_id)
	raw = await read_image_bytes(image)
	media_type = validate_image_upload(raw, image.content_type)
	state = orchestrator.upload(raw, media_type=media_type, filename=image.filename)
	return session_view(state)


async def update_instruction(request: Request, session_id: str, text: str) -> Dict[str, Any]:
	return session_view(_get_session(request, session_id).set_instruction(text))


async def update_feedback(request: Request, session_id: str, text: str) -> Dict[str, Any]:
	return session_view(_get_session(request, session_id).set_feedback(text))


async def generate(
	request: Request,
	session_id: str,
	is_regeneration: bool = False,
	feedback: Optional[str] = None,
) -> Dict[str, Any]:
	"""Run a generation attempt; errors are reported in the returned view."""
	orchestrator = _get_session(request, session_id)
	if feedback is not None and not orchestrator.state.in_flight:
		orchestrator.set_feedback(feedback)
	outcome = await orchestrator.generate(is_regeneration=is_regeneration)
	result = session_view(orchestrator.state)
	result["outcome"] = outcome.value
	return result


async def reset_session(request: Request, session_id: str) -> Dict[str, Any]:
	return session_view(_get_session(request, session_id).reset())


async def get_upload_preview(request: Request, session_id: str) -> Response:
	"""Return a PNG thumbnail of the uploaded reference image."""
	uploaded = _get_session(request, session_id).state.uploaded_image
	if uploaded is None:
		raise HTTPException(status_code=404, detail="No image uploaded for this session")
	try:
		thumbnail = ThumbnailGenerator().create_thumbnail(uploaded.data)
	except ValueError as exc:
		raise HTTPException(status_code=415, detail=str(exc)) from exc
	return Response(content=thumbnail, media_type="image/png")


def _generated_image(request: Request, session_id: str) -> GeneratedImage:
	generated = _get_session(request, session_id).state.generated_image
	if generated is None:
		raise HTTPException(status_code=404, detail="No generated image for this session")
	return generated


async def get_generated_image(request: Request, session_id: str) -> Response:
	"""Return the generated image bytes for inline display."""
	generated = _generated_image(request, session_id)
	return Response(content=media_codec.decode(generated.data), media_type=generated.mime_type)


async def download_generated_image(request: Request, session_id: str, filename: str) -> Response:
	"""Return the generated image as a file attachment."""
	generated = _generated_image(request, session_id)
	return media_codec.package_as_downloadable(media_codec.decode(generated.data), filename=filename)
