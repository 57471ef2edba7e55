"""FastAPI routes for image editing sessions."""

from typing import Optional

from fastapi import APIRouter, File, HTTPException, Query, Request, UploadFile
from pydantic import BaseModel

from controllers.session_controller import (
	delete_session,
	download_generated_image,
	generate,
	get_generated_image,
	get_session,
	get_upload_preview,
	reset_session,
	start_session,
	update_feedback,
	update_instruction,
	upload_image,
)
from services.media_codec import DOWNLOAD_FILENAME

router = APIRouter(prefix="/sessions", tags=["sessions"])


class TextPayload(BaseModel):
	text: str


class RegeneratePayload(BaseModel):
	feedback: Optional[str] = None


@router.post("")
async def start_session_route(request: Request):
	try:
		return await start_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}")
async def get_session_route(request: Request, session_id: str):
	try:
		return await get_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{session_id}")
async def delete_session_route(request: Request, session_id: str):
	try:
		return await delete_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/image", summary="Upload the reference photo")
async def upload_image_route(request: Request, session_id: str, image: UploadFile = File(...)):
	"""Replace the session's reference image; clears any generated result and feedback."""
	try:
		return await upload_image(request, session_id, image)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/image/preview")
async def upload_preview_route(request: Request, session_id: str):
	try:
		return await get_upload_preview(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.put("/{session_id}/instruction")
async def instruction_route(request: Request, session_id: str, payload: TextPayload):
	try:
		return await update_instruction(request, session_id, payload.text)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.put("/{session_id}/feedback")
async def feedback_route(request: Request, session_id: str, payload: TextPayload):
	try:
		return await update_feedback(request, session_id, payload.text)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/generate", summary="Generate an edited image")
async def generate_route(request: Request, session_id: str):
	"""Run one generation with the current instruction.

	Generation failures come back in the ``error`` field with status 200.
	"""
	try:
		return await generate(request, session_id, is_regeneration=False)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/regenerate", summary="Regenerate using feedback")
async def regenerate_route(request: Request, session_id: str, payload: Optional[RegeneratePayload] = None):
	try:
		feedback = payload.feedback if payload else None
		return await generate(request, session_id, is_regeneration=True, feedback=feedback)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/reset")
async def reset_route(request: Request, session_id: str):
	try:
		return await reset_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/generated")
async def generated_image_route(request: Request, session_id: str):
	try:
		return await get_generated_image(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/generated/download")
async def download_route(request: Request, session_id: str, filename: str = Query(DOWNLOAD_FILENAME)):
	"""Return the generated image as a PNG attachment."""
	try:
		return await download_generated_image(request, session_id, filename)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
