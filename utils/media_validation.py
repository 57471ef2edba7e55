"""Validation helpers for uploaded reference images."""

import io
from typing import Optional

from fastapi import HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError


def normalize_content_type(content_type: Optional[str]) -> Optional[str]:
    """Strip parameters and casing from a declared content type."""
    if not content_type:
        return None
    return content_type.lower().split(";", 1)[0].strip() or None


def looks_like_image(raw: bytes) -> bool:
    """Return True when Pillow recognises the bytes as an image."""
    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.verify()
        return True
    except (UnidentifiedImageError, OSError, SyntaxError):
        return False


def validate_image_upload(raw: bytes, content_type: Optional[str]) -> Optional[str]:
    """Validate an uploaded image and return its declared media type.

    Any ``image/*`` type is accepted as declared. Uploads without a content
    type are accepted when Pillow can identify them; their media type stays
    undeclared.
    """
    if not raw:
        raise HTTPException(status_code=400, detail="Uploaded image is empty.")
    media_type = normalize_content_type(content_type)
    if media_type and media_type != "application/octet-stream":
        if not media_type.startswith("image/"):
            raise HTTPException(status_code=415, detail=f"Unsupported image content type: {content_type}")
        return media_type
    if not looks_like_image(raw):
        raise HTTPException(status_code=415, detail="Uploaded file is not a recognised image.")
    return None


async def read_image_bytes(image_file: UploadFile) -> bytes:
    """Read the raw bytes of an uploaded image."""
    try:
        return await image_file.read()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise HTTPException(status_code=400, detail="Unable to read uploaded image.") from exc
