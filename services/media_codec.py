"""Conversions between uploaded image bytes and transfer-safe base64 text."""

from __future__ import annotations

import base64
import binascii

from fastapi.responses import Response

from services.generation.errors import MediaReadError

DOWNLOAD_MEDIA_TYPE = "image/png"
DOWNLOAD_FILENAME = "generated.png"


def encode(image: bytes) -> str:
    """Encode image bytes to a base64 string for embedding in a request.

    Raises:
        MediaReadError: If the source is empty or not bytes-like.
    """
    try:
        raw = bytes(memoryview(image))
    except TypeError as exc:
        raise MediaReadError("Uploaded image could not be read.") from exc
    if not raw:
        raise MediaReadError("Uploaded image is empty.")
    return base64.b64encode(raw).decode("ascii")


def decode(text: str | bytes) -> bytes:
    """Decode base64 text back to the original bytes."""
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MediaReadError("Image data is not valid base64.") from exc


def to_data_url(encoded: str, media_type: str = DOWNLOAD_MEDIA_TYPE) -> str:
    """Wrap base64 data in a data URL suitable for an <img> source."""
    return f"data:{media_type};base64,{encoded}"


def package_as_downloadable(
    data: bytes,
    media_type: str = DOWNLOAD_MEDIA_TYPE,
    filename: str = DOWNLOAD_FILENAME,
) -> Response:
    """Return a response that makes the browser save ``data`` as ``filename``."""
    safe_name = filename.replace('"', "").replace("\r", "").replace("\n", "") or DOWNLOAD_FILENAME
    return Response(
        content=data,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{safe_name}"'},
    )
