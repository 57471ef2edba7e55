"""Thumbnail generator service.

Provides a small OOP wrapper around Pillow to create preview thumbnails
from uploaded image bytes. The resulting thumbnail fits within the
configured size and is returned as raw PNG bytes.

Public class: `ThumbnailGenerator`

Example:
    tg = ThumbnailGenerator(max_size=(512, 512))
    png_bytes = tg.create_thumbnail(upload_bytes)
"""
from __future__ import annotations

import io
from typing import Tuple

from PIL import Image, UnidentifiedImageError


class ThumbnailGenerator:
    """Generate PNG previews from image bytes.

    Args:
        max_size: Maximum width and height for the thumbnail. Defaults to (512, 512).
        background: Optional background color used when flattening images with alpha.
            If None, images with alpha are flattened against white.
    """

    def __init__(self, max_size: Tuple[int, int] = (512, 512), background: Tuple[int, int, int] | None = None):
        self.max_size = max_size
        self.background = background or (255, 255, 255)

    def create_thumbnail(self, data: bytes) -> bytes:
        """Create a thumbnail from raw image bytes.

        Args:
            data: Encoded image file contents (PNG, JPEG, WebP, ...).

        Returns:
            PNG bytes of the thumbnail.

        Raises:
            ValueError: If the bytes cannot be opened as an image.
        """
        try:
            src = Image.open(io.BytesIO(data))
            src.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ValueError("Uploaded bytes are not a supported image format") from exc

        src = src.convert("RGBA")
        src.thumbnail(self.max_size, Image.LANCZOS)

        # Flatten alpha against the background color
        background = Image.new("RGB", src.size, self.background)
        background.paste(src, mask=src.split()[3])

        out_io = io.BytesIO()
        background.save(out_io, format="PNG", optimize=True)
        return out_io.getvalue()
