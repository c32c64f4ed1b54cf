"""Validation helpers for uploaded plant images."""

import base64
import binascii
import re

from fastapi import HTTPException, UploadFile

from models.analysis_record import SourceImage

_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[^,]*)?;base64,(?P<data>.*)$", re.DOTALL)


def decode_image_payload(image_data: str) -> SourceImage:
    """Return a SourceImage from a data URL or bare base64 string.

    Raises:
        ValueError: If the payload is empty, not base64, or not an image type.
    """
    text = (image_data or "").strip()
    if not text:
        raise ValueError("Image data is required.")

    mime_type = "image/jpeg"
    match = _DATA_URL.match(text)
    if match:
        mime_type = (match.group("mime") or mime_type).lower()
        text = match.group("data")

    if not mime_type.startswith("image/"):
        raise ValueError(f"Unsupported content type: {mime_type}")

    try:
        data = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Image data must be base64-encoded.") from exc
    if not data:
        raise ValueError("Image data is empty.")
    return SourceImage(data=data, mime_type=mime_type)


async def read_image_upload(image_file: UploadFile) -> SourceImage:
    """Read a multipart image upload, ensuring it is a non-empty image."""
    content_type = (image_file.content_type or "image/jpeg").lower().split(";", 1)[0].strip()
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=415, detail=f"Unsupported image content type: {image_file.content_type}")
    data = await image_file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded image is empty.")
    return SourceImage(data=data, mime_type=content_type)
