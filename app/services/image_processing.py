"""
Image upload validation.

Images arrive as base64 text. Filetype and filename are user-controlled, so
the decoded bytes are opened with PIL to make sure they really are an image.
"""

import base64
import binascii
import io

from fastapi import HTTPException, status
from PIL import Image, UnidentifiedImageError

from app.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def strip_data_url(base64_data: str) -> str:
    """Drop a ``data:image/png;base64,`` prefix if the client sent a data URL."""
    if base64_data.startswith("data:") and "," in base64_data:
        return base64_data.split(",", 1)[1]
    return base64_data


def decode_image_data(base64_data: str) -> bytes:
    """
    Decode base64 image text.

    Raises:
        HTTPException: 400 if the text is not valid base64
    """
    try:
        return base64.b64decode(strip_data_url(base64_data).strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Image data is not valid base64",
        ) from e


def _canonical_format(filetype: str) -> str:
    filetype = filetype.lower()
    return "jpeg" if filetype == "jpg" else filetype


def validate_image_upload(
    filetype: str,
    base64_data: str,
    allowed_types: list[str] | None = None,
    max_size: int | None = None,
) -> str:
    """Validate an uploaded image and return its normalized base64 text.

    Args:
        filetype: Normalized filetype (e.g. "png")
        base64_data: Base64 payload, optionally as a data URL
        allowed_types: Allowed filetypes. Defaults to settings.ALLOWED_IMAGE_TYPES.
        max_size: Maximum decoded size in bytes. Defaults to settings.MAX_IMAGE_SIZE.

    Raises:
        HTTPException: 400 for a disallowed type, oversize payload, non-image data
            or content whose format differs from the declared filetype
    """
    if allowed_types is None:
        allowed_types = settings.ALLOWED_IMAGE_TYPES  # type: ignore[assignment]
    if max_size is None:
        max_size = settings.MAX_IMAGE_SIZE

    if filetype.lower() not in allowed_types:  # type: ignore[operator]
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Filetype {filetype} not allowed. Allowed: {', '.join(sorted(allowed_types))}",  # type: ignore[arg-type]
        )

    raw = decode_image_data(base64_data)
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Image data is empty",
        )
    if len(raw) > max_size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Image exceeds maximum size of {max_size} bytes",
        )

    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.verify()
            detected = (img.format or "").lower()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.warning("image_upload_rejected", filetype=filetype, size=len(raw), error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File is not a valid image",
        ) from e

    if _canonical_format(detected) != _canonical_format(filetype):
        logger.warning("image_upload_rejected", filetype=filetype, detected=detected)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Image content is {detected or 'unknown'}, not {filetype}",
        )

    return strip_data_url(base64_data).strip()
