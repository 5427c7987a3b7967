"""
Option image storage.

Uploads are written under ``MEDIA_DIR/rooms/<room_id>/`` with generated file
names and served back by the app's ``/media`` mount.
"""

import logging
from pathlib import Path

from fastapi import UploadFile

import config
from errors import ValidationError, StoreError
import utils

logger = logging.getLogger(__name__)

MEDIA_ROOT = Path(config.MEDIA_DIR)
MEDIA_ROOT.mkdir(parents=True, exist_ok=True)

MEDIA_URL_PREFIX = "/media"
MAX_IMAGE_BYTES = 10 * 1024 * 1024

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def image_relative_path(room_id: str, content_type: str) -> str:
    return f"rooms/{room_id}/{utils.generate_uuid()}{ALLOWED_IMAGE_TYPES[content_type]}"

def public_url(relative_path: str) -> str:
    return f"{config.PUBLIC_BASE_URL}{MEDIA_URL_PREFIX}/{relative_path}"

def remove_image(url: str) -> None:
    """Deletes a stored image by its public URL; unknown URLs are ignored."""
    prefix = f"{config.PUBLIC_BASE_URL}{MEDIA_URL_PREFIX}/"
    if not url.startswith(prefix):
        return
    target = MEDIA_ROOT / url[len(prefix):]
    try:
        target.unlink(missing_ok=True)
    except OSError:
        logger.warning("Could not remove orphaned image %s", target)

async def save_image(room_id: str, upload: UploadFile) -> str:
    """Stores an uploaded image for a room and returns its public URL."""
    if upload.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Only JPEG, PNG, WebP or GIF images can be uploaded")

    # one byte past the limit is enough to reject, never buffer the rest
    data = await upload.read(MAX_IMAGE_BYTES + 1)
    if not data:
        raise ValidationError("Uploaded image is empty")
    if len(data) > MAX_IMAGE_BYTES:
        raise ValidationError("Uploaded image is larger than 10 MB")

    relative_path = image_relative_path(room_id, upload.content_type)
    target = MEDIA_ROOT / relative_path
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        logger.exception("Failed to store image %s", relative_path)
        raise StoreError("Could not store image") from exc

    logger.info("Stored image %s (%d bytes)", relative_path, len(data))
    return public_url(relative_path)
