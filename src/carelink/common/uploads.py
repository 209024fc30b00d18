"""Local storage for uploaded child photos.

Files are written under ``<upload_dir>/children`` with a random name and
served by the static mount at ``<upload_url_prefix>``. The file is written
before the row that references it; an orphaned file after a later failure is
accepted.
"""

from __future__ import annotations

import uuid
from pathlib import Path

import structlog

from carelink.config import Settings
from carelink.errors import ValidationFailed

logger = structlog.get_logger()

PHOTO_SUBDIR = "children"

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def validate_photo(content_type: str | None, size: int, settings: Settings) -> None:
    """Check the upload against the allowed types and size limit."""
    if content_type not in settings.upload_allowed_types:
        raise ValidationFailed({"image": f"Content type '{content_type}' not allowed"})
    if size > settings.upload_max_bytes:
        max_mb = settings.upload_max_bytes / (1024 * 1024)
        raise ValidationFailed({"image": f"File size exceeds {max_mb:.0f} MB limit"})


def _extension(content_type: str | None) -> str:
    # Taken from the validated content type, never from the client filename.
    return _EXTENSIONS.get(content_type or "", "bin")


def save_photo(
    content: bytes,
    *,
    filename: str | None,
    content_type: str | None,
    settings: Settings,
) -> str:
    """
    Validate and write a photo, returning its public URL.

    Raises:
        ValidationFailed: On a disallowed type or oversized file.
        OSError: If the file cannot be written.
    """
    validate_photo(content_type, len(content), settings)

    directory = Path(settings.upload_dir) / PHOTO_SUBDIR
    directory.mkdir(parents=True, exist_ok=True)
    stored_name = f"{uuid.uuid4()}.{_extension(content_type)}"
    (directory / stored_name).write_bytes(content)

    logger.info("photo_saved", stored_name=stored_name, original_name=filename, size=len(content))
    return f"{settings.upload_url_prefix.rstrip('/')}/{PHOTO_SUBDIR}/{stored_name}"
