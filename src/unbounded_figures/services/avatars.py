"""Avatar image storage on the local filesystem."""

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile

from unbounded_figures.config import Settings
from unbounded_figures.services.base import APIError

logger = logging.getLogger(__name__)

CONTENT_TYPE_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


class UploadError(APIError):
    """Raised when an uploaded file is rejected."""


def _extension_for(upload: UploadFile) -> str:
    suffix = Path(upload.filename or "").suffix.lower()
    if suffix in CONTENT_TYPE_EXTENSIONS.values() or suffix == ".jpeg":
        return suffix
    return CONTENT_TYPE_EXTENSIONS[upload.content_type]


async def store_avatar(upload: UploadFile | None, settings: Settings) -> str:
    """Write an uploaded avatar under the avatar directory.

    Returns:
        The URL path the file is served from.

    Raises:
        UploadError: If the file is missing, empty, not an image or too large.
    """
    if upload is None:
        raise UploadError("No file uploaded", status_code=400)

    if upload.content_type not in CONTENT_TYPE_EXTENSIONS:
        raise UploadError(f"Unsupported file type: {upload.content_type}", status_code=400)

    data = await upload.read(settings.avatar_max_bytes + 1)
    if not data:
        raise UploadError("No file uploaded", status_code=400)
    if len(data) > settings.avatar_max_bytes:
        limit_mb = settings.avatar_max_bytes // (1024 * 1024)
        raise UploadError(f"File exceeds the {limit_mb}MB limit", status_code=413)

    directory = Path(settings.avatar_dir)
    directory.mkdir(parents=True, exist_ok=True)

    filename = f"{uuid.uuid4().hex}{_extension_for(upload)}"
    (directory / filename).write_bytes(data)
    logger.info("Stored avatar %s (%d bytes)", filename, len(data))

    return f"{settings.avatar_url_prefix.rstrip('/')}/{filename}"
