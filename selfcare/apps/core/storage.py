"""Media storage for blog images.

A blog image is addressed by its storage name (e.g. ``blog/3f2a...c1.jpg``).
That name is the opaque token embedded in markdown as ``![alt](ref:<name>)``
and kept on posts as ``featured_image_token``. Public URLs are derived from
the configured storage backend at read time, so switching backends does not
rewrite stored content.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path

from django.core.files.storage import default_storage
from django.core.files.uploadedfile import UploadedFile

from selfcare.apps.core.images import resize_image_file

logger = logging.getLogger(__name__)

UPLOAD_PREFIX = "blog"
ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
MAX_UPLOAD_SIZE_BYTES = 20 * 1024 * 1024


class UploadRejected(Exception):
    """Raised when an uploaded file is not an acceptable image."""


@dataclass(frozen=True)
class StoredImage:
    """An image saved to media storage."""

    token: str
    url: str

    @property
    def markdown(self) -> str:
        """Markdown snippet that embeds this image by reference."""
        return f"![](ref:{self.token})"


def resolve_public_url(token: str | None) -> str | None:
    """Return the public URL for a stored image, or None.

    Fails soft: a blank token, a missing file, a path outside the storage
    root, or any backend error all return None.
    """
    if not token:
        return None
    try:
        if not default_storage.exists(token):
            logger.info("storage_token_missing", extra={"token": token})
            return None
        return default_storage.url(token)
    except Exception as exc:  # noqa: BLE001 - storage errors must not break callers
        logger.warning("storage_resolve_failed", extra={"token": token, "error": str(exc)})
        return None


def validate_upload(upload: UploadedFile) -> None:
    """Reject files that are too large or not images."""
    ext = Path(upload.name or "").suffix.lower()
    content_type = (getattr(upload, "content_type", "") or "").lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS and not content_type.startswith("image/"):
        raise UploadRejected("Only image uploads are supported.")
    if upload.size and upload.size > MAX_UPLOAD_SIZE_BYTES:
        raise UploadRejected("Image is too large (max 20 MB).")


def save_upload(upload: UploadedFile) -> StoredImage:
    """Normalize and store an uploaded image under a random name."""
    validate_upload(upload)
    processed = resize_image_file(upload)
    ext = Path(processed.name or "").suffix.lower() or ".jpg"
    name = default_storage.save(f"{UPLOAD_PREFIX}/{uuid.uuid4().hex}{ext}", processed)
    logger.info("storage_upload_saved", extra={"token": name, "size": processed.size})
    return StoredImage(token=name, url=default_storage.url(name))
