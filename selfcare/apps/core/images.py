"""Image normalization for blog uploads.

Uploaded photos are often straight off a phone: rotated via EXIF and several
thousand pixels wide. Before storage they are turned upright, shrunk to
``MAX_IMAGE_DIMENSION`` on the longest side, and re-encoded when the format
is not one browsers show natively.
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

from django.core.files.uploadedfile import InMemoryUploadedFile, UploadedFile
from PIL import ExifTags, Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

MAX_IMAGE_DIMENSION = 2000

# Stored untouched when already upright and small enough
WEB_FORMATS = frozenset({"JPEG", "PNG", "GIF", "WEBP"})

JPEG_QUALITY = 85


def _is_rotated(image: Image.Image) -> bool:
    return image.getexif().get(ExifTags.Base.Orientation, 1) != 1


def _encode(image: Image.Image) -> tuple[BytesIO, str]:
    """Encode as PNG when the image has transparency, JPEG otherwise."""
    buffer = BytesIO()
    if image.mode in {"RGBA", "LA", "P"}:
        image.save(buffer, format="PNG", optimize=True)
        fmt = "png"
    else:
        if image.mode not in {"RGB", "L"}:
            image = image.convert("RGB")
        image.save(buffer, format="JPEG", quality=JPEG_QUALITY, optimize=True)
        fmt = "jpeg"
    buffer.seek(0)
    return buffer, fmt


def resize_image_file(
    uploaded_file: UploadedFile,
    max_dimension: int = MAX_IMAGE_DIMENSION,
) -> UploadedFile:
    """Return an upright, web-sized version of ``uploaded_file``.

    The original is returned as-is when no change is needed, and also when
    Pillow cannot read it (``storage.validate_upload`` has already checked
    the extension and content type).
    """
    uploaded_file.seek(0)
    try:
        image = Image.open(uploaded_file)
    except UnidentifiedImageError:
        logger.debug("image_unreadable", extra={"upload_name": uploaded_file.name})
        uploaded_file.seek(0)
        return uploaded_file

    source_format = (image.format or "").upper()
    rotated = _is_rotated(image)
    too_large = max(image.size) > max_dimension
    if source_format in WEB_FORMATS and not (rotated or too_large):
        uploaded_file.seek(0)
        return uploaded_file

    if rotated:
        image = ImageOps.exif_transpose(image)
    if too_large:
        image = ImageOps.contain(image, (max_dimension, max_dimension), Image.Resampling.LANCZOS)

    buffer, fmt = _encode(image)
    size = buffer.getbuffer().nbytes
    suffix = ".jpg" if fmt == "jpeg" else ".png"
    name = str(Path(uploaded_file.name or "upload").with_suffix(suffix))
    logger.debug(
        "image_normalized",
        extra={
            "upload_name": uploaded_file.name,
            "source_format": source_format,
            "rotated": rotated,
            "resized": too_large,
            "dimensions": image.size,
            "output_format": fmt,
        },
    )
    return InMemoryUploadedFile(
        buffer,
        getattr(uploaded_file, "field_name", None),
        name,
        f"image/{fmt}",
        size,
        None,
    )
