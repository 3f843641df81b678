"""Image validation: MIME type and size checks.

Validates that image bytes read from the vault conform to the configured
MIME-type allowlist and maximum size before they are uploaded to Ghost.
"""

from __future__ import annotations

from ghostify.config import GhostifyConfig
from ghostify.errors import GhostifyImageSizeError, GhostifyImageTypeError
from ghostify.image.detect import mime_for_filename

# Map of magic bytes to MIME types for sniffing.
_MAGIC_BYTES: list[tuple[bytes, str]] = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"RIFF", "image/webp"),  # RIFF....WEBP (check further)
    (b"<svg", "image/svg+xml"),
    (b"<?xml", "image/svg+xml"),  # SVG can start with XML declaration
    (b"BM", "image/bmp"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
]


def sniff_mime(data: bytes) -> str | None:
    """Attempt to detect MIME type from the first bytes of image data."""
    for magic, mime in _MAGIC_BYTES:
        if data[:len(magic)] == magic:
            # Extra check for WEBP: RIFF....WEBP
            if magic == b"RIFF" and data[8:12] != b"WEBP":
                continue
            return mime
    return None


def validate_image(name: str, data: bytes, config: GhostifyConfig) -> str:
    """Validate an image's MIME type and size.

    Parameters
    ----------
    name:
        File name of the image (used for the extension fallback).
    data:
        Raw image bytes.
    config:
        Configuration with the MIME allowlist and size limit.

    Returns
    -------
    str
        The validated MIME type.

    Raises
    ------
    GhostifyImageTypeError
        If the detected MIME type is not in the configured allowlist.
    GhostifyImageSizeError
        If the image exceeds ``config.image_max_size_bytes``.
    """
    mime_type = sniff_mime(data) or mime_for_filename(name)

    allowed = config.image_allowed_mimes_upload
    if mime_type not in allowed:
        raise GhostifyImageTypeError(
            message=f"Image MIME type {mime_type!r} is not allowed",
            context={
                "src": name,
                "detected_mime": mime_type,
                "allowed_mimes": allowed,
            },
        )

    if len(data) > config.image_max_size_bytes:
        raise GhostifyImageSizeError(
            message=(
                f"Image size {len(data)} bytes exceeds "
                f"maximum {config.image_max_size_bytes} bytes"
            ),
            context={
                "src": name,
                "size_bytes": len(data),
                "max_bytes": config.image_max_size_bytes,
            },
        )

    return mime_type
