"""Image source detection.

Classifies a raw image ``src`` string (from ``![alt](src)`` or an
``![[embed]]``) into one of the :class:`ImageSourceType` variants, and maps
file names to the MIME type sent with an upload.
"""

from __future__ import annotations

import re
from pathlib import PurePath
from urllib.parse import urlparse

from ghostify.models import ImageSourceType

# Regex for data URIs: data:[<mediatype>][;base64],<data>
_DATA_URI_RE = re.compile(r"^data:", re.IGNORECASE)

_MIME_BY_EXTENSION: dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "tiff": "image/tiff",
    "tif": "image/tiff",
    "bmp": "image/bmp",
}

_FALLBACK_MIME = "application/octet-stream"


def detect_image_source(src: str) -> ImageSourceType:
    """Detect whether an image source is a URL, local file, data URI, or unknown.

    Parameters
    ----------
    src:
        The raw source string from a Markdown image.

    Returns
    -------
    ImageSourceType
        The classification of the source.
    """
    if not src or not src.strip():
        return ImageSourceType.UNKNOWN

    src = src.strip()

    if _DATA_URI_RE.match(src):
        return ImageSourceType.DATA_URI

    parsed = urlparse(src)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return ImageSourceType.EXTERNAL_URL

    # Single-letter schemes are Windows drive letters, not URLs.
    if parsed.scheme and len(parsed.scheme) > 1 and parsed.scheme != "file":
        return ImageSourceType.UNKNOWN

    return ImageSourceType.LOCAL_FILE


def mime_for_filename(name: str) -> str:
    """Map a file name to its image MIME type by extension.

    Unknown extensions map to ``application/octet-stream``.
    """
    extension = PurePath(name).suffix.lower().lstrip(".")
    return _MIME_BY_EXTENSION.get(extension, _FALLBACK_MIME)
