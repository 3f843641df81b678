"""Image upload flow for the Ghost Admin API.

Ghost takes an image in a single multipart ``POST`` and answers with the
absolute URL it will be served from.
"""

from __future__ import annotations

from ghostify.config import GhostifyConfig
from ghostify.image.validate import validate_image


def upload_image(
    image_api,
    name: str,
    data: bytes,
    config: GhostifyConfig,
) -> str:
    """Validate and upload an image.

    1. Check MIME type and size via :func:`validate_image`.
    2. Send the bytes through ``image_api.upload``.

    Parameters
    ----------
    image_api:
        An :class:`ImageAPI` instance.
    name:
        File name (e.g. ``"diagram.png"``).
    data:
        Raw file bytes.
    config:
        Configuration with the MIME allowlist and size limit.

    Returns
    -------
    str
        The absolute URL of the uploaded image.
    """
    content_type = validate_image(name, data, config)
    return image_api.upload(name=name, data=data, content_type=content_type)


async def async_upload_image(
    image_api,
    name: str,
    data: bytes,
    config: GhostifyConfig,
) -> str:
    """Validate and upload an image (async).

    See :func:`upload_image` for parameter documentation.
    """
    content_type = validate_image(name, data, config)
    return await image_api.upload(name=name, data=data, content_type=content_type)
