"""Wrappers for ``POST /images/upload/``.

Ghost takes the file as the ``file`` part of a multipart form, plus an
optional ``ref`` echoed back in the response, and answers with
``{"images": [{"url": ..., "ref": ...}]}``.
"""

from __future__ import annotations

from typing import Any

from ghostify.errors import GhostifyUploadError

from .transport import AsyncGhostTransport, GhostTransport


def _multipart(name: str, data: bytes, content_type: str) -> dict[str, Any]:
    return {
        "files": {"file": (name, data, content_type)},
        "data": {"ref": name},
    }


def _image_url(response: dict[str, Any], name: str) -> str:
    images = response.get("images") or []
    url = images[0].get("url") if images and isinstance(images[0], dict) else None
    if not url:
        raise GhostifyUploadError(
            message=f"Ghost returned no URL for uploaded image {name!r}",
            context={"name": name, "body": response},
        )
    return url


class ImageAPI:
    """Synchronous wrapper for Ghost image uploads.

    Parameters
    ----------
    transport:
        A configured :class:`GhostTransport`.
    """

    def __init__(self, transport: GhostTransport) -> None:
        self._transport = transport

    def upload(self, name: str, data: bytes, content_type: str) -> str:
        """Upload *data* as *name* and return the served URL.

        Raises
        ------
        GhostifyUploadError
            If the response carries no ``images[0].url``.
        """
        response = self._transport.request(
            "POST", "/images/upload/", **_multipart(name, data, content_type)
        )
        return _image_url(response, name)


class AsyncImageAPI:
    """Asynchronous wrapper for Ghost image uploads; see :class:`ImageAPI`."""

    def __init__(self, transport: AsyncGhostTransport) -> None:
        self._transport = transport

    async def upload(self, name: str, data: bytes, content_type: str) -> str:
        response = await self._transport.request(
            "POST", "/images/upload/", **_multipart(name, data, content_type)
        )
        return _image_url(response, name)
