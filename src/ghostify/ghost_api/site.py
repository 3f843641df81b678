"""Wrapper for the Admin API ``/site/`` endpoint.

``GET /site/`` is cheap and requires a valid token, so it doubles as the
connection check.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncGhostTransport, GhostTransport


class SiteAPI:
    def __init__(self, transport: GhostTransport) -> None:
        self._transport = transport

    def retrieve(self) -> dict[str, Any]:
        """Return the site object (``title``, ``url``, ``version``...)."""
        return self._transport.request("GET", "/site/").get("site", {})


class AsyncSiteAPI:
    def __init__(self, transport: AsyncGhostTransport) -> None:
        self._transport = transport

    async def retrieve(self) -> dict[str, Any]:
        response = await self._transport.request("GET", "/site/")
        return response.get("site", {})
