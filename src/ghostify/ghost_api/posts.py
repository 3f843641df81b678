"""Wrappers for the Admin API ``/posts/`` endpoints."""

from __future__ import annotations

from typing import Any

from .transport import AsyncGhostTransport, GhostTransport


def _first_post(response: dict[str, Any]) -> dict[str, Any]:
    posts = response.get("posts") or [{}]
    return posts[0]


class PostAPI:
    """Synchronous wrapper for Ghost posts.

    Parameters
    ----------
    transport:
        A configured :class:`GhostTransport`.
    """

    def __init__(self, transport: GhostTransport) -> None:
        self._transport = transport

    def create(self, post: dict[str, Any], source: str | None = None) -> dict[str, Any]:
        """Create a post and return the created post object.

        Parameters
        ----------
        post:
            Either a bare post object (``{"title": ..., "lexical": ...}``)
            or an already wrapped ``{"posts": [...]}`` body.
        source:
            Set to ``"html"`` when the post carries an ``html`` field that
            Ghost should convert.  Lexical posts need no source.
        """
        body = post if "posts" in post else {"posts": [post]}
        params = {"source": source} if source else None
        return _first_post(self._transport.request("POST", "/posts/", json=body, params=params))

    def retrieve(self, post_id: str) -> dict[str, Any]:
        """Fetch a single post by id."""
        return _first_post(self._transport.request("GET", f"/posts/{post_id}/"))


class AsyncPostAPI:
    """Asynchronous wrapper for Ghost posts; see :class:`PostAPI`."""

    def __init__(self, transport: AsyncGhostTransport) -> None:
        self._transport = transport

    async def create(self, post: dict[str, Any], source: str | None = None) -> dict[str, Any]:
        body = post if "posts" in post else {"posts": [post]}
        params = {"source": source} if source else None
        return _first_post(
            await self._transport.request("POST", "/posts/", json=body, params=params)
        )

    async def retrieve(self, post_id: str) -> dict[str, Any]:
        return _first_post(await self._transport.request("GET", f"/posts/{post_id}/"))
