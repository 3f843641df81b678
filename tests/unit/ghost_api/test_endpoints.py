"""Tests for the posts, images and site endpoint wrappers."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from ghostify.errors import GhostifyUploadError
from ghostify.ghost_api.images import AsyncImageAPI, ImageAPI
from ghostify.ghost_api.posts import AsyncPostAPI, PostAPI
from ghostify.ghost_api.site import AsyncSiteAPI, SiteAPI


def _sync_transport(response: dict) -> MagicMock:
    transport = MagicMock()
    transport.request.return_value = response
    return transport


def _async_transport(response: dict) -> MagicMock:
    transport = MagicMock()
    transport.request = AsyncMock(return_value=response)
    return transport


class TestPostAPI:
    def test_create_wraps_bare_post(self):
        transport = _sync_transport({"posts": [{"id": "p1", "status": "draft"}]})
        post = PostAPI(transport).create({"title": "Hello", "lexical": "{}"})
        assert post == {"id": "p1", "status": "draft"}
        transport.request.assert_called_once_with(
            "POST", "/posts/", json={"posts": [{"title": "Hello", "lexical": "{}"}]}, params=None
        )

    def test_create_keeps_wrapped_body(self):
        transport = _sync_transport({"posts": [{"id": "p1"}]})
        body = {"posts": [{"title": "Hello"}]}
        PostAPI(transport).create(body)
        assert transport.request.call_args.kwargs["json"] is body

    def test_create_with_source(self):
        transport = _sync_transport({"posts": [{"id": "p1"}]})
        PostAPI(transport).create({"title": "T", "html": "<p>x</p>"}, source="html")
        assert transport.request.call_args.kwargs["params"] == {"source": "html"}

    def test_empty_response_gives_empty_post(self):
        assert PostAPI(_sync_transport({})).create({"title": "T"}) == {}

    def test_retrieve(self):
        transport = _sync_transport({"posts": [{"id": "abc"}]})
        assert PostAPI(transport).retrieve("abc") == {"id": "abc"}
        transport.request.assert_called_once_with("GET", "/posts/abc/")

    async def test_async_create(self):
        transport = _async_transport({"posts": [{"id": "p2"}]})
        post = await AsyncPostAPI(transport).create({"title": "Async"})
        assert post["id"] == "p2"
        transport.request.assert_awaited_once()

    async def test_async_retrieve(self):
        transport = _async_transport({"posts": [{"id": "p3"}]})
        assert await AsyncPostAPI(transport).retrieve("p3") == {"id": "p3"}


class TestImageAPI:
    def test_upload_sends_multipart(self):
        transport = _sync_transport(
            {"images": [{"url": "https://blog.example.com/content/images/a.png", "ref": "a.png"}]}
        )
        url = ImageAPI(transport).upload("a.png", b"data", "image/png")
        assert url == "https://blog.example.com/content/images/a.png"
        transport.request.assert_called_once_with(
            "POST",
            "/images/upload/",
            files={"file": ("a.png", b"data", "image/png")},
            data={"ref": "a.png"},
        )

    @pytest.mark.parametrize("response", [{}, {"images": []}, {"images": [{"ref": "a.png"}]}])
    def test_missing_url_raises(self, response):
        with pytest.raises(GhostifyUploadError) as exc_info:
            ImageAPI(_sync_transport(response)).upload("a.png", b"data", "image/png")
        assert exc_info.value.context["name"] == "a.png"

    async def test_async_upload(self):
        transport = _async_transport({"images": [{"url": "https://cdn.example.com/b.gif"}]})
        assert await AsyncImageAPI(transport).upload("b.gif", b"GIF89a", "image/gif") == (
            "https://cdn.example.com/b.gif"
        )


class TestSiteAPI:
    def test_retrieve(self):
        transport = _sync_transport({"site": {"title": "Blog", "version": "5.80"}})
        assert SiteAPI(transport).retrieve() == {"title": "Blog", "version": "5.80"}
        transport.request.assert_called_once_with("GET", "/site/")

    def test_missing_site_key(self):
        assert SiteAPI(_sync_transport({})).retrieve() == {}

    async def test_async_retrieve(self):
        transport = _async_transport({"site": {"title": "Blog"}})
        assert await AsyncSiteAPI(transport).retrieve() == {"title": "Blog"}
