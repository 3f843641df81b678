"""Unit tests for ghostify/ghost_api/transport.py.

Covers:
- _parse_retry_after and _ghost_error
- raise_for_status
- _dump_payload
- GhostTransport.request (success, 4xx errors, retries, headers, debug dump)
- AsyncGhostTransport equivalents
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from conftest import TEST_API_KEY, TEST_SECRET, make_config, make_response
from ghostify.errors import (
    GhostifyAuthError,
    GhostifyNetworkError,
    GhostifyNotFoundError,
    GhostifyPermissionError,
    GhostifyRetryExhaustedError,
    GhostifyValidationError,
)
from ghostify.ghost_api.transport import (
    AsyncGhostTransport,
    GhostTransport,
    _dump_payload,
    _ghost_error,
    _parse_retry_after,
    raise_for_status,
)


class _MockBucket:
    """Synchronous token bucket that never blocks."""
    def __init__(self, wait: float = 0.0):
        self._wait = wait

    def acquire(self, tokens: int = 1) -> float:
        return self._wait


class _MockAsyncBucket:
    """Asynchronous token bucket that never blocks."""
    def __init__(self, wait: float = 0.0):
        self._wait = wait

    async def acquire(self, tokens: int = 1) -> float:
        return self._wait


def _ghost_errors(message: str, type_: str = "ValidationError", context: str | None = None) -> dict:
    error = {"message": message, "type": type_}
    if context:
        error["context"] = context
    return {"errors": [error]}


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------

class TestParseRetryAfter:
    def test_numeric(self):
        assert _parse_retry_after(make_response(429, headers={"retry-after": "2"})) == 2.0

    def test_fractional(self):
        assert _parse_retry_after(make_response(429, headers={"retry-after": "0.5"})) == 0.5

    def test_http_date_ignored(self):
        resp = make_response(429, headers={"retry-after": "Wed, 21 Oct 2026 07:28:00 GMT"})
        assert _parse_retry_after(resp) is None

    def test_missing(self):
        assert _parse_retry_after(make_response(429)) is None


class TestGhostError:
    def test_extracts_first_error(self):
        resp = make_response(422, body=_ghost_errors("Title is required", context="title"))
        message, ghost_type, body = _ghost_error(resp)
        assert message == "Title is required (title)"
        assert ghost_type == "ValidationError"
        assert body["errors"][0]["message"] == "Title is required"

    def test_non_json_falls_back_to_text(self):
        message, ghost_type, _ = _ghost_error(make_response(400, text="<html>Bad</html>"))
        assert message == "<html>Bad</html>"
        assert ghost_type == ""

    def test_json_without_errors_list(self):
        message, _, body = _ghost_error(make_response(400, body={"detail": "nope"}))
        assert "nope" in message
        assert body == {"detail": "nope"}


class TestRaiseForStatus:
    def test_401_auth(self):
        resp = make_response(401, body=_ghost_errors("Invalid token", "UnauthorizedError"))
        with pytest.raises(GhostifyAuthError) as exc_info:
            raise_for_status(resp, "GET", "/site/")
        assert exc_info.value.context["status_code"] == 401
        assert exc_info.value.context["ghost_type"] == "UnauthorizedError"

    def test_403_permission(self):
        with pytest.raises(GhostifyPermissionError) as exc_info:
            raise_for_status(make_response(403, body=_ghost_errors("No")), "POST", "/posts/")
        assert exc_info.value.context["operation"] == "POST /posts/"

    def test_404_not_found(self):
        with pytest.raises(GhostifyNotFoundError) as exc_info:
            raise_for_status(make_response(404, body=_ghost_errors("Missing")), "GET", "/posts/x/")
        assert exc_info.value.context["path"] == "/posts/x/"

    @pytest.mark.parametrize("status", [400, 422])
    def test_validation(self, status):
        resp = make_response(status, body=_ghost_errors("Value in [posts.title] cannot be blank"))
        with pytest.raises(GhostifyValidationError) as exc_info:
            raise_for_status(resp, "POST", "/posts/")
        assert "Validation error" in exc_info.value.message
        assert "cannot be blank" in exc_info.value.message
        assert exc_info.value.context["body"]["errors"]

    def test_other_4xx_mentions_status(self):
        with pytest.raises(GhostifyValidationError) as exc_info:
            raise_for_status(make_response(409, body=_ghost_errors("Conflict")), "PUT", "/posts/1/")
        assert "Client error 409" in exc_info.value.message


class TestDumpPayload:
    def test_writes_redacted_json(self, capsys):
        _dump_payload(
            "POST",
            "https://blog.example.com/ghost/api/admin/posts/",
            {"posts": [{"title": "Hi"}], "token": "abc"},
            201,
            {"posts": [{"id": "1"}]},
        )
        dumped = json.loads(capsys.readouterr().err)
        assert dumped["method"] == "POST"
        assert dumped["request_body"]["token"] == "<redacted>"
        assert dumped["response_status"] == 201

    def test_api_key_never_printed(self, capsys):
        _dump_payload("GET", "/site/", {"note": f"key {TEST_API_KEY}"}, None, None, api_key=TEST_API_KEY)
        err = capsys.readouterr().err
        assert TEST_SECRET not in err
        assert "response_status" not in err


# ---------------------------------------------------------------------------
# GhostTransport
# ---------------------------------------------------------------------------

class TestGhostTransportRequest:
    def _transport(self, **cfg_overrides) -> GhostTransport:
        t = GhostTransport(make_config(**cfg_overrides))
        t._bucket = _MockBucket()
        return t

    def test_base_url_and_accept_version(self):
        transport = self._transport(api_version="v5.9")
        assert str(transport._client.base_url).rstrip("/") == "https://blog.example.com/ghost/api/admin"
        assert transport._client.headers["Accept-Version"] == "v5.9"

    def test_200_returns_json(self):
        transport = self._transport()
        resp = make_response(200, body={"site": {"title": "Blog"}})
        with patch.object(transport._client, "request", return_value=resp):
            assert transport.request("GET", "/site/") == {"site": {"title": "Blog"}}

    def test_204_returns_empty_dict(self):
        transport = self._transport()
        with patch.object(transport._client, "request", return_value=make_response(204)):
            assert transport.request("DELETE", "/posts/1/") == {}

    @pytest.mark.parametrize("text", ["<html><body>Bad gateway page</body></html>", "[1, 2]", "\"ok\""])
    def test_200_without_json_object_raises(self, text):
        transport = self._transport()
        resp = make_response(200, text=text)
        with patch.object(transport._client, "request", return_value=resp) as req:
            with pytest.raises(GhostifyNetworkError) as exc_info:
                transport.request("GET", "/site/")
        assert req.call_count == 1
        assert exc_info.value.context["status_code"] == 200
        assert exc_info.value.context["body"] == text

    def test_authorization_header_is_signed_per_request(self):
        transport = self._transport()
        with patch.object(transport._client, "request", return_value=make_response(200, body={})) as req:
            transport.request("GET", "/site/", headers={"X-Extra": "1"})
        headers = req.call_args.kwargs["headers"]
        assert headers["Authorization"].startswith("Ghost ")
        assert headers["X-Extra"] == "1"

    def test_kwargs_forwarded(self):
        transport = self._transport()
        with patch.object(transport._client, "request", return_value=make_response(200, body={})) as req:
            transport.request("POST", "/posts/", json={"posts": []}, params={"source": "html"})
        args, kwargs = req.call_args
        assert args == ("POST", "/posts/")
        assert kwargs["json"] == {"posts": []}
        assert kwargs["params"] == {"source": "html"}

    @pytest.mark.parametrize(
        ("status", "error"),
        [
            (400, GhostifyValidationError),
            (401, GhostifyAuthError),
            (403, GhostifyPermissionError),
            (404, GhostifyNotFoundError),
            (422, GhostifyValidationError),
        ],
    )
    def test_client_errors_raise_immediately(self, status, error):
        transport = self._transport()
        resp = make_response(status, body=_ghost_errors("nope"))
        with patch.object(transport._client, "request", return_value=resp) as req, pytest.raises(error):
            transport.request("POST", "/posts/")
        assert req.call_count == 1

    def test_malformed_key_raises_auth_error_before_sending(self):
        transport = self._transport(admin_api_key="not-a-key")
        with patch.object(transport._client, "request") as req, pytest.raises(GhostifyAuthError):
            transport.request("GET", "/site/")
        req.assert_not_called()

    def test_429_then_success(self):
        transport = self._transport()
        responses = iter([
            make_response(429, body={}, headers={"retry-after": "0"}),
            make_response(200, body={"ok": True}),
        ])
        with patch.object(transport._client, "request", side_effect=lambda *a, **kw: next(responses)):
            assert transport.request("GET", "/site/") == {"ok": True}

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    def test_retryable_status_exhausted(self, status):
        transport = self._transport(retry_max_attempts=3)
        resp = make_response(status, body=_ghost_errors("busy"))
        with (
            patch.object(transport._client, "request", return_value=resp) as req,
            pytest.raises(GhostifyRetryExhaustedError) as exc_info,
        ):
            transport.request("GET", "/site/")
        assert req.call_count == 3
        assert exc_info.value.context == {"attempts": 3, "last_status_code": status}

    def test_timeout_retried(self):
        transport = self._transport()
        outcomes = iter([httpx.ReadTimeout("slow"), make_response(200, body={"id": "p1"})])

        def side_effect(*args, **kwargs):
            outcome = next(outcomes)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        with patch.object(transport._client, "request", side_effect=side_effect):
            assert transport.request("GET", "/posts/p1/") == {"id": "p1"}

    def test_network_error_exhausted(self):
        transport = self._transport(retry_max_attempts=2)
        with (
            patch.object(transport._client, "request", side_effect=httpx.ConnectError("refused")) as req,
            pytest.raises(GhostifyNetworkError) as exc_info,
        ):
            transport.request("GET", "/site/")
        assert req.call_count == 2
        assert exc_info.value.context["attempt"] == 2
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    def test_metrics(self):
        metrics = MagicMock()
        transport = self._transport(metrics=metrics)
        responses = iter([make_response(503, body={}), make_response(200, body={})])
        with patch.object(transport._client, "request", side_effect=lambda *a, **kw: next(responses)):
            transport.request("GET", "/site/")
        increments = [c.args[0] for c in metrics.increment.call_args_list]
        assert increments.count("ghostify.requests_total") == 2
        assert "ghostify.retries_total" in increments
        timings = [c.args[0] for c in metrics.timing.call_args_list]
        assert "ghostify.request_duration_ms" in timings

    def test_rate_limit_wait_recorded(self):
        metrics = MagicMock()
        transport = self._transport(metrics=metrics)
        transport._bucket = _MockBucket(wait=0.25)
        with patch.object(transport._client, "request", return_value=make_response(200, body={})):
            transport.request("GET", "/site/")
        metrics.timing.assert_any_call(
            "ghostify.rate_limit_wait_ms", 250.0, tags={"method": "GET", "path": "/site/"}
        )

    def test_429_counts_rate_limited(self):
        metrics = MagicMock()
        transport = self._transport(metrics=metrics)
        responses = iter([
            make_response(429, body={}, headers={"retry-after": "0"}),
            make_response(200, body={}),
        ])
        with patch.object(transport._client, "request", side_effect=lambda *a, **kw: next(responses)):
            transport.request("GET", "/site/")
        metrics.increment.assert_any_call(
            "ghostify.rate_limited_total", tags={"method": "GET", "path": "/site/"}
        )
        metrics.increment.assert_any_call(
            "ghostify.retries_total",
            tags={"method": "GET", "path": "/site/", "reason": "rate_limited"},
        )

    def test_debug_dump(self, capsys):
        transport = self._transport(debug_dump_payload=True)
        with patch.object(transport._client, "request", return_value=make_response(200, body={"id": "p"})):
            transport.request("POST", "/posts/", json={"posts": [{"title": "T"}]})
        err = capsys.readouterr().err
        assert '"request_body"' in err
        assert TEST_SECRET not in err

    def test_no_debug_dump_by_default(self, capsys):
        transport = self._transport()
        with patch.object(transport._client, "request", return_value=make_response(200, body={})):
            transport.request("GET", "/site/")
        assert capsys.readouterr().err == ""

    def test_close(self):
        transport = self._transport()
        with patch.object(transport._client, "close") as close:
            transport.close()
        close.assert_called_once()


# ---------------------------------------------------------------------------
# AsyncGhostTransport
# ---------------------------------------------------------------------------

class TestAsyncGhostTransportRequest:
    def _transport(self, **cfg_overrides) -> AsyncGhostTransport:
        t = AsyncGhostTransport(make_config(**cfg_overrides))
        t._bucket = _MockAsyncBucket()
        return t

    async def test_200_returns_json(self):
        transport = self._transport()
        resp = make_response(200, body={"posts": [{"id": "1"}]})
        with patch.object(transport._client, "request", new=AsyncMock(return_value=resp)):
            assert await transport.request("POST", "/posts/") == {"posts": [{"id": "1"}]}

    async def test_200_html_body_raises(self):
        transport = self._transport()
        resp = make_response(200, text="<html>")
        with patch.object(transport._client, "request", new=AsyncMock(return_value=resp)), pytest.raises(GhostifyNetworkError):
            await transport.request("GET", "/site/")

    async def test_401_raises(self):
        transport = self._transport()
        resp = make_response(401, body=_ghost_errors("Invalid token"))
        with patch.object(transport._client, "request", new=AsyncMock(return_value=resp)), pytest.raises(GhostifyAuthError):
            await transport.request("GET", "/site/")

    async def test_500_then_success(self):
        transport = self._transport()
        mock = AsyncMock(side_effect=[make_response(500, body={}), make_response(200, body={"ok": 1})])
        with patch.object(transport._client, "request", new=mock):
            assert await transport.request("GET", "/site/") == {"ok": 1}
        assert mock.await_count == 2

    async def test_retry_exhausted(self):
        transport = self._transport(retry_max_attempts=2)
        mock = AsyncMock(return_value=make_response(502, body={}))
        with patch.object(transport._client, "request", new=mock), pytest.raises(GhostifyRetryExhaustedError):
            await transport.request("GET", "/site/")
        assert mock.await_count == 2

    async def test_network_error(self):
        transport = self._transport(retry_max_attempts=1)
        mock = AsyncMock(side_effect=httpx.ConnectError("refused"))
        with patch.object(transport._client, "request", new=mock), pytest.raises(GhostifyNetworkError):
            await transport.request("GET", "/site/")

    async def test_close(self):
        transport = self._transport()
        with patch.object(transport._client, "aclose", new=AsyncMock()) as aclose:
            await transport.close()
        aclose.assert_awaited_once()
