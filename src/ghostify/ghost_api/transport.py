"""Sync and async HTTP transports for the Ghost Admin API.

A request goes through these steps:

1. Wait for a token-bucket slot.
2. Send it with a freshly signed ``Authorization: Ghost <jwt>`` header and
   the configured ``Accept-Version``.
3. ``2xx`` -- return the decoded JSON body (``{}`` for empty bodies).
4. ``429`` / ``5xx`` / timeout / connection failure -- back off and retry.
5. Other ``4xx`` -- raise the matching :class:`GhostifyError` subclass.
6. Out of attempts -- raise :class:`GhostifyRetryExhaustedError` (or
   :class:`GhostifyNetworkError` when no response ever arrived).

The decision logic lives in :class:`_TransportCore`; the two concrete
transports only differ in how they send and sleep.
"""

from __future__ import annotations

import asyncio
import json as _json
import sys
import time
from typing import Any

import httpx

from ghostify.config import GhostifyConfig
from ghostify.errors import (
    GhostifyAuthError,
    GhostifyNetworkError,
    GhostifyNotFoundError,
    GhostifyPermissionError,
    GhostifyRetryExhaustedError,
    GhostifyValidationError,
)
from ghostify.observability import NoopMetricsHook, get_logger
from ghostify.utils.redact import redact

from .auth import authorization_header
from .rate_limit import AsyncTokenBucket, TokenBucket
from .retries import RETRYABLE_EXCEPTIONS, RETRYABLE_STATUSES, compute_backoff, should_retry

log = get_logger("ghostify.transport")

_BUCKET_BURST = 10


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------

def _parse_retry_after(response: httpx.Response) -> float | None:
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _ghost_error(response: httpx.Response) -> tuple[str, str, Any]:
    """Return ``(message, type, body)`` from a Ghost error response.

    Ghost reports failures as ``{"errors": [{"message": ..., "type": ...}]}``;
    anything else falls back to the raw response text.
    """
    try:
        body = response.json()
    except ValueError:
        return response.text[:500], "", response.text[:500]

    errors = body.get("errors") if isinstance(body, dict) else None
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        first = errors[0]
        message = first.get("message") or response.reason_phrase
        if first.get("context"):
            message = f"{message} ({first['context']})"
        return message, first.get("type", ""), body
    return response.text[:500], "", body


def raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the typed error for a non-retryable ``4xx`` response."""
    status = response.status_code
    message, ghost_type, body = _ghost_error(response)
    context: dict[str, Any] = {"status_code": status, "ghost_type": ghost_type}

    if status == 401:
        raise GhostifyAuthError(
            message=f"Authentication failed on {method} {path}: {message}",
            context=context,
        )
    if status == 403:
        raise GhostifyPermissionError(
            message=f"Permission denied on {method} {path}: {message}",
            context={**context, "operation": f"{method} {path}"},
        )
    if status == 404:
        raise GhostifyNotFoundError(
            message=f"Not found on {method} {path}: {message}",
            context={**context, "path": path},
        )
    label = "Validation error" if status in (400, 422) else f"Client error {status}"
    raise GhostifyValidationError(
        message=f"{label} on {method} {path}: {message}",
        context={**context, "body": body},
    )


def decode_success(response: httpx.Response, method: str, path: str) -> dict:
    """Return the JSON object carried by a ``2xx`` response.

    An empty body decodes to ``{}``.  A body that is not a JSON object, such
    as an HTML page served by a proxy in front of the site, raises
    :class:`GhostifyNetworkError`.
    """
    if response.status_code == 204 or not response.content:
        return {}
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        return body
    raise GhostifyNetworkError(
        message=(
            f"Unexpected response to {method} {path}: status "
            f"{response.status_code} without a JSON object body"
        ),
        context={
            "url": str(response.url),
            "status_code": response.status_code,
            "body": response.text[:500],
        },
    )


def _dump_payload(
    method: str,
    url: str,
    payload: Any,
    response_status: int | None,
    response_body: Any,
    api_key: str | None = None,
) -> None:
    """Print a redacted request/response pair to stderr."""
    dump: dict[str, Any] = {"method": method, "url": url}
    if payload is not None:
        dump["request_body"] = payload
    if response_status is not None:
        dump["response_status"] = response_status
    if response_body is not None:
        dump["response_body"] = response_body
    print(_json.dumps(redact(dump, api_key), indent=2, default=str), file=sys.stderr)


# ---------------------------------------------------------------------------
# Shared decision logic
# ---------------------------------------------------------------------------

class _TransportCore:
    """Bookkeeping shared by :class:`GhostTransport` and :class:`AsyncGhostTransport`."""

    def __init__(self, config: GhostifyConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    def _client_options(self) -> dict[str, Any]:
        return {
            "base_url": self._config.admin_api_url,
            "headers": {"Accept-Version": self._config.api_version},
            "timeout": httpx.Timeout(self._config.timeout_seconds),
            "proxy": self._config.http_proxy,
        }

    def _request_headers(self, extra: dict[str, str] | None) -> dict[str, str]:
        # Each request signs a fresh five-minute token.
        headers = {
            "Authorization": authorization_header(
                self._config.admin_api_key, self._config.token_audience
            ),
        }
        if extra:
            headers.update(extra)
        return headers

    def _record_wait(self, wait: float, method: str, path: str) -> None:
        if wait > 0:
            self._metrics.timing(
                "ghostify.rate_limit_wait_ms",
                wait * 1000,
                tags={"method": method, "path": path},
            )

    def _on_network_error(
        self, method: str, path: str, exc: Exception, attempt: int
    ) -> float:
        """Return the retry delay for *exc*, or raise when out of attempts."""
        self._metrics.increment(
            "ghostify.requests_total",
            tags={"method": method, "path": path, "status": "error"},
        )
        log.warning(
            "Request network error",
            extra={"extra_fields": {
                "op": "request",
                "method": method,
                "path": path,
                "attempt": attempt + 1,
                "error": str(exc),
            }},
        )
        if not should_retry(None, exc, attempt, self._config.retry_max_attempts):
            raise GhostifyNetworkError(
                message=f"Network error on {method} {path}: {exc}",
                context={"url": path, "attempt": attempt + 1},
                cause=exc,
            ) from exc

        self._metrics.increment(
            "ghostify.retries_total",
            tags={"method": method, "path": path, "reason": "network_error"},
        )
        return compute_backoff(
            attempt,
            base=self._config.retry_base_delay,
            maximum=self._config.retry_max_delay,
            jitter=self._config.retry_jitter,
        )

    def _on_response(
        self,
        method: str,
        path: str,
        response: httpx.Response,
        attempt: int,
        elapsed_ms: float,
        payload: Any,
    ) -> dict | float:
        """Return the decoded body on success, or the delay before a retry.

        Non-retryable failures and exhausted retries raise.
        """
        status = response.status_code
        tags = {"method": method, "path": path, "status": str(status)}
        self._metrics.increment("ghostify.requests_total", tags=tags)
        self._metrics.timing("ghostify.request_duration_ms", elapsed_ms, tags=tags)

        if self._config.debug_dump_payload:
            try:
                body: Any = response.json()
            except ValueError:
                body = response.text[:1000]
            _dump_payload(
                method, str(response.url), payload, status, body,
                api_key=self._config.admin_api_key,
            )

        if 200 <= status < 300:
            return decode_success(response, method, path)

        if status not in RETRYABLE_STATUSES:
            raise_for_status(response, method, path)

        if not should_retry(status, None, attempt, self._config.retry_max_attempts):
            message, _, _ = _ghost_error(response)
            raise GhostifyRetryExhaustedError(
                message=(
                    f"All {self._config.retry_max_attempts} attempts exhausted for "
                    f"{method} {path} (last status: {status}, {message})"
                ),
                context={
                    "attempts": self._config.retry_max_attempts,
                    "last_status_code": status,
                },
            )

        retry_after: float | None = None
        reason = "server_error"
        if status == 429:
            retry_after = _parse_retry_after(response)
            reason = "rate_limited"
            self._metrics.increment(
                "ghostify.rate_limited_total", tags={"method": method, "path": path}
            )
            log.warning(
                "Rate limited by Ghost",
                extra={"extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "retry_after": retry_after,
                    "attempt": attempt + 1,
                }},
            )

        self._metrics.increment(
            "ghostify.retries_total",
            tags={"method": method, "path": path, "reason": reason},
        )
        return compute_backoff(
            attempt,
            base=self._config.retry_base_delay,
            maximum=self._config.retry_max_delay,
            jitter=self._config.retry_jitter,
            retry_after=retry_after,
        )


# ---------------------------------------------------------------------------
# Sync transport
# ---------------------------------------------------------------------------

class GhostTransport(_TransportCore):
    """Blocking transport over :class:`httpx.Client`.

    Parameters
    ----------
    config:
        Site URL, credentials, retry and pacing settings.
    """

    def __init__(self, config: GhostifyConfig) -> None:
        super().__init__(config)
        self._bucket = TokenBucket(rate_rps=config.rate_limit_rps, burst=_BUCKET_BURST)
        self._client = httpx.Client(**self._client_options())

    def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Send a request to the Admin API and return the JSON body.

        Parameters
        ----------
        method:
            HTTP method.
        path:
            Path relative to ``/ghost/api/admin`` (e.g. ``/posts/``).
        **kwargs:
            Forwarded to :meth:`httpx.Client.request` (``json=``,
            ``files=``, ``params=``, ``headers=``).

        Raises
        ------
        GhostifyAuthError
            Malformed Admin API key, or a 401 response.
        GhostifyPermissionError
            On 403.
        GhostifyNotFoundError
            On 404.
        GhostifyValidationError
            On 400, 422 and other non-retryable 4xx.
        GhostifyRetryExhaustedError
            When 429/5xx responses persist past ``retry_max_attempts``.
        GhostifyNetworkError
            When connection failures persist past ``retry_max_attempts``, or
            a ``2xx`` response body is not a JSON object.
        """
        extra_headers = kwargs.pop("headers", None)
        payload = kwargs.get("json")

        for attempt in range(self._config.retry_max_attempts):
            self._record_wait(self._bucket.acquire(), method, path)
            headers = self._request_headers(extra_headers)

            started = time.monotonic()
            try:
                response = self._client.request(method, path, headers=headers, **kwargs)
            except RETRYABLE_EXCEPTIONS as exc:
                delay = self._on_network_error(method, path, exc, attempt)
            else:
                elapsed_ms = (time.monotonic() - started) * 1000
                outcome = self._on_response(method, path, response, attempt, elapsed_ms, payload)
                if isinstance(outcome, dict):
                    return outcome
                delay = outcome
            time.sleep(delay)

        # Unreachable: the final attempt returns or raises.
        raise GhostifyRetryExhaustedError(
            message=f"No attempts made for {method} {path}",
            context={"attempts": self._config.retry_max_attempts},
        )

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._client.close()


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncGhostTransport(_TransportCore):
    """Non-blocking transport over :class:`httpx.AsyncClient`.

    Mirrors :class:`GhostTransport`; :meth:`request` is a coroutine.
    """

    def __init__(self, config: GhostifyConfig) -> None:
        super().__init__(config)
        self._bucket = AsyncTokenBucket(rate_rps=config.rate_limit_rps, burst=_BUCKET_BURST)
        self._client = httpx.AsyncClient(**self._client_options())

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Send a request to the Admin API (async).

        See :meth:`GhostTransport.request`.
        """
        extra_headers = kwargs.pop("headers", None)
        payload = kwargs.get("json")

        for attempt in range(self._config.retry_max_attempts):
            self._record_wait(await self._bucket.acquire(), method, path)
            headers = self._request_headers(extra_headers)

            started = time.monotonic()
            try:
                response = await self._client.request(method, path, headers=headers, **kwargs)
            except RETRYABLE_EXCEPTIONS as exc:
                delay = self._on_network_error(method, path, exc, attempt)
            else:
                elapsed_ms = (time.monotonic() - started) * 1000
                outcome = self._on_response(method, path, response, attempt, elapsed_ms, payload)
                if isinstance(outcome, dict):
                    return outcome
                delay = outcome
            await asyncio.sleep(delay)

        raise GhostifyRetryExhaustedError(
            message=f"No attempts made for {method} {path}",
            context={"attempts": self._config.retry_max_attempts},
        )

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
