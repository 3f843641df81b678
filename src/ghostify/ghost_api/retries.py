"""Retry policy for Admin API requests.

* :func:`should_retry` -- is a failed attempt worth repeating?
* :func:`compute_backoff` -- how long to wait before the next attempt.

Ghost answers overload with ``429`` (sometimes carrying ``Retry-After``)
and proxy hiccups with ``502``/``503``/``504``; those and connection-level
failures are retried.  Everything else is surfaced immediately.
"""

from __future__ import annotations

import random

import httpx

RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Decide whether the request should be attempted again.

    Parameters
    ----------
    status_code:
        Response status, or ``None`` if no response arrived.
    exception:
        The transport exception, or ``None`` if a response arrived.
    attempt:
        The zero-based number of the attempt that just failed.
    max_attempts:
        Total attempts allowed, including the first.
    """
    if attempt + 1 >= max_attempts:
        return False
    if exception is not None:
        return isinstance(exception, RETRYABLE_EXCEPTIONS)
    return status_code in RETRYABLE_STATUSES


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    maximum: float = 60.0,
    jitter: bool = True,
    retry_after: float | None = None,
) -> float:
    """Seconds to wait before attempt ``attempt + 1``.

    A server-supplied *retry_after* wins; otherwise the delay doubles per
    attempt from *base* up to *maximum*.  With *jitter* the delay is
    scaled to a random 50-100 % of itself.
    """
    if retry_after is not None:
        delay = max(retry_after, 0.0)
    else:
        delay = min(base * (2 ** attempt), maximum)

    if jitter:
        delay *= 0.5 + random.random() * 0.5

    return delay
