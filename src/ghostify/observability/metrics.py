"""Pluggable metrics for ghostify.

Supply any object with ``increment``/``timing``/``gauge`` methods through
:attr:`GhostifyConfig.metrics` to receive data points; without one a
:class:`NoopMetricsHook` swallows them.

Metric names:

* ``ghostify.requests_total``            -- counter, tagged ``method``/``status``
* ``ghostify.retries_total``             -- counter
* ``ghostify.rate_limited_total``        -- counter
* ``ghostify.request_duration_ms``       -- timing
* ``ghostify.rate_limit_wait_ms``        -- timing
* ``ghostify.posts_published_total``     -- counter, tagged ``status``
* ``ghostify.upload_success_total``      -- counter
* ``ghostify.upload_failure_total``      -- counter
* ``ghostify.conversion_warnings_total`` -- counter, tagged ``code``
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Structural type for a metrics backend.

    *tags* maps string keys to string values; how they are attached
    (labels, tag lists, name suffixes) is up to the backend.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Add *value* to the counter *name*."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration of *ms* milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set the gauge *name* to *value*."""
        ...


class NoopMetricsHook:
    """Metrics backend that drops everything."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
