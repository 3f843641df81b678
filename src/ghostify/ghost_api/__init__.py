"""Ghost Admin API access.

* :mod:`.auth` -- Admin API key parsing and JWT signing.
* :mod:`.rate_limit` -- token buckets (sync and async).
* :mod:`.retries` -- retry decisions and exponential backoff.
* :mod:`.transport` -- HTTP transports with auth, retries and pacing.
* :mod:`.posts`, :mod:`.images`, :mod:`.site` -- endpoint wrappers.
"""

from __future__ import annotations

from .auth import authorization_header, generate_admin_token, parse_admin_api_key
from .images import AsyncImageAPI, ImageAPI
from .posts import AsyncPostAPI, PostAPI
from .rate_limit import AsyncTokenBucket, TokenBucket
from .retries import compute_backoff, should_retry
from .site import AsyncSiteAPI, SiteAPI
from .transport import AsyncGhostTransport, GhostTransport

__all__ = [
    "AsyncGhostTransport",
    "AsyncImageAPI",
    "AsyncPostAPI",
    "AsyncSiteAPI",
    "AsyncTokenBucket",
    "GhostTransport",
    "ImageAPI",
    "PostAPI",
    "SiteAPI",
    "TokenBucket",
    "authorization_header",
    "compute_backoff",
    "generate_admin_token",
    "parse_admin_api_key",
    "should_retry",
]
