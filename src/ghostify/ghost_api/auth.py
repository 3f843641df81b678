"""Ghost Admin API authentication.

An Admin API key has the form ``<id>:<secret>`` where *secret* is
hex-encoded.  Requests authenticate with a short-lived HS256 JWT::

    header  = {"alg": "HS256", "typ": "JWT", "kid": <id>}
    payload = {"iat": now, "exp": now + 300, "aud": "/admin/"}

signed with the decoded secret and sent as ``Authorization: Ghost <jwt>``.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time

from ghostify.errors import GhostifyAuthError

TOKEN_LIFETIME_SECONDS = 5 * 60
"""Ghost rejects admin tokens that live longer than five minutes."""


def parse_admin_api_key(api_key: str) -> tuple[str, str]:
    """Split an Admin API key into ``(key_id, secret_hex)``.

    Raises
    ------
    GhostifyAuthError
        If either part is missing or the secret is not valid hex.
    """
    key_id, sep, secret = api_key.strip().partition(":")
    if not sep or not key_id or not secret:
        raise GhostifyAuthError(
            message="Invalid Admin API key format; expected ID:SECRET",
        )
    try:
        bytes.fromhex(secret)
    except ValueError as exc:
        raise GhostifyAuthError(
            message="Admin API key secret is not hex-encoded",
            context={"key_id": key_id},
            cause=exc,
        ) from exc
    return key_id, secret


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_json(obj: dict) -> str:
    return _b64url(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


def generate_admin_token(
    key_id: str,
    secret_hex: str,
    *,
    now: int | None = None,
    audience: str = "/admin/",
) -> str:
    """Create a signed admin JWT.

    Parameters
    ----------
    key_id:
        The ``id`` half of the Admin API key; becomes the ``kid`` header.
    secret_hex:
        The hex-encoded ``secret`` half of the key.
    now:
        Issue time as a Unix timestamp.  Defaults to the current time.
    audience:
        ``aud`` claim.

    Returns
    -------
    str
        The compact JWT (``header.payload.signature``).
    """
    issued_at = int(time.time()) if now is None else now
    header = {"alg": "HS256", "typ": "JWT", "kid": key_id}
    payload = {
        "iat": issued_at,
        "exp": issued_at + TOKEN_LIFETIME_SECONDS,
        "aud": audience,
    }
    signing_input = f"{_b64url_json(header)}.{_b64url_json(payload)}"
    signature = hmac.new(
        bytes.fromhex(secret_hex),
        signing_input.encode("ascii"),
        hashlib.sha256,
    ).digest()
    return f"{signing_input}.{_b64url(signature)}"


def authorization_header(api_key: str, audience: str = "/admin/") -> str:
    """Return the ``Authorization`` header value for *api_key*."""
    key_id, secret = parse_admin_api_key(api_key)
    return f"Ghost {generate_admin_token(key_id, secret, audience=audience)}"
