"""Scrub credentials and bulky binary data before anything is logged.

:func:`redact` is applied to every request/response dump.  It removes:

* the Admin API key, and its hex secret wherever it appears on its own;
* ``Ghost <jwt>`` and ``Bearer <token>`` authorization values;
* values under credential-looking keys (``authorization``, ``api_key``...);
* base64 data URIs, replaced by ``<data_uri:N_bytes>``;
* raw ``bytes`` values, replaced by ``<binary:N_bytes>``.
"""

from __future__ import annotations

import binascii
import copy
import re
from typing import Any

_DATA_URI_RE = re.compile(
    r"data:[a-zA-Z0-9_.+-]+/[a-zA-Z0-9_.+-]+;base64,[A-Za-z0-9+/=]+"
)

_AUTH_SCHEME_RE = re.compile(r"\b(Ghost|Bearer)\s+\S+")

_SENSITIVE_KEY_PARTS: tuple[str, ...] = (
    "authorization",
    "api_key",
    "api-key",
    "apikey",
    "secret",
    "token",
    "password",
    "cookie",
)


def _data_uri_size(uri: str) -> int:
    encoded = uri.split(";base64,", 1)[1]
    try:
        return len(binascii.a2b_base64(encoded))
    except binascii.Error:
        return len(encoded) * 3 // 4


def _mask_secrets(value: str, secrets: tuple[str, ...]) -> str:
    for secret in secrets:
        if secret and secret in value:
            value = value.replace(secret, "<redacted>")
    return _AUTH_SCHEME_RE.sub(lambda m: f"{m.group(1)} <redacted>", value)


def _secrets_for(api_key: str | None) -> tuple[str, ...]:
    if not api_key:
        return ()
    _, _, secret = api_key.partition(":")
    # Full key first so its id part is not left dangling.
    return (api_key, secret) if secret else (api_key,)


def _scrub(value: Any, secrets: tuple[str, ...]) -> Any:
    if isinstance(value, dict):
        out: dict = {}
        for key, item in value.items():
            lowered = key.lower() if isinstance(key, str) else ""
            if any(part in lowered for part in _SENSITIVE_KEY_PARTS):
                out[key] = "<redacted>"
            else:
                out[key] = _scrub(item, secrets)
        return out
    if isinstance(value, (list, tuple)):
        return [_scrub(item, secrets) for item in value]
    if isinstance(value, (bytes, bytearray)):
        return f"<binary:{len(value)}_bytes>"
    if isinstance(value, str):
        value = _DATA_URI_RE.sub(
            lambda m: f"<data_uri:{_data_uri_size(m.group(0))}_bytes>", value
        )
        return _mask_secrets(value, secrets)
    return value


def redact(payload: dict, api_key: str | None = None) -> dict:
    """Return a scrubbed deep copy of *payload*.

    Parameters
    ----------
    payload:
        A request/response dump, header mapping, or any JSON-like dict.
    api_key:
        The Admin API key in use.  The full key and its secret half are
        removed from every string in the tree.

    Examples
    --------
    >>> redact({"Authorization": "Ghost eyJhbGciOi..."})
    {'Authorization': '<redacted>'}
    >>> redact({"note": "signed with Ghost eyJ.abc.def"})
    {'note': 'signed with Ghost <redacted>'}
    """
    return _scrub(copy.deepcopy(payload), _secrets_for(api_key))
