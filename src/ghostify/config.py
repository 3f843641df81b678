"""Configuration for ghostify.

:class:`GhostifyConfig` is a dataclass that captures every tuneable knob
exposed by the package.  Instances are passed to both
:class:`GhostifyClient` and :class:`AsyncGhostifyClient`.

:data:`DEFAULT_UPLOAD_MIMES` defines the image types Ghost's image upload
endpoint accepts.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# MIME allowlist
# ---------------------------------------------------------------------------

DEFAULT_UPLOAD_MIMES: list[str] = [
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    "image/tiff",
    "image/bmp",
    "image/x-icon",
]
"""MIME types accepted by ``POST /images/upload/``."""


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class GhostifyConfig:
    """Complete configuration for a ghostify client.

    Only ``ghost_url`` and ``admin_api_key`` are needed to publish; the
    converter works with a default-constructed config.

    Parameters
    ----------
    ghost_url:
        Root URL of the Ghost site (``https://blog.example.com``).  A
        trailing slash is stripped.
    admin_api_key:
        Admin API key in ``<id>:<hex secret>`` form.  Never logged.
    api_version:
        Value of the ``Accept-Version`` header sent with every request.
    token_audience:
        ``aud`` claim of the short-lived admin JWT.
    images_directory:
        Vault-relative directory searched for embedded images that are
        not found next to the note.  Surrounding slashes are stripped.
    move_notes_after_publish:
        Move a note into :attr:`published_notes_directory` once its post
        was created.
    published_notes_directory:
        Vault-relative destination for published notes.
    open_editor_after_publish:
        Open the Ghost editor for the new post in a browser (CLI only).
    image_upload:
        Upload locally embedded images before converting the note.  When
        disabled, local references are left in place.
    image_allowed_mimes_upload:
        MIME types accepted for upload.
    image_max_size_bytes:
        Maximum file size in bytes for uploaded images.  Default is 20 MiB.
    retry_max_attempts:
        Maximum number of attempts per request for retryable failures.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Scale backoff intervals randomly to 50-100 %.
    rate_limit_rps:
        Target requests per second for client-side pacing (token bucket).
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    debug_dump_payload:
        Write the (redacted) request and response of every API call to
        *stderr*.
    debug_dump_lexical:
        Write the serialized Lexical document of each conversion to
        *stderr*.
    """

    # ── Site ────────────────────────────────────────────────────────────
    ghost_url: str = ""

    admin_api_key: str = ""

    api_version: str = "v5.0"

    token_audience: str = "/admin/"

    # ── Vault ───────────────────────────────────────────────────────────
    images_directory: str = "assets/files"

    move_notes_after_publish: bool = False

    published_notes_directory: str = "Published Notes"

    open_editor_after_publish: bool = False

    # ── Images ──────────────────────────────────────────────────────────
    image_upload: bool = True

    image_allowed_mimes_upload: list[str] = field(
        default_factory=lambda: list(DEFAULT_UPLOAD_MIMES),
    )

    image_max_size_bytes: int = 20 * 1024 * 1024  # 20 MiB

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 5

    retry_base_delay: float = 1.0

    retry_max_delay: float = 60.0

    retry_jitter: bool = True

    rate_limit_rps: float = 5.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    debug_dump_lexical: bool = False

    def __post_init__(self) -> None:
        """Normalise paths and validate configuration after initialization."""
        from urllib.parse import urlparse

        self.ghost_url = self.ghost_url.strip().rstrip("/")
        self.images_directory = self.images_directory.strip("/")
        self.published_notes_directory = self.published_notes_directory.strip("/")

        if self.ghost_url:
            parsed = urlparse(self.ghost_url)
            if parsed.scheme not in ("http", "https") or not parsed.hostname:
                raise ValueError(f"ghost_url is not a valid URL: {self.ghost_url!r}")
            if parsed.scheme == "http" and parsed.hostname not in (
                "localhost",
                "127.0.0.1",
                "::1",
            ):
                raise ValueError(
                    f"ghost_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                    "Use HTTPS to protect your Admin API key, or target localhost for testing."
                )

        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.image_max_size_bytes <= 0:
            raise ValueError(f"image_max_size_bytes must be > 0, got {self.image_max_size_bytes}")

    @property
    def admin_api_url(self) -> str:
        """Base URL of the Admin API for :attr:`ghost_url`."""
        return f"{self.ghost_url}/ghost/api/admin"

    def __repr__(self) -> str:
        """Mask the API key to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "admin_api_key":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"admin_api_key='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"GhostifyConfig({', '.join(parts)})"
