"""ghostify: publish Markdown notes to Ghost as Lexical posts.

Public re-exports
-----------------

* **Clients:** :class:`GhostifyClient`, :class:`AsyncGhostifyClient`
* **Configuration:** :class:`GhostifyConfig`
* **Conversion:** :func:`markdown_to_lexical`, :class:`MarkdownToLexicalConverter`
* **Errors:** every :class:`GhostifyError` subclass and :class:`ErrorCode`
* **Models:** result dataclasses and enums

Usage::

    from ghostify import markdown_to_lexical

    lexical = markdown_to_lexical("# Hello\\n\\nThis is **bold**.")
"""

from __future__ import annotations

# ── Clients ────────────────────────────────────────────────────────────
from ghostify.async_client import AsyncGhostifyClient
from ghostify.client import GhostifyClient

# ── Configuration ───────────────────────────────────────────────────────
from ghostify.config import DEFAULT_UPLOAD_MIMES, GhostifyConfig

# ── Conversion ──────────────────────────────────────────────────────────
from ghostify.converter import (
    DocumentRoot,
    MarkdownToLexicalConverter,
    markdown_to_lexical,
    render_preview,
    resolve_inline,
    segment,
)

# ── Errors ──────────────────────────────────────────────────────────────
from ghostify.errors import (
    ErrorCode,
    GhostifyAuthError,
    GhostifyError,
    GhostifyImageError,
    GhostifyImageNotFoundError,
    GhostifyImageSizeError,
    GhostifyImageTypeError,
    GhostifyNetworkError,
    GhostifyNoteMoveError,
    GhostifyNotFoundError,
    GhostifyPermissionError,
    GhostifyRateLimitError,
    GhostifyRetryExhaustedError,
    GhostifyUploadError,
    GhostifyValidationError,
)

# ── Models ──────────────────────────────────────────────────────────────
from ghostify.models import (
    ConversionResult,
    ConversionWarning,
    FrontMatter,
    ImageSourceType,
    PostStatus,
    PublishResult,
    Visibility,
)

__version__ = "0.3.0"

__all__ = [
    # Clients
    "GhostifyClient",
    "AsyncGhostifyClient",
    # Configuration
    "GhostifyConfig",
    "DEFAULT_UPLOAD_MIMES",
    # Conversion
    "DocumentRoot",
    "MarkdownToLexicalConverter",
    "markdown_to_lexical",
    "render_preview",
    "resolve_inline",
    "segment",
    # Errors
    "GhostifyError",
    "ErrorCode",
    "GhostifyValidationError",
    "GhostifyAuthError",
    "GhostifyPermissionError",
    "GhostifyNotFoundError",
    "GhostifyRateLimitError",
    "GhostifyRetryExhaustedError",
    "GhostifyNetworkError",
    "GhostifyImageError",
    "GhostifyImageNotFoundError",
    "GhostifyImageTypeError",
    "GhostifyImageSizeError",
    "GhostifyUploadError",
    "GhostifyNoteMoveError",
    # Models
    "ConversionResult",
    "ConversionWarning",
    "FrontMatter",
    "ImageSourceType",
    "PostStatus",
    "PublishResult",
    "Visibility",
]
