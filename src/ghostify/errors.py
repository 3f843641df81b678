"""Error hierarchy for ghostify.

Every public error class inherits from :class:`GhostifyError`.  Each carries
a machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

The Markdown converter never raises any of these: it is total over ``str``
input.  Errors come from the Ghost Admin API transport, the image pipeline,
and note housekeeping.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error ghostify can raise."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    IMAGE_ERROR = "IMAGE_ERROR"
    IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
    IMAGE_TYPE_ERROR = "IMAGE_TYPE_ERROR"
    IMAGE_SIZE_ERROR = "IMAGE_SIZE_ERROR"
    UPLOAD_ERROR = "UPLOAD_ERROR"
    NOTE_MOVE_ERROR = "NOTE_MOVE_ERROR"

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class GhostifyError(Exception):
    """Base exception for all ghostify errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class _CodedError(GhostifyError):
    """Helper base: subclasses pin ``code`` through the ``_code`` attribute."""

    _code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=self._code,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# API / transport errors
# ---------------------------------------------------------------------------

class GhostifyValidationError(_CodedError):
    """Ghost returned 400 or 422: the request payload was rejected.

    Context keys: ``status_code``, ``ghost_type``, ``body``.
    """

    _code = ErrorCode.VALIDATION_ERROR


class GhostifyAuthError(_CodedError):
    """The Admin API key is malformed, or Ghost returned 401.

    Context keys: ``status_code``, ``ghost_type``, ``key_id``.
    """

    _code = ErrorCode.AUTH_ERROR


class GhostifyPermissionError(_CodedError):
    """Ghost returned 403: the integration lacks access to the resource.

    Context keys: ``status_code``, ``operation``.
    """

    _code = ErrorCode.PERMISSION_ERROR


class GhostifyNotFoundError(_CodedError):
    """Ghost returned 404: the endpoint or resource does not exist.

    Context keys: ``status_code``, ``path``.
    """

    _code = ErrorCode.NOT_FOUND


class GhostifyRateLimitError(_CodedError):
    """Ghost returned 429 and the caller asked not to retry.

    Context keys: ``retry_after_seconds``, ``attempt``.
    """

    _code = ErrorCode.RATE_LIMITED


class GhostifyRetryExhaustedError(_CodedError):
    """All retry attempts have been exhausted for a retryable request.

    Context keys: ``attempts``, ``last_status_code``.
    """

    _code = ErrorCode.RETRY_EXHAUSTED


class GhostifyNetworkError(_CodedError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``url``, ``attempt``; ``status_code`` and ``body`` when a
    successful response carried no JSON object.
    """

    _code = ErrorCode.NETWORK_ERROR


# ---------------------------------------------------------------------------
# Image errors
# ---------------------------------------------------------------------------

class GhostifyImageError(GhostifyError):
    """Base class for image-related errors."""

    def __init__(
        self,
        code: str = ErrorCode.IMAGE_ERROR,
        message: str = "Image error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class _CodedImageError(GhostifyImageError):
    _code: ErrorCode = ErrorCode.IMAGE_ERROR

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=self._code,
            message=message,
            context=context,
            cause=cause,
        )


class GhostifyImageNotFoundError(_CodedImageError):
    """The referenced image file does not exist in the vault.

    Context keys: ``src``, ``resolved_path``.
    """

    _code = ErrorCode.IMAGE_NOT_FOUND


class GhostifyImageTypeError(_CodedImageError):
    """The detected MIME type is not in the configured allowlist.

    Context keys: ``src``, ``detected_mime``, ``allowed_mimes``.
    """

    _code = ErrorCode.IMAGE_TYPE_ERROR


class GhostifyImageSizeError(_CodedImageError):
    """The image exceeds the configured maximum upload size.

    Context keys: ``src``, ``size_bytes``, ``max_bytes``.
    """

    _code = ErrorCode.IMAGE_SIZE_ERROR


class GhostifyUploadError(_CodedError):
    """Ghost accepted the upload request but returned no image URL.

    Context keys: ``name``, ``body``.
    """

    _code = ErrorCode.UPLOAD_ERROR


# ---------------------------------------------------------------------------
# Note housekeeping errors
# ---------------------------------------------------------------------------

class GhostifyNoteMoveError(_CodedError):
    """A published note could not be moved into the published directory.

    Context keys: ``note``, ``target``, ``reason``.
    """

    _code = ErrorCode.NOTE_MOVE_ERROR
