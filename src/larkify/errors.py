"""Full error hierarchy for the larkify SDK.

Every public error class inherits from LarkifyError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Feishu answers almost every request with an envelope ``{"code", "msg",
"data"}``; a non-zero ``code`` is an application-level failure.  A few of
those codes have well-known remedies, and :func:`remediation_hint` maps them
to guidance that is attached to the raised error as ``context["hint"]``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the SDK can raise."""

    CONTENT_ERROR = "CONTENT_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_ERROR = "NETWORK_ERROR"
    API_ERROR = "API_ERROR"


# ---------------------------------------------------------------------------
# Feishu application codes
# ---------------------------------------------------------------------------

PERMISSION_DENIED_CODES: frozenset[int] = frozenset({
    99991668,
    99991672,
    99991679,
    1770032,
})
"""Codes returned when the app or user lacks docx scopes on the document."""

TOKEN_EXPIRED_CODES: frozenset[int] = frozenset({99991663})
"""Codes returned when the access token is no longer valid."""

RATE_LIMIT_CODES: frozenset[int] = frozenset({429, 99991400})
"""Envelope codes (and the HTTP status) that mean "slow down"."""

_PERMISSION_HINT = (
    "Permission denied. In the Feishu developer console: "
    "1) enable the docx:document and docx:document:readonly scopes; "
    "2) publish a new app version after changing scopes; "
    "3) authorize again to obtain a fresh user token."
)

_TOKEN_EXPIRED_HINT = (
    "The access token has expired. Log in again to refresh the token cache."
)


def remediation_hint(api_code: int) -> str | None:
    """Return operator guidance for a Feishu error code, or ``None``."""
    if api_code in PERMISSION_DENIED_CODES:
        return _PERMISSION_HINT
    if api_code in TOKEN_EXPIRED_CODES:
        return _TOKEN_EXPIRED_HINT
    return None


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class LarkifyError(Exception):
    """Base exception for all larkify errors.

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

    @property
    def hint(self) -> str | None:
        """Remediation guidance, when the failure has a known fix."""
        return self.context.get("hint")

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Structural errors (raised before any network call)
# ---------------------------------------------------------------------------

class LarkifyContentError(LarkifyError):
    """The content to write is empty or otherwise unusable.

    Context keys: ``action``, ``document_id``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONTENT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# API / transport errors
# ---------------------------------------------------------------------------

class LarkifyAuthError(LarkifyError):
    """The access token is missing, invalid, or expired.

    Context keys: ``step``, ``api_code``, ``msg``, ``hint``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.AUTH_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class LarkifyPermissionError(LarkifyError):
    """The app or user lacks access to the document.

    Context keys: ``step``, ``api_code``, ``msg``, ``hint``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PERMISSION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class LarkifyRateLimitError(LarkifyError):
    """The request was still rate limited after every retry.

    Context keys: ``step``, ``api_code``, ``msg``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.RATE_LIMITED,
            message=message,
            context=context,
            cause=cause,
        )


class LarkifyNetworkError(LarkifyError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``path``, ``attempt``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NETWORK_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class LarkifyAPIError(LarkifyError):
    """Feishu returned a non-zero code not covered by a narrower class.

    Context keys: ``step``, ``api_code``, ``msg``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.API_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
