"""Retry decision logic and linear backoff computation.

Pure functions used by the transport layer:

* :func:`is_rate_limited` -- classify a response as "slow down".
* :func:`should_retry` -- decide whether a failed attempt is retried.
* :func:`compute_backoff` -- delay before the next attempt.

Feishu signals throttling either with HTTP 429 or with a 2xx/4xx response
whose envelope ``code`` is 429 or 99991400.  Both are retried with a fixed,
linearly growing delay; no jitter is applied.
"""

from __future__ import annotations

from typing import Any

import httpx

from larkify.errors import RATE_LIMIT_CODES

# Network-level exceptions that warrant a retry.
_RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


def is_rate_limited(status_code: int | None, envelope: dict[str, Any] | None) -> bool:
    """Whether the HTTP status or the envelope code means "rate limited"."""
    if status_code == 429:
        return True
    if envelope is not None and envelope.get("code") in RATE_LIMIT_CODES:
        return True
    return False


def should_retry(
    rate_limited: bool,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Decide whether a request should be retried.

    Parameters
    ----------
    rate_limited:
        ``True`` if the response was classified by :func:`is_rate_limited`.
    exception:
        The exception raised by the HTTP client, or ``None`` if a response
        was received.
    attempt:
        The current attempt number (0-indexed).
    max_attempts:
        Maximum total attempts allowed (including the initial request).

    Returns
    -------
    bool
        ``True`` if another attempt should be made.
    """
    if attempt + 1 >= max_attempts:
        return False
    if exception is not None:
        return isinstance(exception, _RETRYABLE_EXCEPTIONS)
    return rate_limited


def compute_backoff(attempt: int, base: float = 2.0, maximum: float = 30.0) -> float:
    """Delay in seconds before retrying after attempt *attempt* (0-indexed).

    The delay grows linearly, ``base * (attempt + 1)``, capped at
    *maximum*: with the defaults the first retry waits 2 s, the second 4 s.
    """
    return min(base * (attempt + 1), maximum)
