"""HTTP transport for the Feishu Open API.

Every call returns Feishu's response envelope::

    {"code": 0, "msg": "success", "data": {...}}

``code == 0`` means success; any other value is an application-level
failure described by ``msg``.  The transport does not raise on such codes,
because some callers recover from them (table creation, bulk delete).
Callers that cannot recover pass the envelope to :func:`check_response`.

Request lifecycle:

1. Acquire a token-bucket slot (wait if needed).
2. Send the request with a bearer token from the token provider.
3. Parse the body as an envelope (non-JSON bodies are wrapped).
4. Rate limited (HTTP 429, code 429 / 99991400) -- linear backoff, retry.
5. Network error -- linear backoff, retry; raise
   :class:`LarkifyNetworkError` once attempts are used up.
6. Otherwise return the envelope.  If every attempt was rate limited,
   return a synthetic ``{"code": 429, ...}`` envelope.
"""

from __future__ import annotations

import json as _json
import time
from collections.abc import Iterator
from typing import Any

import httpx

from larkify.auth import TokenProvider
from larkify.config import LarkifyConfig
from larkify.errors import (
    PERMISSION_DENIED_CODES,
    RATE_LIMIT_CODES,
    TOKEN_EXPIRED_CODES,
    LarkifyAPIError,
    LarkifyAuthError,
    LarkifyNetworkError,
    LarkifyPermissionError,
    LarkifyRateLimitError,
    remediation_hint,
)
from larkify.observability import NoopMetricsHook, get_logger

from .rate_limit import TokenBucket
from .retries import compute_backoff, is_rate_limited, should_retry

log = get_logger("larkify.transport")

RATE_LIMIT_EXHAUSTED: dict[str, Any] = {"code": 429, "msg": "rate limited after retries"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_envelope(response: httpx.Response) -> dict[str, Any]:
    """Turn any HTTP response into a ``{code, msg, data}`` envelope."""
    ok = 200 <= response.status_code < 300
    if not response.content:
        if ok:
            return {"code": 0, "data": {}}
        return {"code": response.status_code, "msg": response.reason_phrase}
    try:
        body = response.json()
    except ValueError:
        return {
            "code": -1 if ok else response.status_code,
            "msg": f"non-JSON response: {response.text[:500]}",
        }
    if not isinstance(body, dict):
        return {"code": -1, "msg": f"unexpected response body: {str(body)[:500]}"}
    if "code" not in body:
        body = {**body, "code": 0 if ok else response.status_code}
    return body


def check_response(envelope: dict[str, Any], step: str) -> dict[str, Any]:
    """Return ``envelope["data"]`` or raise the matching typed error.

    Parameters
    ----------
    envelope:
        A response envelope from :meth:`LarkTransport.request`.
    step:
        Human-readable name of the logical step (``"write batch"``,
        ``"create callout"``, ...).  Included in the error message and
        context so the caller can tell which step failed.

    Raises
    ------
    LarkifyPermissionError
        For the docx permission-denied codes.
    LarkifyAuthError
        For the token-expired code.
    LarkifyRateLimitError
        When the request was still throttled after every retry.
    LarkifyAPIError
        For any other non-zero code.
    """
    code = envelope.get("code", -1)
    if code == 0:
        return envelope.get("data") or {}

    msg = envelope.get("msg") or envelope.get("message") or "unknown error"
    context: dict[str, Any] = {"step": step, "api_code": code, "msg": msg}
    hint = remediation_hint(code) if isinstance(code, int) else None
    if hint is not None:
        context["hint"] = hint
    message = f"{step} failed (code={code}): {msg}"

    if code in PERMISSION_DENIED_CODES:
        raise LarkifyPermissionError(message=message, context=context)
    if code in TOKEN_EXPIRED_CODES:
        raise LarkifyAuthError(message=message, context=context)
    if code in RATE_LIMIT_CODES:
        raise LarkifyRateLimitError(message=message, context=context)
    raise LarkifyAPIError(message=message, context=context)


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class LarkTransport:
    """Synchronous HTTP transport with auth, retry, and rate limiting.

    Safe to share between the threads of the table cell-fill pool: the
    token bucket is locked and ``httpx.Client`` is thread-safe.

    Parameters
    ----------
    config:
        A :class:`LarkifyConfig` instance controlling transport behaviour.
    token_provider:
        Source of the bearer token, queried before every request.
    """

    def __init__(self, config: LarkifyConfig, token_provider: TokenProvider) -> None:
        self._config = config
        self._token_provider = token_provider
        self._bucket = TokenBucket(rate_rps=config.rate_limit_rps)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

        proxy: httpx.URL | str | None = config.http_proxy
        self._client = httpx.Client(
            base_url=config.base_url,
            headers={"Content-Type": "application/json; charset=utf-8"},
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=proxy,
        )

    # -- public API --------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute a request against the Open API and return its envelope.

        Parameters
        ----------
        method:
            HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``).
        path:
            API path relative to ``base_url`` (e.g.
            ``/docx/v1/documents/{id}/raw_content``).
        json:
            Optional JSON body.
        params:
            Optional query-string parameters.

        Returns
        -------
        dict
            The response envelope.  Never raises on a non-zero ``code``.

        Raises
        ------
        LarkifyNetworkError
            On transport-level failures after exhausting retries.
        LarkifyAuthError
            If the token provider cannot supply a token.
        """
        max_attempts = self._config.retry_max_attempts

        for attempt in range(max_attempts):
            wait = self._bucket.acquire()
            if wait > 0:
                self._metrics.timing(
                    "larkify.rate_limit_wait_ms",
                    wait * 1000,
                    tags={"method": method, "path": path},
                )

            headers = {"Authorization": f"Bearer {self._token_provider.get_access_token()}"}
            t0 = time.monotonic()
            try:
                response = self._client.request(
                    method, path, json=json, params=params, headers=headers,
                )
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                self._handle_network_error(method, path, exc, attempt)
                continue
            elapsed_ms = (time.monotonic() - t0) * 1000

            envelope = _parse_envelope(response)
            status = str(response.status_code)
            self._metrics.increment(
                "larkify.requests_total",
                tags={"method": method, "path": path, "status": status},
            )
            self._metrics.timing(
                "larkify.request_duration_ms",
                elapsed_ms,
                tags={"method": method, "path": path, "status": status},
            )
            if self._config.debug_dump_payload:
                _dump_payload(method, path, json, response.status_code, envelope)

            if not is_rate_limited(response.status_code, envelope):
                return envelope

            self._metrics.increment(
                "larkify.rate_limited_total",
                tags={"method": method, "path": path},
            )
            if not should_retry(True, None, attempt, max_attempts):
                break

            delay = compute_backoff(
                attempt,
                base=self._config.retry_base_delay,
                maximum=self._config.retry_max_delay,
            )
            log.warning(
                "Rate limited by Feishu API",
                extra={
                    "extra_fields": {
                        "op": "request",
                        "method": method,
                        "path": path,
                        "status_code": response.status_code,
                        "api_code": envelope.get("code"),
                        "attempt": attempt + 1,
                        "backoff_seconds": delay,
                    }
                },
            )
            self._metrics.increment(
                "larkify.retries_total",
                tags={"method": method, "path": path, "reason": "rate_limited"},
            )
            time.sleep(delay)

        log.error(
            "Rate limit retries exhausted",
            extra={
                "extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "attempts": max_attempts,
                }
            },
        )
        return dict(RATE_LIMIT_EXHAUSTED)

    def paginate(
        self,
        path: str,
        page_size: int = 500,
        params: dict[str, Any] | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Yield every item of a ``{items, has_more, page_token}`` list endpoint.

        Pages are fetched until ``has_more`` is false or the returned
        ``page_token`` is empty.  A page that fails ends the iteration with
        the items gathered so far; the failure is logged.
        """
        query: dict[str, Any] = dict(params or {})
        query["page_size"] = page_size
        query.pop("page_token", None)

        while True:
            envelope = self.request("GET", path, params=dict(query))
            if envelope.get("code", -1) != 0:
                log.warning(
                    "Listing stopped early",
                    extra={
                        "extra_fields": {
                            "op": "paginate",
                            "path": path,
                            "api_code": envelope.get("code"),
                            "msg": envelope.get("msg", ""),
                        }
                    },
                )
                return
            data = envelope.get("data") or {}
            yield from data.get("items") or []

            if not data.get("has_more", False):
                return
            page_token = data.get("page_token") or ""
            if not page_token:
                return
            query["page_token"] = page_token

    def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> LarkTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # -- internals ---------------------------------------------------------

    def _handle_network_error(
        self, method: str, path: str, exc: Exception, attempt: int,
    ) -> None:
        """Sleep before the next attempt, or raise when none is left."""
        max_attempts = self._config.retry_max_attempts
        self._metrics.increment(
            "larkify.requests_total",
            tags={"method": method, "path": path, "status": "error"},
        )
        log.warning(
            "Request network error",
            extra={
                "extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "attempt": attempt + 1,
                    "error": str(exc),
                }
            },
        )
        if not should_retry(False, exc, attempt, max_attempts):
            raise LarkifyNetworkError(
                message=f"Network error on {method} {path}: {exc}",
                context={"path": path, "attempt": attempt + 1},
                cause=exc,
            ) from exc
        self._metrics.increment(
            "larkify.retries_total",
            tags={"method": method, "path": path, "reason": "network_error"},
        )
        time.sleep(compute_backoff(
            attempt,
            base=self._config.retry_base_delay,
            maximum=self._config.retry_max_delay,
        ))


def _dump_payload(
    method: str,
    path: str,
    payload: dict[str, Any] | None,
    status: int,
    envelope: dict[str, Any],
) -> None:
    """Log request body and response envelope at DEBUG.  Headers are omitted."""
    log.debug(
        "API exchange",
        extra={
            "extra_fields": {
                "op": "dump",
                "method": method,
                "path": path,
                "request_body": _json.dumps(payload, ensure_ascii=False) if payload else None,
                "response_status": status,
                "response_body": _json.dumps(envelope, ensure_ascii=False)[:2000],
            }
        },
    )
