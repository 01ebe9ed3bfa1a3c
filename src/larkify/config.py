"""SDK configuration for larkify.

:class:`LarkifyConfig` is a dataclass that captures every tuneable knob
exposed by the SDK.  Instances are passed to :class:`LarkifyClient` and,
from there, to the transport, the sync engine, and the clear engine.

The batch size, table row cap, and delay defaults match what the Feishu
docx API tolerates in practice; they are knobs rather than invariants.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class LarkifyConfig:
    """Complete configuration for a larkify client.

    Every parameter has a sensible default.  ``token`` may stay empty when
    the client is given a token provider instead.

    Parameters
    ----------
    token:
        Static bearer token (tenant or user access token).  Never logged.
    base_url:
        Open API root URL.  Override for Lark (``open.larksuite.com``),
        proxies, or testing environments.
    batch_size:
        Maximum blocks per create-children call.
    table_max_rows:
        Tables with more rows (header included) are written as a fenced
        ``markdown`` code block instead of a native table.
    table_total_width:
        Pixel width distributed across table columns.
    table_min_column_width:
        Lower clamp for each computed column width.
    cell_fill_workers:
        Size of the thread pool that fills table cells.
    callout_color:
        ``background_color`` of the callout container used for quotes.
    retry_max_attempts:
        Total attempts per request (initial try included) for rate-limited
        responses and network errors.
    retry_base_delay:
        Linear backoff step in seconds: attempt *n* (0-indexed) waits
        ``retry_base_delay * (n + 1)``.
    retry_max_delay:
        Upper cap (seconds) on a single backoff sleep.
    rate_limit_rps:
        Target requests per second for client-side pacing (token bucket).
    batch_delay:
        Pause after each create-children batch.
    callout_delay:
        Pause after each callout two-phase create.
    table_delay:
        Pause after each native table is created and filled.
    delete_batch_size:
        Sub-batch size used when the bulk delete is rejected.
    delete_delay:
        Pause between delete sub-batches.
    read_page_size:
        ``page_size`` for the paginated block listing.
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~larkify.observability.MetricsHook` backend.
    debug_dump_payload:
        Log request payloads and response envelopes at ``DEBUG``.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    base_url: str = "https://open.feishu.cn/open-apis"

    # ── Batching & tables ───────────────────────────────────────────────
    batch_size: int = 50

    table_max_rows: int = 9

    table_total_width: int = 700

    table_min_column_width: int = 100

    cell_fill_workers: int = 5

    callout_color: int = 15

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 3

    retry_base_delay: float = 2.0

    retry_max_delay: float = 30.0

    rate_limit_rps: float = 5.0

    batch_delay: float = 0.5

    callout_delay: float = 0.3

    table_delay: float = 0.5

    delete_batch_size: int = 50

    delete_delay: float = 0.3

    # ── Read ────────────────────────────────────────────────────────────
    read_page_size: int = 500

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your access token, or target localhost for testing."
            )

        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if self.table_max_rows < 1:
            raise ValueError(f"table_max_rows must be >= 1, got {self.table_max_rows}")
        if self.table_min_column_width < 0:
            raise ValueError(
                f"table_min_column_width must be >= 0, got {self.table_min_column_width}"
            )
        if self.cell_fill_workers < 1:
            raise ValueError(f"cell_fill_workers must be >= 1, got {self.cell_fill_workers}")
        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.delete_batch_size < 1:
            raise ValueError(f"delete_batch_size must be >= 1, got {self.delete_batch_size}")
        if not 1 <= self.read_page_size <= 500:
            raise ValueError(f"read_page_size must be in 1..500, got {self.read_page_size}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        for name in ("batch_delay", "callout_delay", "table_delay", "delete_delay"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"LarkifyConfig({', '.join(parts)})"
