"""Token-bucket pacing for outgoing requests.

Feishu throttles docx writes per app and per document.  Besides the fixed
pauses the sync engine takes between batches, every request passes through
a :class:`TokenBucket` so that bursts (notably the concurrent table cell
fills) stay under ``LarkifyConfig.rate_limit_rps``.
"""

from __future__ import annotations

import threading
import time


class TokenBucket:
    """Thread-safe token bucket.

    Tokens refill continuously at *rate_rps* per second up to *burst*.
    :meth:`acquire` takes one token, sleeping first when the bucket is
    empty.

    Parameters
    ----------
    rate_rps:
        Sustained refill rate in tokens per second.
    burst:
        Bucket capacity.
    """

    __slots__ = ("_lock", "burst", "last_refill", "rate", "tokens")

    def __init__(self, rate_rps: float, burst: int = 5) -> None:
        if rate_rps <= 0:
            raise ValueError(f"rate_rps must be > 0, got {rate_rps}")
        if burst < 1:
            raise ValueError(f"burst must be >= 1, got {burst}")

        self.rate: float = rate_rps
        self.burst: int = burst
        self.tokens: float = float(burst)
        self.last_refill: float = time.monotonic()
        self._lock = threading.Lock()

    def _refill(self, now: float) -> None:
        self.tokens = min(self.burst, self.tokens + (now - self.last_refill) * self.rate)
        self.last_refill = now

    def acquire(self) -> float:
        """Take one token; return the seconds spent waiting for it."""
        with self._lock:
            self._refill(time.monotonic())
            if self.tokens >= 1:
                self.tokens -= 1
                return 0.0
            wait = (1 - self.tokens) / self.rate
            # The token is reserved now; the caller pays for it by sleeping.
            self.tokens -= 1

        time.sleep(wait)
        return wait
