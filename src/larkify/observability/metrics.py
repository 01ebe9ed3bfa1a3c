"""Metrics hook protocol and no-op default implementation.

larkify emits counters and timings around API requests and block writes.
By default :class:`NoopMetricsHook` discards them.  Pass any object that
satisfies :class:`MetricsHook` as ``LarkifyConfig(metrics=...)`` to route
them to StatsD, Prometheus, or similar.

Emitted metric names:

* ``larkify.requests_total``         -- counter, tags ``method``, ``path``, ``status``
* ``larkify.retries_total``          -- counter, tag ``reason``
* ``larkify.rate_limited_total``     -- counter
* ``larkify.request_duration_ms``    -- timing
* ``larkify.rate_limit_wait_ms``     -- timing
* ``larkify.blocks_created_total``   -- counter, tag ``kind``
* ``larkify.table_fallback_total``   -- counter, tag ``reason``
* ``larkify.blocks_deleted_total``   -- counter
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    *tags* keys and values are strings; backends translate them into their
    own labelling scheme.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric by *value*."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards every data point."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
