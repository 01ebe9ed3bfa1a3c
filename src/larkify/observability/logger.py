"""Structured JSON logger for larkify.

Log records go to *stderr* as single-line JSON objects, leaving *stdout*
free for the JSON result descriptor the calling CLI prints.

Typical structured output::

    {"ts": "2026-10-18T12:00:00.123456+00:00", "level": "WARNING",
     "logger": "larkify.sync", "message": "Table create failed, using code block",
     "op": "table", "document_id": "doxcn123", "rows": 4, "columns": 3}

The default level comes from the ``LARKIFY_LOG_LEVEL`` environment
variable (``WARNING`` when unset).

Usage::

    from larkify.observability import get_logger

    log = get_logger("larkify.sync")
    log.info("write complete", extra={"extra_fields": {"blocks": 12}})
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

_LEVEL_ENV_VAR = "LARKIFY_LOG_LEVEL"


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys: ``ts`` (ISO-8601 UTC), ``level``, ``logger``,
    ``message``.  Fields passed as ``extra={"extra_fields": {...}}`` are
    merged into the top-level object; ``exception`` and ``stack_info`` are
    added when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


# One handler per logger name, so repeated ``get_logger`` calls from many
# modules never stack handlers.
_configured_loggers: set[str] = set()


def _default_level() -> int:
    raw = os.environ.get(_LEVEL_ENV_VAR, "WARNING").upper()
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.WARNING


def get_logger(
    name: str = "larkify",
    *,
    level: int | str | None = None,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name, e.g. ``"larkify.transport"``.
    level:
        Minimum level as an ``int`` or case-insensitive name.  ``None``
        reads ``LARKIFY_LOG_LEVEL`` (default ``WARNING``).  Only applied the
        first time a given *name* is configured.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        The named logger with a :class:`StructuredFormatter` handler.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        if level is None:
            resolved_level = _default_level()
        elif isinstance(level, str):
            resolved_level = logging.getLevelName(level.upper())
        else:
            resolved_level = level
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False

        _configured_loggers.add(name)

    return logger
