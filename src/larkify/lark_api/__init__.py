"""larkify.lark_api -- Feishu Open API transport and endpoint wrappers.

This sub-package provides:

* :mod:`.rate_limit` -- Token-bucket pacing.
* :mod:`.retries` -- Rate-limit classification and linear backoff.
* :mod:`.transport` -- HTTP transport returning ``{code, msg, data}`` envelopes.
* :mod:`.blocks` -- Block API wrappers.
* :mod:`.documents` -- Document-level wrappers (raw content, title).
"""

from __future__ import annotations

from .blocks import BlockAPI, created_block_ids, table_cell_ids
from .documents import DocumentAPI
from .rate_limit import TokenBucket
from .retries import compute_backoff, is_rate_limited, should_retry
from .transport import LarkTransport, check_response

__all__ = [
    "BlockAPI",
    "DocumentAPI",
    "LarkTransport",
    "TokenBucket",
    "check_response",
    "compute_backoff",
    "created_block_ids",
    "is_rate_limited",
    "should_retry",
    "table_cell_ids",
]
