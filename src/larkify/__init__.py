"""larkify — Markdown-like text ⇄ Feishu / Lark docx documents.

Public re-exports
-----------------

* **Client:** :class:`LarkifyClient`
* **Configuration:** :class:`LarkifyConfig`
* **Credentials:** :class:`StaticTokenProvider`, :class:`CachedTokenProvider`
* **Errors:** Every :class:`LarkifyError` subclass and :class:`ErrorCode`
* **Models:** Result records, block descriptors and enums

Usage::

    from larkify import LarkifyClient

    client = LarkifyClient(token="u-xxx")
    result = client.read("doxcnXXXX")
    print(result.markdown)
"""

from __future__ import annotations

# ── Credentials ─────────────────────────────────────────────────────────
from larkify.auth import CachedTokenProvider, StaticTokenProvider, TokenCache, TokenProvider

# ── Client ──────────────────────────────────────────────────────────────
from larkify.client import LarkifyClient

# ── Configuration ───────────────────────────────────────────────────────
from larkify.config import LarkifyConfig

# ── Errors ──────────────────────────────────────────────────────────────
from larkify.errors import (
    ErrorCode,
    LarkifyAPIError,
    LarkifyAuthError,
    LarkifyContentError,
    LarkifyError,
    LarkifyNetworkError,
    LarkifyPermissionError,
    LarkifyRateLimitError,
)

# ── Models ──────────────────────────────────────────────────────────────
from larkify.models import (
    BlockType,
    CalloutBlock,
    ClearResult,
    CompiledDocument,
    ConversionWarning,
    LeafBlock,
    PendingBlock,
    ReadResult,
    Span,
    SpanStyle,
    TableBlock,
    TableDescriptor,
    WriteMode,
    WriteResult,
)

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Client
    "LarkifyClient",
    # Configuration
    "LarkifyConfig",
    # Credentials
    "TokenProvider",
    "StaticTokenProvider",
    "CachedTokenProvider",
    "TokenCache",
    # Error base + code enum
    "LarkifyError",
    "ErrorCode",
    # Errors
    "LarkifyContentError",
    "LarkifyAuthError",
    "LarkifyPermissionError",
    "LarkifyRateLimitError",
    "LarkifyNetworkError",
    "LarkifyAPIError",
    # Models: result types
    "ReadResult",
    "WriteResult",
    "ClearResult",
    "ConversionWarning",
    # Models: block descriptors
    "CompiledDocument",
    "PendingBlock",
    "LeafBlock",
    "CalloutBlock",
    "TableBlock",
    "TableDescriptor",
    "Span",
    # Models: enums
    "BlockType",
    "SpanStyle",
    "WriteMode",
]
