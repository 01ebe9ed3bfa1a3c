"""Synchronous Feishu document client.

:class:`LarkifyClient` is the main entry point.  It wires the transport,
the endpoint wrappers, the converters and the sync engines together and
exposes the four document actions: read, write, append and clear.

Usage::

    from larkify import LarkifyClient

    with LarkifyClient(token="u-xxx") as client:
        result = client.write("doxcnXXXX", "# Title\\n\\nHello **world**\\n")
        print(result.to_json())
"""

from __future__ import annotations

import time
from typing import Any

from larkify.auth import StaticTokenProvider, TokenProvider
from larkify.config import LarkifyConfig
from larkify.converter.lark_to_md import LarkToMarkdownRenderer
from larkify.converter.md_to_lark import MarkdownCompiler
from larkify.errors import LarkifyAuthError, LarkifyContentError
from larkify.lark_api.blocks import BlockAPI
from larkify.lark_api.documents import DocumentAPI
from larkify.lark_api.transport import LarkTransport, check_response
from larkify.models import ClearResult, ReadResult, WriteMode, WriteResult
from larkify.observability import get_logger
from larkify.sync.clear import ClearEngine
from larkify.sync.uploader import SyncEngine

log = get_logger("larkify.client")


class LarkifyClient:
    """Synchronous Feishu docx client.

    Parameters
    ----------
    token:
        User or tenant access token.  Ignored when *token_provider* is
        given.
    token_provider:
        Source of the access token, queried before every request; use
        :class:`~larkify.auth.CachedTokenProvider` to read a login cache.
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`LarkifyConfig`.

    Raises
    ------
    LarkifyAuthError
        If neither a token nor a token provider is supplied.
    """

    def __init__(
        self,
        token: str | None = None,
        token_provider: TokenProvider | None = None,
        **kwargs: Any,
    ) -> None:
        if token_provider is None:
            if not token:
                raise LarkifyAuthError(
                    message="No access token or token provider supplied.",
                    context={"hint": "Pass token=... or a TokenProvider such as CachedTokenProvider."},
                )
            token_provider = StaticTokenProvider(token)
        self._config = LarkifyConfig(token=token or "", **kwargs)
        self._transport = LarkTransport(self._config, token_provider)
        self._blocks = BlockAPI(self._transport)
        self._documents = DocumentAPI(self._transport)
        self._compiler = MarkdownCompiler()
        self._clear_engine = ClearEngine(self._blocks, self._documents, self._config)

    @property
    def config(self) -> LarkifyConfig:
        return self._config

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read(self, document_id: str, doc_url: str | None = None) -> ReadResult:
        """Fetch a document as plain text and as rendered Markdown.

        Parameters
        ----------
        document_id:
            The docx document token.
        doc_url:
            Echoed back as ``docUrl``; defaults to *document_id*.

        Returns
        -------
        ReadResult

        Raises
        ------
        LarkifyError
            If the raw-content fetch is rejected.  The block listing is
            best-effort and stops early on a failed page.
        """
        started = time.monotonic()
        data = check_response(self._documents.raw_content(document_id), "fetch raw content")
        raw_content = data.get("content", "")

        items = self._blocks.list_blocks(document_id, page_size=self._config.read_page_size)
        renderer = LarkToMarkdownRenderer()
        markdown = renderer.render_blocks(items)

        log.info(
            "Document read",
            extra={
                "extra_fields": {
                    "op": "read",
                    "document_id": document_id,
                    "blocks": len(items),
                    "warnings": len(renderer.warnings),
                    "duration_ms": round((time.monotonic() - started) * 1000, 1),
                }
            },
        )
        return ReadResult(
            doc_url=doc_url or document_id,
            block_count=len(items),
            markdown=markdown,
            raw_content=raw_content,
            warnings=list(renderer.warnings),
        )

    # ------------------------------------------------------------------
    # Write / append
    # ------------------------------------------------------------------

    def write(self, document_id: str, markdown: str, doc_url: str | None = None) -> WriteResult:
        """Append *markdown* to the document, taking the title from its first ``# heading``.

        Existing content is kept; call :meth:`clear` first for a full
        rewrite.

        Raises
        ------
        LarkifyContentError
            If *markdown* compiles to nothing.  No request is sent.
        LarkifyError
            On the first rejected batch, callout or title update.
        """
        return self._write(document_id, markdown, WriteMode.WRITE, doc_url)

    def append(self, document_id: str, markdown: str, doc_url: str | None = None) -> WriteResult:
        """Append *markdown* without touching the title.

        A leading ``# heading`` is written as a bold text block instead.
        """
        return self._write(document_id, markdown, WriteMode.APPEND, doc_url)

    def _write(
        self,
        document_id: str,
        markdown: str,
        mode: WriteMode,
        doc_url: str | None,
    ) -> WriteResult:
        compiled = self._compiler.compile(markdown, mode)
        if compiled.is_empty:
            raise LarkifyContentError(
                message="Content is empty; nothing to write.",
                context={"action": mode.value, "document_id": document_id},
            )

        started = time.monotonic()
        if compiled.title is not None:
            check_response(self._documents.update_title(document_id, compiled.title), "set title")

        engine = SyncEngine(self._blocks, document_id, self._config)
        blocks_added = engine.flush(compiled.blocks)

        log.info(
            "Document written",
            extra={
                "extra_fields": {
                    "op": mode.value,
                    "document_id": document_id,
                    "blocks": blocks_added,
                    "batches": engine.state.batches,
                    "warnings": len(engine.state.warnings),
                    "duration_ms": round((time.monotonic() - started) * 1000, 1),
                }
            },
        )
        return WriteResult(
            doc_url=doc_url or document_id,
            action=mode.value,
            blocks_added=blocks_added,
            total_batches=engine.state.batches,
            title=compiled.title,
            warnings=list(engine.state.warnings),
        )

    # ------------------------------------------------------------------
    # Clear
    # ------------------------------------------------------------------

    def clear(self, document_id: str, doc_url: str | None = None) -> ClearResult:
        """Delete every top-level block and blank the title."""
        deleted = self._clear_engine.clear(document_id)
        log.info(
            "Document cleared",
            extra={"extra_fields": {"op": "clear", "document_id": document_id, "blocks": deleted}},
        )
        return ClearResult(doc_url=doc_url or document_id, blocks_deleted=deleted)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying HTTP transport."""
        self._transport.close()

    def __enter__(self) -> LarkifyClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
