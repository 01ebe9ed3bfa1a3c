"""Document-level wrappers for the Feishu docx API.

:class:`DocumentAPI` covers what is addressed by document rather than by
block: the flattened plain-text extraction and the title, which lives in
the page block's text elements.
"""

from __future__ import annotations

from typing import Any

from larkify.converter.inline import plain_spans, spans_to_elements

from .blocks import BlockAPI
from .transport import LarkTransport


class DocumentAPI:
    """Synchronous wrapper for document-level docx operations.

    Parameters
    ----------
    transport:
        A configured :class:`LarkTransport` instance.
    """

    def __init__(self, transport: LarkTransport) -> None:
        self._transport = transport
        self._blocks = BlockAPI(transport)

    def raw_content(self, document_id: str) -> dict[str, Any]:
        """Plain-text extraction; on success ``data.content`` holds the text."""
        return self._transport.request(
            "GET", f"/docx/v1/documents/{document_id}/raw_content",
        )

    def update_title(self, document_id: str, title: str) -> dict[str, Any]:
        """Set the document title.  An empty *title* clears it to one space."""
        return self._blocks.update_text(
            document_id, document_id, spans_to_elements(plain_spans(title)),
        )
