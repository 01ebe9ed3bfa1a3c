"""Block API wrappers for the Feishu docx API.

:class:`BlockAPI` is a thin wrapper around the
``/docx/v1/documents/{document_id}/blocks`` endpoints.  Every method
returns the raw response envelope; use
:func:`~larkify.lark_api.transport.check_response` where a failure must
abort the operation.

In docx, the page block's id equals the document id, so the document root
is addressed as ``blocks/{document_id}``.
"""

from __future__ import annotations

from typing import Any

from .transport import LarkTransport


def created_block_ids(data: dict[str, Any]) -> list[str]:
    """Extract block ids from a create-children ``data`` payload."""
    return [c["block_id"] for c in data.get("children") or [] if c.get("block_id")]


def table_cell_ids(data: dict[str, Any]) -> list[str]:
    """Row-major cell ids of the table created by a create-children call."""
    children = data.get("children") or []
    if not children:
        return []
    return list((children[0].get("table") or {}).get("cells") or [])


class BlockAPI:
    """Synchronous wrapper for the docx Blocks API.

    Parameters
    ----------
    transport:
        A configured :class:`LarkTransport` instance.
    """

    def __init__(self, transport: LarkTransport) -> None:
        self._transport = transport

    def list_blocks(self, document_id: str, page_size: int = 500) -> list[dict[str, Any]]:
        """Every block of the document in document order, auto-paginating."""
        return list(self._transport.paginate(
            f"/docx/v1/documents/{document_id}/blocks",
            page_size=page_size,
        ))

    def retrieve(self, document_id: str, block_id: str) -> dict[str, Any]:
        """Fetch one block; ``data.block.children`` lists its child ids."""
        return self._transport.request(
            "GET", f"/docx/v1/documents/{document_id}/blocks/{block_id}",
        )

    def update_text(
        self,
        document_id: str,
        block_id: str,
        elements: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Replace the text elements of a block (the page block included)."""
        return self._transport.request(
            "PATCH",
            f"/docx/v1/documents/{document_id}/blocks/{block_id}",
            json={"update_text_elements": {"elements": elements}},
        )

    def create_children(
        self,
        document_id: str,
        block_id: str,
        children: list[dict[str, Any]],
        index: int = -1,
    ) -> dict[str, Any]:
        """Create *children* under *block_id*.

        Parameters
        ----------
        document_id:
            The document holding the parent block.
        block_id:
            Parent block id; the document id addresses the root.
        children:
            Block payloads.  Feishu accepts at most 50 per call.
        index:
            Insert position among the parent's children; ``-1`` appends.

        Returns
        -------
        dict
            The envelope; on success ``data.children`` holds the created
            blocks with their new ``block_id`` values.
        """
        return self._transport.request(
            "POST",
            f"/docx/v1/documents/{document_id}/blocks/{block_id}/children",
            json={"children": children, "index": index},
        )

    def batch_delete(
        self,
        document_id: str,
        block_id: str,
        start_index: int,
        end_index: int,
    ) -> dict[str, Any]:
        """Delete the children of *block_id* in ``[start_index, end_index)``."""
        return self._transport.request(
            "DELETE",
            f"/docx/v1/documents/{document_id}/blocks/{block_id}/children/batch_delete",
            json={"start_index": start_index, "end_index": end_index},
        )
