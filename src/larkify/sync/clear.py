"""Clear engine: remove every top-level block from a document.

The bulk ``batch_delete`` range call is tried first.  Feishu rejects large
ranges without documenting the ceiling, so on failure the children are
deleted from the front in sub-batches of ``config.delete_batch_size``.
"""

from __future__ import annotations

import time

from larkify.config import LarkifyConfig
from larkify.lark_api.blocks import BlockAPI
from larkify.lark_api.documents import DocumentAPI
from larkify.lark_api.transport import check_response
from larkify.observability import NoopMetricsHook, get_logger

log = get_logger("larkify.sync")


class ClearEngine:
    """Delete a document's content and reset its title.

    Parameters
    ----------
    block_api, document_api:
        Endpoint wrappers sharing one transport.
    config:
        SDK configuration (sub-batch size and delay).
    """

    def __init__(
        self,
        block_api: BlockAPI,
        document_api: DocumentAPI,
        config: LarkifyConfig,
    ) -> None:
        self._blocks = block_api
        self._documents = document_api
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    def clear(self, document_id: str) -> int:
        """Delete all children of the root block and blank the title.

        Returns
        -------
        int
            Number of top-level blocks deleted.

        Raises
        ------
        LarkifyError
            If the root cannot be read, the title cannot be reset, or a
            sub-batch delete is rejected.
        """
        data = check_response(
            self._blocks.retrieve(document_id, document_id), "fetch document root",
        )
        children = (data.get("block") or {}).get("children") or []

        check_response(self._documents.update_title(document_id, ""), "clear title")
        if not children:
            return 0

        count = len(children)
        envelope = self._blocks.batch_delete(document_id, document_id, 0, count)
        if envelope.get("code", -1) != 0:
            log.warning(
                "Bulk delete rejected, deleting in sub-batches",
                extra={
                    "extra_fields": {
                        "op": "clear",
                        "document_id": document_id,
                        "blocks": count,
                        "api_code": envelope.get("code"),
                    }
                },
            )
            self._delete_in_batches(document_id, count)

        self._metrics.increment("larkify.blocks_deleted_total", value=count)
        return count

    def _delete_in_batches(self, document_id: str, count: int) -> None:
        remaining = count
        while remaining > 0:
            batch = min(self._config.delete_batch_size, remaining)
            check_response(
                self._blocks.batch_delete(document_id, document_id, 0, batch),
                "delete blocks",
            )
            remaining -= batch
            time.sleep(self._config.delete_delay)
