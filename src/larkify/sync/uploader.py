"""Sync engine: persist compiled blocks into a Feishu document.

:class:`SyncEngine` walks the pending blocks in document order:

* :class:`~larkify.models.LeafBlock` payloads accumulate in a buffer that
  is written in batches of ``config.batch_size``, pausing
  ``config.batch_delay`` after each batch.
* A :class:`~larkify.models.CalloutBlock` first flushes the buffer, then
  creates an empty callout container and appends the quote text into it.
* A :class:`~larkify.models.TableBlock` first flushes the buffer, then hands
  the table to :class:`~larkify.sync.tables.TableWriter`; a fallback code
  block goes back into the buffer.

Everything except table handling is fatal on failure: the first rejected
call raises and the blocks already written stay in the document.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from typing import Any

from larkify.config import LarkifyConfig
from larkify.converter.inline import parse_spans
from larkify.lark_api.blocks import BlockAPI, created_block_ids
from larkify.lark_api.transport import check_response
from larkify.models import (
    BlockType,
    CalloutBlock,
    LeafBlock,
    PendingBlock,
    TableBlock,
)
from larkify.observability import NoopMetricsHook, get_logger
from larkify.utils.chunk import chunk_children

from .state import SyncState
from .tables import TableWriter

log = get_logger("larkify.sync")


class SyncEngine:
    """Batched uploader for one document.

    Parameters
    ----------
    block_api:
        Block endpoints.
    document_id:
        Target document.  New blocks are appended to its root.
    config:
        SDK configuration (batch size, delays, callout colour).
    state:
        Counters to update.  A fresh :class:`SyncState` is created when
        omitted; pass one in to accumulate across several flushes.
    """

    def __init__(
        self,
        block_api: BlockAPI,
        document_id: str,
        config: LarkifyConfig,
        state: SyncState | None = None,
    ) -> None:
        self._api = block_api
        self._document_id = document_id
        self._config = config
        self.state = state if state is not None else SyncState()
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._tables = TableWriter(block_api, document_id, config, self.state)

    def flush(self, pending: Iterable[PendingBlock]) -> int:
        """Persist *pending* in order.

        Returns
        -------
        int
            Total blocks persisted by this engine so far.

        Raises
        ------
        LarkifyError
            The first batch or callout call that does not succeed.
        """
        buffer: list[dict[str, Any]] = []

        for block in pending:
            if isinstance(block, LeafBlock):
                buffer.append(block.to_payload())
            elif isinstance(block, CalloutBlock):
                self._write_batches(buffer)
                buffer = []
                self._write_callout(block)
            elif isinstance(block, TableBlock):
                self._write_batches(buffer)
                buffer = []
                fallback = self._tables.write(block.table)
                if fallback is not None:
                    buffer.append(fallback.to_payload())
            else:
                raise TypeError(f"Unsupported pending block: {type(block).__name__}")

        self._write_batches(buffer)
        return self.state.blocks_added

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _write_batches(self, payloads: list[dict[str, Any]]) -> None:
        for batch in chunk_children(payloads, self._config.batch_size):
            envelope = self._api.create_children(self._document_id, self._document_id, batch)
            check_response(envelope, "write batch")
            self.state.blocks_added += len(batch)
            self.state.batches += 1
            self._metrics.increment(
                "larkify.blocks_created_total", value=len(batch), tags={"kind": "batch"},
            )
            log.debug(
                "Batch written",
                extra={
                    "extra_fields": {
                        "op": "write_batch",
                        "document_id": self._document_id,
                        "batch": self.state.batches,
                        "size": len(batch),
                        "total": self.state.blocks_added,
                    }
                },
            )
            time.sleep(self._config.batch_delay)

    def _write_callout(self, callout: CalloutBlock) -> None:
        container = {
            "block_type": int(BlockType.CALLOUT),
            "callout": {"background_color": self._config.callout_color},
        }
        envelope = self._api.create_children(self._document_id, self._document_id, [container])
        data = check_response(envelope, "create callout")
        self.state.blocks_added += 1
        self._metrics.increment("larkify.blocks_created_total", tags={"kind": "callout"})

        ids = created_block_ids(data)
        if ids:
            child = LeafBlock(BlockType.TEXT, parse_spans(callout.text)).to_payload()
            envelope = self._api.create_children(self._document_id, ids[0], [child], index=0)
            check_response(envelope, "fill callout")
        else:
            log.warning(
                "Callout created without a block id; content skipped",
                extra={"extra_fields": {"op": "callout", "document_id": self._document_id}},
            )
        time.sleep(self._config.callout_delay)
