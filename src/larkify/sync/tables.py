"""Native table creation with a code-block fallback.

A table is written in two phases: one call creates an empty table of the
right geometry, then one call per non-empty cell appends its text.  The
cell calls are independent, so they run on a small thread pool.

Tables never fail a write.  When the table has more rows than Feishu
accepts, or the create call is rejected, the raw pipe text is handed back
as a ``markdown`` code block for the caller to queue instead.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from larkify.config import LarkifyConfig
from larkify.converter.tables import build_table_payload, cell_fill_plan, table_to_code_block
from larkify.errors import LarkifyError
from larkify.lark_api.blocks import BlockAPI, table_cell_ids
from larkify.models import ConversionWarning, LeafBlock, TableDescriptor
from larkify.observability import NoopMetricsHook, get_logger

from .state import SyncState

log = get_logger("larkify.sync")


class TableWriter:
    """Write :class:`TableDescriptor` objects into a document.

    Parameters
    ----------
    block_api:
        Block endpoints.
    document_id:
        Target document; tables are appended to its root.
    config:
        SDK configuration (row cap, widths, pool size, delays).
    state:
        The owning engine's counters and warning list.
    """

    def __init__(
        self,
        block_api: BlockAPI,
        document_id: str,
        config: LarkifyConfig,
        state: SyncState,
    ) -> None:
        self._api = block_api
        self._document_id = document_id
        self._config = config
        self._state = state
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    def write(self, table: TableDescriptor) -> LeafBlock | None:
        """Create *table* natively.

        Returns
        -------
        LeafBlock | None
            ``None`` when the native table was created, otherwise the
            code block to write in its place.
        """
        if table.row_count > self._config.table_max_rows:
            return self._fallback(
                table,
                "too_many_rows",
                f"Table has {table.row_count} rows (limit {self._config.table_max_rows}); "
                "written as a markdown code block.",
            )

        payload = build_table_payload(
            table,
            total_width=self._config.table_total_width,
            min_width=self._config.table_min_column_width,
        )
        try:
            envelope = self._api.create_children(
                self._document_id, self._document_id, [payload],
            )
        except LarkifyError as exc:
            envelope = {"code": -1, "msg": exc.message}

        try:
            if envelope.get("code", -1) != 0:
                return self._fallback(
                    table,
                    "create_failed",
                    f"Table create failed ({table.row_count}x{table.column_count}): "
                    f"{str(envelope.get('msg', ''))[:80]}",
                    api_code=envelope.get("code"),
                )

            self._state.blocks_added += 1
            self._metrics.increment("larkify.blocks_created_total", tags={"kind": "table"})
            cell_ids = table_cell_ids(envelope.get("data") or {})
            self._fill_cells(cell_fill_plan(table, cell_ids))
            return None
        finally:
            time.sleep(self._config.table_delay)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fallback(
        self,
        table: TableDescriptor,
        reason: str,
        message: str,
        **context: Any,
    ) -> LeafBlock:
        self._state.warnings.append(ConversionWarning(
            code="TABLE_FALLBACK",
            message=message,
            context={"reason": reason, "rows": table.row_count,
                     "columns": table.column_count, **context},
        ))
        self._metrics.increment("larkify.table_fallback_total", tags={"reason": reason})
        log.warning(
            message,
            extra={
                "extra_fields": {
                    "op": "table",
                    "document_id": self._document_id,
                    "reason": reason,
                    "rows": table.row_count,
                    "columns": table.column_count,
                }
            },
        )
        return table_to_code_block(table)

    def _fill_cells(self, plan: list[tuple[str, dict[str, Any]]]) -> None:
        if not plan:
            return
        with ThreadPoolExecutor(max_workers=self._config.cell_fill_workers) as pool:
            results = list(pool.map(lambda item: self._fill_cell(*item), plan))

        for cell_id, error in results:
            if error is None:
                continue
            self._state.warnings.append(ConversionWarning(
                code="CELL_FILL_FAILED",
                message=f"Could not fill table cell {cell_id}: {error}",
                context={"cell_id": cell_id},
            ))
            log.warning(
                "Table cell fill failed",
                extra={"extra_fields": {"op": "table", "cell_id": cell_id, "error": error}},
            )

    def _fill_cell(self, cell_id: str, payload: dict[str, Any]) -> tuple[str, str | None]:
        """Runs on a pool thread; returns ``(cell_id, error or None)``."""
        try:
            envelope = self._api.create_children(
                self._document_id, cell_id, [payload], index=0,
            )
        except LarkifyError as exc:
            return cell_id, exc.message
        if envelope.get("code", -1) != 0:
            return cell_id, f"code={envelope.get('code')}: {envelope.get('msg', '')}"
        return cell_id, None
