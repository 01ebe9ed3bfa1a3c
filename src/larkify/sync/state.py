"""Mutable bookkeeping for one write operation."""

from __future__ import annotations

from larkify.models import ConversionWarning


class SyncState:
    """Counters owned by a :class:`~larkify.sync.uploader.SyncEngine`.

    The engine hands the same instance to its :class:`TableWriter`, so
    tables and callouts are counted alongside ordinary batches.
    """

    __slots__ = ("batches", "blocks_added", "warnings")

    def __init__(self) -> None:
        self.blocks_added = 0
        self.batches = 0
        self.warnings: list[ConversionWarning] = []
