"""Applying compiled blocks to (and removing them from) a remote document."""

from __future__ import annotations

from .clear import ClearEngine
from .state import SyncState
from .tables import TableWriter
from .uploader import SyncEngine

__all__ = [
    "ClearEngine",
    "SyncEngine",
    "SyncState",
    "TableWriter",
]
