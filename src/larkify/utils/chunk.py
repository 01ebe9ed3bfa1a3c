"""Batch a list of Feishu block payloads into groups of at most *size* items.

The docx create-children endpoint accepts at most 50 blocks per request.
This helper splits an arbitrarily long list into compliant batches.
"""

from __future__ import annotations

from typing import Any


def chunk_children(blocks: list[dict[str, Any]], size: int = 50) -> list[list[dict[str, Any]]]:
    """Split a list of block payloads into batches of at most ``size``.

    Parameters
    ----------
    blocks:
        The full list of block payloads to partition.
    size:
        Maximum number of blocks per batch.

    Returns
    -------
    list[list[dict]]
        Sublists in order, each holding at most *size* items.  An empty
        input returns an empty list (not ``[[]]``).

    Raises
    ------
    ValueError
        If *size* is less than 1.

    Examples
    --------
    >>> [len(b) for b in chunk_children([{"block_type": 2}] * 130)]
    [50, 50, 30]
    """
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")

    if not blocks:
        return []

    return [blocks[i : i + size] for i in range(0, len(blocks), size)]
