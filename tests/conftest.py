"""Shared test fixtures for the larkify test suite."""

from __future__ import annotations

import itertools
import threading
from typing import Any

import pytest

from larkify.config import LarkifyConfig
from larkify.converter.lark_to_md import LarkToMarkdownRenderer
from larkify.converter.md_to_lark import MarkdownCompiler


def make_config(**overrides: Any) -> LarkifyConfig:
    """Return a LarkifyConfig with every pause disabled."""
    defaults: dict[str, Any] = dict(
        token="test-token-1234",
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        rate_limit_rps=10_000.0,
        batch_delay=0.0,
        callout_delay=0.0,
        table_delay=0.0,
        delete_delay=0.0,
    )
    defaults.update(overrides)
    return LarkifyConfig(**defaults)


class FakeLarkBackend:
    """In-memory stand-in for both ``BlockAPI`` and ``DocumentAPI``.

    Every call is recorded in :attr:`calls` as ``(name, args)``.  Responses
    default to success; queue envelopes in :attr:`create_responses` or set
    :attr:`bulk_delete_code` to simulate failures.
    """

    def __init__(self, root_children: list[str] | None = None) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.create_responses: list[dict[str, Any]] = []
        self.cell_responses: dict[str, dict[str, Any]] = {}
        self.root_children = list(root_children or [])
        self.bulk_delete_code = 0
        self.title: str | None = None
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def _record(self, name: str, **args: Any) -> None:
        with self._lock:
            self.calls.append((name, args))

    def calls_named(self, name: str) -> list[dict[str, Any]]:
        return [args for call, args in self.calls if call == name]

    # -- BlockAPI ----------------------------------------------------------

    def create_children(
        self,
        document_id: str,
        block_id: str,
        children: list[dict[str, Any]],
        index: int = -1,
    ) -> dict[str, Any]:
        self._record(
            "create_children",
            document_id=document_id, block_id=block_id, children=children, index=index,
        )
        if block_id in self.cell_responses:
            return self.cell_responses[block_id]
        if block_id == document_id and self.create_responses:
            with self._lock:
                return self.create_responses.pop(0)

        created = []
        for child in children:
            with self._lock:
                new_id = f"blk_{next(self._ids)}"
            entry: dict[str, Any] = {"block_id": new_id, "block_type": child["block_type"]}
            if child["block_type"] == 31:
                prop = child["table"]["property"]
                size = prop["row_size"] * prop["column_size"]
                entry["table"] = {
                    "cells": [f"{new_id}_cell_{i}" for i in range(size)],
                    "property": prop,
                }
            created.append(entry)
        return {"code": 0, "msg": "success", "data": {"children": created}}

    def retrieve(self, document_id: str, block_id: str) -> dict[str, Any]:
        self._record("retrieve", document_id=document_id, block_id=block_id)
        return {
            "code": 0,
            "data": {"block": {"block_id": block_id, "children": list(self.root_children)}},
        }

    def batch_delete(
        self,
        document_id: str,
        block_id: str,
        start_index: int,
        end_index: int,
    ) -> dict[str, Any]:
        self._record(
            "batch_delete",
            document_id=document_id, block_id=block_id,
            start_index=start_index, end_index=end_index,
        )
        if end_index - start_index > 50 and self.bulk_delete_code != 0:
            return {"code": self.bulk_delete_code, "msg": "range too large"}
        del self.root_children[start_index:end_index]
        return {"code": 0, "data": {}}

    # -- DocumentAPI -------------------------------------------------------

    def update_title(self, document_id: str, title: str) -> dict[str, Any]:
        self._record("update_title", document_id=document_id, title=title)
        self.title = title
        return {"code": 0, "data": {}}


@pytest.fixture
def config() -> LarkifyConfig:
    """Default test configuration with a dummy token and no pauses."""
    return make_config()


@pytest.fixture
def compiler() -> MarkdownCompiler:
    return MarkdownCompiler()


@pytest.fixture
def renderer() -> LarkToMarkdownRenderer:
    return LarkToMarkdownRenderer()


@pytest.fixture
def backend() -> FakeLarkBackend:
    return FakeLarkBackend()


@pytest.fixture
def config_factory():
    """Build a pause-free config with overrides: ``config_factory(batch_size=10)``."""
    return make_config


@pytest.fixture
def backend_factory():
    """Build a :class:`FakeLarkBackend`: ``backend_factory(root_children=[...])``."""
    return FakeLarkBackend
