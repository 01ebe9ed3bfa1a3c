"""Tests for the clear engine."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from larkify.errors import LarkifyAPIError, LarkifyPermissionError
from larkify.sync.clear import ClearEngine

DOC = "doc1"


def _engine(backend, config):
    return ClearEngine(backend, backend, config)


def _delete_ranges(backend):
    return [(c["start_index"], c["end_index"]) for c in backend.calls_named("batch_delete")]


class TestClear:
    def test_empty_document_only_resets_title(self, backend, config):
        assert _engine(backend, config).clear(DOC) == 0
        assert backend.calls_named("batch_delete") == []
        assert backend.calls_named("update_title") == [{"document_id": DOC, "title": ""}]

    def test_bulk_delete(self, backend_factory, config):
        backend = backend_factory(root_children=[f"b{i}" for i in range(30)])
        assert _engine(backend, config).clear(DOC) == 30
        assert _delete_ranges(backend) == [(0, 30)]
        assert backend.root_children == []

    def test_title_reset_before_delete(self, backend_factory, config):
        backend = backend_factory(root_children=["b0"])
        _engine(backend, config).clear(DOC)
        names = [name for name, _ in backend.calls]
        assert names == ["retrieve", "update_title", "batch_delete"]

    def test_failed_bulk_delete_falls_back_to_sub_batches(self, backend_factory, config):
        backend = backend_factory(root_children=[f"b{i}" for i in range(120)])
        backend.bulk_delete_code = 1770001
        assert _engine(backend, config).clear(DOC) == 120
        # one rejected bulk call, then 50 / 50 / 20 from the front
        assert _delete_ranges(backend) == [(0, 120), (0, 50), (0, 50), (0, 20)]
        assert backend.root_children == []

    def test_pause_between_sub_batches(self, backend_factory, config_factory):
        backend = backend_factory(root_children=[f"b{i}" for i in range(120)])
        backend.bulk_delete_code = 1770001
        engine = _engine(backend, config_factory(delete_delay=0.3))
        with patch("larkify.sync.clear.time.sleep") as sleep:
            engine.clear(DOC)
        assert [c.args[0] for c in sleep.call_args_list] == [0.3, 0.3, 0.3]

    def test_sub_batch_size_from_config(self, backend_factory, config_factory):
        backend = backend_factory(root_children=[f"b{i}" for i in range(70)])
        backend.bulk_delete_code = 1770001
        _engine(backend, config_factory(delete_batch_size=30)).clear(DOC)
        assert _delete_ranges(backend)[1:] == [(0, 30), (0, 30), (0, 10)]

    def test_deleted_metric(self, backend_factory, config_factory):
        metrics = MagicMock()
        backend = backend_factory(root_children=["a", "b"])
        _engine(backend, config_factory(metrics=metrics)).clear(DOC)
        metrics.increment.assert_called_once_with("larkify.blocks_deleted_total", value=2)


class TestClearFailures:
    def test_root_fetch_failure_is_fatal(self, config):
        api = MagicMock()
        api.retrieve.return_value = {"code": 1770032, "msg": "forbidden"}
        with pytest.raises(LarkifyPermissionError):
            ClearEngine(api, api, config).clear(DOC)
        api.batch_delete.assert_not_called()

    def test_title_failure_is_fatal(self, config):
        api = MagicMock()
        api.retrieve.return_value = {"code": 0, "data": {"block": {"children": ["a"]}}}
        api.update_title.return_value = {"code": 1770001, "msg": "bad"}
        with pytest.raises(LarkifyAPIError) as exc_info:
            ClearEngine(api, api, config).clear(DOC)
        assert exc_info.value.context["step"] == "clear title"
        api.batch_delete.assert_not_called()

    def test_failed_sub_batch_is_fatal(self, config):
        api = MagicMock()
        api.retrieve.return_value = {"code": 0, "data": {"block": {"children": ["a"] * 60}}}
        api.update_title.return_value = {"code": 0, "data": {}}
        api.batch_delete.side_effect = [
            {"code": 1770001, "msg": "too many"},
            {"code": 0},
            {"code": 1770002, "msg": "gone"},
        ]
        with pytest.raises(LarkifyAPIError) as exc_info:
            ClearEngine(api, api, config).clear(DOC)
        assert exc_info.value.context["step"] == "delete blocks"
