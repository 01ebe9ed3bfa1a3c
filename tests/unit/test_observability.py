"""Tests for observability/logger.py and observability/metrics.py"""
import io
import json
import logging
import sys

from larkify.observability import MetricsHook, NoopMetricsHook, StructuredFormatter, get_logger


class TestStructuredFormatter:
    def _get_record(self, msg, level=logging.INFO, exc_info=None, extra_fields=None):
        record = logging.LogRecord(
            name="test",
            level=level,
            pathname="",
            lineno=0,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )
        if extra_fields is not None:
            record.extra_fields = extra_fields
        return record

    def test_basic_format(self):
        result = json.loads(StructuredFormatter().format(self._get_record("hello world")))
        assert result["message"] == "hello world"
        assert result["level"] == "INFO"
        assert result["logger"] == "test"
        assert "ts" in result

    def test_extra_fields_merged(self):
        record = self._get_record("msg", extra_fields={"document_id": "doc1", "blocks": 5})
        result = json.loads(StructuredFormatter().format(record))
        assert result["document_id"] == "doc1"
        assert result["blocks"] == 5

    def test_non_ascii_kept(self):
        line = StructuredFormatter().format(self._get_record("写入文档"))
        assert "写入文档" in line

    def test_exception_info_included(self):
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()
        result = json.loads(StructuredFormatter().format(self._get_record("e", exc_info=exc_info)))
        assert "ValueError" in result["exception"]


class TestGetLogger:
    def test_returns_logger_with_one_handler(self):
        logger = get_logger("test.larkify.unique1")
        get_logger("test.larkify.unique1")
        assert isinstance(logger, logging.Logger)
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_level_by_name(self):
        logger = get_logger("test.larkify.unique2", level="debug")
        assert logger.level == logging.DEBUG

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LARKIFY_LOG_LEVEL", "INFO")
        assert get_logger("test.larkify.unique3").level == logging.INFO

    def test_bad_environment_level_falls_back(self, monkeypatch):
        monkeypatch.setenv("LARKIFY_LOG_LEVEL", "LOUD")
        assert get_logger("test.larkify.unique4").level == logging.WARNING

    def test_writes_json_lines_to_stream(self):
        stream = io.StringIO()
        logger = get_logger("test.larkify.unique5", level=logging.INFO, stream=stream)
        logger.info("Batch written", extra={"extra_fields": {"op": "write_batch", "size": 50}})
        entry = json.loads(stream.getvalue().strip())
        assert entry["op"] == "write_batch"
        assert entry["size"] == 50


class TestMetrics:
    def test_noop_satisfies_protocol(self):
        hook = NoopMetricsHook()
        assert isinstance(hook, MetricsHook)
        hook.increment("larkify.requests_total", tags={"status": "200"})
        hook.timing("larkify.request_duration_ms", 1.5)

    def test_custom_hook_satisfies_protocol(self):
        class Recorder:
            def __init__(self):
                self.events = []

            def increment(self, name, value=1, tags=None):
                self.events.append((name, value))

            def timing(self, name, ms, tags=None):
                self.events.append((name, ms))

        assert isinstance(Recorder(), MetricsHook)
