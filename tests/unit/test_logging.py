"""Tests for logging setup."""

from __future__ import annotations

import json
import logging

from httpways._internal.logging import _JsonFormatter, get_logger, level_for, setup_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord("httpways.test", logging.INFO, __file__, 1, "GET %s", ("/x",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_basic_fields():
    """The JSON formatter emits timestamp, level, logger and message."""
    entry = json.loads(_JsonFormatter().format(_record()))
    assert entry["level"] == "INFO"
    assert entry["logger"] == "httpways.test"
    assert entry["message"] == "GET /x"
    assert "timestamp" in entry


def test_json_formatter_request_extras():
    """Request extras become top-level keys; absent ones are omitted."""
    entry = json.loads(_JsonFormatter().format(_record(method="GET", url="http://h/x", status=404)))
    assert entry["method"] == "GET"
    assert entry["url"] == "http://h/x"
    assert entry["status"] == 404
    assert "latency_ms" not in entry


def test_setup_logging_is_idempotent():
    """Repeated setup keeps one handler and applies the latest level."""
    logger = setup_logging(logging.INFO)
    setup_logging(logging.DEBUG, json_format=True)
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert isinstance(logger.handlers[0].formatter, _JsonFormatter)
    setup_logging(logging.WARNING)
    assert not isinstance(logger.handlers[0].formatter, _JsonFormatter)


def test_get_logger_namespace():
    """Child loggers live under the httpways namespace."""
    assert get_logger("clients.builder").name == "httpways.clients.builder"


def test_level_for():
    """--verbose maps to DEBUG, otherwise WARNING."""
    assert level_for(True) == logging.DEBUG
    assert level_for(False) == logging.WARNING
