"""Unit tests for the logger factory and the JSON formatter."""

import json
import logging
import sys

from rich.logging import RichHandler

from hive.main import logging as hive_logging
from hive.main.request_context import bound_context


def make_record(message, **extra):
    record = logging.LogRecord("hive.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_logger_has_a_single_stdout_handler(monkeypatch):
    monkeypatch.setattr(hive_logging, "JSON_LOGS_ENABLED", True)

    logger = hive_logging.SimpleLogger(name="hive.test", level=logging.INFO)

    assert len(logger.handlers) == 1
    (handler,) = logger.handlers
    assert isinstance(handler, logging.StreamHandler)
    assert handler.stream is sys.stdout
    assert isinstance(handler.formatter, hive_logging.ContextJSONFormatter)
    assert handler.level == logging.INFO


def test_rich_logger_when_json_logs_are_disabled(monkeypatch):
    monkeypatch.setattr(hive_logging, "JSON_LOGS_ENABLED", False)

    logger = hive_logging.SimpleLogger(name="hive.test", level=logging.DEBUG)

    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)
    assert logger.handlers[0].level == logging.DEBUG


def test_formatter_merges_context_and_extra_fields():
    record = make_record("Purged org", status_code=200, skipped=None)

    with bound_context(org_id="org-1", correlation_id="abc"):
        log = json.loads(hive_logging.ContextJSONFormatter().format(record))

    assert log["message"] == "Purged org"
    assert log["level"] == "info"
    assert log["logger"] == "hive.test"
    assert log["org_id"] == "org-1"
    assert log["correlation_id"] == "abc"
    assert log["status_code"] == 200
    assert "skipped" not in log
