#!/usr/bin/env python3
"""
Unit tests for logging configuration.
"""

import logging
import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from logger_config import StructuredFormatter, get_logger, log_event


def make_record(msg, **extra):
    record = logging.LogRecord("hot.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test log line layout."""

    def test_plain_message(self):
        line = StructuredFormatter().format(make_record("Generating v2ex-hot..."))
        assert line.endswith("[INFO] hot.test: Generating v2ex-hot...")

    def test_event_data_appended(self):
        line = StructuredFormatter().format(
            make_record("feed_generated", event_data={"feed": "v2ex-hot", "items": 3}))
        assert line.endswith("feed_generated | feed=v2ex-hot items=3")

    def test_empty_event_data_omitted(self):
        line = StructuredFormatter().format(make_record("index_written", event_data={}))
        assert line.endswith("index_written")


class TestLoggerSetup:
    """Test logger construction."""

    def test_handler_added_once(self):
        first = get_logger("hot.test.once")
        second = get_logger("hot.test.once")
        assert first is second
        assert len(first.handlers) == 1

    def test_log_event_passes_structured_data(self, caplog):
        logger = get_logger("hot.test.events")
        with caplog.at_level(logging.INFO):
            log_event(logger, "warning", "feed_failed", {"feed": "zhihu-hot"})

        [record] = [r for r in caplog.records if r.name == "hot.test.events"]
        assert record.levelno == logging.WARNING
        assert record.event_data == {"feed": "zhihu-hot"}

    def test_feed_id_leads_event_data(self, caplog):
        """The feed id is stored first and shows first on the rendered line."""
        logger = get_logger("hot.test.feed")
        with caplog.at_level(logging.INFO):
            log_event(logger, "error", "feed_failed", {"reason": "Request failed 503"}, feed="v2ex-hot")

        [record] = [r for r in caplog.records if r.name == "hot.test.feed"]
        assert list(record.event_data) == ["feed", "reason"]
        assert StructuredFormatter().format(record).endswith(
            "feed_failed | feed=v2ex-hot reason=Request failed 503")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
