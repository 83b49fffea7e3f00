"""
Tests for the structured event logger.
"""

import json
import logging

import pytest

from mongoschema import logger as log


@pytest.fixture
def info_level():
    previous = log.logger.level
    log.set_level(logging.INFO)
    yield
    log.set_level(previous)


class TestLogEvent:
    def test_event_is_json_on_current_stderr(self, info_level, capsys):
        log.log_event("SOURCE_OPENED", {"collection": "orders"})
        captured = capsys.readouterr()
        assert captured.out == ""
        level, payload = captured.err.strip().split(" ", 1)
        assert level == "INFO"
        assert json.loads(payload) == {"event_type": "SOURCE_OPENED", "collection": "orders"}

    def test_below_level_is_dropped(self, capsys):
        previous = log.logger.level
        log.set_level(logging.WARNING)
        try:
            log.log_event("SOURCE_OPENED", {"collection": "orders"})
        finally:
            log.set_level(previous)
        assert capsys.readouterr().err == ""
