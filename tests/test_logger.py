"""Tests for the JSON log formatter."""

import json
import logging

from styleswap.utils.logger import JSONFormatter, get_logger


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("styleswap.test", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_extra_fields_are_included():
    output = json.loads(JSONFormatter().format(make_record(session_id="abc", size_bytes=12)))

    assert output["message"] == "hello"
    assert output["level"] == "INFO"
    assert output["session_id"] == "abc"
    assert output["size_bytes"] == 12


def test_bytes_are_never_logged():
    output = json.loads(JSONFormatter().format(make_record(payload=b"\x89PNG", parts=[b"ab", 1])))

    assert output["payload"] == "<bytes: 4 bytes>"
    assert output["parts"] == ["<bytes: 2 bytes>", 1]


class Blob:

    def __str__(self):
        return "x" * 600


def test_long_unserializable_values_are_truncated():
    output = json.loads(JSONFormatter().format(make_record(blob=Blob())))

    assert output["blob"].endswith("...[truncated]")
    assert len(output["blob"]) == 500 + len("...[truncated]")


def test_get_logger_configures_once():
    logger = get_logger("styleswap.test.once")
    handlers = list(logger.handlers)

    assert get_logger("styleswap.test.once").handlers == handlers
    assert len(handlers) == 1
    assert logger.propagate is False
