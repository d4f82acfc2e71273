"""Tests for logging setup."""

import json
import logging

import pytest
import structlog

from userhub.core.logging import setup_logging


@pytest.fixture(autouse=True)
def _reset_structlog():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_lines_carry_context(capsys):
    setup_logging(level="INFO", log_format="json")
    structlog.contextvars.bind_contextvars(request_id="rid-1")
    try:
        structlog.get_logger("userhub.test").info("hello", code="OK")
    finally:
        structlog.contextvars.clear_contextvars()

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "hello"
    assert record["code"] == "OK"
    assert record["request_id"] == "rid-1"
    assert record["level"] == "info"


def test_level_from_env(monkeypatch):
    monkeypatch.setenv("USERHUB_LOG_LEVEL", "warning")
    setup_logging()
    assert logging.getLogger("userhub").level == logging.WARNING


def test_bad_level():
    with pytest.raises(ValueError, match="USERHUB_LOG_LEVEL"):
        setup_logging(level="loud")
