"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers

import pytest

from habitgarden.config import BaseConfig
from habitgarden.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def config(tmp_path, monkeypatch) -> BaseConfig:
    monkeypatch.setenv("HABITGARDEN_DATA_DIR", str(tmp_path))
    return BaseConfig()


def _record(**kwargs) -> logging.LogRecord:
    defaults = dict(
        name="test.logger",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Test message",
        args=(),
        exc_info=None,
    )
    defaults.update(kwargs)
    return logging.LogRecord(**defaults)


def test_json_formatter():
    """JSONFormatter renders the core record fields."""
    record = _record()
    record.funcName = "test_function"

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        import sys

        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record(level=logging.ERROR, exc_info=exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"]


def test_json_formatter_collects_extra_fields():
    record = _record()
    record.habit_id = 7
    log_data = json.loads(JSONFormatter().format(record))
    assert log_data["extra"] == {"habit_id": 7}


def test_setup_logging_writes_json_lines(config, tmp_path):
    logger = setup_logging(config)

    assert logger.name == "habitgarden"
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "habitgarden.log"
    assert log_file.exists()

    get_logger("tests").warning("Something to look at", extra={"habit_id": 3})
    for handler in logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    entries = [json.loads(line) for line in lines]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["logger"] == "habitgarden.tests"
    assert entries[-1]["extra"]["habit_id"] == 3


def test_setup_logging_is_idempotent(config):
    setup_logging(config)
    logger = setup_logging(config)
    assert len(logger.handlers) == 2


def test_get_logger():
    assert get_logger("store").name == "habitgarden.store"


def test_get_logger_keeps_module_names():
    from habitgarden.services import store

    assert get_logger("habitgarden.services.store").name == "habitgarden.services.store"
    assert get_logger("habitgarden").name == "habitgarden"
    assert store.logger.name == "habitgarden.services.store"


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(config, dev_mode):
    """Console logging level adjusts based on dev mode."""
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    expected_level = logging.INFO if dev_mode else logging.WARNING
    assert console_handler.level == expected_level
