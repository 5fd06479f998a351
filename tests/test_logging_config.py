"""Tests for the structured logging setup."""

import logging

import pytest

from stepcalc_pkg.logging_config import StructuredFormatter, get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_handlers():
    yield
    logging.getLogger("stepcalc").handlers.clear()


def test_get_logger_namespacing():
    assert get_logger("engine").name == "stepcalc.engine"


def test_structured_format():
    record = logging.LogRecord("stepcalc.cli", logging.INFO, __file__, 1, "hello %s", ("x",), None)
    line = StructuredFormatter().format(record)
    assert line.endswith("[INFO] stepcalc.cli: hello x")


def test_setup_logging_with_file(tmp_path):
    log_file = tmp_path / "stepcalc.log"
    logger = setup_logging(level="debug", log_file=str(log_file))
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    get_logger("test").debug("written")
    for handler in logger.handlers:
        handler.flush()
    assert "stepcalc.test: written" in log_file.read_text()


def test_unknown_level_falls_back_to_warning():
    assert setup_logging(level="chatty").level == logging.WARNING
