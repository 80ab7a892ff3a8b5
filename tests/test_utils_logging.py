"""
Tests for toolbelt/utils/logging.py
"""

import logging

import pytest

from toolbelt.utils.logging import LOGGER_NAME, get_logger, setup_logging


@pytest.fixture
def toolbelt_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    yield logger
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


def _installed(logger):
    return [h for h in logger.handlers if getattr(h, "_toolbelt_handler", False)]


def test_setup_logging_installs_one_handler(toolbelt_logger):
    setup_logging(level="info")
    setup_logging(level="debug")

    assert len(_installed(toolbelt_logger)) == 1
    assert toolbelt_logger.level == logging.DEBUG


def test_setup_logging_defaults_from_settings(monkeypatch, toolbelt_logger):
    monkeypatch.setenv("TOOLBELT_LOG_LEVEL", "ERROR")
    monkeypatch.setenv("TOOLBELT_LOG_FORMAT", "%(levelname)s|%(message)s")

    logger = setup_logging()

    assert logger is toolbelt_logger
    assert logger.level == logging.ERROR
    handler = _installed(logger)[0]
    record = logging.LogRecord(LOGGER_NAME, logging.ERROR, __file__, 1, "boom", None, None)
    assert handler.formatter.format(record) == "ERROR|boom"


def test_default_format_has_bracketed_timestamp(toolbelt_logger):
    setup_logging()

    handler = _installed(toolbelt_logger)[0]
    record = logging.LogRecord(LOGGER_NAME, logging.WARNING, __file__, 1, "late", None, None)
    formatted = handler.formatter.format(record)

    assert formatted.startswith("[")
    assert formatted.endswith("WARNING toolbelt: late")


def test_setup_logging_leaves_root_logger_alone(toolbelt_logger):
    root_handlers = list(logging.getLogger().handlers)

    setup_logging()

    assert logging.getLogger().handlers == root_handlers


def test_get_logger_namespaces_under_toolbelt():
    assert get_logger("actions.demo").name == "toolbelt.actions.demo"
    assert get_logger("toolbelt.packing").name == "toolbelt.packing"
    assert get_logger("toolbelt").name == "toolbelt"
