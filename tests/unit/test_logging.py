"""Tests for labeled logging setup."""

from __future__ import annotations

import logging

import pytest

from shiftbridge.core.logging import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    reset_logging,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


def _record(level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord("shiftbridge.test", level, __file__, 1, msg, None, None)


class TestLabeledFormatter:
    @pytest.mark.parametrize(
        ("level", "label"),
        [(logging.INFO, "INFO"), (logging.WARNING, "WARN"), (logging.ERROR, "ERROR"), (SUMMARY_LEVEL, "SUMMARY")],
    )
    def test_prefixes_label(self, level, label):
        assert LabeledFormatter().format(_record(level, "hello")) == f"{label} hello"


class TestSetupLogging:
    def test_idempotent(self):
        first = setup_logging("DEBUG")
        second = setup_logging("ERROR")
        assert first is second
        assert len(first.handlers) == 1
        assert first.level == logging.DEBUG

    def test_does_not_propagate(self):
        assert setup_logging().propagate is False

    def test_get_logger_configures_once(self):
        assert get_logger() is get_logger()
        assert get_logger().name == LOGGER_NAME

    def test_summary_written_to_stdout(self, capsys):
        setup_logging()
        log_summary("Imported 3 shifts")
        assert "SUMMARY Imported 3 shifts" in capsys.readouterr().out

    def test_module_loggers_share_handler(self, capsys):
        setup_logging()
        logging.getLogger("shiftbridge.ingest.applier").warning("row skipped")
        assert "WARN row skipped" in capsys.readouterr().out


class TestResetLogging:
    def test_restores_propagation(self):
        setup_logging()
        reset_logging()
        logger = logging.getLogger(LOGGER_NAME)
        assert logger.handlers == []
        assert logger.propagate is True
