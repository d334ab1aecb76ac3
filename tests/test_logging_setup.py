import io
import logging

import pytest

from ledger_import.logging_setup import configure_logging, get_logger


def test_level_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LEDGER_IMPORT_LOG_LEVEL", "debug")
    stream = io.StringIO()
    configure_logging(stream=stream)
    get_logger("ledger_import.test").debug("hello %s", "there")
    assert "DEBUG ledger_import.test hello there" in stream.getvalue()
    assert logging.getLogger("ledger_import").propagate is False


def test_configure_runs_once():
    first, second = io.StringIO(), io.StringIO()
    configure_logging("INFO", stream=first)
    configure_logging("DEBUG", stream=second)
    get_logger("ledger_import.test").info("once")
    assert "once" in first.getvalue()
    assert second.getvalue() == ""


def test_unknown_level_is_rejected():
    with pytest.raises(ValueError):
        configure_logging("LOUD")
