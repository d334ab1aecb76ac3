"""Pytest configuration for test isolation.

The CLI configures the ``ledger_import`` package logger once per process and
loads a ``.env`` from the working directory. Both would leak between tests, so
an autouse fixture runs every test from its own temporary directory, clears
the log-level variable, and undoes any logging configuration afterwards.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from ledger_import import logging_setup


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LEDGER_IMPORT_LOG_LEVEL", raising=False)
    yield
    logger = logging.getLogger("ledger_import")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    logging_setup._CONFIGURED = False


RULES: dict = {
    "locale": "en-US",
    "currency": "USD",
    "dateFormat": "MM/dd/yyyy",
    "fields": ["date", "description", "amount", "balance"],
    "account1": "Assets:Checking",
    "account2": "Expenses:Unknown",
    "txRules": [
        {"pattern": "COFFEE", "payee": "Coffee Shop", "account2": "Expenses:Food:Coffee"},
        {"pattern": "PAYROLL", "payee": "Employer", "account2": "Income:Salary"},
    ],
}


@pytest.fixture
def rules_dict() -> dict:
    return copy.deepcopy(RULES)
