"""Tests for structured logging."""

from __future__ import annotations

import json
import logging
import logging.handlers

import pytest

from sitebooks.config import BaseConfig
from sitebooks.logging_config import JSONFormatter, get_logger, setup_logging
from sitebooks.models.enums import PaymentMethod


@pytest.fixture
def config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> BaseConfig:
    monkeypatch.setenv("SITEBOOKS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SITEBOOKS_LOG_LEVEL", "INFO")
    return BaseConfig()


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord(
        name="sitebooks.services.balances",
        level=logging.INFO,
        pathname="balances.py",
        lineno=12,
        msg="Applied balance delta",
        args=(),
        exc_info=None,
    )
    record.account_id = "acct-1"
    record.delta = "-200.00"

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "sitebooks.services.balances"
    assert log_data["message"] == "Applied balance delta"
    assert log_data["extra"] == {"account_id": "acct-1", "delta": "-200.00"}


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        import sys

        exc_info = sys.exc_info()

    record = logging.LogRecord(
        name="test.logger",
        level=logging.ERROR,
        pathname="test.py",
        lineno=42,
        msg="Error occurred",
        args=(),
        exc_info=exc_info,
    )
    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]


def test_setup_logging_writes_json_file(config, tmp_path):
    logger = setup_logging(config)

    assert logger.name == "sitebooks"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "sitebooks.log"
    logger.warning("Test warning message")
    for handler in logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text().splitlines() if line.strip()]
    assert lines
    for line in lines:
        entry = json.loads(line)
        assert {"timestamp", "level", "message"} <= set(entry)


@pytest.mark.parametrize("dev_mode", [True, False])
def test_console_level_by_mode(config, dev_mode):
    config.DEV_MODE = dev_mode
    logger = setup_logging(config)

    console = [
        handler
        for handler in logger.handlers
        if not isinstance(handler, logging.handlers.RotatingFileHandler)
    ]
    assert console[0].level == (logging.INFO if dev_mode else logging.WARNING)


def test_get_logger_namespacing():
    assert get_logger("services.ledger").name == "sitebooks.services.ledger"


def test_balance_changes_are_logged(
    ledger, manager, bank_account_factory, expense_input, caplog
):
    account = bank_account_factory(opening_balance="100")

    with caplog.at_level(logging.INFO, logger="sitebooks"):
        expense = ledger.create_expense(
            manager, expense_input("40", method=PaymentMethod.BANK_TRANSFER, account=account)
        )

    [record] = [r for r in caplog.records if r.getMessage() == "Applied balance delta"]
    assert record.account_id == account.id
    assert record.delta == "-40"
    assert record.record_kind == "expense"
    assert record.record_id == expense.id
