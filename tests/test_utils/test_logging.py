"""Tests for root logger setup."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

from csv_shuffle.config import LoggingConfig
from csv_shuffle.utils.logging import _JsonFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_handlers_write_to_stderr() -> None:
    configure_logging(LoggingConfig(level="INFO"))
    root = logging.getLogger()
    assert root.level == logging.INFO
    assert [h.stream for h in root.handlers] == [sys.stderr]


def test_debug_flag_overrides_level() -> None:
    configure_logging(LoggingConfig(level="ERROR"), debug=True)
    assert logging.getLogger().level == logging.DEBUG


def test_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "shuffle.log"
    configure_logging(LoggingConfig(level="WARNING", log_file=str(log_file)))
    logging.getLogger("csv_shuffle.test").warning("skipped %d row(s)", 3)
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "skipped 3 row(s)" in log_file.read_text(encoding="utf-8")


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord("csv_shuffle.reader", logging.WARNING, __file__, 1,
                               "row %d skipped", (7,), None)
    record.path = "data.csv"
    payload = json.loads(_JsonFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "csv_shuffle.reader"
    assert payload["msg"] == "row 7 skipped"
    assert payload["path"] == "data.csv"
    assert "lineno" not in payload
