"""Tests for logging configuration and the JSON formatter."""

from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from ffweb.config import LoggingConfig
from ffweb.logging import JSONFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back the way pytest left it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(msg: str = "hello %s", args=("world",), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "ffweb.test", logging.WARNING, __file__, 1, msg, args, None
    )
    record.__dict__.update(extra)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(make_record()))

        assert entry["level"] == "WARNING"
        assert entry["message"] == "hello world"
        assert entry["logger"] == "ffweb.test"
        assert entry["timestamp"].endswith("+00:00")
        assert "context" not in entry

    def test_extra_values_go_to_context(self):
        entry = json.loads(
            JSONFormatter().format(make_record(task_id="t1", path=Path("/v")))
        )
        assert entry["context"] == {"task_id": "t1", "path": "/v"}

    def test_exception_is_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in entry["exception"]


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_stderr_only_by_default(self):
        configure_logging(LoggingConfig(level="debug"))
        root = logging.getLogger()

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_file_handler_with_json(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "ffweb.log"
        configure_logging(LoggingConfig(file=log_file, format="json"))
        root = logging.getLogger()

        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler, RotatingFileHandler)
        assert isinstance(handler.formatter, JSONFormatter)

        logging.getLogger("ffweb.test").info("written")
        handler.flush()
        assert json.loads(log_file.read_text())["message"] == "written"

    def test_file_and_stderr(self, tmp_path: Path):
        configure_logging(
            LoggingConfig(file=tmp_path / "a.log", include_stderr=True)
        )
        assert len(logging.getLogger().handlers) == 2

    def test_unwritable_file_falls_back_to_stderr(self, tmp_path: Path, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        configure_logging(LoggingConfig(file=blocker / "sub" / "a.log"))

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert not isinstance(handlers[0], RotatingFileHandler)
        assert "Could not open log file" in capsys.readouterr().err

    def test_access_log_quiet_above_debug(self):
        configure_logging(LoggingConfig(level="info"))
        assert logging.getLogger("aiohttp.access").level == logging.WARNING
