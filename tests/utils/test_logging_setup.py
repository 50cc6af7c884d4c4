import json
import logging

import pytest

from stdio_mcp.utils.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_json_records_go_to_stderr(capsys):
    setup_logging(level="info", log_format="json")
    logging.getLogger("stdio_mcp.test").info("server ready")

    captured = capsys.readouterr()
    assert captured.out == ""
    record = json.loads(captured.err.strip().splitlines()[-1])
    assert record["message"] == "server ready"
    assert record["level"] == "INFO"
    assert record["name"] == "stdio_mcp.test"
    assert "timestamp" in record


def test_text_format(capsys):
    setup_logging(level="DEBUG", log_format="text")
    logging.getLogger("stdio_mcp.test").debug("details")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "stdio_mcp.test - DEBUG - details" in captured.err


def test_replaces_existing_handlers():
    setup_logging(log_format="text")
    setup_logging(log_format="text")
    assert len(logging.getLogger().handlers) == 1


def test_unknown_level_falls_back_to_info():
    setup_logging(level="chatty")
    assert logging.getLogger().level == logging.INFO
