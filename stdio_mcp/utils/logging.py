import logging
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from stdio_mcp.config.settings import settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configures root logging on stderr.

    stdout carries the JSON-RPC stream, so log records must never be written
    there. Records are structured JSON unless ``LOG_FORMAT`` is ``text``.
    """
    logger = logging.getLogger()

    # Set the log level from configuration
    try:
        logger.setLevel((level or settings.app.LOG_LEVEL).upper())
    except ValueError:
        logger.setLevel(logging.INFO)

    # Remove default handlers
    if logger.handlers:
        logger.handlers = []

    handler = logging.StreamHandler(sys.stderr)

    if (log_format or settings.app.LOG_FORMAT) == "text":
        formatter = logging.Formatter(TEXT_FORMAT)
    else:
        formatter = JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
