"""Root logger setup."""
from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"

NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "passlib")


def build_formatter(fmt: str) -> logging.Formatter:
    """``json`` gives one object per line; anything else is human-readable."""

    if fmt.lower() == "json":
        return JsonFormatter(JSON_FIELDS, rename_fields={"levelname": "level", "asctime": "timestamp"})
    return logging.Formatter(PLAIN_FORMAT)


def configure_logging(level: str = "INFO", fmt: str = "plain") -> None:
    """Install a single stdout handler on the root logger."""

    resolved = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(build_formatter(fmt))
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
