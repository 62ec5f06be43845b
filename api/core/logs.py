"""
Process-wide logging setup.

Console output at `LOG_LEVEL`, plus a file (`LOG_FILE`, truncated on every
start) that keeps everything down to DEBUG.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "[%(asctime)s %(levelname)s %(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
DEFAULT_LOG_FILE = "server.log"


def log_level() -> int:
    raw = os.environ.get("LOG_LEVEL", "DEBUG").strip().upper() or "DEBUG"
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.DEBUG


def log_file() -> str:
    return os.environ.get("LOG_FILE", DEFAULT_LOG_FILE).strip()


def configure_logging() -> None:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level())
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    path = log_file()
    if path:
        file_handler = logging.FileHandler(path, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)

    # Third-party chatter stays at WARNING regardless of LOG_LEVEL.
    for noisy in ("asyncpg", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
