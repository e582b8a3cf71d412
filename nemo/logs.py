"""Runtime (JSON, to file) and console loggers."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from nemo.conf import get_root_path

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(
            {
                "file": os.path.basename(record.pathname),
                "func": record.funcName,
                "level": record.levelname.lower(),
                "msg": record.getMessage(),
                "time": self.formatTime(record, TIME_FORMAT),
            },
            ensure_ascii=False,
        )


def get_custom_logger_formatter() -> logging.Formatter:
    """Text formatter with a full timestamp used by the console logger."""
    return logging.Formatter(
        "time=%(asctime)s level=%(levelname)s msg=%(message)s", datefmt=TIME_FORMAT
    )


def get_runtime_logger() -> logging.Logger:
    """Logger for runtime errors, writing JSON lines to log/runtime.log."""
    logger = logging.getLogger("nemo.runtime")
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        try:
            handler: logging.Handler = logging.FileHandler(
                Path(get_root_path()) / "log" / "runtime.log", encoding="utf-8"
            )
        except OSError:
            handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
        logger.addHandler(handler)
    return logger


def get_cli_logger() -> logging.Logger:
    """Console logger with the custom text format."""
    logger = logging.getLogger("nemo.cli")
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        handler.setFormatter(get_custom_logger_formatter())
        logger.addHandler(handler)
    return logger