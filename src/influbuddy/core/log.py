"""Logging configuration.

Console output goes through Rich's `RichHandler` so log lines blend with the
CLI tables; an optional plain-text file handler can be added from settings.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any

LOGGER_NAME = "influbuddy"


def setup_logging(
    log_level: str = "WARNING",
    log_file: Path | None = None,
    enable_console: bool = True,
) -> None:
    """Configure the `influbuddy` logger tree.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional file path for log output.
        enable_console: Whether to log to the console (stderr).
    """

    level = log_level.upper()
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "rich": {"format": "%(message)s", "datefmt": "[%X]"},
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {},
        "loggers": {
            LOGGER_NAME: {"level": level, "handlers": [], "propagate": False},
            "httpx": {"level": "WARNING", "handlers": [], "propagate": False},
        },
    }

    if enable_console:
        config["handlers"]["console"] = {
            "class": "rich.logging.RichHandler",
            "level": level,
            "formatter": "rich",
            "rich_tracebacks": True,
            "show_path": False,
            "markup": False,
        }
        for logger in config["loggers"].values():
            logger["handlers"].append("console")

    if log_file:
        config["handlers"]["file"] = {
            "class": "logging.FileHandler",
            "level": level,
            "formatter": "standard",
            "filename": str(log_file),
            "encoding": "utf-8",
        }
        for logger in config["loggers"].values():
            logger["handlers"].append("file")

    logging.config.dictConfig(config)