"""
Process-wide logging setup.

``LoggingConfig()`` installs a single stream handler at the configured level;
``get_logger()`` returns the application logger or a named child of it.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Optional

from app.config import get_settings

APP_LOGGER_NAME = "app"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class LoggingConfig:
    def __init__(self, level: Optional[str] = None) -> None:
        self.level = (level or get_settings().log_level).upper()
        logging.config.dictConfig(self.as_dict())

    def as_dict(self) -> dict:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": LOG_FORMAT}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                }
            },
            "loggers": {
                APP_LOGGER_NAME: {
                    "handlers": ["console"],
                    "level": self.level,
                    "propagate": True,
                },
                "uvicorn.access": {"level": "WARNING"},
            },
        }


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not name:
        return logging.getLogger(APP_LOGGER_NAME)
    if name.startswith(APP_LOGGER_NAME + ".") or name == APP_LOGGER_NAME:
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
