"""smm_matrix.logger
====================
Mini-README: Configures console logging for the site at import time. The level comes
from ``SMM_LOG_LEVEL``; noisy third-party loggers (passlib's bcrypt backend probe and
SQLAlchemy's engine) are pinned to WARNING so request logs stay readable.
"""

import logging
from logging.config import dictConfig
from typing import Any

from .config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
QUIET_LOGGERS = ("passlib", "sqlalchemy.engine")


def build_logging_config(level: str) -> dict[str, Any]:
    """Return a ``dictConfig`` mapping with the package logger at ``level``."""

    level = level.upper()
    return {
        "version": 1,
        # uvicorn configures its own loggers before ours are imported.
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": "DEBUG",
            }
        },
        "loggers": {
            "smm_matrix": {"level": level},
            **{name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        },
        "root": {"handlers": ["console"], "level": level},
    }


dictConfig(build_logging_config(get_settings().log_level))


def get_logger(name: str) -> logging.Logger:
    """Return a module-specific logger instance."""

    return logging.getLogger(name)
