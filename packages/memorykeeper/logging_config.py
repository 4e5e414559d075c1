from __future__ import annotations

import logging.config
import os
import sys
from typing import Any, Dict, Optional


def _log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def _apscheduler_log_level() -> str:
    return os.getenv("APSCHEDULER_LOG_LEVEL", "WARNING").upper()


def _log_destination() -> str:
    return os.getenv("LOG_DESTINATION", "stdout").lower()


def _log_file_path() -> Optional[str]:
    return os.getenv("LOG_FILE")


def _handler(destination: str) -> Dict[str, Any]:
    if destination == "file":
        log_file = _log_file_path()
        if not log_file:
            raise RuntimeError("LOG_FILE is required when LOG_DESTINATION=file")
        return {
            "class": "logging.FileHandler",
            "level": _log_level(),
            "filename": log_file,
            "formatter": "standard",
        }
    return {
        "class": "logging.StreamHandler",
        "level": _log_level(),
        "stream": sys.stdout if destination == "stdout" else sys.stderr,
        "formatter": "standard",
    }


def configure_logging() -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                }
            },
            "handlers": {"default": _handler(_log_destination())},
            "loggers": {
                "memorykeeper": {"level": _log_level()},
                # the interval job logs every run at INFO
                "apscheduler": {"level": _apscheduler_log_level()},
            },
            "root": {"handlers": ["default"], "level": _log_level()},
        }
    )
