"""Logging setup for the muru command line."""

from __future__ import annotations

import logging
import logging.config
from typing import Any

LEVELS = ("debug", "info", "warning", "error")

_CONFIGURED = False


def _config(level: str) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(levelname)-8s | %(name)s | %(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "standard",
            }
        },
        "loggers": {
            "muru": {
                "level": level.upper(),
                "handlers": ["console"],
                "propagate": False,
            }
        },
    }


def configure(level: str = "warning") -> None:
    """Install the stderr handler once; later calls only change the level."""
    global _CONFIGURED
    if level not in LEVELS:
        raise ValueError(f"unknown log level '{level}'")
    if _CONFIGURED:
        logging.getLogger("muru").setLevel(level.upper())
        return
    logging.config.dictConfig(_config(level))
    _CONFIGURED = True
