"""
Logging configuration for the API Explorer.

Applies a console logging setup through dictConfig at application startup.
"""

import logging
import logging.config
from typing import Any


def build_logging_config(level: str) -> dict[str, Any]:
    """Return a dictConfig-compatible logging configuration."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "api_explorer": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level name for the api_explorer logger hierarchy

    Raises:
        ValueError: If the level name is not a known logging level
    """
    if not isinstance(logging.getLevelName(level.upper()), int):
        raise ValueError(f"Invalid log level: {level}")
    logging.config.dictConfig(build_logging_config(level.upper()))
    logging.getLogger(__name__).debug("Logging configured at level %s", level.upper())
