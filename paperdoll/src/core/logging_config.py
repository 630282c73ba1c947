"""
Logging configuration for the paper-doll core.

Provides structured logging with different formats for development, testing, and production.
Configures formatters, handlers, and loggers for the catalog, palette and service components.
"""

import logging
import logging.config
import os
import sys
from typing import Any, Dict, Optional


def get_log_level() -> str:
    """Get the log level from environment variables."""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_environment() -> str:
    return os.getenv("ENVIRONMENT", "development").lower()


def get_logging_config(
    log_level: Optional[str] = None,
    environment: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Get the logging configuration dictionary.

    Returns a logging configuration that can be used with logging.config.dictConfig().
    Production output is JSON formatted; development and testing use a
    human-readable format. Arguments left as None fall back to the
    LOG_LEVEL and ENVIRONMENT variables.
    """
    log_level = (log_level or get_log_level()).upper()
    environment = (environment or get_environment()).lower()

    if environment == "production":
        formatter_class = "pythonjsonlogger.json.JsonFormatter"
        formatter_format = "%(asctime)s %(name)s %(levelname)s %(message)s"
    else:
        formatter_class = "logging.Formatter"
        formatter_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    component_logger = {
        "level": log_level,
        "handlers": ["console", "error_console"],
        "propagate": False,
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "class": formatter_class,
                "format": formatter_format,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "class": formatter_class,
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "default",
                "stream": sys.stdout,
            },
            "error_console": {
                "class": "logging.StreamHandler",
                "level": "ERROR",
                "formatter": "detailed",
                "stream": sys.stderr,
            },
        },
        "loggers": {
            "paperdoll": dict(component_logger),
            "paperdoll.parts": dict(component_logger),
            "paperdoll.palettes": dict(component_logger),
            "paperdoll.services": dict(component_logger),
            "asyncio": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": log_level,
            "handlers": ["console", "error_console"],
        },
    }


def setup_logging(log_level: Optional[str] = None, environment: Optional[str] = None) -> None:
    """
    Configure logging for the application.

    This should be called once at startup, before any catalog scan. It sets
    up all loggers, handlers, and formatters according to the current
    environment.
    """
    logging.config.dictConfig(get_logging_config(log_level, environment))

    logger = logging.getLogger("paperdoll.logging")
    logger.info(
        "Logging configured",
        extra={
            "log_level": (log_level or get_log_level()).upper(),
            "environment": (environment or get_environment()).lower(),
        },
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given name.

    Args:
        name: The logger name, typically __name__ from the calling module

    Returns:
        A configured logger instance
    """
    if not name.startswith("paperdoll."):
        name = f"paperdoll.{name}"
    elif name.startswith("paperdoll.src."):
        # paperdoll.src.parts.catalog -> paperdoll.parts.catalog
        name = "paperdoll." + name[len("paperdoll.src."):]
    return logging.getLogger(name)
