"""
Logging configuration for the request router.

This module provides centralized logging configuration with support for
structured logging, different log levels, and multiple output formats.
"""

import logging
import logging.config
import sys
from typing import Any, Dict, Optional


def get_logging_config(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None
) -> Dict[str, Any]:
    """
    Get logging configuration dictionary.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'text')
        log_file: Optional log file path

    Returns:
        Logging configuration dictionary
    """
    formatters = {
        "default": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "detailed": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(module)s %(lineno)d %(message)s"
        }
    }

    formatter_name = "json" if log_format == "json" else "detailed"

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": formatter_name,
            "stream": sys.stdout
        }
    }

    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": formatter_name,
            "filename": log_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "encoding": "utf8"
        }

    loggers = {
        "routekit": {
            "level": log_level,
            "handlers": list(handlers.keys()),
            "propagate": False
        }
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": loggers
    }


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "text",
    log_file: Optional[str] = None
) -> None:
    """
    Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'text')
        log_file: Optional log file path
    """
    config = get_logging_config(
        log_level=log_level.upper(),
        log_format=log_format,
        log_file=log_file
    )

    logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


class StructuredLogger:
    """
    Structured logger for consistent log message formatting.

    This class provides methods for logging structured data with
    consistent field names and formats.
    """

    def __init__(self, name: str):
        """Initialize structured logger.

        Args:
            name: Logger name
        """
        self.logger = get_logger(name)

    def log_resolution(
        self,
        path: str,
        method: Optional[str],
        matched: bool,
        elapsed_ms: float,
        action: Any = None,
        **kwargs
    ):
        """Log the outcome of resolving a request to a route.

        Args:
            path: Request path
            method: HTTP method
            matched: Whether a route was found
            elapsed_ms: Time spent matching in milliseconds
            action: The matched route's action
            **kwargs: Additional fields to log
        """
        log_data = {
            "event": "route_resolution",
            "path": path,
            "method": method,
            "matched": matched,
            "elapsed_ms": elapsed_ms,
        }

        if action is not None:
            log_data["action"] = repr(action)

        log_data.update(kwargs)

        if matched:
            self.logger.debug("Route resolved", extra=log_data)
        else:
            self.logger.info("No route for request", extra=log_data)

    def log_routing_error(self, path: str, error: Exception, **kwargs):
        """Log a route table or match plan defect.

        Args:
            path: Request path being matched
            error: The routing exception
            **kwargs: Additional fields to log
        """
        log_data = {
            "event": "routing_error",
            "path": path,
            "error": str(error),
            "error_type": type(error).__name__,
            "error_code": getattr(error, "code", None),
        }
        log_data.update(kwargs)
        self.logger.error("Routing configuration error", extra=log_data)
