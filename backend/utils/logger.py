"""
Background Builder Structured Logging Module.

Provides consistent, structured logging throughout the application.
Requires Python 3.11+.
"""

import logging
import sys
import threading
from typing import Any, TextIO

import structlog
from structlog.types import Processor

from utils.config import get_settings


def _add_app_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add application context to all log entries."""
    settings = get_settings()
    event_dict["app"] = settings.app_name
    event_dict["version"] = settings.app_version
    return event_dict


def _add_thread_name(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Record which thread emitted the entry (main loop vs. notification thread)."""
    event_dict["thread"] = threading.current_thread().name
    return event_dict


# Sink opened for LOG_FILE_PATH; replaced on every configure_logging() call
_log_file: TextIO | None = None


def close_log_file() -> None:
    """Close the log file opened by configure_logging(), if any."""
    global _log_file
    if _log_file is not None:
        _log_file.close()
        _log_file = None


def configure_logging() -> None:
    """
    Configure structured logging for the application.

    Call this once at application startup.
    """
    global _log_file

    settings = get_settings()
    level = getattr(logging, settings.logging.level.upper())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_app_context,
        _add_thread_name,
    ]

    if settings.logging.format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=settings.logging.file_path is None,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    close_log_file()
    if settings.logging.file_path is not None:
        _log_file = settings.logging.file_path.open("a", encoding="utf-8")
        logger_factory = structlog.WriteLoggerFactory(file=_log_file)
    else:
        logger_factory = structlog.PrintLoggerFactory()

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    # The observer threads are chatty at DEBUG
    logging.getLogger("watchdog").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


# Pre-configured logger for quick imports
logger = get_logger("background_builder")


class LoggerMixin:
    """
    Mixin class to add logging capability to any class.

    Usage:
        class MyClass(LoggerMixin):
            def my_method(self):
                self.log.info("doing something", key="value")
    """

    @property
    def log(self) -> structlog.stdlib.BoundLogger:
        """Get logger bound to this class name."""
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
