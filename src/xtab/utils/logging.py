"""Logging setup for xtab.

Modules log through ``logging.getLogger(__name__)``; this module only
decides where those records go and how they look. Three formats are
supported:

- human: short, for interactive use
- debug: with module, function and line number
- json: one JSON object per line, machine readable
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, TextIO, Union

from ..exceptions import XtabError

ROOT_LOGGER_NAME = "xtab"


class LogLevel(Enum):
    """Log levels accepted by configure_logging."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @classmethod
    def from_string(cls, value: str) -> "LogLevel":
        try:
            return cls(value.lower())
        except ValueError:
            return cls.INFO

    def to_logging_level(self) -> int:
        return getattr(logging, self.name)


class LogFormat(Enum):
    """Output formats for log records."""
    HUMAN = "human"
    DEBUG = "debug"
    JSON = "json"

    @classmethod
    def from_string(cls, value: str) -> "LogFormat":
        try:
            return cls(value.lower())
        except ValueError:
            return cls.HUMAN


class JsonFormatter(logging.Formatter):
    """JSON formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        error = getattr(record, "xtab_error", None)
        if isinstance(error, XtabError):
            log_data.update({
                "error_id": error.error_id,
                "error_code": error.error_code,
                "context": error.context,
            })

        duration_ms = getattr(record, "duration_ms", None)
        if duration_ms is not None:
            log_data["duration_ms"] = round(duration_ms, 2)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, separators=(",", ":"), default=str)


class HumanFormatter(logging.Formatter):
    """Human-friendly formatter."""

    def __init__(self):
        super().__init__(fmt="%(levelname)s: %(message)s")


class DebugFormatter(logging.Formatter):
    """Detailed formatter for troubleshooting."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def _get_formatter(log_format: LogFormat) -> logging.Formatter:
    if log_format is LogFormat.JSON:
        return JsonFormatter()
    if log_format is LogFormat.DEBUG:
        return DebugFormatter()
    return HumanFormatter()


def configure_logging(level: Union[LogLevel, str] = LogLevel.WARNING,
                      log_format: Union[LogFormat, str] = LogFormat.HUMAN,
                      log_file: Optional[Union[str, Path]] = None,
                      stream: Optional[TextIO] = None) -> logging.Logger:
    """Install handlers on the ``xtab`` logger.

    Calling it again replaces the previous handlers.

    Args:
        level: Minimum level to emit
        log_format: Format of console (and file) records
        log_file: Also append records to this file
        stream: Console stream, defaults to stderr

    Returns:
        The configured ``xtab`` logger
    """
    level = level if isinstance(level, LogLevel) else LogLevel.from_string(level)
    log_format = log_format if isinstance(log_format, LogFormat) else LogFormat.from_string(log_format)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.to_logging_level())
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(_get_formatter(log_format))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(JsonFormatter() if log_format is LogFormat.JSON else DebugFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the ``xtab`` logger."""
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


@contextmanager
def log_operation(operation_name: str, logger: Optional[logging.Logger] = None) -> Iterator[None]:
    """Time an operation and log its duration and outcome."""
    logger = logger or get_logger("operations")
    start_time = time.perf_counter()
    logger.debug("Starting %s", operation_name)
    try:
        yield
    except Exception as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        extra = {"duration_ms": duration_ms}
        if isinstance(e, XtabError):
            extra["xtab_error"] = e
        logger.debug("%s failed after %.2fms: %s", operation_name, duration_ms, e, extra=extra)
        raise
    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.debug("%s completed in %.2fms", operation_name, duration_ms, extra={"duration_ms": duration_ms})


def log_error(error: Exception, message: Optional[str] = None,
              logger: Optional[logging.Logger] = None, level: int = logging.ERROR,
              exc_info: bool = False) -> None:
    """Log an error, attaching XtabError details for the JSON formatter.

    The CLI logs at DEBUG because it prints the user message itself.
    """
    logger = logger or get_logger("errors")
    extra = {"xtab_error": error} if isinstance(error, XtabError) else {}
    logger.log(level, message or f"{type(error).__name__}: {error}", extra=extra, exc_info=exc_info)


__all__ = [
    "LogLevel",
    "LogFormat",
    "JsonFormatter",
    "HumanFormatter",
    "DebugFormatter",
    "configure_logging",
    "get_logger",
    "log_operation",
    "log_error",
]
