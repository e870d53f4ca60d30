"""Logging and output helpers for xtab."""

from .formatters import (
    BaseFormatter,
    JSONFormatter,
    QuietFormatter,
    TableFormatter,
    YAMLFormatter,
    create_formatter,
)
from .logging import configure_logging, get_logger, log_error, log_operation

__all__ = [
    "BaseFormatter",
    "JSONFormatter",
    "QuietFormatter",
    "TableFormatter",
    "YAMLFormatter",
    "configure_logging",
    "create_formatter",
    "get_logger",
    "log_error",
    "log_operation",
]
