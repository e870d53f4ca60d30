"""Exception hierarchy for xtab.

Every error raised on purpose by xtab derives from XtabError, which carries
a stable error code, a suggested fix and a context dictionary so the CLI can
render a friendly message and still expose full details in debug mode.

Categories:
- User errors: bad configuration, bad arguments, unusable input files
- Internal errors: unexpected program state
"""

import os
import sys
import traceback
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class ErrorSeverity(Enum):
    """How serious an error is."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Where an error comes from."""
    USER = "user"
    SYSTEM = "system"
    INTERNAL = "internal"
    EXTERNAL = "external"


class XtabError(Exception):
    """Base class for all xtab errors.

    Attributes:
        message: Human-readable error message
        error_code: Standardized error code (CATEGORY_SPECIFIC_CODE)
        suggested_fix: Hint on how to resolve the problem
        context: Extra key/value information about the failure
        original_error: Wrapped exception, if any
        severity: ErrorSeverity of the failure
        category: ErrorCategory of the failure
        error_id: Short unique identifier for correlating log lines
        timestamp: When the error was created
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        suggested_fix: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
        severity: Union[str, ErrorSeverity] = ErrorSeverity.MEDIUM,
        category: Union[str, ErrorCategory] = ErrorCategory.INTERNAL,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.suggested_fix = suggested_fix
        self.context = context or {}
        self.original_error = original_error

        self.severity = severity if isinstance(severity, ErrorSeverity) else ErrorSeverity(severity)
        self.category = category if isinstance(category, ErrorCategory) else ErrorCategory(category)

        self.error_id = str(uuid.uuid4())[:8]
        self.timestamp = datetime.now()

    def _collect_debug_info(self) -> Dict[str, Any]:
        """Collect environment details for bug reports."""
        return {
            "python_version": sys.version,
            "platform": sys.platform,
            "cwd": str(Path.cwd()),
            "environment_vars": {
                "XTAB_DEBUG": os.getenv("XTAB_DEBUG"),
                "XTAB_LOG_LEVEL": os.getenv("XTAB_LOG_LEVEL"),
            },
            "traceback": "".join(traceback.format_exception(
                type(self.original_error), self.original_error, self.original_error.__traceback__
            )) if self.original_error else None,
            "process_id": os.getpid(),
        }

    def get_user_message(self) -> str:
        """Return the message shown to users on stderr."""
        user_msg = f"Error: {self.message} (error id: {self.error_id})"
        if self.suggested_fix:
            user_msg += f"\nHint: {self.suggested_fix}"
        return user_msg

    def get_full_details(self) -> Dict[str, Any]:
        """Return every known detail of the error, for debugging and reports."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "suggested_fix": self.suggested_fix,
            "context": self.context,
            "debug_info": self._collect_debug_info(),
            "original_error": str(self.original_error) if self.original_error else None,
        }

    def add_context(self, key: str, value: Any) -> None:
        """Attach an extra context entry."""
        self.context[key] = value


# ===== User errors =====

class UserError(XtabError):
    """Errors the user can fix: configuration, arguments, input files."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.USER)
        kwargs.setdefault("severity", ErrorSeverity.MEDIUM)
        super().__init__(message, **kwargs)


class ConfigurationError(UserError):
    """A hook configuration file is unusable."""

    def __init__(self, message: str, config_path: Union[str, Path, None] = None, **kwargs):
        self.config_path = Path(config_path) if config_path else None
        kwargs.setdefault("error_code", "USER_CONFIG_INVALID")
        kwargs.setdefault("suggested_fix", "Check the configuration file format and required fields")
        if self.config_path:
            kwargs.setdefault("context", {}).update({"config_path": str(self.config_path)})
        super().__init__(message, **kwargs)


class ConfigFileNotFoundError(ConfigurationError):
    """No hook configuration file exists where one was expected."""

    def __init__(self, config_path: Union[str, Path, None] = None, start_path: Union[str, Path, None] = None,
                 **kwargs):
        self.start_path = Path(start_path) if start_path else None
        if config_path:
            message = f"Configuration file not found: {config_path}"
        else:
            message = f"No .pre-commit-config.yaml found in {start_path or Path.cwd()} or its parents"
        kwargs.setdefault("error_code", "USER_CONFIG_NOT_FOUND")
        kwargs.setdefault("suggested_fix", "Create .pre-commit-config.yaml or pass --config PATH")
        if self.start_path:
            kwargs.setdefault("context", {}).update({"start_path": str(self.start_path)})
        super().__init__(message, config_path=config_path, **kwargs)


class ConfigParseError(ConfigurationError):
    """A configuration file is not valid YAML."""

    def __init__(self, message: str, config_path: Union[str, Path, None] = None,
                 line: Optional[int] = None, column: Optional[int] = None, **kwargs):
        self.line = line
        self.column = column
        kwargs.setdefault("error_code", "USER_CONFIG_PARSE")
        kwargs.setdefault("suggested_fix", "Fix the YAML syntax at the reported position")
        context = kwargs.setdefault("context", {})
        if line is not None:
            context["line"] = line
        if column is not None:
            context["column"] = column
        super().__init__(message, config_path=config_path, **kwargs)


class HookConfigError(ConfigurationError):
    """A configuration file is valid YAML but breaks the hook schema."""

    def __init__(self, message: str, config_path: Union[str, Path, None] = None,
                 hook_id: Optional[str] = None, repo: Optional[str] = None, **kwargs):
        self.hook_id = hook_id
        self.repo = repo
        kwargs.setdefault("error_code", "USER_HOOK_CONFIG")
        kwargs.setdefault("suggested_fix", "Run 'xtab validatehooks' for a full report")
        context = kwargs.setdefault("context", {})
        if hook_id:
            context["hook_id"] = hook_id
        if repo:
            context["repo"] = repo
        super().__init__(message, config_path=config_path, **kwargs)


class InvalidArgumentError(UserError):
    """A command line argument has an invalid value."""

    def __init__(self, message: str, argument_name: Optional[str] = None,
                 valid_values: Optional[List[str]] = None, **kwargs):
        self.argument_name = argument_name
        self.valid_values = valid_values or []
        kwargs.setdefault("error_code", "USER_INVALID_ARGUMENT")

        suggested_fix = "Check the command arguments"
        if self.argument_name:
            suggested_fix += f"; '{self.argument_name}'"
            if self.valid_values:
                suggested_fix += f" must be one of: {', '.join(self.valid_values)}"
        kwargs.setdefault("suggested_fix", suggested_fix)

        context = kwargs.setdefault("context", {})
        if self.argument_name:
            context["argument_name"] = self.argument_name
        if self.valid_values:
            context["valid_values"] = self.valid_values
        super().__init__(message, **kwargs)


class InputFileError(UserError):
    """The crosstab input file is missing or unreadable."""

    def __init__(self, message: str, path: Union[str, Path, None] = None, **kwargs):
        self.path = Path(path) if path else None
        kwargs.setdefault("error_code", "USER_INPUT_FILE")
        kwargs.setdefault("suggested_fix", "Check the -i/--infile path")
        if self.path:
            kwargs.setdefault("context", {}).update({"infile": str(self.path)})
        super().__init__(message, **kwargs)


class OutputFileError(UserError):
    """The crosstab output file cannot be created."""

    def __init__(self, message: str, path: Union[str, Path, None] = None, **kwargs):
        self.path = Path(path) if path else None
        kwargs.setdefault("error_code", "USER_OUTPUT_FILE")
        kwargs.setdefault("suggested_fix", "The output file must be a writable .csv path")
        if self.path:
            kwargs.setdefault("context", {}).update({"outfile": str(self.path)})
        super().__init__(message, **kwargs)


class CrosstabError(UserError):
    """The requested cross-tabulation cannot be built from the input."""

    def __init__(self, message: str, missing_columns: Optional[List[str]] = None, **kwargs):
        self.missing_columns = missing_columns or []
        kwargs.setdefault("error_code", "USER_CROSSTAB")
        kwargs.setdefault("suggested_fix", "Check the -r, -c and -v column names against the input header")
        if self.missing_columns:
            kwargs.setdefault("context", {}).update({"missing_columns": self.missing_columns})
        super().__init__(message, **kwargs)


# ===== Internal errors =====

class InternalError(XtabError):
    """Unexpected program state; always a bug."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.INTERNAL)
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        kwargs.setdefault("error_code", "INTERNAL_ERROR")
        super().__init__(message, **kwargs)


def handle_exception(error: Exception, context: Optional[Dict[str, Any]] = None) -> XtabError:
    """Wrap any exception into an XtabError.

    XtabError instances are returned unchanged (with the extra context
    merged in); anything else becomes an InternalError that keeps the
    original exception.
    """
    if isinstance(error, XtabError):
        for key, value in (context or {}).items():
            error.add_context(key, value)
        return error

    return InternalError(
        f"Unexpected error: {type(error).__name__}: {error}",
        original_error=error,
        context=context or {},
    )


__all__ = [
    "ErrorSeverity",
    "ErrorCategory",
    "XtabError",
    "UserError",
    "ConfigurationError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "HookConfigError",
    "InvalidArgumentError",
    "InputFileError",
    "OutputFileError",
    "CrosstabError",
    "InternalError",
    "handle_exception",
]
