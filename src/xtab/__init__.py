"""Cross-tabulation and hook configuration tooling.
Copyright (c) 2025 Haoyuan Li
MIT License

xtab turns normalized (long) tables into cross-tables and manages the
``.pre-commit-config.yaml`` that guards its own repository: loading,
validating and planning hooks, and running the built-in meta hooks.

Basic Usage:
    from xtab import CrosstabRequest, crosstab

    request = CrosstabRequest.from_cli_lists(
        "sales.csv", "wide.csv", rows=["region"], cols=["year"], values=["sales,units"]
    )
    result = crosstab(request)

    from xtab import HookValidator, load_raw_config

    report = HookValidator().validate_raw(load_raw_config(".pre-commit-config.yaml"))
"""

__version__ = "0.1.0"

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigurationError,
    CrosstabError,
    HookConfigError,
    InputFileError,
    InvalidArgumentError,
    OutputFileError,
    XtabError,
)
from .models import (
    CrosstabRequest,
    CrosstabResult,
    HookEntry,
    PrecommitConfig,
    RepoConfig,
    ValidationResult,
)
from .services.crosstab import Crosstab, crosstab
from .services.hook_selector import HookSelector
from .services.hook_validator import HookValidator
from .settings import find_and_load_config, load_config, load_raw_config
from .types import HeaderFormat, MetaHookId, OutputFormat, RepoKind

__all__ = [
    # Crosstab
    "Crosstab",
    "CrosstabRequest",
    "CrosstabResult",
    "HeaderFormat",
    "crosstab",
    # Hook configuration
    "HookEntry",
    "HookSelector",
    "HookValidator",
    "MetaHookId",
    "OutputFormat",
    "PrecommitConfig",
    "RepoConfig",
    "RepoKind",
    "ValidationResult",
    "find_and_load_config",
    "load_config",
    "load_raw_config",
    # Exceptions
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigurationError",
    "CrosstabError",
    "HookConfigError",
    "InputFileError",
    "InvalidArgumentError",
    "OutputFileError",
    "XtabError",
]
