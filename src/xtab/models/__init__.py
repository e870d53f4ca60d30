"""Data models package for xtab.

This package contains the hook configuration models, validation results
and the crosstab request/result models.
"""

from .crosstab_request import CrosstabRequest, CrosstabResult, split_column_list
from .hook_config import HookEntry, RepoConfig, compile_pattern
from .precommit_config import PrecommitConfig
from .validation import ValidationError, ValidationResult, ValidationWarning

__all__ = [
    "CrosstabRequest",
    "CrosstabResult",
    "HookEntry",
    "PrecommitConfig",
    "RepoConfig",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "compile_pattern",
    "split_column_list",
]
