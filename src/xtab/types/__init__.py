"""Type definitions for xtab."""

from .enums import HeaderFormat, MetaHookId, OutputFormat, RepoKind

__all__ = [
    "HeaderFormat",
    "MetaHookId",
    "OutputFormat",
    "RepoKind",
]
