"""Enumerations used across xtab.

All string enums inherit from str and Enum so they serialize to JSON
directly and compare equal to their plain values.
"""

from enum import Enum, IntEnum
from typing import List


class OutputFormat(str, Enum):
    """Output format options for hook commands.

    Values:
        JSON: Structured JSON output for programmatic consumption
        YAML: The same structure as JSON, as YAML
        TABLE: Human-readable table format
        QUIET: Minimal output (status only)
    """
    JSON = "json"
    YAML = "yaml"
    TABLE = "table"
    QUIET = "quiet"

    @classmethod
    def from_string(cls, value: str) -> "OutputFormat":
        """Parse output format from string.

        Raises:
            ValueError: If value is not a valid output format
        """
        try:
            return cls(value)
        except ValueError:
            valid_values = [fmt.value for fmt in cls]
            raise ValueError(f"Invalid output format '{value}'. Valid values: {valid_values}")

    @classmethod
    def get_all_formats(cls) -> List[str]:
        return [fmt.value for fmt in cls]


class RepoKind(str, Enum):
    """Where the hooks of a repo entry come from.

    Values:
        META: Checks built into the hook runner (``repo: meta``)
        LOCAL: Hooks defined inline in the configuration (``repo: local``)
        REMOTE: Hooks fetched from a repository URL at a pinned revision
    """
    META = "meta"
    LOCAL = "local"
    REMOTE = "remote"

    @classmethod
    def from_repo(cls, repo: str) -> "RepoKind":
        """Classify a ``repo`` value; anything not a sentinel is remote."""
        if repo == cls.META.value:
            return cls.META
        if repo == cls.LOCAL.value:
            return cls.LOCAL
        return cls.REMOTE

    def requires_rev(self) -> bool:
        """Only remote repos carry a pinned revision."""
        return self is RepoKind.REMOTE


class MetaHookId(str, Enum):
    """Hook ids available under ``repo: meta``."""
    IDENTITY = "identity"
    CHECK_HOOKS_APPLY = "check-hooks-apply"
    CHECK_USELESS_EXCLUDES = "check-useless-excludes"

    @classmethod
    def get_all_ids(cls) -> List[str]:
        return [hook.value for hook in cls]

    @classmethod
    def is_meta_hook(cls, hook_id: str) -> bool:
        return hook_id in cls.get_all_ids()


class HeaderFormat(IntEnum):
    """Layout of the column headers written by the crosstab command.

    Values:
        JOINED: One header row, col values and value name joined by '_'
        TWO_ROWS: Col values on the first row, value names on the second
        ROW_PER_COLUMN: One row per col column plus a row of value names
        LABELED_ROW_PER_COLUMN: Like ROW_PER_COLUMN with 'name=value' labels
    """
    JOINED = 1
    TWO_ROWS = 2
    ROW_PER_COLUMN = 3
    LABELED_ROW_PER_COLUMN = 4

    @classmethod
    def from_value(cls, value: int) -> "HeaderFormat":
        """Parse a header format number.

        Raises:
            ValueError: If value is not between 1 and 4
        """
        try:
            return cls(int(value))
        except (ValueError, TypeError):
            valid_values = [str(fmt.value) for fmt in cls]
            raise ValueError(f"Invalid header format '{value}'. Valid values: {', '.join(valid_values)}")
