"""Hook and repo entry models for the hook configuration file.

A configuration file lists repo entries; each repo entry names a hook
source (a repository URL, or one of the ``meta`` / ``local`` sentinels),
an optional pinned revision and the hooks to run from it:

    repos:
      - repo: https://github.com/pre-commit/pre-commit-hooks
        rev: v4.5.0
        hooks:
          - id: check-yaml
          - id: trailing-whitespace
            args: [--markdown-linebreak-ext=md]

The models enforce the structural rules of that schema on construction and
raise ValueError / TypeError on violations. Semantic checks that should be
reported rather than raised (unknown type tags, unpinned revisions, ...)
live in services.hook_validator.
"""

import re
from typing import Any, Dict, Iterator, List, Optional, Pattern

from ..types.enums import MetaHookId, RepoKind

DEFAULT_FILES = ""
DEFAULT_EXCLUDE = "^$"
DEFAULT_TYPES = ("file",)

# key -> default; None means "not set"
HOOK_OPTIONAL_FIELDS: Dict[str, Any] = {
    "name": None,
    "alias": None,
    "entry": None,
    "language": None,
    "description": None,
    "args": [],
    "files": DEFAULT_FILES,
    "exclude": DEFAULT_EXCLUDE,
    "types": list(DEFAULT_TYPES),
    "types_or": [],
    "exclude_types": [],
    "always_run": False,
    "pass_filenames": True,
    "verbose": False,
}

# Keys read by the hook runner but not interpreted here; kept as written.
HOOK_PASSTHROUGH_FIELDS = frozenset({
    "stages",
    "additional_dependencies",
    "language_version",
    "require_serial",
    "log_file",
    "minimum_pre_commit_version",
    "fail_fast",
})

HOOK_ALLOWED_FIELDS = frozenset({"id"} | set(HOOK_OPTIONAL_FIELDS) | HOOK_PASSTHROUGH_FIELDS)
REPO_ALLOWED_FIELDS = frozenset({"repo", "rev", "hooks"})

_STRING_FIELDS = ("name", "alias", "entry", "language", "description")
_LIST_FIELDS = ("args", "types", "types_or", "exclude_types")
_BOOL_FIELDS = ("always_run", "pass_filenames", "verbose")


def compile_pattern(value: Any, field_name: str) -> Pattern:
    """Compile a files/exclude regex.

    Verbose patterns such as ``(?x)^( target/ | )$`` are supported through
    the inline flag, exactly as written in the file.

    Raises:
        TypeError: If value is not a string
        ValueError: If value is not a valid regular expression
    """
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string, got {type(value).__name__}")
    try:
        return re.compile(value)
    except re.error as e:
        raise ValueError(f"{field_name} is not a valid regular expression ({e}): {value!r}")


def _check_string_list(value: Any, field_name: str) -> List[str]:
    if not isinstance(value, list):
        raise TypeError(f"{field_name} must be a list, got {type(value).__name__}")
    for item in value:
        if not isinstance(item, str):
            raise TypeError(f"{field_name} entries must be strings, got {type(item).__name__}")
    return list(value)


class HookEntry:
    """A single hook inside a repo entry.

    Only ``id`` is required. Filters default to "every file" (``files: ''``,
    ``exclude: '^$'``, ``types: [file]``). Runner-only keys such as
    ``stages`` or ``additional_dependencies`` are kept in ``extras``.
    """

    def __init__(self, id: str, args: Optional[List[str]] = None,
                 files: str = DEFAULT_FILES, exclude: str = DEFAULT_EXCLUDE,
                 types: Optional[List[str]] = None, types_or: Optional[List[str]] = None,
                 exclude_types: Optional[List[str]] = None,
                 name: Optional[str] = None, alias: Optional[str] = None,
                 entry: Optional[str] = None, language: Optional[str] = None,
                 description: Optional[str] = None,
                 always_run: bool = False, pass_filenames: bool = True, verbose: bool = False,
                 **kwargs):
        """Initialize HookEntry with strict field validation."""
        extra_fields = sorted(set(kwargs) - HOOK_PASSTHROUGH_FIELDS)
        if extra_fields:
            raise ValueError(f"Unexpected keys in hook '{id}': {', '.join(extra_fields)}")

        self.id = id
        self.args = [] if args is None else args
        self.files = files
        self.exclude = exclude
        self.types = list(DEFAULT_TYPES) if types is None else types
        self.types_or = [] if types_or is None else types_or
        self.exclude_types = [] if exclude_types is None else exclude_types
        self.name = name
        self.alias = alias
        self.entry = entry
        self.language = language
        self.description = description
        self.always_run = always_run
        self.pass_filenames = pass_filenames
        self.verbose = verbose
        self.extras = dict(kwargs)

        self._validate()
        self.files_pattern = compile_pattern(self.files, "files")
        self.exclude_pattern = compile_pattern(self.exclude, "exclude")

    def _validate(self) -> None:
        """Internal validation method."""
        if not isinstance(self.id, str):
            raise TypeError(f"id must be a string, got {type(self.id).__name__}")
        if not self.id.strip():
            raise ValueError("id field is required and cannot be empty")

        for field_name in _LIST_FIELDS:
            setattr(self, field_name, _check_string_list(getattr(self, field_name), field_name))

        for field_name in _STRING_FIELDS:
            value = getattr(self, field_name)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"{field_name} must be a string, got {type(value).__name__}")

        for field_name in _BOOL_FIELDS:
            value = getattr(self, field_name)
            if not isinstance(value, bool):
                raise TypeError(f"{field_name} must be a boolean, got {type(value).__name__}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HookEntry":
        """Create HookEntry from a parsed YAML mapping.

        Raises:
            ValueError: If data is missing ``id`` or has unknown keys
            TypeError: If data or one of its fields has the wrong type
        """
        if not isinstance(data, dict):
            raise TypeError(f"Hook entry must be a mapping, got {type(data).__name__}")
        if "id" not in data:
            raise ValueError("Missing required field: id")

        extra_fields = set(data.keys()) - HOOK_ALLOWED_FIELDS
        if extra_fields:
            raise ValueError(f"Unexpected keys in hook '{data['id']}': {', '.join(sorted(extra_fields))}")

        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the file format, omitting fields left at their defaults."""
        result: Dict[str, Any] = {"id": self.id}
        for field_name, default in HOOK_OPTIONAL_FIELDS.items():
            value = getattr(self, field_name)
            if value != default:
                result[field_name] = value
        result.update(self.extras)
        return result

    @property
    def display_name(self) -> str:
        """Name shown in listings: explicit name, else alias, else id."""
        return self.name or self.alias or self.id

    def matches(self, id_or_alias: str) -> bool:
        return id_or_alias in (self.id, self.alias)

    def __str__(self) -> str:
        parts = [f"id='{self.id}'"]
        if self.args:
            parts.append(f"args={self.args}")
        if self.files != DEFAULT_FILES:
            parts.append(f"files='{self.files}'")
        if self.types != list(DEFAULT_TYPES):
            parts.append(f"types={self.types}")
        return f"HookEntry({', '.join(parts)})"

    def __repr__(self) -> str:
        return self.__str__()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HookEntry):
            return NotImplemented
        return self.to_dict() == other.to_dict()


class RepoConfig:
    """One ``repos:`` entry: a hook source, its pinned revision and its hooks."""

    def __init__(self, repo: str, hooks: List[HookEntry], rev: Optional[str] = None):
        self.repo = repo
        self.rev = rev
        self.hooks = hooks
        self._validate()
        self.kind = RepoKind.from_repo(self.repo)
        self._validate_rev()

    def _validate(self) -> None:
        if not isinstance(self.repo, str):
            raise TypeError(f"repo must be a string, got {type(self.repo).__name__}")
        if not self.repo.strip():
            raise ValueError("repo field is required and cannot be empty")
        if self.rev is not None and not isinstance(self.rev, str):
            raise TypeError(f"rev must be a string, got {type(self.rev).__name__}")
        if not isinstance(self.hooks, list):
            raise TypeError(f"hooks must be a list, got {type(self.hooks).__name__}")
        if not self.hooks:
            raise ValueError(f"repo '{self.repo}' must list at least one hook")

    def _validate_rev(self) -> None:
        if self.kind.requires_rev():
            if not self.rev or not self.rev.strip():
                raise ValueError(f"repo '{self.repo}' requires a pinned rev")
        elif self.rev is not None:
            raise ValueError(f"repo '{self.repo}' does not accept a rev")

        if self.kind is RepoKind.META:
            for hook in self.hooks:
                if not MetaHookId.is_meta_hook(hook.id):
                    raise ValueError(
                        f"'{hook.id}' is not a meta hook. Valid ids: {', '.join(MetaHookId.get_all_ids())}"
                    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepoConfig":
        """Create RepoConfig from a parsed YAML mapping.

        Raises:
            ValueError: On missing/unknown keys or schema violations
            TypeError: On wrongly typed fields
        """
        if not isinstance(data, dict):
            raise TypeError(f"Repo entry must be a mapping, got {type(data).__name__}")
        if "repo" not in data:
            raise ValueError("Missing required field: repo")
        if "hooks" not in data:
            raise ValueError(f"Missing required field: hooks (repo '{data['repo']}')")

        extra_fields = set(data.keys()) - REPO_ALLOWED_FIELDS
        if extra_fields:
            raise ValueError(f"Unexpected keys in repo '{data['repo']}': {', '.join(sorted(extra_fields))}")

        raw_hooks = data["hooks"]
        if not isinstance(raw_hooks, list):
            raise TypeError(f"hooks must be a list, got {type(raw_hooks).__name__}")

        return cls(
            repo=data["repo"],
            rev=data.get("rev"),
            hooks=[HookEntry.from_dict(hook) for hook in raw_hooks],
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"repo": self.repo}
        if self.rev is not None:
            result["rev"] = self.rev
        result["hooks"] = [hook.to_dict() for hook in self.hooks]
        return result

    def __iter__(self) -> Iterator[HookEntry]:
        return iter(self.hooks)

    def __str__(self) -> str:
        rev = f"@{self.rev}" if self.rev else ""
        return f"RepoConfig({self.repo}{rev}, hooks={[hook.id for hook in self.hooks]})"

    def __repr__(self) -> str:
        return self.__str__()
