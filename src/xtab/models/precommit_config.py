"""Top-level hook configuration model.

PrecommitConfig is the in-memory form of a ``.pre-commit-config.yaml``
file: a fail-fast flag, global files/exclude filters and the ordered list
of repo entries. It is built once per run and treated as read-only.
"""

from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..types.enums import RepoKind
from .hook_config import DEFAULT_EXCLUDE, DEFAULT_FILES, HookEntry, RepoConfig, compile_pattern

TOP_LEVEL_FIELDS = frozenset({
    "repos",
    "fail_fast",
    "exclude",
    "files",
    "default_stages",
    "default_install_hook_types",
    "default_language_version",
    "minimum_pre_commit_version",
    "ci",
})


class PrecommitConfig:
    """Parsed hook configuration file.

    Attributes:
        repos: Repo entries in file order
        fail_fast: Stop at the first failing hook
        exclude: Global exclude regex applied before every hook's own filters
        files: Global include regex applied before every hook's own filters
        source_path: File the configuration was loaded from, if any
        extras: Recognized top-level keys this tool does not interpret
    """

    def __init__(self, repos: List[RepoConfig], fail_fast: bool = False,
                 exclude: str = DEFAULT_EXCLUDE, files: str = DEFAULT_FILES,
                 source_path: Optional[Path] = None,
                 extras: Optional[Dict[str, Any]] = None):
        if not isinstance(fail_fast, bool):
            raise TypeError(f"fail_fast must be a boolean, got {type(fail_fast).__name__}")
        if not isinstance(repos, list):
            raise TypeError(f"repos must be a list, got {type(repos).__name__}")

        self.repos = repos
        self.fail_fast = fail_fast
        self.exclude = exclude
        self.files = files
        self.source_path = Path(source_path) if source_path else None
        self.extras = extras or {}

        self.exclude_pattern = compile_pattern(exclude, "exclude")
        self.files_pattern = compile_pattern(files, "files")

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source_path: Optional[Path] = None) -> "PrecommitConfig":
        """Create PrecommitConfig from a parsed YAML document.

        Raises:
            ValueError: On missing ``repos``, unknown keys or invalid entries
            TypeError: On wrongly typed fields
        """
        if not isinstance(data, dict):
            raise TypeError(f"Configuration must be a mapping, got {type(data).__name__}")
        if "repos" not in data:
            raise ValueError("Missing required field: repos")

        extra_fields = set(data.keys()) - TOP_LEVEL_FIELDS
        if extra_fields:
            raise ValueError(f"Unexpected top-level keys: {', '.join(sorted(extra_fields))}")

        raw_repos = data["repos"]
        if not isinstance(raw_repos, list):
            raise TypeError(f"repos must be a list, got {type(raw_repos).__name__}")

        extras = {key: value for key, value in data.items()
                  if key not in ("repos", "fail_fast", "exclude", "files")}

        return cls(
            repos=[RepoConfig.from_dict(repo) for repo in raw_repos],
            fail_fast=data.get("fail_fast", False),
            exclude=data.get("exclude", DEFAULT_EXCLUDE),
            files=data.get("files", DEFAULT_FILES),
            source_path=source_path,
            extras=extras,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.fail_fast:
            result["fail_fast"] = self.fail_fast
        if self.files != DEFAULT_FILES:
            result["files"] = self.files
        if self.exclude != DEFAULT_EXCLUDE:
            result["exclude"] = self.exclude
        result.update(self.extras)
        result["repos"] = [repo.to_dict() for repo in self.repos]
        return result

    def iter_hooks(self) -> Iterator[Tuple[RepoConfig, HookEntry]]:
        """Yield (repo, hook) pairs in file order."""
        for repo in self.repos:
            for hook in repo.hooks:
                yield repo, hook

    def hook_ids(self) -> List[str]:
        return [hook.id for _, hook in self.iter_hooks()]

    def find_hook(self, id_or_alias: str) -> Optional[Tuple[RepoConfig, HookEntry]]:
        """Return the first (repo, hook) whose id or alias matches, else None."""
        for repo, hook in self.iter_hooks():
            if hook.matches(id_or_alias):
                return repo, hook
        return None

    def repos_of_kind(self, kind: RepoKind) -> List[RepoConfig]:
        return [repo for repo in self.repos if repo.kind is kind]

    def __len__(self) -> int:
        return sum(len(repo.hooks) for repo in self.repos)

    def __str__(self) -> str:
        source = f", source={self.source_path}" if self.source_path else ""
        return f"PrecommitConfig(repos={len(self.repos)}, hooks={len(self)}, fail_fast={self.fail_fast}{source})"
