"""File selection for hooks and the built-in meta hooks.

For each hook the runner narrows the candidate files in three steps:

1. the configuration's global ``files`` / ``exclude`` patterns,
2. the hook's own ``types`` / ``types_or`` / ``exclude_types`` tags,
3. the hook's own ``files`` / ``exclude`` patterns.

Patterns use ``re.search`` semantics, so an unanchored pattern matches
anywhere in the path. Paths are always compared in POSIX form.

The meta hooks (``repo: meta``) check the configuration against the
repository itself and are the only hooks this module executes:

- identity: prints the files it receives
- check-hooks-apply: fails for hooks that apply to no file
- check-useless-excludes: fails for exclude patterns that match no file
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Pattern, Sequence, Union

from ..models.hook_config import DEFAULT_EXCLUDE, HookEntry, compile_pattern
from ..models.precommit_config import PrecommitConfig
from ..types.enums import MetaHookId, RepoKind
from .file_tags import FileTagger

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 30

Tagger = Callable[[str], FrozenSet[str]]


def normalize_filename(filename: Union[str, PurePath]) -> str:
    """Return filename in POSIX form without a leading './'."""
    name = PurePath(filename).as_posix()
    while name.startswith("./"):
        name = name[2:]
    return name


def filter_by_include_exclude(filenames: Iterable[str], include: Union[str, Pattern],
                              exclude: Union[str, Pattern]) -> List[str]:
    """Keep names matched by include and not matched by exclude."""
    include_re = compile_pattern(include, "files") if isinstance(include, str) else include
    exclude_re = compile_pattern(exclude, "exclude") if isinstance(exclude, str) else exclude
    return [
        name for name in filenames
        if include_re.search(name) and not exclude_re.search(name)
    ]


def filter_by_types(filenames: Iterable[str], types: Sequence[str], types_or: Sequence[str],
                    exclude_types: Sequence[str], tagger: Tagger) -> List[str]:
    """Keep names whose tags include all of types, any of types_or and none of exclude_types."""
    types = frozenset(types)
    types_or = frozenset(types_or)
    exclude_types = frozenset(exclude_types)

    selected = []
    for name in filenames:
        tags = tagger(name)
        if not types <= tags:
            continue
        if types_or and not types_or & tags:
            continue
        if exclude_types & tags:
            continue
        selected.append(name)
    return selected


def list_repository_files(root: Union[str, Path, None] = None) -> List[str]:
    """List the files of the repository rooted at root.

    Uses ``git ls-files`` inside a git work tree; elsewhere falls back to
    walking the directory, skipping ``.git``.
    """
    root = Path(root) if root else Path.cwd()

    try:
        completed = subprocess.run(
            ["git", "ls-files", "-z"],
            cwd=str(root),
            capture_output=True,
            check=True,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
        logger.debug("git ls-files unavailable in %s (%s); walking directory", root, e)
        return _walk_files(root)

    output = completed.stdout.decode("utf-8", errors="surrogateescape")
    return sorted(normalize_filename(name) for name in output.split("\0") if name)


def _walk_files(root: Path) -> List[str]:
    filenames = []
    for dirpath, dirnames, files in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d != ".git")
        for name in files:
            filenames.append(normalize_filename(os.path.relpath(os.path.join(dirpath, name), root)))
    return sorted(filenames)


@dataclass
class HookPlanEntry:
    """Which files one hook would receive.

    Attributes:
        repo: Source of the hook (URL, 'meta' or 'local')
        rev: Pinned revision of the source, if any
        hook_id: Hook identifier
        name: Display name of the hook
        files: Files passed to the hook
        skipped: True if the hook would not run (no files and not always_run)
    """
    repo: str
    rev: Optional[str]
    hook_id: str
    name: str
    files: List[str] = field(default_factory=list)
    skipped: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "repo": self.repo,
            "rev": self.rev,
            "hook_id": self.hook_id,
            "name": self.name,
            "files": list(self.files),
            "file_count": len(self.files),
            "skipped": self.skipped,
        }


@dataclass
class MetaHookResult:
    """Outcome of one meta hook.

    Attributes:
        hook_id: Meta hook identifier
        passed: True if the check succeeded
        output: Lines printed by the hook
        ran: False when fail-fast stopped the run before this hook
    """
    hook_id: str
    passed: bool = True
    output: List[str] = field(default_factory=list)
    ran: bool = True

    @property
    def status(self) -> str:
        if not self.ran:
            return "not-run"
        return "passed" if self.passed else "failed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hook_id": self.hook_id,
            "status": self.status,
            "passed": self.passed,
            "ran": self.ran,
            "output": list(self.output),
        }


class HookSelector:
    """Select files for the hooks of a configuration.

    Args:
        config: Loaded hook configuration
        root: Repository root that filenames are relative to
        tagger: Callable returning the tags of a filename; defaults to a
            FileTagger rooted at root
    """

    def __init__(self, config: PrecommitConfig, root: Union[str, Path, None] = None,
                 tagger: Optional[Tagger] = None):
        self.config = config
        self.root = Path(root) if root else Path.cwd()
        self.tagger = tagger or FileTagger(self.root)

    def existing_files(self, filenames: Iterable[str]) -> List[str]:
        """Normalize names and drop those that do not exist under root."""
        names = (normalize_filename(name) for name in filenames)
        return [name for name in names if os.path.lexists(self.root / name)]

    def global_files(self, filenames: Iterable[str]) -> List[str]:
        """Apply the configuration's top-level files/exclude patterns."""
        return filter_by_include_exclude(filenames, self.config.files_pattern, self.config.exclude_pattern)

    def files_for_hook(self, hook: HookEntry, filenames: Iterable[str]) -> List[str]:
        """Files the hook would receive out of filenames."""
        names = self.global_files(filenames)
        names = filter_by_types(names, hook.types, hook.types_or, hook.exclude_types, self.tagger)
        return filter_by_include_exclude(names, hook.files_pattern, hook.exclude_pattern)

    def plan(self, filenames: Iterable[str], hook_ids: Optional[Sequence[str]] = None) -> List[HookPlanEntry]:
        """Build the file plan of every hook, in configuration order.

        Args:
            filenames: Candidate files, relative to root
            hook_ids: Only plan hooks whose id or alias is listed
        """
        names = self.existing_files(filenames)
        entries = []
        for repo, hook in self.config.iter_hooks():
            if hook_ids and not any(hook.matches(hook_id) for hook_id in hook_ids):
                continue
            files = self.files_for_hook(hook, names)
            entries.append(HookPlanEntry(
                repo=repo.repo,
                rev=repo.rev,
                hook_id=hook.id,
                name=hook.display_name,
                files=files,
                skipped=not files and not hook.always_run,
            ))
        logger.debug("Planned %d hooks over %d files", len(entries), len(names))
        return entries

    def run_meta_hooks(self, filenames: Iterable[str]) -> List[MetaHookResult]:
        """Run the configured meta hooks in order.

        With ``fail_fast`` set, the first failing hook stops the run and the
        remaining meta hooks are reported as not run.
        """
        names = self.existing_files(filenames)
        results: List[MetaHookResult] = []
        stopped = False

        for repo in self.config.repos_of_kind(RepoKind.META):
            for hook in repo.hooks:
                if stopped:
                    results.append(MetaHookResult(hook_id=hook.id, ran=False))
                    continue

                result = self._run_meta_hook(hook, names)
                results.append(result)
                logger.info("Meta hook %s %s", hook.id, result.status)

                if not result.passed and self.config.fail_fast:
                    logger.info("fail_fast set; stopping after %s", hook.id)
                    stopped = True

        return results

    def _run_meta_hook(self, hook: HookEntry, filenames: List[str]) -> MetaHookResult:
        if hook.id == MetaHookId.IDENTITY.value:
            return MetaHookResult(hook_id=hook.id, output=self.files_for_hook(hook, filenames))

        if hook.id == MetaHookId.CHECK_HOOKS_APPLY.value:
            output = self.check_hooks_apply(filenames)
        elif hook.id == MetaHookId.CHECK_USELESS_EXCLUDES.value:
            output = self.check_useless_excludes(filenames)
        else:
            output = [f"{hook.id} is not a meta hook"]

        return MetaHookResult(hook_id=hook.id, passed=not output, output=output)

    def check_hooks_apply(self, filenames: Iterable[str]) -> List[str]:
        """Report non-meta hooks that would receive no file."""
        names = list(filenames)
        problems = []
        for repo, hook in self.config.iter_hooks():
            if repo.kind is RepoKind.META or hook.always_run:
                continue
            if not self.files_for_hook(hook, names):
                problems.append(f"{hook.id} does not apply to this repository")
        return problems

    def check_useless_excludes(self, filenames: Iterable[str]) -> List[str]:
        """Report exclude patterns that match no file."""
        names = list(filenames)
        problems = []

        if not _exclude_matches_any(names, "", self.config.exclude):
            problems.append(f"The global exclude pattern {self.config.exclude!r} does not match any files")

        candidates = self.global_files(names)
        for repo, hook in self.config.iter_hooks():
            if repo.kind is RepoKind.META:
                continue
            typed = filter_by_types(candidates, hook.types, hook.types_or, hook.exclude_types, self.tagger)
            if not _exclude_matches_any(typed, hook.files, hook.exclude):
                problems.append(f"The exclude pattern {hook.exclude!r} for {hook.id} does not match any files")

        return problems


def _exclude_matches_any(filenames: Iterable[str], include: str, exclude: str) -> bool:
    if exclude == DEFAULT_EXCLUDE:
        return True
    include_re = compile_pattern(include, "files")
    exclude_re = compile_pattern(exclude, "exclude")
    return any(include_re.search(name) and exclude_re.search(name) for name in filenames)
