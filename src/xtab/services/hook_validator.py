"""Hook configuration validation service.

Model construction stops at the first schema violation. The HookValidator
instead walks a raw configuration mapping and reports every problem it
finds, so a user can fix a file in one pass.

The HookValidator provides:
- Top-level key, flag and regex validation
- Repo entry validation (source, pinned revision, hook list)
- Hook entry validation (schema, meta hook ids, local hook fields, type tags)
- Cross-entry checks (duplicate hook ids)
"""

import logging
import re
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from ..models.hook_config import HookEntry, REPO_ALLOWED_FIELDS
from ..models.precommit_config import TOP_LEVEL_FIELDS, PrecommitConfig
from ..models.validation import ValidationResult
from ..types.enums import MetaHookId, RepoKind
from .file_tags import ALL_TAGS

logger = logging.getLogger(__name__)


class HookValidator:
    """Validation service for hook configuration files."""

    # Branch-like revisions move over time; a pinned rev is a tag or a commit
    MUTABLE_REVS = frozenset({"master", "main", "HEAD", "head", "develop", "trunk", "latest", "stable"})

    LOCAL_REQUIRED_FIELDS = ("name", "entry", "language")

    def validate_raw(self, data: Any) -> ValidationResult:
        """Validate a parsed YAML document and collect every problem.

        Args:
            data: Output of yaml.safe_load for a configuration file

        Returns:
            ValidationResult covering the whole document
        """
        result = ValidationResult(is_valid=True)

        if not isinstance(data, dict):
            result.add_error(
                field_name="<document>",
                error_code="INVALID_DOCUMENT",
                message=f"Configuration must be a mapping, got {type(data).__name__}",
                suggested_fix="Start the file with 'repos:'"
            )
            return result

        for key in sorted(set(data.keys()) - TOP_LEVEL_FIELDS, key=str):
            result.add_error(
                field_name=str(key),
                error_code="UNEXPECTED_KEY",
                message=f"Unexpected top-level key: {key}",
                suggested_fix=f"Use one of: {', '.join(sorted(TOP_LEVEL_FIELDS))}"
            )

        if "fail_fast" in data and not isinstance(data["fail_fast"], bool):
            result.add_error(
                field_name="fail_fast",
                error_code="INVALID_FAIL_FAST",
                message=f"fail_fast must be a boolean, got {type(data['fail_fast']).__name__}",
                suggested_fix="Use 'fail_fast: true' or 'fail_fast: false'"
            )

        for field_name in ("files", "exclude"):
            if field_name in data:
                result.merge(self.validate_pattern(data[field_name], field_name))

        if "repos" not in data:
            result.add_error(
                field_name="repos",
                error_code="MISSING_REPOS",
                message="Missing required field: repos",
                suggested_fix="Add a 'repos:' list"
            )
            return result

        repos = data["repos"]
        if not isinstance(repos, list):
            result.add_error(
                field_name="repos",
                error_code="INVALID_REPOS",
                message=f"repos must be a list, got {type(repos).__name__}"
            )
            return result

        if not repos:
            result.add_warning(
                field_name="repos",
                warning_code="EMPTY_REPOS",
                message="No repos configured; no hooks will run"
            )

        parsed_hooks: List[HookEntry] = []
        for index, repo_data in enumerate(repos):
            repo_result, hooks = self._validate_repo_dict(repo_data)
            result.merge(repo_result, prefix=f"repos[{index}].")
            parsed_hooks.extend(hooks)

        self._check_duplicate_ids(parsed_hooks, result)

        if not result.has_errors() and not result.has_warnings():
            result.add_suggestion("Configuration looks good!")

        logger.debug("Validated raw configuration: %d errors, %d warnings",
                     len(result.errors), len(result.warnings))
        return result

    def validate_config(self, config: PrecommitConfig) -> ValidationResult:
        """Run the semantic checks on an already-built configuration.

        Structural rules hold by construction, so only the checks that
        models do not enforce are repeated here.
        """
        result = ValidationResult(is_valid=True)

        for repo_index, repo in enumerate(config.repos):
            prefix = f"repos[{repo_index}]."
            result.merge(self.validate_rev(repo.rev, repo.kind), prefix=prefix)
            for hook_index, hook in enumerate(repo.hooks):
                result.merge(self.validate_hook(hook, repo.kind),
                             prefix=f"{prefix}hooks[{hook_index}].")

        self._check_duplicate_ids([hook for _, hook in config.iter_hooks()], result)

        if not result.has_errors() and not result.has_warnings():
            result.add_suggestion("Configuration looks good!")
        return result

    def validate_pattern(self, pattern: Any, field_name: str) -> ValidationResult:
        """Validate a files/exclude regular expression."""
        result = ValidationResult(is_valid=True)

        if not isinstance(pattern, str):
            result.add_error(
                field_name=field_name,
                error_code="INVALID_PATTERN_TYPE",
                message=f"{field_name} must be a string, got {type(pattern).__name__}",
                suggested_fix="Quote the regular expression"
            )
            return result

        try:
            re.compile(pattern)
        except re.error as e:
            result.add_error(
                field_name=field_name,
                error_code="INVALID_PATTERN",
                message=f"{field_name} is not a valid regular expression: {e}",
                suggested_fix="Check brackets, groups and escapes in the pattern"
            )

        return result

    def validate_rev(self, rev: Any, kind: RepoKind) -> ValidationResult:
        """Validate a repo's revision against its kind."""
        result = ValidationResult(is_valid=True)

        if not kind.requires_rev():
            if rev is not None:
                result.add_error(
                    field_name="rev",
                    error_code="UNEXPECTED_REV",
                    message=f"'{kind.value}' repos do not accept a rev",
                    suggested_fix="Remove the rev line"
                )
            return result

        if rev is None:
            result.add_error(
                field_name="rev",
                error_code="MISSING_REV",
                message="Remote repos require a pinned rev",
                suggested_fix="Pin a release tag or commit, e.g. 'rev: v1.2.3'"
            )
        elif not isinstance(rev, str):
            result.add_error(
                field_name="rev",
                error_code="INVALID_REV",
                message=f"rev must be a string, got {type(rev).__name__} ({rev!r})",
                suggested_fix=f"Quote the revision: rev: '{rev}'"
            )
        elif not rev.strip():
            result.add_error(
                field_name="rev",
                error_code="MISSING_REV",
                message="rev cannot be empty",
                suggested_fix="Pin a release tag or commit, e.g. 'rev: v1.2.3'"
            )
        elif rev.strip() in self.MUTABLE_REVS:
            result.add_warning(
                field_name="rev",
                warning_code="UNPINNED_REV",
                message=f"rev '{rev}' is a branch name and is not reproducible"
            )
            result.add_suggestion("Pin hook repos to a release tag or a full commit hash")

        return result

    def validate_hook(self, hook: HookEntry, kind: RepoKind) -> ValidationResult:
        """Semantic validation of a single hook entry."""
        result = ValidationResult(is_valid=True)

        if kind is RepoKind.META:
            if not MetaHookId.is_meta_hook(hook.id):
                result.add_error(
                    field_name="id",
                    error_code="UNKNOWN_META_HOOK",
                    message=f"'{hook.id}' is not a meta hook",
                    suggested_fix=f"Use one of: {', '.join(MetaHookId.get_all_ids())}"
                )
            if hook.args:
                result.add_warning(
                    field_name="args",
                    warning_code="META_HOOK_ARGS",
                    message=f"Meta hook '{hook.id}' ignores args"
                )

        elif kind is RepoKind.LOCAL:
            for field_name in self.LOCAL_REQUIRED_FIELDS:
                if not getattr(hook, field_name):
                    result.add_error(
                        field_name=field_name,
                        error_code="MISSING_LOCAL_FIELD",
                        message=f"Local hook '{hook.id}' requires '{field_name}'",
                        suggested_fix="Local hooks must define name, entry and language"
                    )

        for field_name in ("types", "types_or", "exclude_types"):
            for tag in getattr(hook, field_name):
                if tag not in ALL_TAGS:
                    result.add_error(
                        field_name=field_name,
                        error_code="UNKNOWN_TYPE_TAG",
                        message=f"Unknown type tag '{tag}' in hook '{hook.id}'",
                        suggested_fix="Use tags such as file, text, yaml, markdown, python"
                    )

        conflicting = set(hook.types) & set(hook.exclude_types)
        if conflicting:
            result.add_warning(
                field_name="exclude_types",
                warning_code="CONFLICTING_TYPES",
                message=f"Hook '{hook.id}' both requires and excludes {sorted(conflicting)}; it never runs"
            )

        return result

    def _validate_repo_dict(self, data: Any) -> Tuple[ValidationResult, List[HookEntry]]:
        """Validate one raw repo entry; returns the result and the hooks that parsed."""
        result = ValidationResult(is_valid=True)
        hooks: List[HookEntry] = []

        if not isinstance(data, dict):
            result.add_error(
                field_name="<repo>",
                error_code="INVALID_REPO",
                message=f"Repo entry must be a mapping, got {type(data).__name__}"
            )
            return result, hooks

        repo = data.get("repo")
        if not isinstance(repo, str) or not repo.strip():
            result.add_error(
                field_name="repo",
                error_code="MISSING_REPO",
                message="Each repo entry needs a 'repo' URL or 'meta' / 'local'",
                suggested_fix="Add 'repo: <url>'"
            )
            kind = RepoKind.REMOTE
        else:
            kind = RepoKind.from_repo(repo)

        for key in sorted(set(data.keys()) - REPO_ALLOWED_FIELDS, key=str):
            result.add_error(
                field_name=str(key),
                error_code="UNEXPECTED_KEY",
                message=f"Unexpected key in repo entry: {key}",
                suggested_fix=f"Use one of: {', '.join(sorted(REPO_ALLOWED_FIELDS))}"
            )

        result.merge(self.validate_rev(data.get("rev"), kind))

        raw_hooks = data.get("hooks")
        if raw_hooks is None:
            result.add_error(
                field_name="hooks",
                error_code="MISSING_HOOKS",
                message="Missing required field: hooks"
            )
            return result, hooks
        if not isinstance(raw_hooks, list):
            result.add_error(
                field_name="hooks",
                error_code="INVALID_HOOKS",
                message=f"hooks must be a list, got {type(raw_hooks).__name__}"
            )
            return result, hooks
        if not raw_hooks:
            result.add_error(
                field_name="hooks",
                error_code="EMPTY_HOOKS",
                message="A repo entry must list at least one hook",
                suggested_fix="Add a hook or remove the repo entry"
            )

        for index, hook_data in enumerate(raw_hooks):
            hook_result, hook = self._validate_hook_dict(hook_data, kind)
            result.merge(hook_result, prefix=f"hooks[{index}].")
            if hook is not None:
                hooks.append(hook)

        return result, hooks

    def _validate_hook_dict(self, data: Any, kind: RepoKind) -> Tuple[ValidationResult, Optional[HookEntry]]:
        result = ValidationResult(is_valid=True)
        try:
            hook = HookEntry.from_dict(data)
        except (ValueError, TypeError) as e:
            result.add_error(
                field_name="<hook>",
                error_code="INVALID_HOOK",
                message=str(e),
                suggested_fix="Check the hook keys and their types"
            )
            return result, None

        result.merge(self.validate_hook(hook, kind))
        return result, hook

    def _check_duplicate_ids(self, hooks: List[HookEntry], result: ValidationResult) -> None:
        """Warn about hook ids that appear more than once without an alias."""
        counts: Dict[str, int] = Counter(hook.id for hook in hooks)
        for hook_id, count in counts.items():
            if count < 2:
                continue
            unaliased = [hook for hook in hooks if hook.id == hook_id and not hook.alias]
            if len(unaliased) > 1:
                result.add_warning(
                    field_name=hook_id,
                    warning_code="DUPLICATE_HOOK_ID",
                    message=f"Hook '{hook_id}' is configured {count} times without an alias"
                )
                result.add_suggestion("Give repeated hooks an 'alias' so they can be selected individually")
