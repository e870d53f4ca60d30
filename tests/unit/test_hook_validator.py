"""Unit tests for HookValidator.

The validator reports every problem of a raw configuration mapping with a
stable error or warning code and a dotted field path.
"""

import pytest

from xtab.models.hook_config import HookEntry
from xtab.models.precommit_config import PrecommitConfig
from xtab.services.hook_validator import HookValidator
from xtab.types.enums import RepoKind


@pytest.fixture
def validator():
    return HookValidator()


class TestValidateRaw:
    """Whole-document validation."""

    def test_valid_configuration(self, validator, sample_config_data):
        result = validator.validate_raw(sample_config_data)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []
        assert "Configuration looks good!" in result.suggestions

    def test_document_must_be_mapping(self, validator):
        result = validator.validate_raw(["repos"])
        assert result.error_codes() == ["INVALID_DOCUMENT"]

    def test_missing_repos(self, validator):
        result = validator.validate_raw({"fail_fast": True})
        assert "MISSING_REPOS" in result.error_codes()

    def test_repos_must_be_list(self, validator):
        result = validator.validate_raw({"repos": {"repo": "meta"}})
        assert result.error_codes() == ["INVALID_REPOS"]

    def test_empty_repos_is_a_warning(self, validator):
        result = validator.validate_raw({"repos": []})
        assert result.is_valid
        assert result.warning_codes() == ["EMPTY_REPOS"]

    def test_unexpected_top_level_key(self, validator, sample_config_data):
        sample_config_data["fail-fast"] = True
        result = validator.validate_raw(sample_config_data)
        assert result.error_codes() == ["UNEXPECTED_KEY"]
        assert result.errors[0].field_name == "fail-fast"

    def test_fail_fast_must_be_boolean(self, validator, sample_config_data):
        sample_config_data["fail_fast"] = "yes"
        result = validator.validate_raw(sample_config_data)
        assert "INVALID_FAIL_FAST" in result.error_codes()

    def test_invalid_global_exclude(self, validator, sample_config_data):
        sample_config_data["exclude"] = "(target/"
        result = validator.validate_raw(sample_config_data)
        assert result.error_codes() == ["INVALID_PATTERN"]
        assert result.errors[0].field_name == "exclude"

    def test_collects_every_problem(self, validator):
        data = {
            "fail_fast": 1,
            "repos": [
                {"repo": "https://github.com/crate-ci/typos", "hooks": [{"id": "typos"}]},
                {"repo": "meta", "rev": "v1", "hooks": [{"id": "not-meta"}]},
                {"repo": "https://github.com/pre-commit/pre-commit-hooks", "rev": "v4.5.0", "hooks": []},
            ],
        }
        result = validator.validate_raw(data)
        fields = [error.field_name for error in result.errors]
        assert not result.is_valid
        assert "fail_fast" in fields
        assert "repos[0].rev" in fields
        assert "repos[1].rev" in fields
        assert "repos[1].hooks[0].id" in fields
        assert "repos[2].hooks" in fields

    def test_missing_rev_error_code(self, validator):
        data = {"repos": [{"repo": "https://github.com/crate-ci/typos", "hooks": [{"id": "typos"}]}]}
        assert validator.validate_raw(data).error_codes() == ["MISSING_REV"]

    def test_rev_on_local_repo(self, validator):
        data = {"repos": [{"repo": "local", "rev": "v1.0.0", "hooks": [
            {"id": "lint", "name": "lint", "entry": "make lint", "language": "system"}
        ]}]}
        assert validator.validate_raw(data).error_codes() == ["UNEXPECTED_REV"]

    def test_invalid_hook_entry(self, validator):
        data = {"repos": [{"repo": "https://github.com/crate-ci/typos", "rev": "v1.19.0",
                           "hooks": [{"id": "typos", "stage": "commit"}]}]}
        result = validator.validate_raw(data)
        assert result.error_codes() == ["INVALID_HOOK"]
        assert result.errors[0].field_name == "repos[0].hooks[0].<hook>"

    def test_repo_entry_must_be_mapping(self, validator):
        result = validator.validate_raw({"repos": ["meta"]})
        assert result.error_codes() == ["INVALID_REPO"]

    def test_missing_hooks(self, validator):
        result = validator.validate_raw({"repos": [{"repo": "meta"}]})
        assert result.error_codes() == ["MISSING_HOOKS"]

    def test_duplicate_hook_ids_warn(self, validator, sample_config_data):
        sample_config_data["repos"][1]["hooks"].append({"id": "check-yaml", "args": ["--unsafe"]})
        result = validator.validate_raw(sample_config_data)
        assert result.is_valid
        assert result.warning_codes() == ["DUPLICATE_HOOK_ID"]

    def test_duplicate_hook_ids_with_alias_are_fine(self, validator, sample_config_data):
        sample_config_data["repos"][1]["hooks"].append({"id": "check-yaml", "alias": "check-yaml-unsafe"})
        result = validator.validate_raw(sample_config_data)
        assert result.warnings == []


class TestValidateRev:

    @pytest.mark.parametrize("rev", ["main", "master", "HEAD"])
    def test_branch_revs_warn(self, validator, rev):
        result = validator.validate_rev(rev, RepoKind.REMOTE)
        assert result.is_valid
        assert result.warning_codes() == ["UNPINNED_REV"]

    def test_tag_is_pinned(self, validator):
        result = validator.validate_rev("v4.5.0", RepoKind.REMOTE)
        assert result.errors == [] and result.warnings == []

    def test_numeric_rev(self, validator):
        result = validator.validate_rev(4.5, RepoKind.REMOTE)
        assert result.error_codes() == ["INVALID_REV"]

    def test_empty_rev(self, validator):
        assert validator.validate_rev("", RepoKind.REMOTE).error_codes() == ["MISSING_REV"]

    def test_meta_without_rev(self, validator):
        assert validator.validate_rev(None, RepoKind.META).is_valid


class TestValidateHook:

    def test_unknown_type_tag(self, validator):
        hook = HookEntry(id="markdownlint", types=["markdwn"])
        result = validator.validate_hook(hook, RepoKind.REMOTE)
        assert result.error_codes() == ["UNKNOWN_TYPE_TAG"]
        assert result.errors[0].field_name == "types"

    def test_known_type_tags(self, validator):
        hook = HookEntry(id="lint", types=["text"], types_or=["python", "yaml", "markdown"])
        assert validator.validate_hook(hook, RepoKind.REMOTE).is_valid

    def test_local_hook_requires_entry_fields(self, validator):
        result = validator.validate_hook(HookEntry(id="pytest", name="pytest"), RepoKind.LOCAL)
        assert result.error_codes() == ["MISSING_LOCAL_FIELD", "MISSING_LOCAL_FIELD"]
        assert [error.field_name for error in result.errors] == ["entry", "language"]

    def test_meta_hook_args_warn(self, validator):
        result = validator.validate_hook(HookEntry(id="identity", args=["-v"]), RepoKind.META)
        assert result.warning_codes() == ["META_HOOK_ARGS"]

    def test_conflicting_types_warn(self, validator):
        hook = HookEntry(id="lint", types=["python"], exclude_types=["python"])
        result = validator.validate_hook(hook, RepoKind.REMOTE)
        assert result.warning_codes() == ["CONFLICTING_TYPES"]


class TestValidatePattern:

    def test_non_string_pattern(self, validator):
        assert validator.validate_pattern(3, "files").error_codes() == ["INVALID_PATTERN_TYPE"]

    def test_valid_pattern(self, validator):
        assert validator.validate_pattern(r".(md|qmd)$", "files").is_valid


class TestValidateConfig:

    def test_built_config_with_unpinned_rev(self, validator, sample_config_data):
        sample_config_data["repos"][1]["rev"] = "main"
        config = PrecommitConfig.from_dict(sample_config_data)
        result = validator.validate_config(config)
        assert result.is_valid
        assert result.warning_codes() == ["UNPINNED_REV"]
        assert result.warnings[0].field_name == "repos[1].rev"

    def test_built_config_is_clean(self, validator, sample_config_data):
        result = validator.validate_config(PrecommitConfig.from_dict(sample_config_data))
        assert result.errors == [] and result.warnings == []
