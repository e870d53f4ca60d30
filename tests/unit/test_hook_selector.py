"""Unit tests for per-hook file selection and the meta hooks."""

from xtab.models.precommit_config import PrecommitConfig
from xtab.services.hook_selector import (
    HookSelector,
    filter_by_include_exclude,
    filter_by_types,
    list_repository_files,
    normalize_filename,
)
from tests.fixtures.sample_data import SAMPLE_LOCAL_REPO, SAMPLE_REPO_FILES

TAGS = {
    "README.md": frozenset({"file", "text", "markdown"}),
    "setup.py": frozenset({"file", "text", "python", "executable"}),
    "logo.png": frozenset({"file", "binary", "image", "png"}),
    "ci.yaml": frozenset({"file", "text", "yaml"}),
}


def fake_tagger(name):
    return TAGS[name]


class TestFilters:

    def test_normalize_filename(self):
        assert normalize_filename("./src/app.py") == "src/app.py"
        assert normalize_filename("docs/guide.md") == "docs/guide.md"

    def test_include_uses_search(self):
        names = ["README.md", "docs/guide.qmd", "src/app.py"]
        assert filter_by_include_exclude(names, ".(md|qmd)$", "^$") == ["README.md", "docs/guide.qmd"]

    def test_exclude_wins(self):
        names = ["vendor/lib.py", "src/app.py"]
        assert filter_by_include_exclude(names, "", "^vendor/") == ["src/app.py"]

    def test_types_all_of(self):
        selected = filter_by_types(TAGS, ["text", "python"], [], [], fake_tagger)
        assert selected == ["setup.py"]

    def test_types_or_any_of(self):
        selected = filter_by_types(TAGS, ["file"], ["markdown", "yaml"], [], fake_tagger)
        assert selected == ["README.md", "ci.yaml"]

    def test_exclude_types_none_of(self):
        selected = filter_by_types(TAGS, ["file"], [], ["binary", "executable"], fake_tagger)
        assert selected == ["README.md", "ci.yaml"]


class TestPlan:

    def test_plan_applies_global_then_hook_filters(self, sample_repo, sample_config_data):
        config = PrecommitConfig.from_dict(sample_config_data)
        selector = HookSelector(config, sample_repo)
        filenames = sorted(SAMPLE_REPO_FILES)
        entries = {entry.hook_id: entry for entry in selector.plan(filenames)}

        assert entries["markdownlint"].files == ["README.md", "docs/guide.qmd"]
        assert entries["check-yaml"].files == [
            "README.md", "config.yaml", "docs/guide.qmd", "src/app.py"
        ]
        assert all("vendor/lib.py" not in entry.files for entry in entries.values())

    def test_hook_without_files_is_skipped(self, sample_repo, sample_config_data):
        sample_config_data["repos"][2]["hooks"][0]["files"] = r"\.rst$"
        config = PrecommitConfig.from_dict(sample_config_data)
        entries = HookSelector(config, sample_repo).plan(["README.md", "src/app.py"])
        markdownlint = [entry for entry in entries if entry.hook_id == "markdownlint"][0]
        assert markdownlint.skipped
        assert markdownlint.files == []

    def test_always_run_is_never_skipped(self, sample_repo, sample_config_data):
        sample_config_data["repos"].append(SAMPLE_LOCAL_REPO)
        config = PrecommitConfig.from_dict(sample_config_data)
        entries = HookSelector(config, sample_repo).plan([])
        assert [entry.hook_id for entry in entries if not entry.skipped] == ["pytest"]

    def test_plan_selected_hooks_and_missing_files(self, sample_repo, sample_config_data):
        config = PrecommitConfig.from_dict(sample_config_data)
        entries = HookSelector(config, sample_repo).plan(["README.md", "gone.md"], hook_ids=["markdownlint"])
        assert len(entries) == 1
        assert entries[0].files == ["README.md"]
        assert entries[0].to_dict()["file_count"] == 1


class TestMetaHooks:

    def test_identity_echoes_files(self, sample_repo, sample_config_data):
        config = PrecommitConfig.from_dict(sample_config_data)
        results = HookSelector(config, sample_repo).run_meta_hooks(["README.md", "vendor/lib.py"])
        identity = results[0]
        assert identity.hook_id == "identity"
        assert identity.passed
        assert identity.output == ["README.md"]

    def test_check_hooks_apply_reports_idle_hooks(self, sample_repo, sample_config_data):
        config = PrecommitConfig.from_dict(sample_config_data)
        results = HookSelector(config, sample_repo).run_meta_hooks(["src/app.py"])
        check = results[1]
        assert check.status == "failed"
        assert check.output == ["markdownlint does not apply to this repository"]

    def test_check_useless_excludes(self, sample_repo):
        config = PrecommitConfig.from_dict({
            "exclude": "^build/",
            "repos": [
                {"repo": "meta", "hooks": [{"id": "check-useless-excludes"}]},
                {"repo": "https://github.com/pre-commit/pre-commit-hooks", "rev": "v4.5.0", "hooks": [
                    {"id": "check-yaml", "exclude": "^vendor/"},
                    {"id": "end-of-file-fixer", "exclude": r"\.lock$"},
                ]},
            ],
        })
        filenames = sorted(SAMPLE_REPO_FILES)
        result = HookSelector(config, sample_repo).run_meta_hooks(filenames)[0]
        assert not result.passed
        assert result.output == [
            "The global exclude pattern '^build/' does not match any files",
            "The exclude pattern '\\\\.lock$' for end-of-file-fixer does not match any files",
        ]

    def test_fail_fast_stops_remaining_meta_hooks(self, sample_repo, sample_config_data):
        sample_config_data["fail_fast"] = True
        sample_config_data["repos"][0]["hooks"] = [
            {"id": "check-hooks-apply"},
            {"id": "identity"},
        ]
        config = PrecommitConfig.from_dict(sample_config_data)
        results = HookSelector(config, sample_repo).run_meta_hooks(["src/app.py"])
        assert [result.status for result in results] == ["failed", "not-run"]
        assert results[1].to_dict()["ran"] is False

    def test_without_fail_fast_every_meta_hook_runs(self, sample_repo, sample_config_data):
        sample_config_data["repos"][0]["hooks"] = [
            {"id": "check-hooks-apply"},
            {"id": "identity"},
        ]
        config = PrecommitConfig.from_dict(sample_config_data)
        results = HookSelector(config, sample_repo).run_meta_hooks(["src/app.py"])
        assert [result.status for result in results] == ["failed", "passed"]


class TestListRepositoryFiles:

    def test_walk_fallback_outside_git(self, sample_repo, monkeypatch):
        def no_git(*args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr("xtab.services.hook_selector.subprocess.run", no_git)
        (sample_repo / ".git").mkdir()
        (sample_repo / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        assert list_repository_files(sample_repo) == [
            "README.md", "config.yaml", "docs/guide.qmd", "src/app.py", "vendor/lib.py"
        ]
