"""Unit tests for file type tags."""

import os

import pytest

from xtab.services.file_tags import (
    ALL_TAGS,
    SNIFF_SIZE,
    FileTagger,
    is_text_content,
    tags_from_filename,
    tags_from_path,
)


class TestTagsFromFilename:

    @pytest.mark.parametrize("filename,expected", [
        ("README.md", {"text", "markdown"}),
        ("docs/guide.qmd", {"text", "markdown"}),
        (".pre-commit-config.yaml", {"text", "yaml"}),
        ("ci.yml", {"text", "yaml"}),
        ("src/main.rs", {"text", "rust"}),
        ("Cargo.lock", {"text", "toml"}),
        ("logo.PNG", {"binary", "image", "png"}),
    ])
    def test_known_names(self, filename, expected):
        assert tags_from_filename(filename) == expected

    def test_unknown_extension(self):
        assert tags_from_filename("data.xyz") == set()
        assert tags_from_filename("noext") == set()


class TestTagsFromPath:

    def test_regular_text_file(self, tmp_path):
        path = tmp_path / "notes"
        path.write_text("plain words\n")
        tags = tags_from_path(path)
        assert {"file", "text", "non-executable"} <= tags
        assert "binary" not in tags

    def test_binary_content(self, tmp_path):
        path = tmp_path / "blob"
        path.write_bytes(b"\x00\x01\x02")
        assert "binary" in tags_from_path(path)

    def test_character_cut_at_sniff_boundary_is_text(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_bytes(b"a" * (SNIFF_SIZE - 1) + "\u20ac".encode("utf-8"))
        assert is_text_content(path)

    def test_invalid_byte_at_sniff_boundary_is_binary(self, tmp_path):
        path = tmp_path / "blob.dat"
        path.write_bytes(b"a" * (SNIFF_SIZE - 1) + b"\xff" + b"a" * 10)
        assert not is_text_content(path)

    def test_extension_decides_encoding(self, tmp_path):
        path = tmp_path / "script.py"
        path.write_text("print(1)\n")
        tags = tags_from_path(path)
        assert {"file", "text", "python"} <= tags

    @pytest.mark.skipif(os.name == "nt", reason="POSIX file modes")
    def test_executable(self, tmp_path):
        path = tmp_path / "run.sh"
        path.write_text("#!/bin/sh\n")
        path.chmod(0o755)
        assert "executable" in tags_from_path(path)

    def test_directory(self, tmp_path):
        assert tags_from_path(tmp_path) == frozenset({"directory"})

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_symlink(self, tmp_path):
        target = tmp_path / "target.txt"
        target.write_text("x")
        link = tmp_path / "link.txt"
        link.symlink_to(target)
        assert tags_from_path(link) == frozenset({"symlink"})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            tags_from_path(tmp_path / "missing")

    def test_every_tag_is_known(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_text("<p></p>")
        assert tags_from_path(path) <= ALL_TAGS


class TestFileTagger:

    def test_caches_results(self, tmp_path):
        path = tmp_path / "a.md"
        path.write_text("# a\n")
        tagger = FileTagger(tmp_path)
        first = tagger("a.md")
        path.unlink()
        assert tagger("a.md") == first
