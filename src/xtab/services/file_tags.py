"""File type tags used by the ``types`` / ``types_or`` / ``exclude_types`` filters.

A file's tags describe its kind (file, directory, symlink), mode
(executable, non-executable), encoding (text, binary) and format
(yaml, markdown, python, ...). A hook applies to a file only if the
file's tags satisfy the hook's type filters.
"""

import os
from pathlib import Path
from typing import Dict, FrozenSet, Set, Union

KIND_TAGS = frozenset({"file", "directory", "symlink"})
MODE_TAGS = frozenset({"executable", "non-executable"})
ENCODING_TAGS = frozenset({"text", "binary"})

EXTENSION_TAGS: Dict[str, FrozenSet[str]] = {
    "bash": frozenset({"text", "shell", "bash"}),
    "cfg": frozenset({"text", "ini"}),
    "css": frozenset({"text", "css"}),
    "csv": frozenset({"text", "csv"}),
    "gif": frozenset({"binary", "image", "gif"}),
    "html": frozenset({"text", "html"}),
    "ini": frozenset({"text", "ini"}),
    "jpeg": frozenset({"binary", "image", "jpeg"}),
    "jpg": frozenset({"binary", "image", "jpeg"}),
    "js": frozenset({"text", "javascript"}),
    "json": frozenset({"text", "json"}),
    "lock": frozenset({"text"}),
    "md": frozenset({"text", "markdown"}),
    "png": frozenset({"binary", "image", "png"}),
    "py": frozenset({"text", "python"}),
    "pyi": frozenset({"text", "pyi"}),
    "qmd": frozenset({"text", "markdown"}),
    "rs": frozenset({"text", "rust"}),
    "rst": frozenset({"text", "rst"}),
    "sh": frozenset({"text", "shell", "sh"}),
    "svg": frozenset({"text", "image", "svg", "xml"}),
    "toml": frozenset({"text", "toml"}),
    "tsv": frozenset({"text", "tsv"}),
    "txt": frozenset({"text", "plain-text"}),
    "xml": frozenset({"text", "xml"}),
    "yaml": frozenset({"text", "yaml"}),
    "yml": frozenset({"text", "yaml"}),
    "zip": frozenset({"binary", "zip"}),
}

NAME_TAGS: Dict[str, FrozenSet[str]] = {
    ".gitignore": frozenset({"text", "gitignore"}),
    ".gitattributes": frozenset({"text", "gitattributes"}),
    "Cargo.lock": frozenset({"text", "toml"}),
    "Dockerfile": frozenset({"text", "dockerfile"}),
    "LICENSE": frozenset({"text", "plain-text"}),
    "Makefile": frozenset({"text", "makefile"}),
}

ALL_TAGS: FrozenSet[str] = frozenset(
    KIND_TAGS | MODE_TAGS | ENCODING_TAGS
    | {tag for tags in EXTENSION_TAGS.values() for tag in tags}
    | {tag for tags in NAME_TAGS.values() for tag in tags}
)

# bytes inspected when sniffing text vs binary
SNIFF_SIZE = 1024


def tags_from_filename(filename: str) -> Set[str]:
    """Tags implied by a file's name or extension alone."""
    basename = os.path.basename(filename)
    if basename in NAME_TAGS:
        return set(NAME_TAGS[basename])

    _, _, ext = basename.rpartition(".")
    if ext != basename and ext.lower() in EXTENSION_TAGS:
        return set(EXTENSION_TAGS[ext.lower()])
    return set()


def is_text_content(path: Union[str, Path]) -> bool:
    """Sniff the start of a file; NUL bytes or invalid UTF-8 mean binary."""
    with open(path, "rb") as f:
        chunk = f.read(SNIFF_SIZE)
    if b"\x00" in chunk:
        return False
    try:
        chunk.decode("utf-8")
    except UnicodeDecodeError as e:
        # a multi-byte character cut at the sniff boundary is still text
        return len(chunk) == SNIFF_SIZE and e.reason == "unexpected end of data"
    return True


def tags_from_path(path: Union[str, Path]) -> FrozenSet[str]:
    """All tags describing the file at path.

    Raises:
        FileNotFoundError: If path does not exist
    """
    path = str(path)
    if not os.path.lexists(path):
        raise FileNotFoundError(path)

    if os.path.islink(path):
        return frozenset({"symlink"})
    if os.path.isdir(path):
        return frozenset({"directory"})

    tags = {"file"}
    tags.add("executable" if os.access(path, os.X_OK) else "non-executable")

    by_name = tags_from_filename(path)
    tags |= by_name
    if not by_name & ENCODING_TAGS:
        tags.add("text" if is_text_content(path) else "binary")

    return frozenset(tags)


class FileTagger:
    """Caching tagger rooted at a directory.

    Filenames are resolved against root; results are memoized per name so
    each file is sniffed at most once per run.
    """

    def __init__(self, root: Union[str, Path, None] = None):
        self.root = Path(root) if root else Path.cwd()
        self._cache: Dict[str, FrozenSet[str]] = {}

    def __call__(self, filename: str) -> FrozenSet[str]:
        if filename not in self._cache:
            self._cache[filename] = tags_from_path(self.root / filename)
        return self._cache[filename]
