"""Services for xtab.

- crosstab: pivot normalized tables with pandas
- hook_validator: report every problem of a hook configuration
- hook_selector: select files per hook and run the meta hooks
- file_tags: file type tags for the types filters
"""

from .crosstab import Crosstab, crosstab
from .file_tags import FileTagger, tags_from_path
from .hook_selector import HookSelector, list_repository_files
from .hook_validator import HookValidator

__all__ = [
    "Crosstab",
    "FileTagger",
    "HookSelector",
    "HookValidator",
    "crosstab",
    "list_repository_files",
    "tags_from_path",
]
