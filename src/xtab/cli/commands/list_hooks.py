"""xt_listhooks command.

Lists the hooks of a configuration in file order, with their source repo,
pinned revision, arguments and file filters. ``--repo`` keeps only hooks
whose repo contains the given text.
"""

import logging
import sys
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from ...models.hook_config import DEFAULT_EXCLUDE
from ...models.precommit_config import PrecommitConfig
from ...settings.loader import find_and_load_config
from ...utils.formatters import create_formatter

logger = logging.getLogger(__name__)


def execute_list_hooks_command(config: Optional[str] = None, repo_filter: Optional[str] = None,
                               format_type: str = "table") -> int:
    """List configured hooks.

    Args:
        config: Explicit configuration path; discovered when None
        repo_filter: Only list hooks whose repo contains this text
        format_type: Output format (json, yaml, table, quiet)

    Returns:
        0 on success
    """
    precommit_config = find_and_load_config(config)
    hooks = build_hook_rows(precommit_config, repo_filter)

    by_repo: Dict[str, int] = OrderedDict()
    for hook in hooks:
        by_repo[hook["repo"]] = by_repo.get(hook["repo"], 0) + 1

    logger.debug("Listing %d of %d hooks from %s", len(hooks), len(precommit_config),
                 precommit_config.source_path)

    formatter = create_formatter(format_type, sys.stdout)
    formatter.write(formatter.format_hook_list(hooks, len(hooks), by_repo))
    return 0


def build_hook_rows(config: PrecommitConfig, repo_filter: Optional[str] = None) -> List[Dict[str, Any]]:
    """One display row per hook, in configuration order."""
    rows = []
    for repo, hook in config.iter_hooks():
        if repo_filter and repo_filter not in repo.repo:
            continue
        row = {
            "repo": repo.repo,
            "rev": repo.rev,
            "kind": repo.kind.value,
            "id": hook.id,
            "name": hook.display_name,
            "args": list(hook.args),
            "files": hook.files,
            "types": list(hook.types),
        }
        if hook.exclude != DEFAULT_EXCLUDE:
            row["exclude"] = hook.exclude
        rows.append(row)
    return rows
