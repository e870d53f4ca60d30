"""xt_checkhooks command.

Runs the meta hooks configured under ``repo: meta`` against every file of
the repository. Exit code 1 if any of them fails.
"""

import argparse
import logging
import sys
from pathlib import Path

from ...services.hook_selector import HookSelector, list_repository_files
from ...settings.loader import find_and_load_config
from ...types.enums import RepoKind
from ...utils.formatters import create_formatter
from ...utils.logging import log_operation

logger = logging.getLogger(__name__)


def execute_check_hooks(args: argparse.Namespace) -> int:
    """Run the meta hooks.

    Returns:
        0 if every meta hook passed (or none is configured), 1 otherwise
    """
    config = find_and_load_config(args.config)
    root = Path(args.root) if args.root else config.source_path.parent
    formatter = create_formatter(args.format, sys.stdout)

    if not config.repos_of_kind(RepoKind.META):
        logger.info("No meta hooks configured in %s", config.source_path)
        formatter.write(formatter.format_meta_results([]))
        return 0

    with log_operation("meta hooks", logger):
        results = HookSelector(config, root).run_meta_hooks(list_repository_files(root))

    formatter.write(formatter.format_meta_results([result.to_dict() for result in results]))
    return 1 if any(not result.passed for result in results) else 0
