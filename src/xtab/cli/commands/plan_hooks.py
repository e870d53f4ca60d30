"""xt_planhooks command.

Shows, for each configured hook, the files it would receive. Without
explicit filenames every file of the repository is considered.
"""

import argparse
import logging
import sys
from pathlib import Path

from ...services.hook_selector import HookSelector, list_repository_files
from ...settings.loader import find_and_load_config
from ...utils.formatters import create_formatter

logger = logging.getLogger(__name__)


def execute_plan_hooks(args: argparse.Namespace) -> int:
    """Print the file plan of every hook.

    Returns:
        0 on success
    """
    config = find_and_load_config(args.config)
    root = Path(args.root) if args.root else config.source_path.parent

    filenames = args.filenames or list_repository_files(root)
    selector = HookSelector(config, root)
    entries = selector.plan(filenames, hook_ids=args.hooks)

    logger.debug("Planned %d hooks over %d candidate files in %s", len(entries), len(filenames), root)

    formatter = create_formatter(args.format, sys.stdout)
    formatter.write(formatter.format_hook_plan([entry.to_dict() for entry in entries], len(filenames)))
    return 0
