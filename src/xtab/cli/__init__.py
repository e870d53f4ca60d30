"""CLI package for xtab.

Key modules:
- argument_parser: argparse parser with one subcommand per command
- main: dispatcher and console script entry points
- commands/: command implementations

Available commands:
- xt_crosstab: Pivot a normalized table into a cross-table CSV
- xt_validatehooks: Validate a hook configuration file
- xt_listhooks: List configured hooks
- xt_planhooks: Show which files each hook would receive
- xt_checkhooks: Run the meta hooks of a configuration
"""

from .argument_parser import create_parser, parse_args

__all__ = [
    "parse_args",
    "create_parser"
]
