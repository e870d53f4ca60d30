"""CLI argument parser for xtab commands.

This module builds one argparse parser with a subcommand per xtab command.
The dispatcher in cli.main prefixes the command name with ``xt_`` before
parsing, so ``xtab crosstab ...`` and ``xt_crosstab ...`` parse the same.

Supported commands:
- xt_crosstab: Pivot a normalized table into a cross-table CSV
- xt_validatehooks: Validate a hook configuration file
- xt_listhooks: List configured hooks
- xt_planhooks: Show which files each hook would receive
- xt_checkhooks: Run the meta hooks of a configuration

Usage:
    from xtab.cli.argument_parser import parse_args

    args = parse_args(["xt_crosstab", "-i", "in.csv", "-o", "out.csv",
                       "-r", "region", "-c", "year", "-v", "sales"])
    print(args.subcommand, args.row)
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .. import __version__
from ..types.enums import HeaderFormat, OutputFormat

OUTPUT_FORMATS = OutputFormat.get_all_formats()
HEADER_FORMATS = [fmt.value for fmt in HeaderFormat]


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the arguments shared by every hook command."""
    parser.add_argument(
        "--config",
        help="Path of the hook configuration file (default: discover .pre-commit-config.yaml)"
    )

    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=OutputFormat.TABLE.value,
        help="Output format (default: table)"
    )


def _create_crosstab_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for xt_crosstab command."""
    parser = subparsers.add_parser(
        "xt_crosstab",
        help="Pivot a normalized table into a cross-table CSV",
        description="Read a normalized table and write it in wide form. Each of "
                    "--row, --col and --value may be repeated and takes a "
                    "comma-separated list of column names."
    )

    parser.add_argument(
        "-i", "--infile",
        required=True,
        help="Input file; its first line holds the column names"
    )

    parser.add_argument(
        "-o", "--outfile",
        required=True,
        help="Output file, must end with .csv"
    )

    parser.add_argument(
        "-r", "--row",
        action="append",
        required=True,
        metavar="COLUMNS",
        help="Row header column(s)"
    )

    parser.add_argument(
        "-c", "--col",
        action="append",
        required=True,
        metavar="COLUMNS",
        help="Column header column(s)"
    )

    parser.add_argument(
        "-v", "--value",
        action="append",
        required=True,
        metavar="COLUMNS",
        help="Value column(s) that fill the cells"
    )

    parser.add_argument(
        "-f", "--format",
        type=int,
        choices=HEADER_FORMATS,
        default=HeaderFormat.JOINED.value,
        help="Header layout: 1 joined row, 2 two rows, 3 one row per column, "
             "4 like 3 with name=value labels (default: 1)"
    )

    parser.add_argument(
        "--delimiter",
        default=",",
        help="Field separator of the input file (default: ',')"
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Do not print a summary"
    )

    return parser


def _create_validatehooks_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for xt_validatehooks command."""
    parser = subparsers.add_parser(
        "xt_validatehooks",
        help="Validate a hook configuration file",
        description="Report every schema and semantic problem of a hook configuration. "
                    "Exit codes: 0 valid, 1 warnings, 2 errors."
    )

    _add_config_arguments(parser)

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as errors"
    )

    return parser


def _create_listhooks_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for xt_listhooks command."""
    parser = subparsers.add_parser(
        "xt_listhooks",
        help="List configured hooks",
        description="List the hooks of a configuration in file order."
    )

    _add_config_arguments(parser)

    parser.add_argument(
        "--repo",
        help="Only list hooks whose repo contains this text"
    )

    return parser


def _create_planhooks_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for xt_planhooks command."""
    parser = subparsers.add_parser(
        "xt_planhooks",
        help="Show which files each hook would receive",
        description="Apply the global and per-hook filters to the repository files "
                    "(or to the given filenames) and show the result per hook."
    )

    _add_config_arguments(parser)

    parser.add_argument(
        "--root",
        help="Repository root (default: directory of the configuration file)"
    )

    parser.add_argument(
        "--hook",
        action="append",
        dest="hooks",
        metavar="ID",
        help="Only plan this hook id or alias (repeatable)"
    )

    parser.add_argument(
        "filenames",
        nargs="*",
        help="Files to consider instead of all repository files"
    )

    return parser


def _create_checkhooks_parser(subparsers) -> argparse.ArgumentParser:
    """Create parser for xt_checkhooks command."""
    parser = subparsers.add_parser(
        "xt_checkhooks",
        help="Run the meta hooks of a configuration",
        description="Run identity, check-hooks-apply and check-useless-excludes as "
                    "configured under 'repo: meta'. Exit code 1 if any of them fails."
    )

    _add_config_arguments(parser)

    parser.add_argument(
        "--root",
        help="Repository root (default: directory of the configuration file)"
    )

    return parser


def _validate_arguments(args: argparse.Namespace) -> None:
    """Validate parsed arguments beyond what argparse checks.

    Raises:
        SystemExit: If validation fails
    """
    if args.subcommand == "xt_crosstab":
        if not Path(args.outfile).suffix.lower() == ".csv":
            print(f"Error: The output file must be a .csv file: {args.outfile}", file=sys.stderr)
            sys.exit(2)
        if len(args.delimiter) != 1:
            print("Error: --delimiter must be a single character", file=sys.stderr)
            sys.exit(2)

    if getattr(args, "root", None) and not Path(args.root).is_dir():
        print(f"Error: --root is not a directory: {args.root}", file=sys.stderr)
        sys.exit(2)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the main argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="xtab",
        description="Cross-tabulate normalized tables and check hook configurations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Pivot sales per region and year
  xtab xt_crosstab -i sales.csv -o wide.csv -r region -c year -v sales,units

  # Validate the hook configuration of the current repository
  xtab xt_validatehooks --strict

  # Run the meta hooks
  xtab xt_checkhooks --format json
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(
        dest="subcommand",
        help="Available commands",
        metavar="COMMAND"
    )

    _create_crosstab_parser(subparsers)
    _create_validatehooks_parser(subparsers)
    _create_listhooks_parser(subparsers)
    _create_planhooks_parser(subparsers)
    _create_checkhooks_parser(subparsers)

    return parser


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments with validation.

    Args:
        args: List of arguments to parse. If None, uses sys.argv

    Returns:
        Parsed and validated arguments namespace

    Raises:
        SystemExit: If parsing or validation fails
    """
    parser = create_parser()

    if not args and len(sys.argv) == 1:
        parser.print_help()
        sys.exit(0)

    parsed_args = parser.parse_args(args)

    if not parsed_args.subcommand:
        parser.print_help()
        sys.exit(0)

    _validate_arguments(parsed_args)

    return parsed_args
