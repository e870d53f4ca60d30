"""Main CLI entry points for xtab commands.

Each command is reachable as ``xtab <command>`` through main() and as a
direct console script (``xt_<command>``) declared in pyproject.toml. Both
paths parse the arguments with cli.argument_parser and run the command
under the same error handling, which maps exceptions to exit codes:

    XtabError / FileNotFoundError   2
    PermissionError                 3
    anything else                   4
    KeyboardInterrupt               130
"""

import difflib
import logging
import os
import signal
import sys
from typing import Any, Callable, List, NoReturn, Optional

from .. import __version__
from ..exceptions import XtabError, handle_exception
from ..utils.logging import configure_logging, log_error
from .argument_parser import parse_args

DEBUG_MODE = os.getenv("XTAB_DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("XTAB_LOG_LEVEL", "DEBUG" if DEBUG_MODE else "WARNING")
LOG_FORMAT = os.getenv("XTAB_LOG_FORMAT", "debug" if DEBUG_MODE else "human")
LOG_FILE = os.getenv("XTAB_LOG_FILE")

logger = logging.getLogger(__name__)

# command -> (module, function, description)
COMMAND_REGISTRY = {
    "xt_crosstab": ("commands.crosstab", "execute_crosstab", "Pivot a normalized table into a cross-table CSV"),
    "xt_validatehooks": ("commands.validate_hooks", "create_command", "Validate a hook configuration file"),
    "xt_listhooks": ("commands.list_hooks", "execute_list_hooks_command", "List configured hooks"),
    "xt_planhooks": ("commands.plan_hooks", "execute_plan_hooks", "Show which files each hook would receive"),
    "xt_checkhooks": ("commands.check_hooks", "execute_check_hooks", "Run the meta hooks of a configuration"),
}


def _setup_signal_handlers() -> None:
    def signal_handler(signum: int, frame: Any) -> None:
        logger.debug("Received signal %s", signum)
        print("\n\nInterrupted", file=sys.stderr)
        sys.exit(130)

    signal.signal(signal.SIGINT, signal_handler)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, signal_handler)


def _format_error_message(error: BaseException) -> str:
    """Format the stderr message for a failed command."""
    if isinstance(error, XtabError):
        return error.get_user_message()
    if isinstance(error, FileNotFoundError):
        return f"Error: File not found: {error}"
    if isinstance(error, PermissionError):
        return f"Error: Permission denied: {error}"
    if isinstance(error, KeyboardInterrupt):
        return "Interrupted"
    if DEBUG_MODE:
        return f"Error: {type(error).__name__}: {error}"
    return "Internal error, rerun with XTAB_DEBUG=true for details"


def _execute_command_safely(command_name: str, command_func: Callable, args: Any) -> int:
    """Run a command and map its exceptions to exit codes."""
    try:
        if command_name == "xt_listhooks":
            return command_func(
                config=getattr(args, "config", None),
                repo_filter=getattr(args, "repo", None),
                format_type=getattr(args, "format", "table"),
            )
        elif command_name == "xt_validatehooks":
            command_obj = command_func()
            return command_obj.execute(args)
        else:
            return command_func(args)

    except KeyboardInterrupt:
        logger.debug("%s interrupted by user", command_name)
        print(f"\n{_format_error_message(KeyboardInterrupt())}", file=sys.stderr)
        return 130
    except XtabError as e:
        error = handle_exception(e, {"command": command_name})
        log_error(error, f"{command_name} failed: {error.message}", logger, level=logging.DEBUG)
        if DEBUG_MODE:
            logger.debug("Error details: %s", error.get_full_details())
        print(_format_error_message(error), file=sys.stderr)
        return 2
    except FileNotFoundError as e:
        logger.debug("%s file not found: %s", command_name, e)
        print(_format_error_message(e), file=sys.stderr)
        return 2
    except PermissionError as e:
        logger.debug("%s permission denied: %s", command_name, e)
        print(_format_error_message(e), file=sys.stderr)
        return 3
    except Exception as e:
        error = handle_exception(e, {"command": command_name})
        log_error(error, f"{command_name} unexpected error", logger, level=logging.DEBUG, exc_info=True)
        if DEBUG_MODE:
            logger.debug("Error details: %s", error.get_full_details())
        print(_format_error_message(e), file=sys.stderr)
        return 4


def _create_command_function(command_name: str) -> Callable[..., NoReturn]:
    """Create the console script function of a command."""
    def command_function(argv: Optional[List[str]] = None) -> NoReturn:
        module_path, func_name, description = COMMAND_REGISTRY[command_name]
        configure_logging(LOG_LEVEL, LOG_FORMAT, LOG_FILE)

        args = parse_args([command_name] + (sys.argv[1:] if argv is None else list(argv)))

        module = __import__(f"xtab.cli.{module_path}", fromlist=[func_name])
        command_func = getattr(module, func_name)

        sys.exit(_execute_command_safely(command_name, command_func, args))

    command_function.__doc__ = COMMAND_REGISTRY[command_name][2]
    command_function.__name__ = command_name
    return command_function


for command_name in COMMAND_REGISTRY:
    globals()[command_name] = _create_command_function(command_name)


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """Main entry point: ``xtab <command> [options]``."""
    _setup_signal_handlers()
    argv = sys.argv[1:] if argv is None else list(argv)

    if not argv or argv[0] in ["-h", "--help"]:
        _show_main_help()
        sys.exit(0)
    elif argv[0] in ["-V", "--version"]:
        print(f"xtab {__version__}")
        sys.exit(0)

    command = argv[0]
    simplified_command_map = {
        cmd.replace("xt_", ""): globals()[cmd]
        for cmd in COMMAND_REGISTRY
    }

    if command in simplified_command_map:
        simplified_command_map[command](argv[1:])
    elif command in COMMAND_REGISTRY:
        globals()[command](argv[1:])
    else:
        _show_command_not_found_error(command)
        sys.exit(1)


def _show_command_not_found_error(command: str) -> None:
    print(f"Error: unknown command '{command}'", file=sys.stderr)
    print("", file=sys.stderr)

    available_commands = [cmd.replace("xt_", "") for cmd in COMMAND_REGISTRY]
    suggestions = difflib.get_close_matches(command, available_commands, n=3, cutoff=0.5)

    if suggestions:
        print("Did you mean one of these?", file=sys.stderr)
        for suggestion in suggestions:
            print(f"  xtab {suggestion} - {COMMAND_REGISTRY['xt_' + suggestion][2]}", file=sys.stderr)
        print("", file=sys.stderr)

    print("Run 'xtab --help' to list the available commands", file=sys.stderr)


def _show_main_help() -> None:
    help_text = f"""xtab {__version__} - cross-tabulation and hook configuration tool

Usage: xtab <command> [options]
       xt_<command> [options]  (direct invocation)

Table commands:
  crosstab         Pivot a normalized table into a cross-table CSV

Hook configuration commands:
  validatehooks    Validate a .pre-commit-config.yaml file
  listhooks        List configured hooks
  planhooks        Show which files each hook would receive
  checkhooks       Run the meta hooks (identity, check-hooks-apply, check-useless-excludes)

Global options:
  -h, --help       Show this help
  -V, --version    Show the version

Environment variables:
  XTAB_DEBUG       Enable debug mode (true/false)
  XTAB_LOG_LEVEL   Log level (DEBUG/INFO/WARNING/ERROR)
  XTAB_LOG_FORMAT  Log format (human/debug/json)
  XTAB_LOG_FILE    Also write log records to this file

Examples:
  xtab crosstab -i sales.csv -o wide.csv -r region -c year -v sales,units -f 2
  xtab validatehooks --strict
  xtab planhooks --format json README.md

Run 'xtab <command> --help' for the options of a command.
"""
    print(help_text)


if __name__ == "__main__":
    main()
