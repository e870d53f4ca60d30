"""Output formatters for the xtab CLI.

Every hook command renders its result through one of these formatters so
the same data can be read by people (table), by scripts (json, yaml) or
reduced to an exit status (quiet).

Structured output follows one envelope:
{
    "success": boolean,
    "message": string,
    "data": object,
    "warnings": array,
    "errors": array
}
"""

import json
import os
import shutil
import sys
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, TextIO

import yaml


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    def __init__(self, file: TextIO = sys.stdout):
        self.file = file

    @abstractmethod
    def format_command_result(
        self,
        success: bool,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        warnings: Optional[List[str]] = None,
        errors: Optional[List[str]] = None
    ) -> str:
        """Format a generic command result."""

    @abstractmethod
    def format_hook_list(self, hooks: List[Dict[str, Any]], total_count: int,
                         by_repo: Optional[Dict[str, int]] = None) -> str:
        """Format the hooks of a configuration.

        Args:
            hooks: One dict per hook (repo, rev, id, name, args, files, types)
            total_count: Number of hooks
            by_repo: Hook count per repo
        """

    @abstractmethod
    def format_validation_result(self, validation_result: Dict[str, Any]) -> str:
        """Format a validation report (ValidationResult.to_dict() plus config_path)."""

    @abstractmethod
    def format_hook_plan(self, entries: List[Dict[str, Any]], total_files: int) -> str:
        """Format the files each hook would receive."""

    @abstractmethod
    def format_meta_results(self, results: List[Dict[str, Any]]) -> str:
        """Format meta hook outcomes."""

    def write(self, text: str) -> None:
        """Write text followed by a newline, skipping empty output."""
        if text:
            print(text, file=self.file)


class JSONFormatter(BaseFormatter):
    """Structured JSON output.

    Supports pretty (indented) and compact output.
    """

    def __init__(self, file: TextIO = sys.stdout, pretty: bool = True):
        super().__init__(file)
        self.pretty = pretty

    def _envelope(self, success: bool, message: str, data: Optional[Dict[str, Any]] = None,
                  warnings: Optional[List[str]] = None, errors: Optional[List[str]] = None) -> Dict[str, Any]:
        return {
            "success": success,
            "message": message,
            "data": data or {},
            "warnings": warnings or [],
            "errors": errors or [],
        }

    def format_command_result(self, success, message, data=None, warnings=None, errors=None) -> str:
        return self._format_json(self._envelope(success, message, data, warnings, errors))

    def format_hook_list(self, hooks, total_count, by_repo=None) -> str:
        data = {"hooks": hooks, "total_count": total_count, "by_repo": by_repo or {}}
        return self._format_json(self._envelope(True, f"Found {total_count} hooks", data))

    def format_validation_result(self, validation_result) -> str:
        errors = validation_result.get("errors", [])
        warnings = validation_result.get("warnings", [])
        message = f"Validation finished: {len(errors)} errors, {len(warnings)} warnings"
        return self._format_json(self._envelope(
            success=validation_result.get("is_valid", False),
            message=message,
            data=validation_result,
            warnings=[warning["message"] for warning in warnings],
            errors=[error["message"] for error in errors],
        ))

    def format_hook_plan(self, entries, total_files) -> str:
        active = sum(1 for entry in entries if not entry.get("skipped"))
        data = {"hooks": entries, "total_files": total_files}
        return self._format_json(self._envelope(True, f"{active} of {len(entries)} hooks would run", data))

    def format_meta_results(self, results) -> str:
        failed = [result for result in results if result.get("status") == "failed"]
        return self._format_json(self._envelope(
            success=not failed,
            message=f"{len(results) - len(failed)} of {len(results)} meta hooks passed",
            data={"results": results},
            errors=[line for result in failed for line in result.get("output", [])],
        ))

    def _format_json(self, obj: Any) -> str:
        if self.pretty:
            return json.dumps(obj, ensure_ascii=False, indent=2)
        return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


class YAMLFormatter(JSONFormatter):
    """YAML output with the same envelope as JSONFormatter."""

    def _format_json(self, obj: Any) -> str:
        return yaml.safe_dump(obj, sort_keys=False, default_flow_style=False, allow_unicode=True).rstrip("\n")


class TableFormatter(BaseFormatter):
    """Human-readable table output.

    Adjusts column widths to the terminal and uses colors when the output
    stream is a color-capable terminal.
    """

    def __init__(self, file: TextIO = sys.stdout, max_width: Optional[int] = None):
        super().__init__(file)
        self.max_width = max_width or self._get_terminal_width()
        self._supports_color = self._check_color_support()

    def format_command_result(self, success, message, data=None, warnings=None, errors=None) -> str:
        lines = []
        status_symbol = "✓" if success else "✗"
        status_color = self._green if success else self._red
        lines.append(f"{status_color}{status_symbol} {message}{self._reset}")

        if data:
            lines.append("")
            lines.append(self._format_data_table(data))

        if warnings:
            lines.append("")
            lines.append(f"{self._yellow}Warnings:{self._reset}")
            for warning in warnings:
                lines.append(f"  ⚠ {warning}")

        if errors:
            lines.append("")
            lines.append(f"{self._red}Errors:{self._reset}")
            for error in errors:
                lines.append(f"  ✗ {error}")

        return "\n".join(lines)

    def format_hook_list(self, hooks, total_count, by_repo=None) -> str:
        if not hooks:
            return f"{self._yellow}No hooks configured{self._reset}"

        lines = [f"{self._bold}Hooks ({total_count}){self._reset}", ""]
        headers = ["#", "Repo", "Rev", "Hook", "Args", "Files"]
        rows = []
        for index, hook in enumerate(hooks):
            rows.append([
                str(index),
                self._truncate(hook.get("repo", ""), 45),
                hook.get("rev") or "-",
                hook.get("id", ""),
                self._truncate(" ".join(hook.get("args", [])) or "-", 30),
                self._truncate(hook.get("files") or "*", 20),
            ])
        lines.append(self._create_table(headers, rows))

        if by_repo:
            lines.append("")
            lines.append(f"{self._bold}Hooks per repo:{self._reset}")
            for repo, count in by_repo.items():
                lines.append(f"  {repo}: {count}")

        return "\n".join(lines)

    def format_validation_result(self, validation_result) -> str:
        errors = validation_result.get("errors", [])
        warnings = validation_result.get("warnings", [])
        lines = []

        config_path = validation_result.get("config_path")
        if config_path:
            lines.append(f"{self._bold}{config_path}{self._reset}")

        if errors:
            lines.append(f"{self._red}✗ Validation failed{self._reset}")
        elif warnings:
            lines.append(f"{self._yellow}⚠ Valid, with warnings{self._reset}")
        else:
            lines.append(f"{self._green}✓ Valid{self._reset}")

        for error in errors:
            lines.append(f"  {self._red}✗{self._reset} {error['field_name']}: {error['message']} [{error['error_code']}]")
            if error.get("suggested_fix"):
                lines.append(f"      → {error['suggested_fix']}")
        for warning in warnings:
            lines.append(f"  {self._yellow}⚠{self._reset} {warning['field_name']}: {warning['message']} "
                         f"[{warning['warning_code']}]")

        suggestions = validation_result.get("suggestions", [])
        if suggestions:
            lines.append("")
            for suggestion in suggestions:
                lines.append(f"  💡 {suggestion}")

        return "\n".join(lines)

    def format_hook_plan(self, entries, total_files) -> str:
        if not entries:
            return f"{self._yellow}No hooks configured{self._reset}"

        lines = [f"{self._bold}Hook plan over {total_files} files{self._reset}", ""]
        rows = []
        for entry in entries:
            status = "skip" if entry.get("skipped") else "run"
            rows.append([entry["hook_id"], status, str(len(entry.get("files", []))),
                         self._truncate(", ".join(entry.get("files", [])) or "-", 50)])
        lines.append(self._create_table(["Hook", "Status", "Files", "Sample"], rows))
        return "\n".join(lines)

    def format_meta_results(self, results) -> str:
        if not results:
            return f"{self._yellow}No meta hooks configured{self._reset}"

        symbols = {
            "passed": f"{self._green}✓ Passed{self._reset}",
            "failed": f"{self._red}✗ Failed{self._reset}",
            "not-run": f"{self._yellow}- Not run (fail_fast){self._reset}",
        }
        lines = []
        for result in results:
            lines.append(f"{result['hook_id']:.<50}{symbols.get(result['status'], result['status'])}")
            for line in result.get("output", []):
                lines.append(f"  {line}")
        return "\n".join(lines)

    def _create_table(self, headers: List[str], rows: List[List[str]]) -> str:
        if not rows:
            return ""

        col_widths = [len(header) for header in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(col_widths):
                    col_widths[i] = max(col_widths[i], len(str(cell)))

        total_width = sum(col_widths) + len(headers) * 3 - 1
        if total_width > self.max_width:
            scale = (self.max_width - len(headers) * 3 + 1) / sum(col_widths)
            col_widths = [max(8, int(w * scale)) for w in col_widths]

        lines = []
        header_line = " │ ".join(header.ljust(col_widths[i]) for i, header in enumerate(headers))
        lines.append(f"{self._bold}{header_line}{self._reset}")
        lines.append("─┼─".join("─" * w for w in col_widths))
        for row in rows:
            lines.append(" │ ".join(
                self._truncate(str(cell), col_widths[i]).ljust(col_widths[i]) for i, cell in enumerate(row)
            ))

        return "\n".join(lines)

    def _format_data_table(self, data: Dict[str, Any]) -> str:
        lines = []
        for key, value in data.items():
            if isinstance(value, dict):
                lines.append(f"{self._bold}{key}:{self._reset}")
                for sub_key, sub_value in value.items():
                    lines.append(f"  {sub_key}: {sub_value}")
            elif isinstance(value, list):
                lines.append(f"{self._bold}{key}:{self._reset}")
                for item in value:
                    lines.append(f"  - {item}")
            else:
                lines.append(f"{self._bold}{key}:{self._reset} {value}")
        return "\n".join(lines)

    def _truncate(self, text: str, max_length: int) -> str:
        if len(text) <= max_length:
            return text
        return text[:max(max_length - 3, 0)] + "..."

    def _get_terminal_width(self) -> int:
        try:
            return shutil.get_terminal_size().columns
        except (AttributeError, OSError):
            return 80

    def _check_color_support(self) -> bool:
        return (
            hasattr(self.file, "isatty") and self.file.isatty()
            and os.environ.get("TERM", "").lower() != "dumb"
            and os.environ.get("NO_COLOR") is None
        )

    @property
    def _reset(self) -> str:
        return "\033[0m" if self._supports_color else ""

    @property
    def _bold(self) -> str:
        return "\033[1m" if self._supports_color else ""

    @property
    def _green(self) -> str:
        return "\033[32m" if self._supports_color else ""

    @property
    def _red(self) -> str:
        return "\033[31m" if self._supports_color else ""

    @property
    def _yellow(self) -> str:
        return "\033[33m" if self._supports_color else ""


class QuietFormatter(BaseFormatter):
    """Minimal output for scripts: nothing on success, errors on failure."""

    def format_command_result(self, success, message, data=None, warnings=None, errors=None) -> str:
        if not success and errors:
            return "\n".join(errors)
        if not success:
            return message
        return ""

    def format_hook_list(self, hooks, total_count, by_repo=None) -> str:
        return str(total_count)

    def format_validation_result(self, validation_result) -> str:
        return "\n".join(
            f"{error['field_name']}: {error['message']}" for error in validation_result.get("errors", [])
        )

    def format_hook_plan(self, entries, total_files) -> str:
        return "\n".join(entry["hook_id"] for entry in entries if not entry.get("skipped"))

    def format_meta_results(self, results) -> str:
        return "\n".join(
            line for result in results if result.get("status") == "failed" for line in result.get("output", [])
        )


def create_formatter(format_type: str, file: TextIO = sys.stdout) -> BaseFormatter:
    """Create the formatter for a format name.

    Raises:
        ValueError: If the format is not supported
    """
    format_type = format_type.lower()

    if format_type == "json":
        return JSONFormatter(file)
    elif format_type == "yaml":
        return YAMLFormatter(file)
    elif format_type == "table":
        return TableFormatter(file)
    elif format_type == "quiet":
        return QuietFormatter(file)
    else:
        raise ValueError(f"Unsupported output format: {format_type}")
