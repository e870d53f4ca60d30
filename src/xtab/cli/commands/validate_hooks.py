"""xt_validatehooks command.

Validates a hook configuration file and reports every problem found.

Exit codes:
- 0: configuration is valid
- 1: valid, with warnings
- 2: errors found (or warnings with --strict)
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ...exceptions import XtabError
from ...models.validation import ValidationResult
from ...services.hook_validator import HookValidator
from ...settings.discovery import resolve_config_path
from ...settings.loader import load_raw_config
from ...utils.formatters import create_formatter

logger = logging.getLogger(__name__)


@dataclass
class ValidationSummary:
    """Validation outcome for one configuration file."""
    config_path: Optional[Path] = None
    total_repos: int = 0
    total_hooks: int = 0
    result: ValidationResult = field(default_factory=ValidationResult)

    def has_errors(self) -> bool:
        return self.result.has_errors()

    def has_warnings(self) -> bool:
        return self.result.has_warnings()

    def exit_code(self, strict: bool = False) -> int:
        if self.has_errors():
            return 2
        if self.has_warnings():
            return 2 if strict else 1
        return 0

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data.update({
            "config_path": str(self.config_path) if self.config_path else None,
            "total_repos": self.total_repos,
            "total_hooks": self.total_hooks,
        })
        return data


class ValidateHooksCommand:
    """xt_validatehooks command implementation."""

    def __init__(self):
        self.hook_validator = HookValidator()

    def execute(self, args: argparse.Namespace) -> int:
        """Validate the configuration and print the report.

        Returns:
            Exit code: 0 (valid), 1 (warnings), 2 (errors)
        """
        try:
            summary = self.validate(args.config)
        except XtabError as e:
            logger.debug("Validation could not start: %s", e)
            formatter = create_formatter(args.format, sys.stdout)
            formatter.write(formatter.format_command_result(
                success=False, message=e.message, errors=[e.message]
            ))
            return 2

        formatter = create_formatter(args.format, sys.stdout)
        formatter.write(formatter.format_validation_result(summary.to_dict()))
        if args.strict and summary.has_warnings() and not summary.has_errors():
            logger.info("Strict mode: %d warnings treated as errors", len(summary.result.warnings))

        return summary.exit_code(args.strict)

    def validate(self, config: Optional[str] = None) -> ValidationSummary:
        """Validate the explicit or discovered configuration file.

        Raises:
            ConfigFileNotFoundError: If no configuration file can be found
            ConfigParseError: If the file is not valid YAML
            ConfigurationError: If the document is empty
        """
        config_path = resolve_config_path(config)
        raw = load_raw_config(config_path)
        result = self.hook_validator.validate_raw(raw)

        repos = raw.get("repos") if isinstance(raw.get("repos"), list) else []
        total_hooks = sum(
            len(repo["hooks"]) for repo in repos
            if isinstance(repo, dict) and isinstance(repo.get("hooks"), list)
        )

        logger.debug("Validated %s: %d errors, %d warnings",
                     config_path, len(result.errors), len(result.warnings))
        return ValidationSummary(
            config_path=config_path,
            total_repos=len(repos),
            total_hooks=total_hooks,
            result=result,
        )


def create_command() -> ValidateHooksCommand:
    return ValidateHooksCommand()
