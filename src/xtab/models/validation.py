"""Validation models for hook configuration validation.

This module contains the ValidationResult, ValidationError, and ValidationWarning
models used by the hook validator and the validatehooks command.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ValidationError:
    """Represents a field-specific validation error.

    ValidationError is used when a configuration field contains invalid
    data that would stop the hook runner from loading the file.

    Attributes:
        field_name: Dotted path of the field with the error (e.g. repos[2].hooks[0].id)
        error_code: Standardized error code for programmatic handling
        message: Human-readable error description
        suggested_fix: Optional suggestion for fixing the error
    """
    field_name: str
    error_code: str
    message: str
    suggested_fix: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {
            "field_name": self.field_name,
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.suggested_fix is not None:
            result["suggested_fix"] = self.suggested_fix
        return result


@dataclass
class ValidationWarning:
    """Represents a non-blocking validation warning.

    Attributes:
        field_name: Dotted path of the field with the warning
        warning_code: Standardized warning code for programmatic handling
        message: Human-readable warning description
    """
    field_name: str
    warning_code: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "field_name": self.field_name,
            "warning_code": self.warning_code,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    """Result of hook configuration validation.

    Attributes:
        is_valid: Overall validation result (True if no errors)
        errors: List of field-specific validation errors
        warnings: List of non-blocking validation warnings
        suggestions: List of improvement suggestions for the configuration
    """
    is_valid: bool = True
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def add_error(
        self,
        field_name: str,
        error_code: str,
        message: str,
        suggested_fix: Optional[str] = None
    ) -> None:
        """Add a validation error and mark result as invalid."""
        self.errors.append(ValidationError(
            field_name=field_name,
            error_code=error_code,
            message=message,
            suggested_fix=suggested_fix
        ))
        self.is_valid = False

    def add_warning(
        self,
        field_name: str,
        warning_code: str,
        message: str
    ) -> None:
        """Add a validation warning."""
        self.warnings.append(ValidationWarning(
            field_name=field_name,
            warning_code=warning_code,
            message=message
        ))

    def add_suggestion(self, suggestion: str) -> None:
        """Add an improvement suggestion, skipping duplicates."""
        if suggestion not in self.suggestions:
            self.suggestions.append(suggestion)

    def merge(self, other: ValidationResult, prefix: str = "") -> None:
        """Fold another result into this one.

        Args:
            other: Result to merge
            prefix: Prepended to every merged field name (e.g. "repos[1].")
        """
        for error in other.errors:
            self.add_error(
                field_name=f"{prefix}{error.field_name}",
                error_code=error.error_code,
                message=error.message,
                suggested_fix=error.suggested_fix,
            )
        for warning in other.warnings:
            self.add_warning(
                field_name=f"{prefix}{warning.field_name}",
                warning_code=warning.warning_code,
                message=warning.message,
            )
        for suggestion in other.suggestions:
            self.add_suggestion(suggestion)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def error_codes(self) -> List[str]:
        """Error codes in the order they were added."""
        return [error.error_code for error in self.errors]

    def warning_codes(self) -> List[str]:
        """Warning codes in the order they were added."""
        return [warning.warning_code for warning in self.warnings]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "is_valid": self.is_valid,
            "errors": [error.to_dict() for error in self.errors],
            "warnings": [warning.to_dict() for warning in self.warnings],
            "suggestions": self.suggestions.copy(),
        }
