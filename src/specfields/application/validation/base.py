"""Validation result structures.

Validation never raises for bad input; every check reports through these
result objects so callers can render messages next to their fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationContext:
    """Information a field check needs beyond the value itself.

    Attributes:
        field_key: Key of the field being validated.
        category_id: Category the form belongs to, if known.
        all_values: Current values of every field in the form.
        is_required: Required flag after conditional rules were applied.
    """

    field_key: str
    category_id: str | None = None
    all_values: dict[str, Any] = field(default_factory=dict)
    is_required: bool = False


@dataclass
class FieldValidationResult:
    """Outcome of validating one field value.

    Attributes:
        errors: Blocking messages.
        warnings: Non-blocking messages.
        value: The value after coercion (e.g. "16" -> 16.0 for numbers).
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    value: Any = None

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, message: str) -> "FieldValidationResult":
        """Add a blocking error and return self for chaining."""
        self.errors.append(message)
        return self

    def add_warning(self, message: str) -> "FieldValidationResult":
        self.warnings.append(message)
        return self

    def merge(self, other: "FieldValidationResult") -> "FieldValidationResult":
        """Merge another result's messages into this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "value": self.value,
        }


@dataclass
class FormValidationResult:
    """Outcome of validating a whole form.

    Attributes:
        field_results: Per-field results keyed by field key.
        global_errors: Errors that do not belong to a single field.
        global_warnings: Warnings that do not belong to a single field.
    """

    field_results: dict[str, FieldValidationResult] = field(default_factory=dict)
    global_errors: list[str] = field(default_factory=list)
    global_warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True when no field result and no global check reported an error."""
        if self.global_errors:
            return False
        return all(result.is_valid for result in self.field_results.values())

    @property
    def errors(self) -> dict[str, list[str]]:
        """Field errors keyed by field key, omitting valid fields."""
        return {
            key: list(result.errors)
            for key, result in self.field_results.items()
            if result.errors
        }

    @property
    def warnings(self) -> dict[str, list[str]]:
        return {
            key: list(result.warnings)
            for key, result in self.field_results.items()
            if result.warnings
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "field_results": {
                key: result.to_dict() for key, result in self.field_results.items()
            },
            "global_errors": list(self.global_errors),
            "global_warnings": list(self.global_warnings),
        }
