"""Custom validator protocol.

Custom validators are referenced by name from ``ValidationRules.custom_validator``
and run after the built-in type checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from specfields.application.validation.base import (
        FieldValidationResult,
        ValidationContext,
    )


@runtime_checkable
class CustomValidator(Protocol):
    """Protocol for named value validators.

    Example:
        class WattsValidator:
            @property
            def name(self) -> str:
                return "watts"

            def validate(self, value, context) -> FieldValidationResult:
                result = FieldValidationResult()
                if float(value) > 2000:
                    result.add_error("Watts cannot exceed 2000W")
                return result
    """

    @property
    def name(self) -> str:
        """Return the name fields use to reference this validator."""
        ...

    def validate(self, value: Any, context: ValidationContext) -> FieldValidationResult:
        """Validate a non-empty value.

        Args:
            value: The raw field value.
            context: Sibling values and field metadata.

        Returns:
            FieldValidationResult with any errors or warnings found.
        """
        ...
