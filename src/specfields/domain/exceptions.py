"""Exception taxonomy for the specification field system.

Validation failures are not exceptions; they are returned as structured
results by the validation engine. The classes here cover configuration,
registry, store and form generation failures.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any


class SpecificationError(Exception):
    """Base class for all specification field errors.

    Attributes:
        message: Human-readable description.
        context: Extra details useful for debugging and API responses.
        timestamp: When the error was created (UTC).
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialisable summary of the error."""
        return {
            "name": type(self).__name__,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "context": {k: _jsonable(v) for k, v in self.context.items()},
        }


class FieldConfigurationErrorCode(str, Enum):
    INVALID_TYPE = "INVALID_TYPE"
    INVALID_KEY = "INVALID_KEY"
    MISSING_OPTIONS = "MISSING_OPTIONS"
    CIRCULAR_DEPENDENCY = "CIRCULAR_DEPENDENCY"
    CONDITIONAL_DEPTH_EXCEEDED = "CONDITIONAL_DEPTH_EXCEEDED"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    INVALID_CATEGORY = "INVALID_CATEGORY"
    MISSING_REQUIRED_PROPERTY = "MISSING_REQUIRED_PROPERTY"
    INVALID_CONDITIONAL_RULE = "INVALID_CONDITIONAL_RULE"
    TOO_MANY_FIELDS = "TOO_MANY_FIELDS"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class FieldConfigurationError(SpecificationError):
    """Raised when a field definition is rejected at registration time."""

    def __init__(
        self,
        field_key: str,
        code: FieldConfigurationErrorCode,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.field_key = field_key
        self.code = code
        super().__init__(
            message, {**(context or {}), "field_key": field_key, "code": code.value}
        )

    @classmethod
    def invalid_type(
        cls, field_key: str, provided: Any, valid_types: list[str]
    ) -> "FieldConfigurationError":
        return cls(
            field_key,
            FieldConfigurationErrorCode.INVALID_TYPE,
            f"Invalid field type '{provided}' for field '{field_key}'. "
            f"Valid types are: {', '.join(valid_types)}",
            {"provided_type": provided},
        )

    @classmethod
    def invalid_key(cls, field_key: str, pattern: str) -> "FieldConfigurationError":
        return cls(
            field_key,
            FieldConfigurationErrorCode.INVALID_KEY,
            f"Field key '{field_key}' does not match {pattern}",
            {"pattern": pattern},
        )

    @classmethod
    def missing_options(
        cls, field_key: str, field_type: str
    ) -> "FieldConfigurationError":
        return cls(
            field_key,
            FieldConfigurationErrorCode.MISSING_OPTIONS,
            f"Field '{field_key}' of type '{field_type}' requires options to be defined",
            {"field_type": field_type},
        )

    @classmethod
    def duplicate_key(
        cls, field_key: str, existing_field_id: str
    ) -> "FieldConfigurationError":
        return cls(
            field_key,
            FieldConfigurationErrorCode.DUPLICATE_KEY,
            f"Field key '{field_key}' is already in use by field ID '{existing_field_id}'",
            {"existing_field_id": existing_field_id},
        )

    @classmethod
    def missing_required_property(
        cls, field_key: str, prop: str
    ) -> "FieldConfigurationError":
        return cls(
            field_key,
            FieldConfigurationErrorCode.MISSING_REQUIRED_PROPERTY,
            f"Required property '{prop}' is missing for field '{field_key}'",
            {"property": prop},
        )

    @classmethod
    def invalid_conditional_rule(
        cls, field_key: str, reason: str
    ) -> "FieldConfigurationError":
        return cls(
            field_key,
            FieldConfigurationErrorCode.INVALID_CONDITIONAL_RULE,
            f"Invalid conditional rule for field '{field_key}': {reason}",
            {"reason": reason},
        )

    @classmethod
    def conditional_depth_exceeded(
        cls, field_key: str, chain: list[str], max_depth: int
    ) -> "FieldConfigurationError":
        return cls(
            field_key,
            FieldConfigurationErrorCode.CONDITIONAL_DEPTH_EXCEEDED,
            f"Conditional chain for field '{field_key}' is {len(chain) - 1} deep "
            f"(maximum {max_depth}): {' -> '.join(chain)}",
            {"chain": chain, "max_depth": max_depth},
        )

    @classmethod
    def too_many_fields(
        cls, field_key: str, category_id: str, limit: int
    ) -> "FieldConfigurationError":
        return cls(
            field_key,
            FieldConfigurationErrorCode.TOO_MANY_FIELDS,
            f"Category '{category_id}' already has the maximum of {limit} fields",
            {"category_id": category_id, "limit": limit},
        )


class RegistryOperation(str, Enum):
    LOAD_FIELDS = "LOAD_FIELDS"
    REGISTER_FIELD = "REGISTER_FIELD"
    UPDATE_FIELD = "UPDATE_FIELD"
    REMOVE_FIELD = "REMOVE_FIELD"
    SUBSCRIBE = "SUBSCRIBE"
    CACHE_OPERATION = "CACHE_OPERATION"


class RegistryError(SpecificationError):
    """Raised when a load/register/update/remove operation fails.

    Registry errors are surfaced to the caller and never retried
    automatically.
    """

    def __init__(
        self,
        operation: RegistryOperation,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.operation = operation
        super().__init__(message, {**(context or {}), "operation": operation.value})

    @classmethod
    def load_fields_failed(
        cls, reason: str, context: dict[str, Any] | None = None
    ) -> "RegistryError":
        return cls(
            RegistryOperation.LOAD_FIELDS,
            f"Failed to load field configurations: {reason}",
            context,
        )

    @classmethod
    def field_not_found(
        cls, operation: RegistryOperation, field_key: str
    ) -> "RegistryError":
        return cls(operation, f"Field '{field_key}' not found", {"field_key": field_key})


class GenerationType(str, Enum):
    SCHEMA_GENERATION = "SCHEMA_GENERATION"
    VALIDATION_SETUP = "VALIDATION_SETUP"
    CONDITIONAL_LOGIC_SETUP = "CONDITIONAL_LOGIC_SETUP"


class FormGenerationError(SpecificationError):
    """Raised when a form schema cannot be assembled for a category.

    Callers are expected to fall back to an empty form rather than crash.
    """

    def __init__(
        self,
        category_id: str,
        generation_type: GenerationType,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.category_id = category_id
        self.generation_type = generation_type
        super().__init__(
            message,
            {
                **(context or {}),
                "category_id": category_id,
                "generation_type": generation_type.value,
            },
        )

    @classmethod
    def schema_generation_failed(
        cls, category_id: str, reason: str
    ) -> "FormGenerationError":
        return cls(
            category_id,
            GenerationType.SCHEMA_GENERATION,
            f"Failed to generate form schema for category '{category_id}': {reason}",
        )


class StoreError(SpecificationError):
    """Raised by store implementations when the transport fails."""

    def __init__(
        self, message: str, status_code: int | None = None, context: dict[str, Any] | None = None
    ) -> None:
        self.status_code = status_code
        super().__init__(message, {**(context or {}), "status_code": status_code})


def _jsonable(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return str(value)
