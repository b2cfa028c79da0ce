"""Domain layer - field records, enums and errors."""

from .exceptions import (
    FieldConfigurationError,
    FieldConfigurationErrorCode,
    FormGenerationError,
    GenerationType,
    RegistryError,
    RegistryOperation,
    SpecificationError,
    StoreError,
)
from .models import (
    CategoryFieldMapping,
    ConditionalRule,
    FieldConfig,
    FieldGroup,
    FieldOption,
    FormattingRules,
    ValidationRules,
)
from .value_objects import (
    CategoryType,
    CommonFieldKeys,
    ConditionalAction,
    ConditionalCondition,
    FieldType,
    RegistryEventType,
    RegistryState,
)

__all__ = [
    "CategoryFieldMapping",
    "CategoryType",
    "CommonFieldKeys",
    "ConditionalAction",
    "ConditionalCondition",
    "ConditionalRule",
    "FieldConfig",
    "FieldConfigurationError",
    "FieldConfigurationErrorCode",
    "FieldGroup",
    "FieldOption",
    "FieldType",
    "FormGenerationError",
    "FormattingRules",
    "GenerationType",
    "RegistryError",
    "RegistryEventType",
    "RegistryOperation",
    "RegistryState",
    "SpecificationError",
    "StoreError",
    "ValidationRules",
]
