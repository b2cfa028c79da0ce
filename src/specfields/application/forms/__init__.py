"""Form schema generation, form state and display naming."""

from .engine import (
    FormGenerationEngine,
    FormGenerationOptions,
    FormSchema,
    FormState,
    GeneratedForm,
    default_value,
)
from .naming import derive_display_name

__all__ = [
    "FormGenerationEngine",
    "FormGenerationOptions",
    "FormSchema",
    "FormState",
    "GeneratedForm",
    "default_value",
    "derive_display_name",
]
