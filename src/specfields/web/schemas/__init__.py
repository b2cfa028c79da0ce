"""Request and response schemas for the REST API."""

from specfields.web.schemas.requests import (
    CategoryFormRequest,
    FieldChangeRequest,
    FormValidateRequest,
    InitialStateRequest,
    LegacyFormDataRequest,
)
from specfields.web.schemas.responses import (
    FieldValidationSchema,
    FormStateSchema,
    FormValidationSchema,
    LegacyValidationSchema,
    MigratedValuesSchema,
)

__all__ = [
    "CategoryFormRequest",
    "FieldChangeRequest",
    "FieldValidationSchema",
    "FormStateSchema",
    "FormValidateRequest",
    "FormValidationSchema",
    "InitialStateRequest",
    "LegacyFormDataRequest",
    "LegacyValidationSchema",
    "MigratedValuesSchema",
]
