"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field

from specfields.web.schemas.responses import FormStateSchema


class CategoryFormRequest(BaseModel):
    """Common part of requests that operate on a category form."""

    category_id: str = Field(..., min_length=1, description="Category id")
    include_optional_fields: bool = Field(
        default=True, description="Include fields that are not required"
    )
    exclude_fields: list[str] | None = Field(
        default=None, description="Field keys to leave out of the form"
    )


class InitialStateRequest(CategoryFormRequest):
    initial_values: dict[str, Any] = Field(
        default_factory=dict, description="Values that replace per-type defaults"
    )


class FieldChangeRequest(CategoryFormRequest):
    """A single field change applied to a client-held form state."""

    state: FormStateSchema = Field(..., description="Current form state")
    key: str = Field(..., min_length=1, description="Key of the changed field")
    value: Any = Field(default=None, description="New value")


class FormValidateRequest(CategoryFormRequest):
    values: dict[str, Any] = Field(default_factory=dict, description="Submitted values")


class LegacyFormDataRequest(BaseModel):
    """Legacy form data for a category."""

    category_id: str = Field(..., min_length=1, description="Category id")
    values: dict[str, Any] = Field(default_factory=dict, description="Legacy form values")
