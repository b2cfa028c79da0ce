"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field

from specfields.application.forms import FormState
from specfields.application.validation import FormValidationResult


class FormStateSchema(BaseModel):
    """Serialisable form state, mirrored on the client between requests."""

    values: dict[str, Any] = Field(default_factory=dict)
    errors: dict[str, list[str]] = Field(default_factory=dict)
    warnings: dict[str, list[str]] = Field(default_factory=dict)
    touched: dict[str, bool] = Field(default_factory=dict)
    is_valid: bool = True
    is_submitting: bool = False
    is_dirty: bool = False

    @classmethod
    def from_state(cls, state: FormState) -> "FormStateSchema":
        return cls(
            values=state.values,
            errors=state.errors,
            warnings=state.warnings,
            touched=state.touched,
            is_valid=state.is_valid,
            is_submitting=state.is_submitting,
            is_dirty=state.is_dirty,
        )

    def to_state(self) -> FormState:
        return FormState(**self.model_dump())


class FieldValidationSchema(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    value: Any = None


class FormValidationSchema(BaseModel):
    """Whole-form validation result."""

    is_valid: bool
    field_results: dict[str, FieldValidationSchema] = Field(default_factory=dict)
    global_errors: list[str] = Field(default_factory=list)
    global_warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: FormValidationResult) -> "FormValidationSchema":
        return cls.model_validate(result.to_dict())


class LegacyValidationSchema(BaseModel):
    is_valid: bool
    errors: dict[str, str] = Field(default_factory=dict)


class MigratedValuesSchema(BaseModel):
    values: dict[str, Any] = Field(default_factory=dict)
