"""Record shapes of the older static field-definition system.

Legacy documents use Sanity's underscore-prefixed system attributes
(``_id``, ``_ref``, ``_type``) alongside camelCase fields.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import Field

from specfields.domain.models import StoreModel
from specfields.domain.value_objects import DEFAULT_DISPLAY_ORDER, CategoryType


class LegacyFieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    MULTISELECT = "multiselect"
    BOOLEAN = "boolean"
    DATE = "date"


class LegacyReference(StoreModel):
    ref: str = Field(alias="_ref")
    type: Literal["reference"] = Field(default="reference", alias="_type")


class LegacyValidationRules(StoreModel):
    required: bool | None = None
    min_length: int | None = None
    max_length: int | None = None
    min_value: float | None = None
    max_value: float | None = None
    pattern: str | None = None
    custom_error_message: str | None = None


class LegacyConditionalLogic(StoreModel):
    """Single show-if rule; the compared value is always stored as text."""

    depends_on: str
    condition: str
    value: str


class LegacyFieldDefinition(StoreModel):
    """A field as the older specification forms expect it."""

    id: str = Field(alias="_id")
    field_key: str
    field_label: str
    field_type: LegacyFieldType
    description: str | None = None
    placeholder: str | None = None
    validation_rules: LegacyValidationRules | None = None
    default_value: Any = None
    sort_order: int = DEFAULT_DISPLAY_ORDER
    is_active: bool = True
    applicable_categories: list[LegacyReference] = Field(default_factory=list)
    conditional_logic: LegacyConditionalLogic | None = None


class LegacyCategoryFieldMapping(StoreModel):
    category_type: CategoryType
    required_fields: list[LegacyFieldDefinition] = Field(default_factory=list)
    optional_fields: list[LegacyFieldDefinition] = Field(default_factory=list)
