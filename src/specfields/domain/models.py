"""Pydantic models for specification field records.

These models mirror the documents owned by the external store. They
serialise with camelCase aliases (``model_dump(by_alias=True)``) so the JSON
matches the store's shape, while Python code uses snake_case attributes.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from specfields.domain.value_objects import (
    DEFAULT_DISPLAY_ORDER,
    FIELD_KEY_PATTERN,
    CategoryType,
    ConditionalAction,
    ConditionalCondition,
    FieldType,
    OptionsSource,
    TextTransform,
)


class StoreModel(BaseModel):
    """Base model for records exchanged with the document store."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_document(self) -> dict[str, Any]:
        """Serialise to the store's camelCase JSON shape, dropping unset values."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ValidationRules(StoreModel):
    """Declarative bounds attached to a field.

    Attributes:
        min: Lower bound for numeric fields.
        max: Upper bound for numeric fields.
        min_length: Minimum string length for text fields.
        max_length: Maximum string length for text fields.
        pattern: Regular expression text values must match.
        custom_validator: Name of a registered custom validator.
        error_message: Message used instead of the generic pattern error.
    """

    min: float | None = None
    max: float | None = None
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)
    pattern: str | None = None
    custom_validator: str | None = None
    error_message: str | None = None

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str | None) -> str | None:
        """Reject patterns that do not compile."""
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"invalid regular expression: {e}") from e
        return v

    @model_validator(mode="after")
    def validate_bounds(self) -> "ValidationRules":
        """Ensure lower bounds do not exceed upper bounds."""
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError(
                f"minLength ({self.min_length}) must not exceed "
                f"maxLength ({self.max_length})"
            )
        return self


class FieldOption(StoreModel):
    """One selectable value of a select or multiselect field."""

    value: str
    label: str
    disabled: bool = False
    description: str | None = None
    group: str | None = None


class ConditionalRule(StoreModel):
    """Makes a field react to the current value of another field.

    Attributes:
        depends_on: Key of the field whose value is inspected.
        condition: Comparison applied to that value.
        value: Value compared against.
        action: Effect on this field when the comparison holds.
        message: Optional note shown to the user when the rule applies.
    """

    depends_on: str = Field(min_length=1)
    condition: ConditionalCondition
    value: Any
    action: ConditionalAction = ConditionalAction.SHOW
    message: str | None = None


class FormattingRules(StoreModel):
    prefix: str | None = None
    suffix: str | None = None
    transform: TextTransform | None = None
    display_format: str | None = None
    decimal_places: int | None = Field(default=None, ge=0, le=10)


class FieldGroup(StoreModel):
    """Visual grouping of fields inside a generated form."""

    id: str
    name: str
    label: str
    description: str | None = None
    collapsible: bool = False
    default_expanded: bool = True
    display_order: int = 100


class FieldConfig(StoreModel):
    """Declarative definition of one specification input.

    Attributes:
        id: Store document id.
        key: Unique field identifier (e.g. "watts", "voltage").
        label: Display label.
        type: Input type.
        categories: Category ids the field applies to.
        required: Whether a value must be supplied.
        validation: Optional bounds and pattern.
        options: Selectable values, only meaningful for select/multiselect.
        conditional: Ordered conditional rules.
        display_order: Position in generated forms (lower first).
        is_active: False when the field is soft-deleted.
        version: Incremented by the store on every update.
    """

    id: str
    key: str = Field(pattern=FIELD_KEY_PATTERN)
    label: str = Field(min_length=1)
    type: FieldType

    categories: list[str] = Field(default_factory=list)
    category_type: CategoryType | None = None

    required: bool = False
    validation: ValidationRules | None = None

    placeholder: str | None = None
    description: str | None = None
    help_text: str | None = None
    display_order: int | None = None
    group_id: str | None = None

    options: list[FieldOption] | None = None
    options_source: OptionsSource | None = None
    options_endpoint: str | None = None

    conditional: list[ConditionalRule] | None = None
    formatting: FormattingRules | None = None

    searchable: bool = True
    sortable: bool = True
    exportable: bool = True

    is_active: bool = True
    version: int = Field(default=1, ge=1)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None

    @property
    def sort_position(self) -> int:
        """Display order with unset values sorted last."""
        if self.display_order is None:
            return DEFAULT_DISPLAY_ORDER
        return self.display_order

    @property
    def option_values(self) -> list[str]:
        return [option.value for option in self.options or []]

    def merged(self, updates: Mapping[str, Any]) -> "FieldConfig":
        """Return a re-validated copy with ``updates`` applied.

        Update keys may use either the Python attribute name or the store
        alias (``display_order`` or ``displayOrder``).
        """
        data = self.model_dump(by_alias=True)
        data.update(normalize_update_keys(type(self), updates))
        return type(self).model_validate(data)


class CategoryFieldMapping(StoreModel):
    """Association between a product category and its field keys.

    Attributes:
        category_id: Category document id.
        category_name: Human readable category name.
        category_type: Product family declared by the store.
        required_field_keys: Keys that must be filled for this category.
        optional_field_keys: Keys that may be filled for this category.
        field_groups: Ids of groups used by the category's form.
        name_source_field: Key of the field whose value names a product of
            this category (e.g. "suitableFor"), if any.
    """

    category_id: str
    category_name: str = ""
    category_type: CategoryType = CategoryType.GENERAL
    required_field_keys: list[str] = Field(default_factory=list)
    optional_field_keys: list[str] = Field(default_factory=list)
    field_groups: list[str] = Field(default_factory=list)
    name_source_field: str | None = None
    display_order: int = 0
    is_active: bool = True

    @property
    def field_keys(self) -> list[str]:
        """Required keys followed by optional keys, without duplicates."""
        keys: list[str] = []
        for key in [*self.required_field_keys, *self.optional_field_keys]:
            if key not in keys:
                keys.append(key)
        return keys


def normalize_update_keys(
    model: type[BaseModel], updates: Mapping[str, Any]
) -> dict[str, Any]:
    """Translate attribute names in ``updates`` to the model's aliases."""
    normalized: dict[str, Any] = {}
    for name, value in updates.items():
        info = model.model_fields.get(name)
        alias = info.alias if info is not None and info.alias else name
        if isinstance(value, BaseModel):
            value = value.model_dump(by_alias=True)
        elif isinstance(value, list):
            value = [
                item.model_dump(by_alias=True) if isinstance(item, BaseModel) else item
                for item in value
            ]
        normalized[alias] = value
    return normalized
