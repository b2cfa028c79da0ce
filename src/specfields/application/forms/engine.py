"""Form schema generation and pure form state transitions.

``FormGenerationEngine`` turns the fields of a category into a
``FormSchema`` (filtered, overridden, ordered and grouped) and provides
the state helpers a form UI needs: initial state, per-field change
handling and whole-form validation. State helpers never mutate their
input; each returns a new ``FormState``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from specfields.application.cache import FieldCache
from specfields.application.data_access import (
    CACHE_CLEARED,
    MUTATION_EVENTS,
    FieldDataAccess,
)
from specfields.application.settings import RegistrySettings
from specfields.application.validation import (
    FormValidationResult,
    ValidationContext,
    ValidationEngine,
)
from specfields.domain.exceptions import FormGenerationError
from specfields.domain.models import (
    ConditionalRule,
    FieldConfig,
    FieldGroup,
    StoreModel,
    ValidationRules,
)
from specfields.domain.value_objects import FieldType

logger = logging.getLogger(__name__)

FORM_CACHE_PREFIX = "form_schema_"


class FormGenerationOptions(BaseModel):
    """How to build a form for a category.

    Attributes:
        category_id: Category whose fields make up the form.
        include_optional_fields: Keep fields that are not required.
        group_fields: Include the field groups used by the form.
        enable_conditional_logic: Include the conditional rule map.
        custom_field_order: Keys placed first, in this order.
        exclude_fields: Keys left out of the form.
        field_overrides: Per-key attribute overrides, applied on every call
            (never cached).
    """

    model_config = ConfigDict(extra="forbid")

    category_id: str = Field(min_length=1)
    include_optional_fields: bool = False
    group_fields: bool = True
    enable_conditional_logic: bool = True
    custom_field_order: list[str] | None = None
    exclude_fields: list[str] | None = None
    field_overrides: dict[str, dict[str, Any]] | None = None

    def cache_signature(self) -> str:
        """Canonical JSON of every option except ``field_overrides``."""
        return json.dumps(
            self.model_dump(exclude={"field_overrides"}),
            sort_keys=True,
            separators=(",", ":"),
        )


class FormSchema(StoreModel):
    """Renderable description of a category form."""

    category_id: str
    fields: list[FieldConfig] = Field(default_factory=list)
    groups: list[FieldGroup] = Field(default_factory=list)
    validation_rules: dict[str, ValidationRules] = Field(default_factory=dict)
    conditional_rules: dict[str, list[ConditionalRule]] = Field(default_factory=dict)


class GeneratedForm(StoreModel):
    schema_: FormSchema = Field(alias="schema")
    required_fields: list[str] = Field(default_factory=list)
    optional_fields: list[str] = Field(default_factory=list)

    @property
    def fields(self) -> list[FieldConfig]:
        return self.schema_.fields

    @property
    def groups(self) -> list[FieldGroup]:
        return self.schema_.groups


@dataclass(frozen=True)
class FormState:
    """Values and feedback of a form being filled in.

    Attributes:
        values: Current value per field key.
        errors: Error messages per field key (empty list when valid).
        warnings: Warning messages per field key.
        touched: Whether the user has changed each field.
        is_valid: No field currently has an error.
        is_submitting: A submit is in progress.
        is_dirty: Any value changed since the initial state.
    """

    values: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict)
    warnings: dict[str, list[str]] = field(default_factory=dict)
    touched: dict[str, bool] = field(default_factory=dict)
    is_valid: bool = True
    is_submitting: bool = False
    is_dirty: bool = False


@dataclass(frozen=True)
class _FilteredFields:
    """Cached part of a schema: fields after exclusion and required filtering."""

    fields: list[FieldConfig]
    groups: list[FieldGroup]


def default_value(config: FieldConfig) -> Any:
    """Initial value a field gets when none is supplied."""
    if config.type == FieldType.BOOLEAN:
        return False
    if config.type.is_numeric:
        if config.validation is not None and config.validation.min is not None:
            return config.validation.min
        return 0
    if config.type == FieldType.MULTISELECT:
        return []
    if config.type == FieldType.SELECT:
        return config.options[0].value if config.options else ""
    return ""


class FormGenerationEngine:
    """Builds form schemas for categories and manages form state.

    Schemas are cached per option signature for ``cache_ttl_seconds``; the
    cache is dropped whenever the data access layer reports a field
    mutation or clears its own cache.

    Example:
        engine = FormGenerationEngine(data_access, ValidationEngine())
        schema = await engine.generate_form_schema(
            FormGenerationOptions(category_id="switches", include_optional_fields=True)
        )
        state = engine.create_initial_form_state(schema.fields)
        state = engine.handle_field_change(state, "amperage", "16A", schema.fields)
    """

    def __init__(
        self,
        data_access: FieldDataAccess,
        validation_engine: ValidationEngine | None = None,
        settings: RegistrySettings | None = None,
        cache: FieldCache | None = None,
    ) -> None:
        self.data_access = data_access
        self.validation_engine = (
            validation_engine if validation_engine is not None else ValidationEngine()
        )
        settings = settings if settings is not None else RegistrySettings()
        self.cache = (
            cache if cache is not None else FieldCache(default_ttl=settings.cache_ttl_seconds)
        )
        self._detach = data_access.subscribe(self._on_data_access_event)

    def close(self) -> None:
        self._detach()

    async def generate_form_schema(self, options: FormGenerationOptions) -> FormSchema:
        """Build the schema for ``options.category_id``.

        Raises:
            FormGenerationError: If fields cannot be fetched or an override
                produces an invalid field.
        """
        try:
            filtered = await self._filtered_fields(options)
            fields = self._apply_overrides(filtered.fields, options.field_overrides)
            fields = self._order(fields, options.custom_field_order)
            groups = self._groups_for(filtered.groups, fields) if options.group_fields else []
        except FormGenerationError:
            raise
        except Exception as e:
            logger.error(f"Form generation failed for '{options.category_id}': {e}")
            raise FormGenerationError.schema_generation_failed(
                options.category_id, str(e)
            ) from e

        conditional_rules: dict[str, list[ConditionalRule]] = {}
        if options.enable_conditional_logic:
            conditional_rules = {f.key: list(f.conditional) for f in fields if f.conditional}

        return FormSchema(
            category_id=options.category_id,
            fields=fields,
            groups=groups,
            validation_rules={f.key: f.validation for f in fields if f.validation is not None},
            conditional_rules=conditional_rules,
        )

    async def generate_form(self, options: FormGenerationOptions) -> GeneratedForm:
        schema = await self.generate_form_schema(options)
        return GeneratedForm(
            schema=schema,
            required_fields=[f.key for f in schema.fields if f.required],
            optional_fields=[f.key for f in schema.fields if not f.required],
        )

    def clear_cache(self) -> None:
        removed = self.cache.invalidate_prefix(FORM_CACHE_PREFIX)
        logger.debug(f"Cleared {removed} cached form schemas")

    # Form state

    def create_initial_form_state(
        self,
        fields: Iterable[FieldConfig],
        initial_values: Mapping[str, Any] | None = None,
    ) -> FormState:
        """Initial state with supplied values or per-type defaults."""
        initial_values = initial_values or {}
        values: dict[str, Any] = {}
        errors: dict[str, list[str]] = {}
        warnings: dict[str, list[str]] = {}
        touched: dict[str, bool] = {}

        for config in fields:
            if config.key in initial_values:
                values[config.key] = initial_values[config.key]
            else:
                values[config.key] = default_value(config)
            errors[config.key] = []
            warnings[config.key] = []
            touched[config.key] = False

        return FormState(values=values, errors=errors, warnings=warnings, touched=touched)

    def handle_field_change(
        self,
        state: FormState,
        key: str,
        value: Any,
        fields: Sequence[FieldConfig],
        category_id: str | None = None,
    ) -> FormState:
        """Apply one value change and re-validate only that field."""
        values = {**state.values, key: value}
        touched = {**state.touched, key: True}

        config = next((f for f in fields if f.key == key), None)
        if config is None:
            return replace(state, values=values, touched=touched, is_dirty=True)

        result = self.validation_engine.validate_field(
            config,
            value,
            ValidationContext(
                field_key=key,
                category_id=category_id,
                all_values=values,
                is_required=config.required,
            ),
        )
        errors = {**state.errors, key: list(result.errors)}
        warnings = {**state.warnings, key: list(result.warnings)}

        return replace(
            state,
            values=values,
            touched=touched,
            errors=errors,
            warnings=warnings,
            is_dirty=True,
            is_valid=all(not messages for messages in errors.values()),
        )

    def validate_form_state(
        self,
        state: FormState,
        fields: Iterable[FieldConfig],
        category_id: str | None = None,
    ) -> FormValidationResult:
        return self.validation_engine.validate_form(fields, state.values, category_id)

    def update_form_state(self, state: FormState, **changes: Any) -> FormState:
        """Return a copy with ``changes`` applied and marked dirty."""
        changes["is_dirty"] = True
        return replace(state, **changes)

    def apply_validation(self, state: FormState, result: FormValidationResult) -> FormState:
        """Write a whole-form validation result back into ``state``."""
        errors = dict(state.errors)
        warnings = dict(state.warnings)
        for key, field_result in result.field_results.items():
            errors[key] = list(field_result.errors)
            warnings[key] = list(field_result.warnings)
        return replace(state, errors=errors, warnings=warnings, is_valid=result.is_valid)

    # Schema helpers

    async def _filtered_fields(self, options: FormGenerationOptions) -> _FilteredFields:
        cache_key = f"{FORM_CACHE_PREFIX}{options.cache_signature()}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        fields = await self.data_access.fetch_fields_for_category(options.category_id)
        groups = await self.data_access.fetch_field_groups()

        excluded = set(options.exclude_fields or [])
        fields = [f for f in fields if f.key not in excluded]
        if not options.include_optional_fields:
            fields = [f for f in fields if f.required]

        filtered = _FilteredFields(fields=fields, groups=groups)
        self.cache.set(cache_key, filtered)
        logger.debug(
            f"Built form fields for '{options.category_id}': {len(fields)} fields"
        )
        return filtered

    def _apply_overrides(
        self,
        fields: list[FieldConfig],
        overrides: Mapping[str, Mapping[str, Any]] | None,
    ) -> list[FieldConfig]:
        # Copies keep consumers from editing the cached records
        if not overrides:
            return [f.model_copy(deep=True) for f in fields]
        return [
            f.merged(overrides[f.key]) if f.key in overrides else f.model_copy(deep=True)
            for f in fields
        ]

    def _order(
        self, fields: list[FieldConfig], custom_order: list[str] | None
    ) -> list[FieldConfig]:
        by_display = sorted(fields, key=lambda f: (f.sort_position, f.key))
        if not custom_order:
            return by_display

        by_key = {f.key: f for f in by_display}
        ordered = [by_key.pop(key) for key in dict.fromkeys(custom_order) if key in by_key]
        ordered.extend(f for f in by_display if f.key in by_key)
        return ordered

    def _groups_for(
        self, groups: list[FieldGroup], fields: list[FieldConfig]
    ) -> list[FieldGroup]:
        used = {f.group_id for f in fields if f.group_id}
        return sorted(
            (g.model_copy(deep=True) for g in groups if g.id in used),
            key=lambda g: (g.display_order, g.id),
        )

    def _on_data_access_event(self, event: str, data: Any) -> None:
        if event in MUTATION_EVENTS or event == CACHE_CLEARED:
            self.clear_cache()
