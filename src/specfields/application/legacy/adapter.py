"""Bridge between FieldConfig records and the legacy field-definition shape.

Existing specification forms still consume ``LegacyFieldDefinition``
objects and submit loosely typed form data. ``LegacyFieldAdapter`` converts
definitions both ways, migrates old form data and validates it with the
current validation engine.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from specfields.application.registry import FieldRegistry
from specfields.application.validation import (
    ValidationContext,
    ValidationEngine,
    is_empty,
    parse_boolean,
    parse_number,
)
from specfields.domain.exceptions import (
    FieldConfigurationError,
    FieldConfigurationErrorCode,
)
from specfields.domain.models import ConditionalRule, FieldConfig, ValidationRules
from specfields.domain.value_objects import (
    ConditionalAction,
    ConditionalCondition,
    FieldType,
)

from .classification import classify_category_type
from .models import (
    LegacyCategoryFieldMapping,
    LegacyConditionalLogic,
    LegacyFieldDefinition,
    LegacyFieldType,
    LegacyReference,
    LegacyValidationRules,
)

logger = logging.getLogger(__name__)

# Types the legacy forms cannot render, and the closest type they can
_DOWNGRADED_TYPES: dict[FieldType, LegacyFieldType] = {
    FieldType.TEXTAREA: LegacyFieldType.TEXT,
    FieldType.EMAIL: LegacyFieldType.TEXT,
    FieldType.URL: LegacyFieldType.TEXT,
    FieldType.RANGE: LegacyFieldType.NUMBER,
}


def _legacy_value_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


def _rule_value_from_legacy(condition: ConditionalCondition, text: Any) -> Any:
    """Undo ``_legacy_value_text`` for booleans, lists and objects.

    Other text, numeric text included, stays a string.
    """
    if not isinstance(text, str):
        return text
    stripped = text.strip()
    if stripped in ("true", "false"):
        return stripped == "true"
    if stripped[:1] in ("[", "{") or condition in (
        ConditionalCondition.IN,
        ConditionalCondition.NOT_IN,
    ):
        try:
            return json.loads(stripped)
        except ValueError:
            logger.warning(f"Legacy rule value {text!r} is not valid JSON; kept as text")
    return text


def _legacy_type(config: FieldConfig) -> LegacyFieldType:
    downgraded = _DOWNGRADED_TYPES.get(config.type)
    if downgraded is not None:
        logger.warning(
            f"Field '{config.key}' of type '{config.type.value}' is exported "
            f"as legacy type '{downgraded.value}'"
        )
        return downgraded
    return LegacyFieldType(config.type.value)


class LegacyFieldAdapter:
    """Serves registry data and validation in the legacy shape.

    Example:
        adapter = LegacyFieldAdapter(registry, ValidationEngine())
        mapping = adapter.get_legacy_category_field_mapping("switches")
        migrated = adapter.migrate_form_data({"amperage": "16"}, "switches")
    """

    def __init__(
        self,
        registry: FieldRegistry,
        validation_engine: ValidationEngine | None = None,
    ) -> None:
        self.registry = registry
        self.validation_engine = (
            validation_engine if validation_engine is not None else ValidationEngine()
        )

    def to_legacy_field_definition(self, config: FieldConfig) -> LegacyFieldDefinition:
        """Convert a FieldConfig to the legacy shape.

        Only the first conditional rule survives; its value becomes text.
        """
        validation = config.validation or ValidationRules()
        conditional_logic = None
        if config.conditional:
            rule = config.conditional[0]
            conditional_logic = LegacyConditionalLogic(
                depends_on=rule.depends_on,
                condition=rule.condition.value,
                value=_legacy_value_text(rule.value),
            )

        return LegacyFieldDefinition(
            id=config.id,
            field_key=config.key,
            field_label=config.label,
            field_type=_legacy_type(config),
            description=config.description,
            placeholder=config.placeholder,
            validation_rules=LegacyValidationRules(
                required=config.required,
                min_length=validation.min_length,
                max_length=validation.max_length,
                min_value=validation.min,
                max_value=validation.max,
                pattern=validation.pattern,
                custom_error_message=validation.error_message,
            ),
            sort_order=config.sort_position,
            is_active=config.is_active,
            applicable_categories=[LegacyReference(ref=c) for c in config.categories],
            conditional_logic=conditional_logic,
        )

    def from_legacy_field_definition(
        self,
        legacy: LegacyFieldDefinition | Mapping[str, Any],
        category_id: str,
        is_required: bool = False,
    ) -> FieldConfig:
        """Convert a legacy definition into a FieldConfig for ``category_id``.

        Raises:
            FieldConfigurationError: If the legacy record has an unknown
                field type or otherwise cannot form a valid FieldConfig.
        """
        if not isinstance(legacy, LegacyFieldDefinition):
            try:
                legacy = LegacyFieldDefinition.model_validate(dict(legacy))
            except PydanticValidationError as e:
                key = str(legacy.get("fieldKey") or legacy.get("field_key") or "unknown")
                if any(err["loc"][:1] in (("fieldType",), ("field_type",)) for err in e.errors()):
                    raise FieldConfigurationError.invalid_type(
                        key,
                        legacy.get("fieldType", legacy.get("field_type")),
                        [t.value for t in LegacyFieldType],
                    ) from e
                raise FieldConfigurationError(
                    key,
                    FieldConfigurationErrorCode.VALIDATION_ERROR,
                    f"Invalid legacy field definition '{key}': {e.errors()[0]['msg']}",
                ) from e

        rules = legacy.validation_rules or LegacyValidationRules()
        required = is_required or bool(rules.required)

        conditional = None
        if legacy.conditional_logic is not None:
            logic = legacy.conditional_logic
            try:
                condition = ConditionalCondition(logic.condition)
            except ValueError as e:
                raise FieldConfigurationError.invalid_conditional_rule(
                    legacy.field_key, f"unknown condition '{logic.condition}'"
                ) from e
            conditional = [
                ConditionalRule(
                    depends_on=logic.depends_on,
                    condition=condition,
                    value=_rule_value_from_legacy(condition, logic.value),
                    action=ConditionalAction.SHOW,
                )
            ]

        bounds = {
            "min": rules.min_value,
            "max": rules.max_value,
            "min_length": rules.min_length,
            "max_length": rules.max_length,
            "pattern": rules.pattern,
            "error_message": rules.custom_error_message,
        }
        try:
            return FieldConfig(
                id=legacy.id,
                key=legacy.field_key,
                label=legacy.field_label,
                type=FieldType(legacy.field_type.value),
                categories=[category_id],
                required=required,
                validation=(
                    ValidationRules(**bounds)
                    if any(v is not None for v in bounds.values())
                    else None
                ),
                placeholder=legacy.placeholder,
                description=legacy.description,
                display_order=legacy.sort_order,
                conditional=conditional,
                is_active=legacy.is_active,
            )
        except (PydanticValidationError, ValueError) as e:
            raise FieldConfigurationError(
                legacy.field_key,
                FieldConfigurationErrorCode.VALIDATION_ERROR,
                f"Legacy field '{legacy.field_key}' cannot be converted: {e}",
            ) from e

    def get_legacy_category_field_mapping(self, category_id: str) -> LegacyCategoryFieldMapping:
        """Required and optional legacy definitions plus the inferred type."""
        fields = self.registry.get_fields_for_category(category_id)
        required_keys = {f.key for f in self.registry.get_required_fields(category_id)}

        return LegacyCategoryFieldMapping(
            category_type=classify_category_type(f.key for f in fields),
            required_fields=[
                self.to_legacy_field_definition(f) for f in fields if f.key in required_keys
            ],
            optional_fields=[
                self.to_legacy_field_definition(f)
                for f in fields
                if f.key not in required_keys
            ],
        )

    def get_field_config_for_dynamic_component(
        self, category_id: str
    ) -> dict[str, list[LegacyFieldDefinition]]:
        mapping = self.get_legacy_category_field_mapping(category_id)
        return {
            "required_fields": mapping.required_fields,
            "optional_fields": mapping.optional_fields,
        }

    def get_field_options_legacy(self, field_key: str) -> list[dict[str, str]]:
        config = self.registry.get_field(field_key)
        if config is None or not config.options:
            return []
        return [{"value": o.value, "label": o.label} for o in config.options]

    def migrate_form_data(
        self, form_data: Mapping[str, Any], category_id: str
    ) -> dict[str, Any]:
        """Coerce old form values to the types of the category's fields.

        Keys that are not fields of the category pass through untouched.
        Strings that do not parse as the field's type are kept as they are
        so validation can report them.
        """
        migrated = dict(form_data)
        for config in self.registry.get_fields_for_category(category_id):
            if config.key in form_data:
                migrated[config.key] = self._transform_value(config, form_data[config.key])
        return migrated

    def validate_form_data(
        self, form_data: Mapping[str, Any], category_id: str
    ) -> tuple[bool, dict[str, str]]:
        """Validate legacy form data, keeping the first error per field."""
        values = dict(form_data)
        required_keys = {f.key for f in self.registry.get_required_fields(category_id)}
        errors: dict[str, str] = {}

        for config in self.registry.get_fields_for_category(category_id):
            result = self.validation_engine.validate_field(
                config,
                values.get(config.key),
                ValidationContext(
                    field_key=config.key,
                    category_id=category_id,
                    all_values=values,
                    is_required=config.key in required_keys,
                ),
            )
            if result.errors:
                errors[config.key] = result.errors[0]

        return len(errors) == 0, errors

    def _transform_value(self, config: FieldConfig, value: Any) -> Any:
        if config.type.is_numeric:
            if isinstance(value, str):
                number = parse_number(value)
                return value if number is None else number
            return value

        if config.type == FieldType.BOOLEAN:
            if isinstance(value, str):
                flag = parse_boolean(value)
                return value if flag is None else flag
            return value if value is None else bool(value)

        if config.type == FieldType.MULTISELECT:
            if isinstance(value, list):
                return value
            if is_empty(value):
                return []
            return [value]

        return value
