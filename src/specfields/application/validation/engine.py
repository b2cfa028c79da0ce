"""Field and form validation.

``ValidationEngine`` checks values against FieldConfig definitions:
conditional rules first, then the required check, then type checks,
declarative rules and finally any named custom validator. Problems are
reported through result objects; nothing here raises for bad input.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from specfields.domain.models import FieldConfig, ValidationRules
from specfields.domain.value_objects import DEFAULT_MAX_LENGTHS, FieldType

from .base import FieldValidationResult, FormValidationResult, ValidationContext
from .coercion import is_empty, parse_boolean, parse_number
from .conditions import ConditionalState, resolve_conditional_state
from .custom import CustomValidatorRegistry

if TYPE_CHECKING:
    from specfields.contracts.validators import CustomValidator

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
UNSAFE_CONTENT_PATTERN = re.compile(r"<script|javascript:|data:", re.IGNORECASE)
NO_REQUIRED_VALUES_MESSAGE = "At least one required field must be filled"

_url_adapter = TypeAdapter(AnyUrl)


def _describe(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class ValidationEngine:
    """Validates field values and whole forms.

    Args:
        custom_validators: Registry used for ``validation.customValidator``
            lookups. Defaults to a registry holding the built-in validators.

    Example:
        engine = ValidationEngine()
        result = engine.validate_field(watts_config, "2500")
        result.errors  # ["Watts cannot exceed 2000W"]
    """

    def __init__(self, custom_validators: CustomValidatorRegistry | None = None) -> None:
        self.custom_validators = (
            custom_validators
            if custom_validators is not None
            else CustomValidatorRegistry.with_builtins()
        )

    def register_custom_validator(self, validator: "CustomValidator") -> None:
        self.custom_validators.register(validator)

    def validate_field(
        self,
        config: FieldConfig,
        value: Any,
        context: ValidationContext | None = None,
    ) -> FieldValidationResult:
        """Validate one value against its field definition.

        Args:
            config: Field definition.
            value: Raw value as entered.
            context: Sibling values and category. When omitted, the field is
                validated in isolation.

        Returns:
            FieldValidationResult whose ``value`` is the coerced value.
        """
        if context is None:
            context = ValidationContext(
                field_key=config.key,
                all_values={config.key: value},
                is_required=config.required,
            )

        state = resolve_conditional_state(config, context.all_values)
        result = FieldValidationResult(value=value)

        if not state.accepts_input:
            return result

        if is_empty(value):
            if state.required or context.is_required:
                result.add_error(self._required_message(config, state))
            return result

        coerced = self._check_type(config, value, result)
        result.value = coerced
        if not result.is_valid:
            return result

        self._check_rules(config, coerced, result)

        if config.validation is not None and config.validation.custom_validator:
            custom_context = ValidationContext(
                field_key=config.key,
                category_id=context.category_id,
                all_values=context.all_values,
                is_required=state.required,
            )
            result.merge(
                self.custom_validators.run(
                    config.validation.custom_validator, coerced, custom_context
                )
            )

        return result

    def validate_form(
        self,
        fields: Iterable[FieldConfig],
        values: Mapping[str, Any],
        category_id: str | None = None,
    ) -> FormValidationResult:
        """Validate every field of a form against the submitted values.

        Adds the global error "At least one required field must be filled"
        when the form has required fields and none of them has a value, and
        a global warning for each value whose key is not part of the form.
        """
        fields = list(fields)
        all_values = dict(values)
        form_result = FormValidationResult()

        for config in fields:
            context = ValidationContext(
                field_key=config.key,
                category_id=category_id,
                all_values=all_values,
                is_required=config.required,
            )
            form_result.field_results[config.key] = self.validate_field(
                config, all_values.get(config.key), context
            )

        required = [config for config in fields if config.required]
        if required and all(is_empty(all_values.get(c.key)) for c in required):
            form_result.global_errors.append(NO_REQUIRED_VALUES_MESSAGE)

        known = {config.key for config in fields}
        for key in all_values:
            if key not in known:
                form_result.global_warnings.append(
                    f"Value for unknown field '{key}' was ignored"
                )

        if not form_result.is_valid:
            logger.debug(
                f"Form for category '{category_id}' invalid: "
                f"{sorted(form_result.errors)} {form_result.global_errors}"
            )
        return form_result

    def _required_message(self, config: FieldConfig, state: ConditionalState) -> str:
        rule = state.requiring_rule
        if rule is not None:
            return (
                f"{config.label} is required when {rule.depends_on} "
                f"is {_describe(rule.value)}"
            )
        return f"{config.label} is required"

    def _check_type(
        self, config: FieldConfig, value: Any, result: FieldValidationResult
    ) -> Any:
        """Run the type-specific check and return the coerced value."""
        label = config.label
        field_type = config.type

        if field_type.is_numeric:
            number = parse_number(value)
            if number is None:
                result.add_error(f"{label} must be a valid number")
                return value
            return number

        if field_type == FieldType.BOOLEAN:
            flag = parse_boolean(value)
            if flag is None:
                result.add_error(f"{label} must be true or false")
                return value
            return flag

        if field_type == FieldType.MULTISELECT:
            if not isinstance(value, list):
                result.add_error(f"{label} must be an array of values")
                return value
            allowed = self._allowed_values(config)
            if allowed is not None:
                invalid = [str(v) for v in value if str(v) not in allowed]
                if invalid:
                    result.add_error(f"{label} contains invalid options: {', '.join(invalid)}")
            return value

        if field_type == FieldType.SELECT:
            allowed = self._allowed_values(config)
            if allowed is not None and str(value) not in allowed:
                result.add_error(f"{label} must be one of: {', '.join(allowed)}")
            return value

        text = value if isinstance(value, str) else str(value)

        if field_type == FieldType.EMAIL:
            if not EMAIL_PATTERN.match(text):
                result.add_error(f"{label} must be a valid email address")
        elif field_type == FieldType.URL:
            try:
                _url_adapter.validate_python(text)
            except PydanticValidationError:
                result.add_error(f"{label} must be a valid URL")
        elif field_type == FieldType.DATE:
            try:
                datetime.fromisoformat(text)
            except ValueError:
                result.add_error(f"{label} must be a valid date")
        elif field_type in (FieldType.TEXT, FieldType.TEXTAREA):
            if UNSAFE_CONTENT_PATTERN.search(text):
                result.add_error(f"{label} contains potentially unsafe content")

        return text

    def _allowed_values(self, config: FieldConfig) -> list[str] | None:
        if not config.options:
            return None
        return [option.value for option in config.options if not option.disabled]

    def _check_rules(
        self, config: FieldConfig, value: Any, result: FieldValidationResult
    ) -> None:
        rules = config.validation or ValidationRules()
        label = config.label

        if config.type.is_numeric:
            if rules.min is not None and value < rules.min:
                result.add_error(f"{label} must be at least {_describe(rules.min)}")
            if rules.max is not None and value > rules.max:
                result.add_error(f"{label} cannot exceed {_describe(rules.max)}")
            return

        if not config.type.is_textual:
            return

        max_length = rules.max_length
        if max_length is None:
            max_length = DEFAULT_MAX_LENGTHS.get(config.type)

        if rules.min_length is not None and len(value) < rules.min_length:
            result.add_error(f"{label} must be at least {rules.min_length} characters")
        if max_length is not None and len(value) > max_length:
            result.add_error(f"{label} cannot exceed {max_length} characters")
        if rules.pattern and not re.search(rules.pattern, value):
            result.add_error(rules.error_message or f"{label} format is invalid")
