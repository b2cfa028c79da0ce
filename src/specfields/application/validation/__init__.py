"""Validation engine, results and conditional rule evaluation."""

from .base import FieldValidationResult, FormValidationResult, ValidationContext
from .coercion import is_empty, parse_boolean, parse_number
from .conditions import ConditionalState, evaluate_condition, resolve_conditional_state
from .custom import CustomValidatorRegistry, WattsValidator, WireGaugeValidator
from .engine import NO_REQUIRED_VALUES_MESSAGE, ValidationEngine

__all__ = [
    "ConditionalState",
    "CustomValidatorRegistry",
    "FieldValidationResult",
    "FormValidationResult",
    "NO_REQUIRED_VALUES_MESSAGE",
    "ValidationContext",
    "ValidationEngine",
    "WattsValidator",
    "WireGaugeValidator",
    "evaluate_condition",
    "is_empty",
    "parse_boolean",
    "parse_number",
    "resolve_conditional_state",
]
