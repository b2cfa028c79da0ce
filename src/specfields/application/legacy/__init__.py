"""Compatibility layer for the legacy field-definition shape."""

from .adapter import LegacyFieldAdapter
from .classification import CATEGORY_TYPE_RULES, CategoryTypeRule, classify_category_type
from .models import (
    LegacyCategoryFieldMapping,
    LegacyConditionalLogic,
    LegacyFieldDefinition,
    LegacyFieldType,
    LegacyReference,
    LegacyValidationRules,
)

__all__ = [
    "CATEGORY_TYPE_RULES",
    "CategoryTypeRule",
    "LegacyCategoryFieldMapping",
    "LegacyConditionalLogic",
    "LegacyFieldAdapter",
    "LegacyFieldDefinition",
    "LegacyFieldType",
    "LegacyReference",
    "LegacyValidationRules",
    "classify_category_type",
]
