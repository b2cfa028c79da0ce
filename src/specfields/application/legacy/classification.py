"""Category type inference from the field keys a category uses."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from specfields.domain.value_objects import CategoryType, CommonFieldKeys

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryTypeRule:
    """Assigns ``category_type`` when the key set matches.

    A rule matches when every key of ``all_of`` is present and, if
    ``any_of`` is non-empty, at least one of its keys is present too.
    """

    category_type: CategoryType
    all_of: frozenset[str] = frozenset()
    any_of: frozenset[str] = frozenset()

    def matches(self, keys: frozenset[str]) -> bool:
        if not self.all_of and not self.any_of:
            return False
        if not self.all_of <= keys:
            return False
        return not self.any_of or bool(self.any_of & keys)


# Checked in order; the first matching rule wins
CATEGORY_TYPE_RULES: tuple[CategoryTypeRule, ...] = (
    CategoryTypeRule(
        CategoryType.AMPERE,
        all_of=frozenset({CommonFieldKeys.AMPERAGE, CommonFieldKeys.VOLTAGE}),
    ),
    CategoryTypeRule(
        CategoryType.VOLT_WATT,
        all_of=frozenset({CommonFieldKeys.WATTS, CommonFieldKeys.VOLTAGE}),
    ),
    CategoryTypeRule(
        CategoryType.WIRE,
        all_of=frozenset({CommonFieldKeys.WIRE_GAUGE, CommonFieldKeys.CORE}),
    ),
    CategoryTypeRule(
        CategoryType.LIGHT,
        any_of=frozenset({CommonFieldKeys.LIGHT_TYPE, CommonFieldKeys.LUMENS}),
    ),
)


def classify_category_type(
    field_keys: Iterable[str],
    rules: Sequence[CategoryTypeRule] = CATEGORY_TYPE_RULES,
) -> CategoryType:
    """Return the type of the first rule matching ``field_keys``.

    Examples:
        >>> classify_category_type(["amperage", "voltage", "watts"])
        <CategoryType.AMPERE: 'ampere'>
        >>> classify_category_type(["color"])
        <CategoryType.GENERAL: 'general'>
    """
    keys = frozenset(field_keys)
    for rule in rules:
        if rule.matches(keys):
            return rule.category_type
    logger.debug(f"No category type rule matched {sorted(keys)}; using general")
    return CategoryType.GENERAL
