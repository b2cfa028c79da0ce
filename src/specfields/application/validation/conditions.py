"""Conditional rule evaluation.

Rules are evaluated in a single pass against the sibling values currently
known. Chained conditions (A depends on B which depends on C) see B's raw
value, never B's resolved visibility, and the pass is never repeated until
a fixed point is reached.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from specfields.domain.models import ConditionalRule, FieldConfig
from specfields.domain.value_objects import ConditionalAction, ConditionalCondition

logger = logging.getLogger(__name__)


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def evaluate_condition(rule: ConditionalRule, actual: Any) -> bool:
    """Check whether ``actual`` satisfies ``rule``.

    ``in`` and ``not_in`` require the rule value to be a list; any other
    rule value makes them evaluate to False. Numeric comparisons with a
    non-numeric side are False.
    """
    expected = rule.value
    condition = rule.condition

    if condition == ConditionalCondition.EQUALS:
        return actual == expected
    if condition == ConditionalCondition.NOT_EQUALS:
        return actual != expected
    if condition == ConditionalCondition.CONTAINS:
        if isinstance(actual, (list, tuple, set)):
            return expected in actual
        if actual is None:
            return False
        return str(expected) in str(actual)
    if condition in (ConditionalCondition.GREATER_THAN, ConditionalCondition.LESS_THAN):
        left, right = _to_number(actual), _to_number(expected)
        if left is None or right is None:
            return False
        if condition == ConditionalCondition.GREATER_THAN:
            return left > right
        return left < right
    if condition == ConditionalCondition.IN:
        return isinstance(expected, list) and actual in expected
    if condition == ConditionalCondition.NOT_IN:
        return isinstance(expected, list) and actual not in expected

    logger.warning(f"Unknown condition '{condition}' on rule for '{rule.depends_on}'")
    return False


@dataclass
class ConditionalState:
    """Resolved effect of a field's conditional rules.

    Attributes:
        visible: False when a show rule is unmet or a hide rule is met.
        enabled: False when a disable rule is met or an enable rule is unmet.
        required: Field required flag, possibly raised by a require rule.
        requiring_rule: The require rule that made the field required.
        messages: Messages of rules whose condition holds.
    """

    visible: bool = True
    enabled: bool = True
    required: bool = False
    requiring_rule: ConditionalRule | None = None
    messages: list[str] = field(default_factory=list)

    @property
    def accepts_input(self) -> bool:
        return self.visible and self.enabled


def resolve_conditional_state(
    config: FieldConfig, all_values: Mapping[str, Any]
) -> ConditionalState:
    """Apply every conditional rule of ``config`` once.

    Rules whose ``dependsOn`` key is absent from ``all_values`` are skipped.
    """
    state = ConditionalState(required=config.required)

    for rule in config.conditional or []:
        # Rules on values the caller did not supply leave the field as declared
        if rule.depends_on not in all_values:
            continue
        met = evaluate_condition(rule, all_values.get(rule.depends_on))
        if met and rule.message:
            state.messages.append(rule.message)

        if rule.action == ConditionalAction.SHOW:
            if not met:
                state.visible = False
        elif rule.action == ConditionalAction.HIDE:
            if met:
                state.visible = False
        elif rule.action == ConditionalAction.REQUIRE:
            if met and not state.required:
                state.required = True
                state.requiring_rule = rule
        elif rule.action == ConditionalAction.DISABLE:
            if met:
                state.enabled = False
        elif rule.action == ConditionalAction.ENABLE:
            if not met:
                state.enabled = False

    return state
