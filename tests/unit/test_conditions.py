"""Unit tests for conditional rule evaluation."""

from typing import Any

import pytest

from specfields.application.validation import evaluate_condition, resolve_conditional_state
from specfields.domain import ConditionalRule


def rule(condition: str, value: Any, action: str = "show", **extra: Any) -> ConditionalRule:
    return ConditionalRule(
        depends_on="other", condition=condition, value=value, action=action, **extra
    )


class TestEvaluateCondition:
    """Tests for evaluate_condition."""

    @pytest.mark.parametrize(
        "condition,expected,actual,result",
        [
            ("equals", "yes", "yes", True),
            ("equals", "yes", "no", False),
            ("not_equals", "yes", "no", True),
            ("contains", "led", ["led", "cfl"], True),
            ("contains", "led", "led strip", True),
            ("contains", "led", None, False),
            ("greater_than", 100, "150", True),
            ("greater_than", 100, 50, False),
            ("greater_than", 100, "abc", False),
            ("less_than", 10, 5.5, True),
            ("in", ["a", "b"], "a", True),
            ("in", ["a", "b"], "c", False),
            ("not_in", ["a", "b"], "c", True),
        ],
    )
    def test_conditions(self, condition: str, expected: Any, actual: Any, result: bool) -> None:
        assert evaluate_condition(rule(condition, expected), actual) is result

    def test_in_with_non_list_value_is_false(self) -> None:
        assert evaluate_condition(rule("in", "a"), "a") is False
        assert evaluate_condition(rule("not_in", "a"), "b") is False

    def test_numeric_comparison_rejects_booleans(self) -> None:
        assert evaluate_condition(rule("greater_than", 0), True) is False


class TestResolveConditionalState:
    """Tests for resolve_conditional_state."""

    def test_show_rule_unmet_hides_field(self, field_factory) -> None:
        config = field_factory("x", conditional=[rule("equals", "yes").model_dump()])

        state = resolve_conditional_state(config, {"other": "no"})

        assert state.visible is False
        assert state.accepts_input is False

    def test_hide_rule_met_hides_field(self, field_factory) -> None:
        config = field_factory("x", conditional=[rule("equals", "yes", "hide").model_dump()])

        assert resolve_conditional_state(config, {"other": "yes"}).visible is False
        assert resolve_conditional_state(config, {"other": "no"}).visible is True

    def test_require_rule_records_rule(self, field_factory) -> None:
        config = field_factory(
            "x",
            conditional=[rule("greater_than", 1000, "require", message="Needed").model_dump()],
        )

        state = resolve_conditional_state(config, {"other": 1500})

        assert state.required is True
        assert state.requiring_rule is not None
        assert state.messages == ["Needed"]

    def test_enable_rule_unmet_disables(self, field_factory) -> None:
        config = field_factory("x", conditional=[rule("equals", True, "enable").model_dump()])

        assert resolve_conditional_state(config, {"other": False}).enabled is False
        assert resolve_conditional_state(config, {"other": True}).enabled is True

    def test_disable_rule_met_disables(self, field_factory) -> None:
        config = field_factory("x", conditional=[rule("equals", True, "disable").model_dump()])

        assert resolve_conditional_state(config, {"other": True}).enabled is False

    def test_chained_rules_see_raw_values(self, field_factory) -> None:
        """A field depending on a hidden field still sees that field's value."""
        config = field_factory("c", conditional=[rule("equals", "on").model_dump()])

        state = resolve_conditional_state(config, {"other": "on"})

        assert state.visible is True

    def test_rule_on_missing_value_is_skipped(self, field_factory) -> None:
        config = field_factory(
            "x",
            conditional=[
                rule("equals", "yes").model_dump(),
                rule("equals", True, "enable").model_dump(),
            ],
        )

        state = resolve_conditional_state(config, {})

        assert state.visible is True
        assert state.enabled is True
