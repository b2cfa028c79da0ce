"""Named custom validators.

Fields opt in to a custom validator through ``validation.customValidator``.
Each ``ValidationEngine`` owns its own ``CustomValidatorRegistry``, so tests
and applications can register validators without affecting each other.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .base import FieldValidationResult, ValidationContext

if TYPE_CHECKING:
    from specfields.contracts.validators import CustomValidator

logger = logging.getLogger(__name__)


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class WattsValidator:
    """Power consumption between 0.1W and 2000W, warning above 1000W."""

    MIN_WATTS = 0.1
    MAX_WATTS = 2000.0
    HIGH_WATTS = 1000.0

    @property
    def name(self) -> str:
        return "watts"

    def validate(self, value: Any, context: ValidationContext) -> FieldValidationResult:
        result = FieldValidationResult(value=value)
        watts = _as_number(value)
        if watts is None:
            return result.add_error("Watts must be a valid number")

        if watts < self.MIN_WATTS:
            result.add_error(f"Watts must be at least {self.MIN_WATTS}W")
        if watts > self.MAX_WATTS:
            result.add_error(f"Watts cannot exceed {self.MAX_WATTS:g}W")
        if watts > self.HIGH_WATTS:
            result.add_warning(f"High wattage detected ({watts:g}W). Please verify.")
        return result


class WireGaugeValidator:
    """Conductor cross-section between 0.1 and 50 sq mm."""

    MIN_GAUGE = 0.1
    MAX_GAUGE = 50.0

    @property
    def name(self) -> str:
        return "wire_gauge"

    def validate(self, value: Any, context: ValidationContext) -> FieldValidationResult:
        result = FieldValidationResult(value=value)
        gauge = _as_number(value)
        if gauge is None:
            return result.add_error("Wire gauge must be a valid number")

        if gauge < self.MIN_GAUGE:
            result.add_error(f"Wire gauge must be at least {self.MIN_GAUGE} sq mm")
        if gauge > self.MAX_GAUGE:
            result.add_error(f"Wire gauge cannot exceed {self.MAX_GAUGE:g} sq mm")
        return result


class CustomValidatorRegistry:
    """Registry of custom validators, looked up by name.

    Example:
        registry = CustomValidatorRegistry.with_builtins()
        result = registry.run("watts", 1500, ValidationContext(field_key="watts"))
        result.warnings  # ["High wattage detected (1500W). Please verify."]
    """

    def __init__(self) -> None:
        self._validators: dict[str, CustomValidator] = {}

    @classmethod
    def with_builtins(cls) -> "CustomValidatorRegistry":
        """Create a registry holding the watts and wire_gauge validators."""
        registry = cls()
        registry.register(WattsValidator())
        registry.register(WireGaugeValidator())
        return registry

    def register(self, validator: "CustomValidator") -> None:
        """Register a validator instance, replacing one with the same name."""
        name = validator.name
        if name in self._validators:
            logger.warning(f"Overwriting existing custom validator '{name}'")
        self._validators[name] = validator
        logger.debug(f"Registered custom validator '{name}': {type(validator).__name__}")

    def unregister(self, name: str) -> bool:
        return self._validators.pop(name, None) is not None

    def get(self, name: str) -> "CustomValidator":
        """Get a validator by name.

        Raises:
            KeyError: If no validator is registered with that name.
        """
        if name not in self._validators:
            available = ", ".join(sorted(self._validators))
            raise KeyError(
                f"No custom validator registered with name '{name}'. "
                f"Available validators: {available or 'none'}"
            )
        return self._validators[name]

    def available(self) -> list[str]:
        return sorted(self._validators)

    def is_registered(self, name: str) -> bool:
        return name in self._validators

    def run(self, name: str, value: Any, context: ValidationContext) -> FieldValidationResult:
        """Run a validator, reporting lookup or runtime failures as errors."""
        if name not in self._validators:
            logger.warning(f"Field '{context.field_key}' references unknown validator '{name}'")
            return FieldValidationResult(value=value).add_error(
                f"Unknown validator '{name}'"
            )

        try:
            return self._validators[name].validate(value, context)
        except Exception as e:
            logger.error(f"Custom validator '{name}' raised an exception: {e}")
            return FieldValidationResult(value=value).add_error(
                f"Validator '{name}' failed: {e}"
            )
