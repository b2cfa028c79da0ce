"""Value objects for the specification field domain.

All enums use (str, Enum) so that they serialise to the same strings the
external document store uses.
"""

from __future__ import annotations

from enum import Enum


class FieldType(str, Enum):
    """Primitive input types a specification field can take."""

    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    MULTISELECT = "multiselect"
    BOOLEAN = "boolean"
    TEXTAREA = "textarea"
    EMAIL = "email"
    URL = "url"
    DATE = "date"
    RANGE = "range"

    @property
    def is_numeric(self) -> bool:
        return self in (FieldType.NUMBER, FieldType.RANGE)

    @property
    def has_options(self) -> bool:
        return self in (FieldType.SELECT, FieldType.MULTISELECT)

    @property
    def is_textual(self) -> bool:
        return self in (
            FieldType.TEXT,
            FieldType.TEXTAREA,
            FieldType.EMAIL,
            FieldType.URL,
        )


class CategoryType(str, Enum):
    """Broad product families a category can belong to.

    Attributes:
        AMPERE: Current-rated devices (switches, MCBs, contactors).
        VOLT_WATT: Power-rated devices (motors, pumps, fans).
        WIRE: Cables and wires.
        LIGHT: Lamps and fittings.
        GENERAL: Anything without a recognised specification profile.
    """

    AMPERE = "ampere"
    VOLT_WATT = "volt-watt"
    WIRE = "wire"
    LIGHT = "light"
    GENERAL = "general"


class ConditionalCondition(str, Enum):
    """Comparison used by a conditional rule."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    IN = "in"
    NOT_IN = "not_in"


class ConditionalAction(str, Enum):
    """Effect a conditional rule has on its field when the condition holds."""

    SHOW = "show"
    HIDE = "hide"
    REQUIRE = "require"
    DISABLE = "disable"
    ENABLE = "enable"


class TextTransform(str, Enum):
    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    CAPITALIZE = "capitalize"
    NONE = "none"


class OptionsSource(str, Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"
    API = "api"


class RegistryEventType(str, Enum):
    """Kinds of change the field registry broadcasts to subscribers."""

    FIELD_ADDED = "field_added"
    FIELD_UPDATED = "field_updated"
    FIELD_REMOVED = "field_removed"
    FIELD_ACTIVATED = "field_activated"
    FIELD_DEACTIVATED = "field_deactivated"
    CATEGORY_MAPPING_CHANGED = "category_mapping_changed"


class RegistryState(str, Enum):
    """Lifecycle of a field registry.

    uninitialized -> loading -> ready | error. A refresh re-enters loading
    from either ready or error.
    """

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


# Display order assumed for fields and groups that do not declare one
DEFAULT_DISPLAY_ORDER = 999

# Field keys are camelCase-ish identifiers starting with a letter
FIELD_KEY_PATTERN = r"^[a-zA-Z][a-zA-Z0-9_]*$"

# Default length limits for free-text inputs without an explicit maxLength
DEFAULT_MAX_LENGTHS: dict[FieldType, int] = {
    FieldType.TEXT: 255,
    FieldType.TEXTAREA: 1000,
}


class CommonFieldKeys:
    """Standard field keys shared across product categories."""

    WATTS = "watts"
    VOLTAGE = "voltage"
    AMPERAGE = "amperage"
    FREQUENCY = "frequency"
    PHASE = "phase"

    COLOR = "color"
    SIZE = "size"
    MATERIAL = "material"
    WEIGHT = "weight"

    WIRE_GAUGE = "wireGauge"
    CORE = "core"
    INSULATION = "insulation"

    LIGHT_TYPE = "lightType"
    LUMENS = "lumens"
    COLOR_TEMP = "colorTemp"

    HORSEPOWER = "horsepower"
    RPM = "rpm"
