"""Pytest configuration and shared fixtures for specification field tests."""

from __future__ import annotations

from typing import Any

import pytest

from specfields.application import (
    FieldCache,
    FieldDataAccess,
    FieldRegistry,
    RegistrySettings,
    ServiceFactory,
)
from specfields.domain.models import (
    CategoryFieldMapping,
    FieldConfig,
    FieldGroup,
)
from specfields.infrastructure import InMemoryFieldStore


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: tests that exercise several layers together"
    )


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_field(key: str, **overrides: Any) -> FieldConfig:
    """Build a FieldConfig with sensible defaults for tests."""
    data: dict[str, Any] = {
        "id": f"field-{key}",
        "key": key,
        "label": key.capitalize(),
        "type": "text",
        "categories": ["switches"],
    }
    data.update(overrides)
    return FieldConfig.model_validate(data)


# =============================================================================
# Sample records
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample_fields() -> list[FieldConfig]:
    """Fields for a "switches" category and a "lights" category."""
    return [
        make_field(
            "amperage",
            label="Amperage",
            type="select",
            required=True,
            displayOrder=1,
            groupId="electrical",
            options=[
                {"value": "6A", "label": "6 Amp"},
                {"value": "16A", "label": "16 Amp"},
                {"value": "32A", "label": "32 Amp", "disabled": True},
            ],
        ),
        make_field(
            "voltage",
            label="Voltage",
            type="number",
            required=True,
            displayOrder=2,
            groupId="electrical",
            validation={"min": 110, "max": 440},
        ),
        make_field(
            "watts",
            label="Watts",
            type="number",
            displayOrder=3,
            groupId="electrical",
            validation={"customValidator": "watts"},
        ),
        make_field("color", label="Color", displayOrder=10, groupId="appearance"),
        make_field("dimmable", label="Dimmable", type="boolean", displayOrder=4),
        make_field(
            "dimmerType",
            label="Dimmer Type",
            type="select",
            displayOrder=5,
            options=[
                {"value": "leading", "label": "Leading edge"},
                {"value": "trailing", "label": "Trailing edge"},
            ],
            conditional=[
                {"dependsOn": "dimmable", "condition": "equals", "value": True, "action": "show"}
            ],
        ),
        make_field(
            "lightType",
            label="Light Type",
            type="select",
            categories=["lights"],
            required=True,
            options=[
                {"value": "led", "label": "LED"},
                {"value": "cfl", "label": "CFL"},
            ],
        ),
        make_field(
            "lumens", label="Lumens", type="number", categories=["lights"], displayOrder=2
        ),
        make_field("suitableFor", label="Suitable For", categories=["lights"]),
    ]


@pytest.fixture
def sample_groups() -> list[FieldGroup]:
    return [
        FieldGroup(id="electrical", name="electrical", label="Electrical", display_order=1),
        FieldGroup(id="appearance", name="appearance", label="Appearance", display_order=2),
        FieldGroup(id="unused", name="unused", label="Unused", display_order=3),
    ]


@pytest.fixture
def sample_mappings() -> list[CategoryFieldMapping]:
    return [
        CategoryFieldMapping(
            category_id="switches",
            category_name="Switches",
            required_field_keys=["amperage", "voltage"],
            optional_field_keys=["watts", "color", "dimmable", "dimmerType"],
            field_groups=["electrical", "appearance"],
        ),
        CategoryFieldMapping(
            category_id="lights",
            category_name="Lights",
            required_field_keys=["lightType", "lumens"],
            optional_field_keys=["suitableFor"],
            name_source_field="suitableFor",
        ),
    ]


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def store(
    sample_fields: list[FieldConfig],
    sample_groups: list[FieldGroup],
    sample_mappings: list[CategoryFieldMapping],
) -> InMemoryFieldStore:
    return InMemoryFieldStore(sample_fields, sample_groups, sample_mappings)


@pytest.fixture
def cache(clock: FakeClock) -> FieldCache:
    return FieldCache(default_ttl=300, clock=clock)


@pytest.fixture
def data_access(store: InMemoryFieldStore, cache: FieldCache) -> FieldDataAccess:
    return FieldDataAccess(store, cache)


@pytest.fixture
def registry(data_access: FieldDataAccess) -> FieldRegistry:
    """Registry over the sample store, not yet loaded."""
    return FieldRegistry(data_access, RegistrySettings())


@pytest.fixture
def factory(store: InMemoryFieldStore) -> ServiceFactory:
    return ServiceFactory(store=store)


@pytest.fixture
def field_factory() -> Any:
    """The ``make_field`` helper, for tests that build their own fields."""
    return make_field
