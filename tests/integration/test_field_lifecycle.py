"""Integration tests for a field's lifecycle across all services.

A field created, updated and deleted through the data access layer must be
reflected by the registry, the form engine and the legacy adapter without
any manual refresh.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from specfields.application import RegistryEvent, ServiceFactory, load_catalog
from specfields.application.forms import FormGenerationOptions
from specfields.domain import RegistryEventType
from specfields.infrastructure import InMemoryFieldStore
from specfields.web.app import CATALOG_ENV, SETTINGS_ENV, create_app

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures"

pytestmark = pytest.mark.integration


@pytest.fixture
def catalog_factory() -> ServiceFactory:
    catalog = load_catalog(FIXTURES_PATH / "catalog.json")
    return ServiceFactory(store=InMemoryFieldStore.from_catalog(catalog))


class TestFieldLifecycle:
    """End-to-end create/update/delete flow."""

    @pytest.mark.asyncio
    async def test_create_update_delete(self, catalog_factory: ServiceFactory) -> None:
        registry = await catalog_factory.get_loaded_registry()
        data_access = catalog_factory.get_data_access()
        form_engine = catalog_factory.get_form_engine()
        adapter = catalog_factory.get_legacy_adapter()
        events: list[RegistryEvent] = []
        registry.subscribe(events.append)

        options = FormGenerationOptions(category_id="lights", include_optional_fields=True)
        before = await form_engine.generate_form_schema(options)
        assert [f.key for f in before.fields] == ["lightType", "lumens"]

        created = await data_access.create_field(
            {
                "key": "colorTemp",
                "label": "Color Temperature",
                "type": "number",
                "categories": ["lights"],
                "displayOrder": 1,
                "validation": {"min": 1800, "max": 6500},
            }
        )
        assert events[-1].type == RegistryEventType.FIELD_ADDED

        after_create = await form_engine.generate_form_schema(options)
        assert [f.key for f in after_create.fields][0] == "colorTemp"
        assert adapter.migrate_form_data({"colorTemp": "2700"}, "lights") == {"colorTemp": 2700}

        await data_access.update_field(created.id, {"isActive": False})
        assert events[-1].type == RegistryEventType.FIELD_DEACTIVATED
        assert "colorTemp" not in registry.get_category_field_keys("lights")
        after_update = await form_engine.generate_form_schema(options)
        assert "colorTemp" not in [f.key for f in after_update.fields]

        await data_access.delete_field(created.id)
        assert events[-1].type == RegistryEventType.FIELD_REMOVED
        assert registry.get_field("colorTemp") is None

    @pytest.mark.asyncio
    async def test_validation_matches_between_engines(
        self, catalog_factory: ServiceFactory
    ) -> None:
        """The legacy adapter and the form validator report the same problems."""
        registry = await catalog_factory.get_loaded_registry()
        values = {"amperage": "10A", "voltage": "9000"}

        form_result = catalog_factory.get_validation_engine().validate_form(
            registry.get_form_fields("switches"), values, "switches"
        )
        is_valid, legacy_errors = catalog_factory.get_legacy_adapter().validate_form_data(
            values, "switches"
        )

        assert is_valid is False
        assert {k: v[0] for k, v in form_result.errors.items()} == legacy_errors


class TestDefaultApp:
    """The API built from environment variables."""

    def test_catalog_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(SETTINGS_ENV, raising=False)
        monkeypatch.setenv(CATALOG_ENV, str(FIXTURES_PATH / "catalog.json"))

        with TestClient(create_app()) as client:
            response = client.post(
                "/api/v1/legacy/validate",
                json={"category_id": "switches", "values": {"amperage": "6A", "voltage": 230}},
            )
            health = client.get("/health")

        assert response.json() == {"is_valid": True, "errors": {}}
        assert health.json()["registry"] == "ready"

    def test_empty_catalog_without_configuration(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv(SETTINGS_ENV, raising=False)
        monkeypatch.delenv(CATALOG_ENV, raising=False)

        with TestClient(create_app()) as client:
            response = client.get("/api/v1/legacy/categories/switches")

        assert response.status_code == 404
