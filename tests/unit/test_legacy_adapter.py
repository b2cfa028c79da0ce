"""Unit tests for the legacy field-definition adapter."""

import pytest
import pytest_asyncio

from specfields.application import FieldRegistry
from specfields.application.legacy import (
    LegacyFieldAdapter,
    LegacyFieldDefinition,
    LegacyFieldType,
)
from specfields.application.validation import ValidationContext
from specfields.domain import (
    CategoryType,
    FieldConfigurationError,
    FieldConfigurationErrorCode,
    FieldType,
)


@pytest_asyncio.fixture
async def adapter(registry: FieldRegistry) -> LegacyFieldAdapter:
    await registry.load()
    return LegacyFieldAdapter(registry)


class TestToLegacy:
    """Tests for FieldConfig -> LegacyFieldDefinition."""

    @pytest.mark.asyncio
    async def test_basic_conversion(self, adapter: LegacyFieldAdapter) -> None:
        legacy = adapter.to_legacy_field_definition(adapter.registry.get_field("voltage"))

        assert legacy.field_key == "voltage"
        assert legacy.field_type == LegacyFieldType.NUMBER
        assert legacy.validation_rules.required is True
        assert legacy.validation_rules.min_value == 110
        assert legacy.sort_order == 2
        assert legacy.applicable_categories[0].ref == "switches"

    @pytest.mark.asyncio
    async def test_document_shape(self, adapter: LegacyFieldAdapter) -> None:
        legacy = adapter.to_legacy_field_definition(adapter.registry.get_field("voltage"))

        document = legacy.to_document()

        assert document["_id"] == "field-voltage"
        assert document["fieldKey"] == "voltage"
        assert document["applicableCategories"] == [
            {"_ref": "switches", "_type": "reference"}
        ]

    @pytest.mark.asyncio
    async def test_conditional_value_becomes_text(self, adapter: LegacyFieldAdapter) -> None:
        legacy = adapter.to_legacy_field_definition(adapter.registry.get_field("dimmerType"))

        assert legacy.conditional_logic.depends_on == "dimmable"
        assert legacy.conditional_logic.value == "true"

    @pytest.mark.asyncio
    async def test_unsupported_type_is_downgraded(
        self, adapter: LegacyFieldAdapter, field_factory
    ) -> None:
        legacy = adapter.to_legacy_field_definition(field_factory("notes", type="textarea"))

        assert legacy.field_type == LegacyFieldType.TEXT

    @pytest.mark.asyncio
    async def test_unset_display_order_sorts_last(
        self, adapter: LegacyFieldAdapter
    ) -> None:
        legacy = adapter.to_legacy_field_definition(adapter.registry.get_field("lightType"))

        assert legacy.sort_order == 999


class TestFromLegacy:
    """Tests for LegacyFieldDefinition -> FieldConfig."""

    @pytest.mark.asyncio
    async def test_from_document(self, adapter: LegacyFieldAdapter) -> None:
        config = adapter.from_legacy_field_definition(
            {
                "_id": "legacy-1",
                "fieldKey": "rpm",
                "fieldLabel": "RPM",
                "fieldType": "number",
                "validationRules": {"minValue": 100, "maxValue": 3000},
                "sortOrder": 4,
                "conditionalLogic": {
                    "dependsOn": "motorType",
                    "condition": "equals",
                    "value": "ac",
                },
            },
            "fans",
            is_required=True,
        )

        assert config.type == FieldType.NUMBER
        assert config.categories == ["fans"]
        assert config.required is True
        assert config.validation.min == 100
        assert config.display_order == 4
        assert config.conditional[0].depends_on == "motorType"

    @pytest.mark.asyncio
    async def test_round_trip_keeps_key_fields(self, adapter: LegacyFieldAdapter) -> None:
        original = adapter.registry.get_field("amperage")
        legacy = adapter.to_legacy_field_definition(original)

        restored = adapter.from_legacy_field_definition(legacy, "switches")

        assert restored.key == original.key
        assert restored.type == original.type
        assert restored.required is True

    @pytest.mark.asyncio
    async def test_round_trip_keeps_list_rule_value(
        self, adapter: LegacyFieldAdapter, field_factory
    ) -> None:
        original = field_factory(
            "finish",
            categories=["fans"],
            conditional=[{"dependsOn": "kind", "condition": "in", "value": ["a", "b"]}],
        )

        restored = adapter.from_legacy_field_definition(
            adapter.to_legacy_field_definition(original), "fans"
        )

        assert restored.conditional[0].value == ["a", "b"]
        result = adapter.validation_engine.validate_field(
            restored,
            "x" * 5000,
            ValidationContext(field_key="finish", all_values={"kind": "a"}),
        )
        assert result.errors == ["Finish cannot exceed 255 characters"]
        assert adapter.registry.register_field(restored).key == "finish"

    @pytest.mark.asyncio
    async def test_round_trip_keeps_boolean_rule_value(
        self, adapter: LegacyFieldAdapter
    ) -> None:
        original = adapter.registry.get_field("dimmerType")

        restored = adapter.from_legacy_field_definition(
            adapter.to_legacy_field_definition(original), "switches"
        )

        assert restored.conditional[0].value is True
        assert restored.conditional[0].condition == original.conditional[0].condition

    @pytest.mark.asyncio
    async def test_plain_rule_value_stays_text(self, adapter: LegacyFieldAdapter) -> None:
        legacy = LegacyFieldDefinition.model_validate(
            {
                "_id": "x",
                "fieldKey": "rpm",
                "fieldLabel": "RPM",
                "fieldType": "number",
                "conditionalLogic": {"dependsOn": "phase", "condition": "equals", "value": "1"},
            }
        )

        config = adapter.from_legacy_field_definition(legacy, "fans")

        assert config.conditional[0].value == "1"

    @pytest.mark.asyncio
    async def test_unknown_type(self, adapter: LegacyFieldAdapter) -> None:
        with pytest.raises(FieldConfigurationError) as exc_info:
            adapter.from_legacy_field_definition(
                {"_id": "x", "fieldKey": "rpm", "fieldLabel": "RPM", "fieldType": "dial"},
                "fans",
            )

        assert exc_info.value.code == FieldConfigurationErrorCode.INVALID_TYPE

    @pytest.mark.asyncio
    async def test_invalid_key(self, adapter: LegacyFieldAdapter) -> None:
        legacy = LegacyFieldDefinition(
            id="x", field_key="2rpm", field_label="RPM", field_type=LegacyFieldType.NUMBER
        )

        with pytest.raises(FieldConfigurationError) as exc_info:
            adapter.from_legacy_field_definition(legacy, "fans")

        assert exc_info.value.code == FieldConfigurationErrorCode.VALIDATION_ERROR

    @pytest.mark.asyncio
    async def test_unknown_condition(self, adapter: LegacyFieldAdapter) -> None:
        legacy = LegacyFieldDefinition.model_validate(
            {
                "_id": "x",
                "fieldKey": "rpm",
                "fieldLabel": "RPM",
                "fieldType": "number",
                "conditionalLogic": {"dependsOn": "a", "condition": "between", "value": "1"},
            }
        )

        with pytest.raises(FieldConfigurationError) as exc_info:
            adapter.from_legacy_field_definition(legacy, "fans")

        assert exc_info.value.code == FieldConfigurationErrorCode.INVALID_CONDITIONAL_RULE


class TestCategoryMapping:
    """Tests for legacy category views."""

    @pytest.mark.asyncio
    async def test_switches_mapping(self, adapter: LegacyFieldAdapter) -> None:
        mapping = adapter.get_legacy_category_field_mapping("switches")

        assert mapping.category_type == CategoryType.AMPERE
        assert [f.field_key for f in mapping.required_fields] == ["amperage", "voltage"]
        assert "color" in [f.field_key for f in mapping.optional_fields]

    @pytest.mark.asyncio
    async def test_lights_classified(self, adapter: LegacyFieldAdapter) -> None:
        mapping = adapter.get_legacy_category_field_mapping("lights")

        assert mapping.category_type == CategoryType.LIGHT
        assert [f.field_key for f in mapping.required_fields] == ["lumens", "lightType"]

    @pytest.mark.asyncio
    async def test_dynamic_component_config(self, adapter: LegacyFieldAdapter) -> None:
        config = adapter.get_field_config_for_dynamic_component("lights")

        assert set(config) == {"required_fields", "optional_fields"}
        assert [f.field_key for f in config["optional_fields"]] == ["suitableFor"]

    @pytest.mark.asyncio
    async def test_field_options(self, adapter: LegacyFieldAdapter) -> None:
        assert adapter.get_field_options_legacy("lightType") == [
            {"value": "led", "label": "LED"},
            {"value": "cfl", "label": "CFL"},
        ]
        assert adapter.get_field_options_legacy("voltage") == []
        assert adapter.get_field_options_legacy("missing") == []


class TestFormData:
    """Tests for migrating and validating legacy form data."""

    @pytest.mark.asyncio
    async def test_migrate_coerces_types(self, adapter: LegacyFieldAdapter) -> None:
        migrated = adapter.migrate_form_data(
            {"voltage": "230", "watts": "12.5", "dimmable": "TRUE", "notes": "kept"},
            "switches",
        )

        assert migrated == {"voltage": 230, "watts": 12.5, "dimmable": True, "notes": "kept"}

    @pytest.mark.asyncio
    async def test_migrate_whole_number_string(self, adapter: LegacyFieldAdapter) -> None:
        assert adapter.migrate_form_data({"watts": "100"}, "switches") == {"watts": 100}

    @pytest.mark.asyncio
    async def test_migrate_keeps_unparseable_values(
        self, adapter: LegacyFieldAdapter
    ) -> None:
        migrated = adapter.migrate_form_data({"voltage": "230V"}, "switches")

        assert migrated == {"voltage": "230V"}

    @pytest.mark.asyncio
    async def test_migrate_multiselect(
        self, adapter: LegacyFieldAdapter, field_factory
    ) -> None:
        adapter.registry.register_field(
            field_factory(
                "finish",
                type="multiselect",
                options=[{"value": "matte", "label": "Matte"}],
            )
        )

        assert adapter.migrate_form_data({"finish": "matte"}, "switches") == {
            "finish": ["matte"]
        }
        assert adapter.migrate_form_data({"finish": ""}, "switches") == {"finish": []}

    @pytest.mark.asyncio
    async def test_validate_form_data(self, adapter: LegacyFieldAdapter) -> None:
        is_valid, errors = adapter.validate_form_data(
            {"lightType": "halogen", "lumens": ""}, "lights"
        )

        assert is_valid is False
        assert errors == {
            "lightType": "Light Type must be one of: led, cfl",
            "lumens": "Lumens is required",
        }

    @pytest.mark.asyncio
    async def test_validate_valid_form_data(self, adapter: LegacyFieldAdapter) -> None:
        is_valid, errors = adapter.validate_form_data(
            {"lightType": "led", "lumens": "800"}, "lights"
        )

        assert is_valid is True
        assert errors == {}
