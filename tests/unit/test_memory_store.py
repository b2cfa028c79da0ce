"""Unit tests for the in-memory field store."""

import pytest

from specfields.domain import FieldConfig, StoreError
from specfields.infrastructure import InMemoryFieldStore


class TestInMemoryFieldStoreReads:
    """Tests for InMemoryFieldStore queries."""

    @pytest.mark.asyncio
    async def test_fetch_fields_for_category(self, store: InMemoryFieldStore) -> None:
        fields = await store.fetch_fields_for_category("lights")

        assert {f.key for f in fields} == {"lightType", "lumens", "suitableFor"}

    @pytest.mark.asyncio
    async def test_inactive_fields_are_not_returned(self, field_factory) -> None:
        store = InMemoryFieldStore(
            [field_factory("watts"), field_factory("color", isActive=False)]
        )

        fields = await store.fetch_all_fields()

        assert [f.key for f in fields] == ["watts"]

    @pytest.mark.asyncio
    async def test_calls_are_counted(self, store: InMemoryFieldStore) -> None:
        await store.fetch_all_fields()
        await store.fetch_all_fields()

        assert store.calls["fetch_all_fields"] == 2

    @pytest.mark.asyncio
    async def test_failure_is_raised(self, store: InMemoryFieldStore) -> None:
        store.failure = StoreError("down", status_code=503)

        with pytest.raises(StoreError, match="down"):
            await store.fetch_field_groups()

    @pytest.mark.asyncio
    async def test_failure_for_one_method(self, store: InMemoryFieldStore) -> None:
        store.failures["fetch_field_groups"] = StoreError("groups down")

        with pytest.raises(StoreError, match="groups down"):
            await store.fetch_field_groups()
        assert len(await store.fetch_all_fields()) > 0


class TestInMemoryFieldStoreWrites:
    """Tests for InMemoryFieldStore mutations."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_version(self, store: InMemoryFieldStore) -> None:
        created = await store.create_field(
            {"key": "phase", "label": "Phase", "type": "number", "categories": ["switches"]}
        )

        assert isinstance(created, FieldConfig)
        assert created.id.startswith("field-")
        assert created.version == 1
        assert created.created_at is not None

    @pytest.mark.asyncio
    async def test_create_duplicate_id_conflicts(self, store: InMemoryFieldStore) -> None:
        with pytest.raises(StoreError) as exc_info:
            await store.create_field(
                {"id": "field-watts", "key": "watts2", "label": "W", "type": "number"}
            )

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_update_increments_version(self, store: InMemoryFieldStore) -> None:
        updated = await store.update_field("field-watts", {"label": "Power", "version": 40})

        assert updated.label == "Power"
        assert updated.version == 2
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_update_missing_field(self, store: InMemoryFieldStore) -> None:
        with pytest.raises(StoreError) as exc_info:
            await store.update_field("missing", {"label": "x"})

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_delete(self, store: InMemoryFieldStore) -> None:
        await store.delete_field("field-color")

        keys = {f.key for f in await store.fetch_all_fields()}
        assert "color" not in keys

        with pytest.raises(StoreError):
            await store.delete_field("field-color")
