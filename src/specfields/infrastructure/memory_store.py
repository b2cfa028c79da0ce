"""Dictionary-backed FieldStore for catalogs and tests."""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from specfields.application.catalog import FieldCatalog
from specfields.domain.exceptions import StoreError
from specfields.domain.models import (
    CategoryFieldMapping,
    FieldConfig,
    FieldGroup,
    normalize_update_keys,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryFieldStore:
    """FieldStore holding records in dictionaries.

    Behaves like the document store: reads return active records only,
    ``update_field`` increments ``version`` and stamps ``updatedAt``.

    Attributes:
        calls: Number of calls per method name.
        failure: When set, every call raises it (simulates an outage).
        failures: Errors raised by single methods, keyed by method name.

    Example:
        store = InMemoryFieldStore.from_catalog(load_catalog(Path("catalog.json")))
        await store.fetch_fields_for_category("switches")
        store.calls["fetch_fields_for_category"]  # 1
    """

    def __init__(
        self,
        fields: Iterable[FieldConfig] = (),
        groups: Iterable[FieldGroup] = (),
        mappings: Iterable[CategoryFieldMapping] = (),
    ) -> None:
        self._fields: dict[str, FieldConfig] = {f.id: f for f in fields}
        self._groups: dict[str, FieldGroup] = {g.id: g for g in groups}
        self._mappings: dict[str, CategoryFieldMapping] = {
            m.category_id: m for m in mappings
        }
        self.calls: Counter[str] = Counter()
        self.failure: Exception | None = None
        self.failures: dict[str, Exception] = {}

    @classmethod
    def from_catalog(cls, catalog: FieldCatalog) -> "InMemoryFieldStore":
        return cls(catalog.fields, catalog.groups, catalog.category_mappings)

    def _record(self, method: str) -> None:
        self.calls[method] += 1
        error = self.failures.get(method, self.failure)
        if error is not None:
            raise error

    async def fetch_all_fields(self) -> list[FieldConfig]:
        self._record("fetch_all_fields")
        return [f for f in self._fields.values() if f.is_active]

    async def fetch_fields_for_category(self, category_id: str) -> list[FieldConfig]:
        self._record("fetch_fields_for_category")
        return [
            f
            for f in self._fields.values()
            if f.is_active and category_id in f.categories
        ]

    async def fetch_category_mappings(self) -> list[CategoryFieldMapping]:
        self._record("fetch_category_mappings")
        return [m for m in self._mappings.values() if m.is_active]

    async def fetch_field_groups(self) -> list[FieldGroup]:
        self._record("fetch_field_groups")
        return list(self._groups.values())

    async def create_field(self, config: Mapping[str, Any]) -> FieldConfig:
        self._record("create_field")
        data = normalize_update_keys(FieldConfig, config)
        now = _now()
        data.update(
            {
                "id": data.get("id") or f"field-{uuid.uuid4().hex[:12]}",
                "version": 1,
                "createdAt": now,
                "updatedAt": now,
            }
        )
        if data["id"] in self._fields:
            raise StoreError(f"Document '{data['id']}' already exists", status_code=409)

        created = FieldConfig.model_validate(data)
        self._fields[created.id] = created
        logger.debug(f"Stored new field '{created.key}' as {created.id}")
        return created

    async def update_field(
        self, field_id: str, updates: Mapping[str, Any]
    ) -> FieldConfig:
        self._record("update_field")
        current = self._fields.get(field_id)
        if current is None:
            raise StoreError(f"Document '{field_id}' not found", status_code=404)

        changes = {
            k: v
            for k, v in dict(updates).items()
            if k not in ("id", "version", "created_at", "createdAt")
        }
        changes.update({"version": current.version + 1, "updatedAt": _now()})
        updated = current.merged(changes)
        self._fields[field_id] = updated
        return updated

    async def delete_field(self, field_id: str) -> None:
        self._record("delete_field")
        if self._fields.pop(field_id, None) is None:
            raise StoreError(f"Document '{field_id}' not found", status_code=404)

    def add_mapping(self, mapping: CategoryFieldMapping) -> None:
        self._mappings[mapping.category_id] = mapping

    def add_group(self, group: FieldGroup) -> None:
        self._groups[group.id] = group
