"""Store protocol for the external document store.

The registry does not persist anything itself. Every durable read and write
goes through an implementation of ``FieldStore``; see
``specfields.infrastructure`` for the in-memory and Sanity implementations.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from specfields.domain.models import CategoryFieldMapping, FieldConfig, FieldGroup


@runtime_checkable
class FieldStore(Protocol):
    """Protocol for the persistent document store collaborator.

    All methods are coroutines. Implementations raise whatever their
    transport raises; the data access layer wraps those failures into
    ``RegistryError``.

    Example:
        class MyStore:
            async def fetch_all_fields(self) -> list[FieldConfig]:
                ...
    """

    async def fetch_all_fields(self) -> list[FieldConfig]:
        """Return every active field configuration."""
        ...

    async def fetch_fields_for_category(self, category_id: str) -> list[FieldConfig]:
        """Return active field configurations referencing ``category_id``."""
        ...

    async def fetch_category_mappings(self) -> list[CategoryFieldMapping]:
        """Return every active category mapping."""
        ...

    async def fetch_field_groups(self) -> list[FieldGroup]:
        """Return every active field group."""
        ...

    async def create_field(self, config: Mapping[str, Any]) -> FieldConfig:
        """Persist a new field and return the stored record.

        Args:
            config: Field attributes without id, timestamps or version.
        """
        ...

    async def update_field(
        self, field_id: str, updates: Mapping[str, Any]
    ) -> FieldConfig:
        """Apply a partial update and return the stored record.

        The store increments ``version`` on every update.
        """
        ...

    async def delete_field(self, field_id: str) -> None:
        """Hard-delete a field."""
        ...
