"""Cache-first access to the external field store.

``FieldDataAccess`` is the only component that talks to a ``FieldStore``.
Reads are served from a ``FieldCache`` when possible; writes always round
trip through the store first and then invalidate exactly the cache entries
the change can affect.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from specfields.application.cache import CacheStats, FieldCache
from specfields.application.events import DataAccessSubscriber, SubscriberSet
from specfields.contracts.store import FieldStore
from specfields.domain.exceptions import RegistryError, RegistryOperation
from specfields.domain.models import CategoryFieldMapping, FieldConfig, FieldGroup

logger = logging.getLogger(__name__)

ALL_FIELDS_KEY = "field_configs"
CATEGORY_FIELDS_PREFIX = "field_configs_category_"
CATEGORY_MAPPINGS_KEY = "category_mappings"
FIELD_GROUPS_KEY = "field_options_groups"
FIELD_KEY_PREFIX = "field_"

# Data access event names
FIELDS_LOADED = "fields_loaded"
CATEGORY_FIELDS_LOADED = "category_fields_loaded"
CATEGORY_MAPPINGS_LOADED = "category_mappings_loaded"
FIELD_GROUPS_LOADED = "field_groups_loaded"
FIELD_CREATED = "field_created"
FIELD_UPDATED = "field_updated"
FIELD_DELETED = "field_deleted"
CACHE_CLEARED = "cache_cleared"

MUTATION_EVENTS = frozenset({FIELD_CREATED, FIELD_UPDATED, FIELD_DELETED})


def category_cache_key(category_id: str) -> str:
    return f"{CATEGORY_FIELDS_PREFIX}{category_id}"


def field_cache_key(field_id: str) -> str:
    return f"{FIELD_KEY_PREFIX}{field_id}"


class FieldDataAccess:
    """Fetches, caches and mutates field records in the external store.

    Subscribers receive ``(event, data)`` for load events (fields_loaded,
    category_fields_loaded, category_mappings_loaded, field_groups_loaded,
    cache_cleared) and mutation events (field_created, field_updated,
    field_deleted). Mutation events carry the stored FieldConfig as data,
    or the deleted field's id for field_deleted.

    Example:
        access = FieldDataAccess(InMemoryFieldStore(), FieldCache(default_ttl=300))
        fields = await access.fetch_fields_for_category("switches")
    """

    def __init__(self, store: FieldStore, cache: FieldCache | None = None) -> None:
        self.store = store
        self.cache = cache if cache is not None else FieldCache()
        self._subscribers: SubscriberSet[DataAccessSubscriber] = SubscriberSet(
            "data access"
        )
        # Last known categories per field id, used for scoped invalidation
        self._field_categories: dict[str, set[str]] = {}

    # Reads

    async def fetch_all_fields(self) -> list[FieldConfig]:
        cached = self.cache.get(ALL_FIELDS_KEY)
        if cached is not None:
            return list(cached)

        try:
            fields = await self.store.fetch_all_fields()
        except Exception as e:
            logger.error(f"Failed to fetch field configurations: {e}")
            raise RegistryError.load_fields_failed(str(e)) from e

        self._remember(fields)
        self.cache.set(ALL_FIELDS_KEY, list(fields))
        logger.debug(f"Fetched {len(fields)} field configurations")
        self._notify(FIELDS_LOADED, fields)
        return list(fields)

    async def fetch_fields_for_category(self, category_id: str) -> list[FieldConfig]:
        """Return the active fields referencing ``category_id``.

        Two calls within the cache TTL hit the store once.
        """
        key = category_cache_key(category_id)
        cached = self.cache.get(key)
        if cached is not None:
            return list(cached)

        try:
            fields = await self.store.fetch_fields_for_category(category_id)
        except Exception as e:
            logger.error(f"Failed to fetch fields for category '{category_id}': {e}")
            raise RegistryError.load_fields_failed(
                str(e), {"category_id": category_id}
            ) from e

        self._remember(fields)
        self.cache.set(key, list(fields))
        logger.debug(f"Fetched {len(fields)} fields for category '{category_id}'")
        self._notify(CATEGORY_FIELDS_LOADED, {"category_id": category_id, "fields": fields})
        return list(fields)

    async def fetch_category_mappings(self) -> list[CategoryFieldMapping]:
        cached = self.cache.get(CATEGORY_MAPPINGS_KEY)
        if cached is not None:
            return list(cached)

        try:
            mappings = await self.store.fetch_category_mappings()
        except Exception as e:
            logger.error(f"Failed to fetch category mappings: {e}")
            raise RegistryError(
                RegistryOperation.LOAD_FIELDS,
                f"Failed to load category mappings: {e}",
            ) from e

        self.cache.set(CATEGORY_MAPPINGS_KEY, list(mappings))
        self._notify(CATEGORY_MAPPINGS_LOADED, mappings)
        return list(mappings)

    async def fetch_field_groups(self) -> list[FieldGroup]:
        cached = self.cache.get(FIELD_GROUPS_KEY)
        if cached is not None:
            return list(cached)

        try:
            groups = await self.store.fetch_field_groups()
        except Exception as e:
            logger.error(f"Failed to fetch field groups: {e}")
            raise RegistryError(
                RegistryOperation.LOAD_FIELDS,
                f"Failed to load field groups: {e}",
            ) from e

        self.cache.set(FIELD_GROUPS_KEY, list(groups))
        self._notify(FIELD_GROUPS_LOADED, groups)
        return list(groups)

    # Writes

    async def create_field(self, config: Mapping[str, Any]) -> FieldConfig:
        try:
            created = await self.store.create_field(config)
        except Exception as e:
            logger.error(f"Failed to create field '{config.get('key')}': {e}")
            raise RegistryError(
                RegistryOperation.REGISTER_FIELD,
                f"Failed to create field: {e}",
                {"field_key": config.get("key")},
            ) from e

        self._invalidate_for(created.id, set(created.categories))
        self._field_categories[created.id] = set(created.categories)
        logger.info(f"Created field '{created.key}' ({created.id})")
        self._notify(FIELD_CREATED, created)
        return created

    async def update_field(
        self, field_id: str, updates: Mapping[str, Any]
    ) -> FieldConfig:
        """Apply a partial update through the store.

        Invalidates the categories the field belonged to before and after
        the update so every affected category refetches.
        """
        try:
            updated = await self.store.update_field(field_id, updates)
        except Exception as e:
            logger.error(f"Failed to update field '{field_id}': {e}")
            raise RegistryError(
                RegistryOperation.UPDATE_FIELD,
                f"Failed to update field: {e}",
                {"field_id": field_id},
            ) from e

        previous = self._field_categories.get(field_id)
        if previous is None:
            self._invalidate_for(field_id, None)
        else:
            self._invalidate_for(field_id, previous | set(updated.categories))
        self._field_categories[field_id] = set(updated.categories)
        logger.info(f"Updated field '{updated.key}' to version {updated.version}")
        self._notify(FIELD_UPDATED, updated)
        return updated

    async def delete_field(self, field_id: str) -> None:
        try:
            await self.store.delete_field(field_id)
        except Exception as e:
            logger.error(f"Failed to delete field '{field_id}': {e}")
            raise RegistryError(
                RegistryOperation.REMOVE_FIELD,
                f"Failed to delete field: {e}",
                {"field_id": field_id},
            ) from e

        self._invalidate_for(field_id, self._field_categories.pop(field_id, None))
        logger.info(f"Deleted field {field_id}")
        self._notify(FIELD_DELETED, field_id)

    # Cache and observer plumbing

    def subscribe(self, callback: DataAccessSubscriber) -> Callable[[], None]:
        """Register ``callback(event, data)``; returns an unsubscribe function."""
        return self._subscribers.subscribe(callback)

    def unsubscribe(self, callback: DataAccessSubscriber) -> bool:
        return self._subscribers.unsubscribe(callback)

    def clear_cache(self) -> None:
        self.cache.clear()
        self._field_categories.clear()
        logger.debug("Field data cache cleared")
        self._notify(CACHE_CLEARED, None)

    def get_cache_stats(self) -> CacheStats:
        return self.cache.get_stats()

    def _remember(self, fields: list[FieldConfig]) -> None:
        for config in fields:
            self._field_categories[config.id] = set(config.categories)

    def _invalidate_for(self, field_id: str, categories: set[str] | None) -> None:
        self.cache.delete(ALL_FIELDS_KEY)
        self.cache.delete(CATEGORY_MAPPINGS_KEY)
        self.cache.delete(field_cache_key(field_id))
        if categories is None:
            removed = self.cache.invalidate_prefix(CATEGORY_FIELDS_PREFIX)
            logger.debug(
                f"Categories of field {field_id} unknown; "
                f"invalidated {removed} category entries"
            )
            return
        for category_id in categories:
            self.cache.delete(category_cache_key(category_id))

    def _notify(self, event: str, data: Any) -> None:
        self._subscribers.notify(event, data)
