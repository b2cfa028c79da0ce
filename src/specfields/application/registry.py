"""In-memory registry of field configurations.

The registry indexes active FieldConfig records by key and by category and
keeps the category mappings the store declares. It is populated by ``load``
and then kept current by live updates from the data access layer; it never
writes to the store itself.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from specfields.application.data_access import (
    FIELD_CREATED,
    FIELD_DELETED,
    FIELD_UPDATED,
    FieldDataAccess,
)
from specfields.application.events import RegistryEvent, RegistrySubscriber, SubscriberSet
from specfields.application.settings import RegistrySettings
from specfields.domain.exceptions import (
    FieldConfigurationError,
    FieldConfigurationErrorCode,
    RegistryError,
    RegistryOperation,
)
from specfields.domain.models import CategoryFieldMapping, FieldConfig
from specfields.domain.value_objects import (
    FIELD_KEY_PATTERN,
    ConditionalCondition,
    FieldType,
    RegistryEventType,
    RegistryState,
)

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(FIELD_KEY_PATTERN)


def _error_from_pydantic(
    data: Mapping[str, Any], error: PydanticValidationError
) -> FieldConfigurationError:
    field_key = str(data.get("key") or "unknown")
    first = error.errors()[0]
    location = first["loc"][0] if first["loc"] else ""
    if location == "type":
        return FieldConfigurationError.invalid_type(
            field_key, data.get("type"), [t.value for t in FieldType]
        )
    if location == "key":
        return FieldConfigurationError.invalid_key(field_key, FIELD_KEY_PATTERN)
    return FieldConfigurationError(
        field_key,
        FieldConfigurationErrorCode.VALIDATION_ERROR,
        f"Invalid configuration for field '{field_key}': {first['msg']}",
        {"errors": [err["msg"] for err in error.errors()]},
    )


def _as_field_config(config: FieldConfig | Mapping[str, Any]) -> FieldConfig:
    if isinstance(config, FieldConfig):
        return config
    try:
        return FieldConfig.model_validate(dict(config))
    except PydanticValidationError as e:
        raise _error_from_pydantic(config, e) from e


def _sort_key(config: FieldConfig) -> tuple[int, str]:
    return (config.sort_position, config.key)


@dataclass
class _RegistryIndex:
    """Field, category and mapping indexes swapped in as a unit by ``load``."""

    fields: dict[str, FieldConfig] = field(default_factory=dict)
    categories: dict[str, list[str]] = field(default_factory=dict)
    mappings: dict[str, CategoryFieldMapping] = field(default_factory=dict)

    def key_for_id(self, field_id: str) -> str | None:
        for key, config in self.fields.items():
            if config.id == field_id:
                return key
        return None

    def add(self, config: FieldConfig) -> None:
        self.fields[config.key] = config
        for category_id in config.categories:
            keys = self.categories.setdefault(category_id, [])
            if config.key not in keys:
                keys.append(config.key)

    def attach_to_mappings(self, key: str) -> None:
        """Index ``key`` under every category whose mapping lists it."""
        for category_id, mapping in self.mappings.items():
            if key in mapping.field_keys:
                keys = self.categories.setdefault(category_id, [])
                if key not in keys:
                    keys.append(key)

    def discard(self, key: str) -> FieldConfig | None:
        config = self.fields.pop(key, None)
        for keys in self.categories.values():
            if key in keys:
                keys.remove(key)
        return config

    def apply_mapping(self, mapping: CategoryFieldMapping) -> CategoryFieldMapping:
        """Index a mapping, dropping keys that no registered field has."""
        unknown = [key for key in mapping.field_keys if key not in self.fields]
        if unknown:
            logger.warning(
                f"Category '{mapping.category_id}' references unknown fields "
                f"{unknown}; ignoring them"
            )
            mapping = mapping.model_copy(
                update={
                    "required_field_keys": [
                        k for k in mapping.required_field_keys if k in self.fields
                    ],
                    "optional_field_keys": [
                        k for k in mapping.optional_field_keys if k in self.fields
                    ],
                }
            )

        keys = self.categories.setdefault(mapping.category_id, [])
        for key in mapping.field_keys:
            if key not in keys:
                keys.append(key)
        self.mappings[mapping.category_id] = mapping
        return mapping


class FieldRegistry:
    """Indexed, observable view of the active field configurations.

    Lifecycle: ``uninitialized -> loading -> ready | error``. A failed load
    keeps the previously loaded indexes so readers keep working with the
    last known good data.

    Example:
        registry = FieldRegistry(data_access, RegistrySettings())
        await registry.load()
        required = registry.get_required_fields("switches")
        unsubscribe = registry.subscribe(lambda event: print(event.type))
    """

    def __init__(
        self,
        data_access: FieldDataAccess,
        settings: RegistrySettings | None = None,
    ) -> None:
        self.data_access = data_access
        self.settings = settings if settings is not None else RegistrySettings()
        self._index = _RegistryIndex()
        self._state = RegistryState.UNINITIALIZED
        self._subscribers: SubscriberSet[RegistrySubscriber] = SubscriberSet("registry")
        self.last_error: RegistryError | None = None
        self.rejected: list[FieldConfigurationError] = []
        # Ids of fields deactivated while indexed; a reload drops them from the index
        self._deactivated_ids: set[str] = set()

        self._detach: Callable[[], None] | None = None
        if self.settings.enable_real_time_updates:
            self._detach = data_access.subscribe(self._on_data_access_event)

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == RegistryState.READY

    def close(self) -> None:
        """Stop receiving live updates from the data access layer."""
        if self._detach is not None:
            self._detach()
            self._detach = None

    # Loading

    async def load(self) -> None:
        """Fetch every field and category mapping and rebuild the indexes.

        Fields that fail registration checks are skipped, logged and kept in
        ``rejected``; the rest of the load proceeds.

        Raises:
            RegistryError: If the store cannot be read. The registry enters
                the error state and keeps its previous indexes.
        """
        self._state = RegistryState.LOADING
        try:
            fields = await self.data_access.fetch_all_fields()
            mappings = await self.data_access.fetch_category_mappings()
        except RegistryError as e:
            self._fail(e)
            raise
        except Exception as e:
            error = RegistryError.load_fields_failed(str(e))
            self._fail(error)
            raise error from e

        index = _RegistryIndex()
        rejected: list[FieldConfigurationError] = []
        for config in fields:
            try:
                self._check(config, index)
            except FieldConfigurationError as e:
                logger.warning(f"Skipping field '{config.key}': {e}")
                rejected.append(e)
                continue
            index.add(config)

        for mapping in mappings:
            index.apply_mapping(mapping)

        self._deactivated_ids.update(
            f.id for f in self._index.fields.values() if not f.is_active
        )
        self._deactivated_ids.difference_update(f.id for f in index.fields.values())
        self._index = index
        self.rejected = rejected
        self.last_error = None
        self._state = RegistryState.READY
        logger.info(
            f"Field registry loaded {len(index.fields)} fields and "
            f"{len(index.mappings)} category mappings"
        )
        self._emit(RegistryEventType.CATEGORY_MAPPING_CHANGED, "all", list(index.mappings))

    async def refresh(self) -> None:
        """Drop cached store data and reload."""
        self.data_access.clear_cache()
        await self.load()

    def _fail(self, error: RegistryError) -> None:
        self._state = RegistryState.ERROR
        self.last_error = error
        logger.error(f"Field registry load failed: {error}")

    # Queries

    def get_field(self, key: str) -> FieldConfig | None:
        return self._index.fields.get(key)

    def get_all_fields(self, include_inactive: bool = False) -> list[FieldConfig]:
        return sorted(
            (f for f in self._index.fields.values() if include_inactive or f.is_active),
            key=_sort_key,
        )

    def get_fields_for_category(self, category_id: str) -> list[FieldConfig]:
        """Active fields of a category, by display order then key."""
        fields = (
            self._index.fields[key]
            for key in self._index.categories.get(category_id, [])
            if key in self._index.fields
        )
        return sorted((f for f in fields if f.is_active), key=_sort_key)

    def get_required_fields(self, category_id: str) -> list[FieldConfig]:
        """Fields required on their own or through the category mapping."""
        required_keys = set(self._mapping_required_keys(category_id))
        return [
            f
            for f in self.get_fields_for_category(category_id)
            if f.required or f.key in required_keys
        ]

    def get_optional_fields(self, category_id: str) -> list[FieldConfig]:
        required_keys = set(self._mapping_required_keys(category_id))
        return [
            f
            for f in self.get_fields_for_category(category_id)
            if not f.required and f.key not in required_keys
        ]

    def get_form_fields(self, category_id: str) -> list[FieldConfig]:
        """Category fields with mapping-required keys marked ``required``."""
        required_keys = set(self._mapping_required_keys(category_id))
        return [
            f.model_copy(update={"required": True})
            if f.key in required_keys and not f.required
            else f
            for f in self.get_fields_for_category(category_id)
        ]

    def get_category_mapping(self, category_id: str) -> CategoryFieldMapping | None:
        return self._index.mappings.get(category_id)

    def get_category_mappings(self) -> list[CategoryFieldMapping]:
        return sorted(
            self._index.mappings.values(),
            key=lambda m: (m.display_order, m.category_id),
        )

    def get_category_field_keys(self, category_id: str) -> list[str]:
        return [f.key for f in self.get_fields_for_category(category_id)]

    def _mapping_required_keys(self, category_id: str) -> list[str]:
        mapping = self._index.mappings.get(category_id)
        return mapping.required_field_keys if mapping is not None else []

    # Index mutations

    def register_field(self, config: FieldConfig | Mapping[str, Any]) -> FieldConfig:
        """Add a field to the index.

        Args:
            config: A FieldConfig, or a mapping in store (camelCase) or
                attribute (snake_case) shape.

        Returns:
            The registered FieldConfig.

        Raises:
            FieldConfigurationError: If the definition is rejected. The
                index is left unchanged.
        """
        config = _as_field_config(config)
        self._check(config, self._index)
        self._index.add(config)
        logger.debug(f"Registered field '{config.key}'")
        self._emit(RegistryEventType.FIELD_ADDED, config.key, config)
        return config

    def register_fields(
        self, configs: Iterable[FieldConfig | Mapping[str, Any]]
    ) -> list[FieldConfigurationError]:
        """Register a batch, skipping rejected definitions.

        Returns:
            Errors for the rejected definitions, in batch order.
        """
        errors: list[FieldConfigurationError] = []
        for config in configs:
            try:
                self.register_field(config)
            except FieldConfigurationError as e:
                logger.warning(f"Rejected field '{e.field_key}': {e}")
                errors.append(e)
        return errors

    def replace_field(self, config: FieldConfig | Mapping[str, Any]) -> FieldConfig:
        """Apply a new version of a field already in the index.

        The field is matched by id, so a changed key replaces the old key.
        Unknown ids are registered as new fields, except that a field
        deactivated before a reload comes back as ``field_activated``.

        Raises:
            FieldConfigurationError: If the new version is rejected. The
                previous version stays in place.
        """
        config = _as_field_config(config)
        old_key = self._index.key_for_id(config.id)
        if old_key is None:
            if config.id in self._deactivated_ids and config.is_active:
                return self._reactivate(config)
            return self.register_field(config)

        previous = self._index.fields[old_key]
        self._check(config, self._index, replacing=previous)

        self._index.discard(old_key)
        self._index.add(config)
        self._index.attach_to_mappings(config.key)

        logger.debug(f"Replaced field '{config.key}' (version {config.version})")
        self._emit(RegistryEventType.FIELD_UPDATED, config.key, config)
        if previous.is_active and not config.is_active:
            self._deactivated_ids.add(config.id)
            self._emit(RegistryEventType.FIELD_DEACTIVATED, config.key, config)
        elif not previous.is_active and config.is_active:
            self._deactivated_ids.discard(config.id)
            self._emit(RegistryEventType.FIELD_ACTIVATED, config.key, config)
        return config

    def _reactivate(self, config: FieldConfig) -> FieldConfig:
        """Index a field that a reload dropped while it was inactive."""
        self._check(config, self._index)
        self._index.add(config)
        self._deactivated_ids.discard(config.id)
        self._index.attach_to_mappings(config.key)
        logger.debug(f"Reactivated field '{config.key}'")
        self._emit(RegistryEventType.FIELD_ACTIVATED, config.key, config)
        return config

    def remove_field(self, key: str) -> FieldConfig:
        """Drop a field from every index.

        Raises:
            RegistryError: If no field has that key.
        """
        config = self._index.discard(key)
        if config is None:
            raise RegistryError.field_not_found(RegistryOperation.REMOVE_FIELD, key)
        logger.debug(f"Removed field '{key}'")
        self._emit(RegistryEventType.FIELD_REMOVED, key, config)
        return config

    def set_category_fields(self, category_id: str, keys: Iterable[str]) -> list[str]:
        """Replace the field keys indexed for a category.

        Unknown keys are dropped with a warning.

        Returns:
            The keys actually indexed.
        """
        keys = list(dict.fromkeys(keys))
        unknown = [key for key in keys if key not in self._index.fields]
        if unknown:
            logger.warning(
                f"Ignoring unknown fields {unknown} for category '{category_id}'"
            )
        indexed = [key for key in keys if key in self._index.fields]
        self._index.categories[category_id] = indexed

        mapping = self._index.mappings.get(category_id)
        if mapping is not None:
            self._index.mappings[category_id] = mapping.model_copy(
                update={
                    "required_field_keys": [
                        k for k in mapping.required_field_keys if k in indexed
                    ],
                    "optional_field_keys": [
                        k
                        for k in indexed
                        if k not in mapping.required_field_keys
                    ],
                }
            )

        self._emit(RegistryEventType.CATEGORY_MAPPING_CHANGED, category_id, indexed)
        return indexed

    # Observer

    def subscribe(self, callback: RegistrySubscriber) -> Callable[[], None]:
        """Register ``callback(event)``; returns a function that unsubscribes."""
        return self._subscribers.subscribe(callback)

    def unsubscribe(self, callback: RegistrySubscriber) -> bool:
        return self._subscribers.unsubscribe(callback)

    def _emit(self, event_type: RegistryEventType, field_key: str, data: Any) -> None:
        self._subscribers.notify(RegistryEvent(type=event_type, field_key=field_key, data=data))

    def _on_data_access_event(self, event: str, data: Any) -> None:
        try:
            if event in (FIELD_CREATED, FIELD_UPDATED):
                self.replace_field(data)
            elif event == FIELD_DELETED:
                self._deactivated_ids.discard(data)
                key = self._index.key_for_id(data)
                if key is not None:
                    self.remove_field(key)
        except FieldConfigurationError as e:
            logger.warning(f"Live update for field '{e.field_key}' rejected: {e}")

    # Registration checks

    def _check(
        self,
        config: FieldConfig,
        index: _RegistryIndex,
        replacing: FieldConfig | None = None,
    ) -> None:
        existing = index.fields.get(config.key)
        if existing is not None and existing is not replacing:
            raise FieldConfigurationError.duplicate_key(config.key, existing.id)

        if not self.settings.validate_on_load:
            return

        if not _KEY_RE.fullmatch(config.key):
            raise FieldConfigurationError.invalid_key(config.key, FIELD_KEY_PATTERN)

        if config.type.has_options and not config.options:
            raise FieldConfigurationError.missing_options(config.key, config.type.value)

        for rule in config.conditional or []:
            if rule.depends_on == config.key:
                raise FieldConfigurationError.invalid_conditional_rule(
                    config.key, "a field cannot depend on itself"
                )
            if rule.condition in (
                ConditionalCondition.IN,
                ConditionalCondition.NOT_IN,
            ) and not isinstance(rule.value, list):
                raise FieldConfigurationError.invalid_conditional_rule(
                    config.key, f"'{rule.condition.value}' requires a list value"
                )
            if rule.depends_on not in index.fields:
                logger.warning(
                    f"Field '{config.key}' depends on unregistered field "
                    f"'{rule.depends_on}'"
                )

        chain = self._longest_chain(config, index)
        if len(chain) - 1 > self.settings.max_conditional_depth:
            raise FieldConfigurationError.conditional_depth_exceeded(
                config.key, chain, self.settings.max_conditional_depth
            )

        limit = self.settings.max_fields_per_category
        for category_id in config.categories:
            keys = [k for k in index.categories.get(category_id, []) if k != config.key]
            if replacing is not None:
                keys = [k for k in keys if k != replacing.key]
            if len(keys) >= limit:
                raise FieldConfigurationError.too_many_fields(config.key, category_id, limit)

    def _longest_chain(self, config: FieldConfig, index: _RegistryIndex) -> list[str]:
        """Longest ``dependsOn`` chain starting at ``config``.

        The walk follows registered fields only and stops at keys already on
        the current path.
        """

        def walk(current: FieldConfig, path: list[str]) -> list[str]:
            best = path
            for rule in current.conditional or []:
                target = index.fields.get(rule.depends_on)
                if target is None or rule.depends_on in path:
                    candidate = path if target is not None else [*path, rule.depends_on]
                else:
                    candidate = walk(target, [*path, rule.depends_on])
                if len(candidate) > len(best):
                    best = candidate
            return best

        return walk(config, [config.key])
