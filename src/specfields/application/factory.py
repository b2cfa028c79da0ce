"""Service factory for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from specfields.application.settings import RegistrySettings

if TYPE_CHECKING:
    from specfields.application.cache import FieldCache
    from specfields.application.data_access import FieldDataAccess
    from specfields.application.forms import FormGenerationEngine
    from specfields.application.legacy import LegacyFieldAdapter
    from specfields.application.registry import FieldRegistry
    from specfields.application.validation import ValidationEngine
    from specfields.contracts.store import FieldStore


@dataclass
class ServiceFactory:
    """Builds and caches the services that share one store.

    Every service is created on first use and then reused, so the registry,
    the form engine and the legacy adapter all observe the same data access
    layer and cache. Create one factory per store; there are no module
    level instances.

    Example:
        ```python
        factory = ServiceFactory(store=InMemoryFieldStore.from_catalog(catalog))
        registry = await factory.get_loaded_registry()
        adapter = factory.get_legacy_adapter()
        ```
    """

    store: "FieldStore"
    settings: RegistrySettings = field(default_factory=RegistrySettings)

    _cache: "FieldCache | None" = field(default=None, init=False, repr=False)
    _data_access: "FieldDataAccess | None" = field(default=None, init=False, repr=False)
    _registry: "FieldRegistry | None" = field(default=None, init=False, repr=False)
    _validation_engine: "ValidationEngine | None" = field(
        default=None, init=False, repr=False
    )
    _form_engine: "FormGenerationEngine | None" = field(
        default=None, init=False, repr=False
    )
    _legacy_adapter: "LegacyFieldAdapter | None" = field(
        default=None, init=False, repr=False
    )

    def get_cache(self) -> "FieldCache":
        """Get or create the store read cache."""
        if self._cache is None:
            from specfields.application.cache import FieldCache

            self._cache = FieldCache(default_ttl=self.settings.cache_ttl_seconds)
        return self._cache

    def get_data_access(self) -> "FieldDataAccess":
        if self._data_access is None:
            from specfields.application.data_access import FieldDataAccess

            self._data_access = FieldDataAccess(self.store, self.get_cache())
        return self._data_access

    def get_registry(self) -> "FieldRegistry":
        """Get or create the registry. It is not loaded yet."""
        if self._registry is None:
            from specfields.application.registry import FieldRegistry

            self._registry = FieldRegistry(self.get_data_access(), self.settings)
        return self._registry

    async def get_loaded_registry(self) -> "FieldRegistry":
        """Get the registry, loading it on first use."""
        registry = self.get_registry()
        if not registry.is_ready:
            await registry.load()
        return registry

    def get_validation_engine(self) -> "ValidationEngine":
        if self._validation_engine is None:
            from specfields.application.validation import ValidationEngine

            self._validation_engine = ValidationEngine()
        return self._validation_engine

    def get_form_engine(self) -> "FormGenerationEngine":
        if self._form_engine is None:
            from specfields.application.forms import FormGenerationEngine

            self._form_engine = FormGenerationEngine(
                self.get_data_access(),
                self.get_validation_engine(),
                self.settings,
            )
        return self._form_engine

    def get_legacy_adapter(self) -> "LegacyFieldAdapter":
        if self._legacy_adapter is None:
            from specfields.application.legacy import LegacyFieldAdapter

            self._legacy_adapter = LegacyFieldAdapter(
                self.get_registry(), self.get_validation_engine()
            )
        return self._legacy_adapter

    def close(self) -> None:
        """Detach the registry and form engine from data access events."""
        if self._registry is not None:
            self._registry.close()
        if self._form_engine is not None:
            self._form_engine.close()
