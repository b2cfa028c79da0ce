"""Application layer - caching, registry, validation, forms and legacy support."""

from .cache import CacheStats, FieldCache
from .catalog import FieldCatalog, load_catalog, load_catalog_from_dict
from .data_access import FieldDataAccess
from .events import RegistryEvent, SubscriberSet
from .factory import ServiceFactory
from .loader import ConfigError
from .registry import FieldRegistry
from .settings import (
    RegistrySettings,
    SanitySettings,
    load_settings,
    load_settings_from_dict,
)

__all__ = [
    "CacheStats",
    "ConfigError",
    "FieldCache",
    "FieldCatalog",
    "FieldDataAccess",
    "FieldRegistry",
    "RegistryEvent",
    "RegistrySettings",
    "SanitySettings",
    "ServiceFactory",
    "SubscriberSet",
    "load_catalog",
    "load_catalog_from_dict",
    "load_settings",
    "load_settings_from_dict",
]
