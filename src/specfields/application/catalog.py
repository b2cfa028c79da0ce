"""Field catalogs: JSON snapshots of a store's contents.

A catalog file holds the three collections the store serves::

    {
      "fields": [...],
      "groups": [...],
      "categoryMappings": [...]
    }

Catalogs seed ``InMemoryFieldStore`` for the CLI and for tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field

from specfields.application.loader import load_model, validate_data
from specfields.domain.models import (
    CategoryFieldMapping,
    FieldConfig,
    FieldGroup,
    StoreModel,
)


class FieldCatalog(StoreModel):
    """Fields, groups and category mappings in store (camelCase) shape."""

    fields: list[FieldConfig] = Field(default_factory=list)
    groups: list[FieldGroup] = Field(default_factory=list)
    category_mappings: list[CategoryFieldMapping] = Field(default_factory=list)


def load_catalog(path: Path) -> FieldCatalog:
    """Load a catalog JSON file.

    Raises:
        ConfigError: If the file is missing, is not JSON or fails validation.
    """
    return load_model(FieldCatalog, path)


def load_catalog_from_dict(data: dict[str, Any]) -> FieldCatalog:
    return validate_data(FieldCatalog, data)
