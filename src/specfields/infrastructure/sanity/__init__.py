"""Sanity content lake integration."""

from .client import SanityFieldStore
from .documents import (
    field_from_document,
    field_to_document,
    group_from_document,
    mapping_from_document,
)

__all__ = [
    "SanityFieldStore",
    "field_from_document",
    "field_to_document",
    "group_from_document",
    "mapping_from_document",
]
