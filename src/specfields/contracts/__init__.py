"""Contracts module - protocols shared across layers.

By depending on protocols rather than concrete implementations, the
application layer stays independent of any particular document store.
"""

from .store import FieldStore as FieldStore
from .validators import CustomValidator as CustomValidator

__all__ = ["CustomValidator", "FieldStore"]
