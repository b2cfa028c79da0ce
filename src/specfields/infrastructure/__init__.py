"""Infrastructure layer - FieldStore implementations."""

from .memory_store import InMemoryFieldStore
from .sanity import SanityFieldStore

__all__ = ["InMemoryFieldStore", "SanityFieldStore"]
