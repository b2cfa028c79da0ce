"""Observer primitives shared by the data access layer and the registry.

Subscribers are plain callables. ``subscribe`` returns a function that
removes the subscription, so UI integrations only need a thin adapter.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from specfields.domain.value_objects import RegistryEventType

logger = logging.getLogger(__name__)

CallbackT = TypeVar("CallbackT", bound=Callable[..., Any])


@dataclass(frozen=True)
class RegistryEvent:
    """A change broadcast by the field registry.

    Attributes:
        type: What happened.
        field_key: Affected field key (category id for mapping changes,
            "all" after a full load).
        timestamp: When the event was emitted (UTC).
        data: Event payload, usually the affected FieldConfig.
    """

    type: RegistryEventType
    field_key: str
    data: Any = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


RegistrySubscriber = Callable[[RegistryEvent], None]
DataAccessSubscriber = Callable[[str, Any], None]


class SubscriberSet(Generic[CallbackT]):
    """Ordered set of callbacks notified synchronously.

    A callback that raises is logged and skipped; the remaining callbacks
    still receive the notification.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._callbacks: list[CallbackT] = []

    def subscribe(self, callback: CallbackT) -> Callable[[], None]:
        """Add ``callback`` and return a function that removes it again."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

        def unsubscribe() -> None:
            self.unsubscribe(callback)

        return unsubscribe

    def unsubscribe(self, callback: CallbackT) -> bool:
        """Remove ``callback``. Returns True if it was subscribed."""
        try:
            self._callbacks.remove(callback)
        except ValueError:
            return False
        return True

    def notify(self, *args: Any) -> None:
        # Copy so callbacks may unsubscribe while being notified
        for callback in list(self._callbacks):
            try:
                callback(*args)
            except Exception:
                logger.exception(f"Error notifying {self._name} subscriber {callback!r}")

    def __len__(self) -> int:
        return len(self._callbacks)

    def __contains__(self, callback: object) -> bool:
        return callback in self._callbacks
