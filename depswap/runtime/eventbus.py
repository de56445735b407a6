"""Event bus for rewrite observers.

The traversal publishes facts as it goes (edge substituted, build
requested, dependencies propagated). The ``rewrite`` command builds its
summary from them. Publishing is synchronous and in subscription order.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from threading import RLock
from typing import Any, Callable, Dict, FrozenSet, List, Tuple

logger = logging.getLogger("depswap.runtime.eventbus")


class EventType(Enum):
    """Facts published during a rewrite pass."""

    PROJECT_VISITED = auto()
    DEPENDENCY_SUBSTITUTED = auto()
    BUILD_REQUESTED = auto()
    DEPENDENCIES_PROPAGATED = auto()
    CYCLE_DETECTED = auto()
    REWRITE_COMPLETED = auto()


@dataclass
class Event:
    """One published fact.

    Attributes:
        event_type: Type of event.
        source: Path of the project the event concerns.
        data: Event payload, keyed by field name.
    """

    event_type: EventType
    source: str
    data: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"Event({self.event_type.name}, source={self.source})"


EventHandler = Callable[[Event], None]


class EventBus:
    """Fans rewrite events out to observers.

    A handler subscribed without event types receives every event. A
    handler that raises is logged and skipped; the rewrite carries on.
    """

    def __init__(self) -> None:
        self._handlers: List[Tuple[FrozenSet[EventType], EventHandler]] = []
        self._lock = RLock()

    def subscribe(self, handler: EventHandler, *event_types: EventType) -> None:
        with self._lock:
            self._handlers.append((frozenset(event_types), handler))
        logger.debug(
            "Handler %s subscribed to %s",
            getattr(handler, "__name__", repr(handler)),
            ", ".join(sorted(t.name for t in event_types)) or "all events",
        )

    def publish(self, event: Event) -> None:
        with self._lock:
            handlers = [
                handler
                for types, handler in self._handlers
                if not types or event.event_type in types
            ]

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Observer failed on %s", event)

    def emit(self, event_type: EventType, source: str, **data: Any) -> None:
        """Shorthand for ``publish(Event(event_type, source, data))``."""
        self.publish(Event(event_type=event_type, source=source, data=data))
