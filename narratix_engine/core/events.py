"""
Typed event bus for decoupled communication.

Uses Enums for event types so publishers and subscribers agree on
names without magic strings.

Usage:
    event_bus.subscribe(OverlayEvent.AVATAR_CHANGED, on_avatar_changed)
    event_bus.publish(OverlayEvent.AVATAR_CHANGED, avatar="assets/avatars/happy.png")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Union
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


class OverlayEvent(Enum):
    """Events emitted by the dialogue overlay to the host UI."""
    # Session lifecycle
    SESSION_OPENED = auto()
    SESSION_FAILED = auto()
    SESSION_CLOSED = auto()

    # Navigation
    AVATAR_CHANGED = auto()
    TOTAL_CHUNKS_FOR_SEGMENT = auto()

    # Reveal
    CHUNK_VISIBLE_TEXT_CHANGED = auto()
    CHUNK_REVEAL_COMPLETE = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Keyword data given to publish()
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]
_HandlerRef = Union[EventHandler, ref, WeakMethod]


class EventBus:
    """
    Publish/subscribe hub shared by the overlay and its host.

    Handlers run in subscription order. Bound methods and functions are
    held weakly by default, so a listener that goes away stops receiving
    events without unsubscribing.

    An event published from inside a handler waits until the current
    event has reached every handler; subscribers therefore see events in
    publish order.
    """

    def __init__(self):
        self._handlers: dict[Enum, list[_HandlerRef]] = {}
        self._queue: list[Event] = []
        self._dispatching = False

    def subscribe(self, event_type: Enum, handler: EventHandler, weak: bool = True) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            weak: Hold the handler through a weak reference (pass False for lambdas)
        """
        if weak:
            handler_ref = WeakMethod(handler) if hasattr(handler, '__self__') else ref(handler)
        else:
            handler_ref = handler
        self._handlers.setdefault(event_type, []).append(handler_ref)

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """Publish an event; returns the Event delivered to handlers."""
        event = Event(type=event_type, data=data)
        self._queue.append(event)
        if not self._dispatching:
            self._drain()
        return event

    def _drain(self) -> None:
        self._dispatching = True
        try:
            while self._queue:
                self._deliver(self._queue.pop(0))
        finally:
            self._dispatching = False

    def _deliver(self, event: Event) -> None:
        handlers = self._handlers.get(event.type)
        if not handlers:
            return

        dead = []
        for handler_ref in list(handlers):
            handler = handler_ref() if isinstance(handler_ref, (ref, WeakMethod)) else handler_ref
            if handler is None:
                dead.append(handler_ref)
                continue
            try:
                handler(event)
            except Exception:
                logger.exception("Error in event handler for %s", event.type)

        for handler_ref in dead:
            handlers.remove(handler_ref)
