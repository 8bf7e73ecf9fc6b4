"""Synchronous event bus for zoo events.

Replaces per-object multicast callbacks with one explicit registry mapping
event type to an ordered list of subscribers. Handlers run synchronously, in
registration order, on whatever context calls emit() (the engine's event loop).
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventBus:
    """Synchronous publish/subscribe registry.

    Example:
        bus = EventBus()
        bus.subscribe(FoodDroppedEvent, coordinator.on_food_dropped)
        bus.emit(FoodDroppedEvent(food=FoodKind("fish"), enclosure=EnclosureName("A")))
    """

    def __init__(self) -> None:
        """Initialize an empty event bus."""
        self._handlers: dict[type, list[Callable]] = defaultdict(list)

    def emit(self, event: object) -> None:
        """Emit an event to all registered handlers.

        Handlers are called synchronously in registration order. The handler
        list is copied first, so a handler may subscribe or unsubscribe
        without affecting the current dispatch.

        Args:
            event: The event to dispatch
        """
        handlers = self._handlers.get(type(event))
        if not handlers:
            return
        for handler in tuple(handlers):
            handler(event)

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for a specific event type.

        Args:
            event_type: The event class to subscribe to
            handler: Callable that receives the event instance
        """
        self._handlers[event_type].append(handler)
        logger.debug(f"Subscribed {getattr(handler, '__qualname__', handler)} to {event_type.__name__}")

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> bool:
        """Remove a handler for a specific event type.

        Returns:
            True if handler was found and removed, False otherwise
        """
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def clear_subscribers(self) -> None:
        """Remove all registered handlers."""
        self._handlers.clear()

    def has_subscribers(self, event_type: type) -> bool:
        """Check if any handlers are registered for an event type."""
        return bool(self._handlers.get(event_type))

    def subscriber_count(self, event_type: type) -> int:
        """Get the number of handlers registered for an event type."""
        return len(self._handlers.get(event_type, []))
