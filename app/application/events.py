"""In-process domain event bus.

Business actions publish events; side effects such as notifications
subscribe to them. A failing subscriber is logged and never propagates to
the publisher or to the other subscribers.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any, DefaultDict

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], None]


class DomainEventBus:
    """Route published events to the handlers subscribed to their type."""

    def __init__(self) -> None:
        self._handlers: DefaultDict[type, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        if handler not in self._handlers[event_type]:
            self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def publish(self, event: Any) -> int:
        """Run every handler for ``event``; returns how many succeeded."""

        succeeded = 0
        for handler in list(self._handlers.get(type(event), ())):
            try:
                handler(event)
            except Exception:  # noqa: BLE001 - subscribers must not fail the publisher
                logger.exception(
                    "Handler %r failed for event %s", handler, type(event).__name__
                )
            else:
                succeeded += 1
        return succeeded


__all__ = ["DomainEventBus", "EventHandler"]
