"""
Event bus for the shake detector application.

The bus validates each published event against the event registry, records it
with the tracer, and hands it to every subscriber of its type. ``publish`` only
returns once all handlers have finished, so a producer that awaits each publish
delivers its events in the order it produced them.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Callable, Awaitable
from .events import EventType, BaseEvent
from .registry import EventRegistry
from .tracing import EventTracer

# Type aliases
EventHandler = Callable[[BaseEvent], Awaitable[None]]

class EventBus:
    """
    Central event bus for delivering typed events between services.

    Handler errors are logged and contained; one failing subscriber never
    prevents delivery to the others.
    """

    def __init__(self, registry: EventRegistry, tracer: Optional[EventTracer] = None):
        """
        Initialize the event bus.

        Args:
            registry: The event registry for validation and tracking
            tracer: Optional event tracer for observability
        """
        self.registry = registry
        self.tracer = tracer
        self.subscribers: Dict[EventType, List[EventHandler]] = {}
        self.wildcard_subscribers: List[EventHandler] = []
        self.logger = logging.getLogger(__name__)

    async def publish(self, event: BaseEvent, sender: str) -> bool:
        """
        Publish an event to all subscribers.

        Args:
            event: The event to publish
            sender: Name of the service publishing the event

        Returns:
            False if the event was rejected by the registry, True otherwise
        """
        if not event.producer_name:
            event.producer_name = sender

        try:
            self.registry.validate_schema(event)
        except (ValueError, TypeError) as e:
            self.logger.error(f"Event validation failed: {e}")
            return False

        if self.tracer:
            self.tracer.record_event(event)

        handlers = self.subscribers.get(EventType(event.type), []) + self.wildcard_subscribers
        if not handlers:
            self.logger.debug(f"No subscribers for event type: {event.type}")
            return True

        tasks = [asyncio.create_task(self._deliver_event(handler, event)) for handler in handlers]
        await asyncio.gather(*tasks)
        return True

    async def _deliver_event(self, handler: EventHandler, event: BaseEvent) -> None:
        """Deliver an event to a single handler, logging any failure."""
        try:
            await handler(event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.error(
                f"Error delivering event {event.type} to {handler.__qualname__}: {e}",
                exc_info=True,
            )

    def subscribe(self, event_type: Optional[EventType], handler: EventHandler, service_name: str) -> None:
        """
        Subscribe a handler to events of a specific type, or all events if None.

        Args:
            event_type: The event type to subscribe to, or None for all events
            handler: The coroutine function to call when events arrive
            service_name: Name of the service subscribing
        """
        if event_type is None:
            self.wildcard_subscribers.append(handler)
            self.logger.debug(f"Service {service_name} subscribed to all events")
            return

        self.subscribers.setdefault(event_type, []).append(handler)
        self.registry.register_consumer(service_name, event_type)
        self.logger.debug(f"Service {service_name} subscribed to {event_type}")

    def unsubscribe(self, event_type: Optional[EventType], handler: EventHandler) -> None:
        """Remove a handler previously passed to ``subscribe``."""
        if event_type is None:
            if handler in self.wildcard_subscribers:
                self.wildcard_subscribers.remove(handler)
            return

        handlers = self.subscribers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            if not handlers:
                del self.subscribers[event_type]
            self.logger.debug(f"Handler {handler.__qualname__} unsubscribed from {event_type}")
