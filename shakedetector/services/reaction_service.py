"""
Service that turns shakes into the user-visible reaction: an updated counter
label, a random background color and a short notification.

Rendering is left to whoever consumes DISPLAY_UPDATED; this service only works
out what should be shown.
"""

import random
from typing import Optional, Tuple

from shakedetector.core.events import EventType, BaseEvent
from shakedetector.core.service import BaseService
from shakedetector.events.display import DisplayUpdatedEvent

SHAKE_NOTIFICATION = "Shake Detected!"

Color = Tuple[int, int, int]


def format_label(shake_count: int) -> str:
    return f"Shake Count: {shake_count}"


class ReactionService(BaseService):
    """Consumes SHAKE_DETECTED and publishes DISPLAY_UPDATED."""

    PRODUCES_EVENTS = {
        EventType.DISPLAY_UPDATED: {
            'schema': DisplayUpdatedEvent,
            'description': "Counter label, background color and notification to show",
        },
    }

    CONSUMES_EVENTS = {
        EventType.SHAKE_DETECTED: 'handle_event',
    }

    def __init__(self, event_bus, service_registry,
                 name: Optional[str] = None,
                 config=None,
                 rng: Optional[random.Random] = None):
        super().__init__(event_bus, service_registry, name=name, config=config)
        self.rng = rng or random.Random()
        self.label = format_label(0)
        self.color: Optional[Color] = None

    def random_color(self) -> Color:
        """Pick an RGB color, each channel uniformly in 0-255."""
        return (self.rng.randint(0, 255), self.rng.randint(0, 255), self.rng.randint(0, 255))

    async def handle_event(self, event: BaseEvent) -> None:
        if event.type != EventType.SHAKE_DETECTED:
            return

        self.label = format_label(event.sequence_number)
        self.color = self.random_color()
        self.logger.info(SHAKE_NOTIFICATION, label=self.label, color=self.color)

        await self.publish(DisplayUpdatedEvent(
            label=self.label,
            color=self.color,
            notification=SHAKE_NOTIFICATION,
        ))
