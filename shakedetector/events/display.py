"""
Display events for the shake detector application.
"""

from typing import Literal, Tuple
from shakedetector.core.events import BaseEvent, EventType

class DisplayUpdatedEvent(BaseEvent):
    """
    Event published after a shake has been turned into a visible reaction.

    Carries what a front end should show: the counter label, the new
    background color and a short notification.
    """
    type: Literal[EventType.DISPLAY_UPDATED] = EventType.DISPLAY_UPDATED
    label: str
    color: Tuple[int, int, int]  # RGB, each channel 0-255
    notification: str
