"""
Sensor events for the shake detector application.

This module defines the events produced from the accelerometer stream.
"""

from typing import Literal
from shakedetector.core.events import BaseEvent, EventType

class ShakeDetectedEvent(BaseEvent):
    """
    Event published when the detector accepts a shake.

    One event per physical shake; bursts of over-threshold samples inside the
    cooldown window are collapsed before this event is produced.
    """
    type: Literal[EventType.SHAKE_DETECTED] = EventType.SHAKE_DETECTED
    sequence_number: int  # Running shake count, starting at 1
    timestamp_millis: int  # Timestamp of the accepted sample
    g_force: float  # Magnitude of the accepted sample in g

class SensorUnavailableEvent(BaseEvent):
    """
    Event published when no accelerometer can be found at start.

    The application keeps running; it simply never sees a shake.
    """
    type: Literal[EventType.SENSOR_UNAVAILABLE] = EventType.SENSOR_UNAVAILABLE
    sensor_name: str
    reason: str
