"""
System events for the shake detector application.

This module defines events related to application lifecycle, service state,
and service failures.
"""

from typing import Dict, Any, Optional, Literal
from shakedetector.core.events import BaseEvent, EventType
from shakedetector.core.registry import EventRegistry

class ApplicationStartupCompletedEvent(BaseEvent):
    """
    Event published when application startup has completed.

    All services have been started and the sensor is being read.
    """
    type: Literal[EventType.APPLICATION_STARTUP_COMPLETED] = EventType.APPLICATION_STARTUP_COMPLETED

class ServiceStateChangedEvent(BaseEvent):
    """
    Event published when a service changes state.
    """
    type: Literal[EventType.SERVICE_STATE_CHANGED] = EventType.SERVICE_STATE_CHANGED
    service_name: str
    state: str  # 'started', 'stopping', 'stopped'
    error: Optional[str] = None

class ServiceErrorEvent(BaseEvent):
    """
    Event published when a service encounters an error it cannot recover from
    locally, such as a sensor failing mid-stream.
    """
    type: Literal[EventType.SERVICE_ERROR] = EventType.SERVICE_ERROR
    service_name: str
    error_type: str
    error_message: str
    details: Optional[Dict[str, Any]] = None

SYSTEM_EVENTS = {
    EventType.APPLICATION_STARTUP_COMPLETED: (
        ApplicationStartupCompletedEvent, "All services started"),
    EventType.SERVICE_STATE_CHANGED: (
        ServiceStateChangedEvent, "A service changed lifecycle state"),
    EventType.SERVICE_ERROR: (
        ServiceErrorEvent, "A service hit an unrecoverable error"),
}

def register_system_events(registry: EventRegistry) -> None:
    """Register the schemas of the events every service may publish."""
    for event_type, (schema, description) in SYSTEM_EVENTS.items():
        if registry.get_event_schema(event_type) is None:
            registry.register_event(event_type, schema, description)
