"""
Event definitions for the shake detector application.

Each module defines the events of one functional area.
"""

# Re-export core types
from shakedetector.core.events import EventType, BaseEvent
