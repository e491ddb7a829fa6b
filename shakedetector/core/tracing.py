"""
Event tracing for the shake detector application.

Keeps a bounded buffer of recently published events so a running session can be
inspected (how many shakes fired, which services produced what).
"""

import time
import logging
from collections import Counter, deque
from typing import Dict, List, Optional, Any, Deque
from .events import BaseEvent

class EventTracer:
    """
    Records published events in a ring buffer.

    Only the newest ``max_events`` entries are kept.
    """

    def __init__(self, max_events: int = 1000):
        self.max_events = max_events
        self.events: Deque[Dict[str, Any]] = deque(maxlen=max_events)
        self.logger = logging.getLogger(__name__)

    def record_event(self, event: BaseEvent) -> None:
        """
        Record an event in the trace buffer.

        Args:
            event: The event to record
        """
        self.events.append({
            'recorded_at': time.time(),
            'trace_id': event.trace_id,
            'type': event.type,
            'producer': event.producer_name,
            'event_data': event.model_dump(exclude={'trace_id', 'type', 'producer_name'}),
        })
        self.logger.debug(f"Recorded event {event.type} from {event.producer_name}")

    def get_trace(self, trace_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return all recorded events, or only those with ``trace_id``."""
        if trace_id is None:
            return list(self.events)
        return [e for e in self.events if e['trace_id'] == trace_id]

    def get_events_by_type(self, event_type: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e['type'] == event_type]

    def get_event_count(self) -> int:
        return len(self.events)

    def clear(self) -> None:
        self.events.clear()

    def get_event_stats(self) -> Dict[str, Any]:
        """
        Summarize the buffer.

        Returns:
            Dictionary with the total count and per-type and per-producer counts
        """
        return {
            'total_events': len(self.events),
            'event_types': dict(Counter(e['type'] for e in self.events)),
            'producers': dict(Counter(e['producer'] for e in self.events)),
        }
