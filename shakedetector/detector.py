"""
Shake detection from a stream of 3-axis accelerometer samples.

Each sample is converted to a g-force magnitude. Samples at or below the
threshold are ignored. A sample above the threshold is accepted as a shake only
if more than ``cooldown_millis`` have passed since the last accepted shake, so
the burst of over-threshold samples produced by one physical shake collapses
into a single event. Because the cooldown runs from the last *accepted* shake,
sustained shaking produces one event per cooldown window.

The magnitude is computed in double precision and narrowed to float32, the
working precision the threshold is held in.
"""

import math
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np
import structlog

from shakedetector.core.config import DEFAULT_SHAKE_COOLDOWN_MILLIS, DEFAULT_SHAKE_THRESHOLD

STANDARD_GRAVITY = 9.81  # m/s^2

logger = structlog.get_logger(component="shake_detector")


class InvalidDetectorConfigError(ValueError):
    """Raised when a detector is built with a threshold or cooldown that cannot work."""


@dataclass(frozen=True)
class AccelerationSample:
    """Single accelerometer reading in m/s^2 with its arrival time."""
    x: float
    y: float
    z: float
    timestamp_millis: int


@dataclass(frozen=True)
class ShakeEvent:
    """A debounced shake, numbered from 1."""
    sequence_number: int
    timestamp_millis: int  # timestamp of the sample that was accepted
    g_force: float


ShakeListener = Callable[[ShakeEvent], None]


def _is_finite(value) -> bool:
    try:
        return math.isfinite(value)
    except (TypeError, OverflowError):
        return False


def g_force(sample: AccelerationSample) -> np.float32:
    """
    Return the g-force magnitude of a sample.

    Non-finite components, or a magnitude too large for float32, come back as
    a non-finite value.
    """
    gx = sample.x / STANDARD_GRAVITY
    gy = sample.y / STANDARD_GRAVITY
    gz = sample.z / STANDARD_GRAVITY
    with np.errstate(over="ignore"):
        return np.float32(math.sqrt(gx * gx + gy * gy + gz * gz))


class ShakeDetector:
    """
    Turns acceleration samples into debounced shake events.

    ``process`` is serialized by an internal re-entrant lock and listeners are
    called inside it, so concurrent callers cannot reorder delivery. A
    listener may feed the detector again from the same thread. The count
    and last shake time live as long as the detector; attaching it to a new
    sensor subscription does not reset them.
    """

    def __init__(self,
                 threshold: float = DEFAULT_SHAKE_THRESHOLD,
                 cooldown_millis: int = DEFAULT_SHAKE_COOLDOWN_MILLIS):
        """
        Args:
            threshold: Minimum g-force (exclusive) for a sample to count as shaking
            cooldown_millis: Time after an accepted shake during which further
                shakes are suppressed (inclusive)

        Raises:
            InvalidDetectorConfigError: If threshold is not a positive finite
                number or cooldown is not a positive integer
        """
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise InvalidDetectorConfigError(f"Threshold must be a number, got {threshold!r}")
        if not math.isfinite(threshold) or threshold <= 0:
            raise InvalidDetectorConfigError(f"Threshold must be positive and finite, got {threshold}")
        if isinstance(cooldown_millis, bool) or not isinstance(cooldown_millis, int):
            raise InvalidDetectorConfigError(f"Cooldown must be an integer, got {cooldown_millis!r}")
        if cooldown_millis <= 0:
            raise InvalidDetectorConfigError(f"Cooldown must be positive, got {cooldown_millis}")

        self._threshold = np.float32(threshold)
        self._cooldown_millis = cooldown_millis
        self._last_shake_timestamp_millis: Optional[int] = None
        self._shake_count = 0
        self._listeners: List[ShakeListener] = []
        self._lock = threading.RLock()

    @property
    def threshold(self) -> float:
        return float(self._threshold)

    @property
    def cooldown_millis(self) -> int:
        return self._cooldown_millis

    @property
    def shake_count(self) -> int:
        return self._shake_count

    @property
    def last_shake_timestamp_millis(self) -> Optional[int]:
        """Timestamp of the last accepted shake, None if there has been none."""
        return self._last_shake_timestamp_millis

    def add_listener(self, listener: ShakeListener) -> None:
        """
        Register a callback invoked synchronously with every accepted ShakeEvent.

        The callback runs while the detector lock is held. A listener may call
        ``process`` again; the nested event is then delivered to every listener
        before the remaining listeners see the outer one.
        """
        self._listeners.append(listener)

    def remove_listener(self, listener: ShakeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def process(self, sample: AccelerationSample) -> Optional[ShakeEvent]:
        """
        Feed one sample to the detector.

        Args:
            sample: The accelerometer reading

        Returns:
            The ShakeEvent if this sample was accepted as a new shake, else None
        """
        if not (_is_finite(sample.x) and _is_finite(sample.y) and _is_finite(sample.z)):
            logger.debug("Ignoring non-finite sample", timestamp_millis=sample.timestamp_millis)
            return None

        magnitude = g_force(sample)
        if not np.isfinite(magnitude) or magnitude <= self._threshold:
            return None

        with self._lock:
            last = self._last_shake_timestamp_millis
            if last is not None and sample.timestamp_millis - last <= self._cooldown_millis:
                return None

            self._last_shake_timestamp_millis = sample.timestamp_millis
            self._shake_count += 1
            event = ShakeEvent(
                sequence_number=self._shake_count,
                timestamp_millis=sample.timestamp_millis,
                g_force=float(magnitude),
            )
            logger.debug("Shake accepted",
                         sequence_number=event.sequence_number,
                         g_force=round(event.g_force, 3))

            for listener in list(self._listeners):
                try:
                    listener(event)
                except Exception:
                    logger.exception("Shake listener failed",
                                     listener=getattr(listener, "__qualname__", repr(listener)))

        return event
