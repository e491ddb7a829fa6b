"""
Shake Detector - turns a stream of accelerometer samples into debounced shake events.

This package contains the shake detection core and the small event-driven
application around it:

Features:
- g-force magnitude thresholding with a cooldown window
- Scoped sensor subscriptions (simulated device or CSV replay)
- Typed event bus connecting detection to the user-visible reaction
"""

from shakedetector.detector import (
    AccelerationSample,
    InvalidDetectorConfigError,
    ShakeDetector,
    ShakeEvent,
)

__version__ = "1.0.0"

__all__ = [
    'AccelerationSample',
    'InvalidDetectorConfigError',
    'ShakeDetector',
    'ShakeEvent',
]
