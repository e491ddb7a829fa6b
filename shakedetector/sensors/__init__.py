"""
Accelerometer sources.

Every source implements BaseSensor; the services only ever talk to that
interface.
"""

from .base import BaseSensor, now_millis
from .simulated import SimulatedAccelerometer
from .replay import ReplaySensor

__all__ = ['BaseSensor', 'now_millis', 'SimulatedAccelerometer', 'ReplaySensor']
