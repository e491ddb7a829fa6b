"""
Test doubles for the sensor interface.
"""

import asyncio

from shakedetector.detector import AccelerationSample
from shakedetector.sensors.base import BaseSensor

GRAVITY_AT_REST = (0.0, 0.0, 9.81)
SHAKING = (30.0, 0.0, 0.0)


def sample(t, axes=SHAKING):
    x, y, z = axes
    return AccelerationSample(x=x, y=y, z=z, timestamp_millis=t)


class ListSensor(BaseSensor):
    """Plays a fixed list of samples, then reports the stream as exhausted."""

    def __init__(self, samples, available=True, fail_at=None):
        super().__init__(name="ListSensor")
        self.samples = list(samples)
        self.available = available
        self.fail_at = fail_at
        self.index = 0
        self.initialize_calls = 0
        self.shutdown_calls = 0

    def is_available(self):
        return self.available

    async def _initialize_impl(self):
        self.initialize_calls += 1

    async def _shutdown_impl(self):
        self.shutdown_calls += 1

    async def read_sample(self):
        if self.fail_at is not None and self.index == self.fail_at:
            raise OSError("I2C bus error")
        if self.index >= len(self.samples):
            return None
        s = self.samples[self.index]
        self.index += 1
        return s


class QueueSensor(BaseSensor):
    """Delivers whatever the test puts on its queue; None ends the stream."""

    def __init__(self):
        super().__init__(name="QueueSensor")
        self.queue = asyncio.Queue()
        self.initialize_calls = 0
        self.shutdown_calls = 0

    async def _initialize_impl(self):
        self.initialize_calls += 1

    async def _shutdown_impl(self):
        self.shutdown_calls += 1

    async def read_sample(self):
        return await self.queue.get()
