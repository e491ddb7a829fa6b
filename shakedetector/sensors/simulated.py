"""
Simulated accelerometer.

Models a device lying flat (gravity on Z plus gaussian noise) that gets shaken
along X for ``shake_duration_seconds`` at the end of every
``shake_interval_seconds``. Timestamps follow a synthetic clock that advances
exactly one sample period per reading, anchored at the time of initialization
unless ``start_millis`` is given.
"""

import asyncio
import math
from typing import Optional

import numpy as np

from shakedetector.core.config import SensorConfig
from shakedetector.detector import AccelerationSample, STANDARD_GRAVITY
from .base import BaseSensor, now_millis

SHAKE_FREQUENCY_HZ = 6.0  # back-and-forth hand motion


class SimulatedAccelerometer(BaseSensor):
    """Accelerometer stand-in producing a rest signal with periodic shakes."""

    def __init__(self,
                 config: Optional[SensorConfig] = None,
                 name: Optional[str] = None,
                 seed: Optional[int] = None,
                 realtime: bool = True,
                 start_millis: Optional[int] = None,
                 max_samples: Optional[int] = None):
        """
        Args:
            config: Sensor configuration, defaults to SensorConfig()
            name: Optional sensor name
            seed: Seed for the noise generator
            realtime: Sleep one sample period between readings
            start_millis: Timestamp of the first sample
            max_samples: Stop after this many samples (None runs forever)
        """
        super().__init__(config or SensorConfig(), name)
        self.seed = seed
        self.realtime = realtime
        self.start_millis = start_millis
        self.max_samples = max_samples
        self._rng: Optional[np.random.Generator] = None
        self._index = 0
        self._origin_millis: Optional[int] = None

    @property
    def period_seconds(self) -> float:
        return 1.0 / self.config.sample_rate_hz

    async def _initialize_impl(self) -> None:
        self._rng = np.random.default_rng(self.seed)
        if self._origin_millis is None:
            self._origin_millis = now_millis() if self.start_millis is None else self.start_millis
        self.logger.debug("Simulation started",
                          sample_rate_hz=self.config.sample_rate_hz,
                          shake_interval_seconds=self.config.shake_interval_seconds)

    async def _shutdown_impl(self) -> None:
        # The sample index survives so a resumed subscription keeps its timeline
        self._rng = None

    def _shake_offset(self, t: float) -> float:
        """Extra X acceleration at time ``t`` seconds into the simulation."""
        interval = self.config.shake_interval_seconds
        duration = self.config.shake_duration_seconds
        if interval <= 0 or duration <= 0:
            return 0.0
        phase = t % interval
        if phase < interval - duration:
            return 0.0
        return self.config.shake_amplitude * math.sin(2 * math.pi * SHAKE_FREQUENCY_HZ * phase)

    async def read_sample(self) -> Optional[AccelerationSample]:
        if self._rng is None:
            raise RuntimeError("Sensor read outside of a subscription")
        if self.max_samples is not None and self._index >= self.max_samples:
            return None

        if self.realtime:
            await asyncio.sleep(self.period_seconds)

        t = self._index * self.period_seconds
        noise = self._rng.normal(0.0, self.config.noise_stddev, size=3)
        sample = AccelerationSample(
            x=float(noise[0]) + self._shake_offset(t),
            y=float(noise[1]),
            z=STANDARD_GRAVITY + float(noise[2]),
            timestamp_millis=self._origin_millis + round(t * 1000),
        )
        self._index += 1
        return sample
