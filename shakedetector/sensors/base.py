"""
Base sensor abstraction for the shake detector application.

A sensor is something that delivers AccelerationSamples. It has to be
initialized before reading and shut down afterwards; ``subscription()`` wraps
both in one scope so the device is always released, including when the
reading task is cancelled.
"""

import asyncio
import time
import structlog
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from shakedetector.detector import AccelerationSample


def now_millis() -> int:
    """Monotonic, process-wide millisecond clock."""
    return time.monotonic_ns() // 1_000_000


class BaseSensor(ABC):
    """
    Base class for accelerometer sources.

    Subclasses implement ``_initialize_impl``, ``_shutdown_impl`` and
    ``read_sample``.
    """

    def __init__(self, config: Optional[Any] = None, name: Optional[str] = None):
        """
        Initialize the sensor wrapper.

        Args:
            config: Optional sensor-specific configuration
            name: Optional name for this sensor instance
        """
        self.config = config
        self.name = name or self.__class__.__name__
        self.logger = structlog.get_logger(sensor=self.name)
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """
        Acquire the sensor.

        Calling it on an already initialized sensor only logs a warning.
        """
        async with self._lock:
            if self._initialized:
                self.logger.warning("Sensor already initialized")
                return

            try:
                await self._initialize_impl()
            except Exception as e:
                self.logger.error(f"Error initializing sensor: {e}")
                raise
            self._initialized = True
            self.logger.info("Sensor initialized")

    async def shutdown(self) -> None:
        """Release the sensor."""
        async with self._lock:
            if not self._initialized:
                self.logger.warning("Sensor not initialized")
                return

            try:
                await self._shutdown_impl()
            except Exception as e:
                self.logger.error(f"Error shutting down sensor: {e}")
                raise
            finally:
                self._initialized = False
            self.logger.info("Sensor shut down")

    @asynccontextmanager
    async def subscription(self) -> AsyncIterator["BaseSensor"]:
        """
        Scope in which the sensor may be read.

        Usage::

            async with sensor.subscription():
                sample = await sensor.read_sample()
        """
        await self.initialize()
        try:
            yield self
        finally:
            await self.shutdown()

    def is_initialized(self) -> bool:
        return self._initialized

    def is_available(self) -> bool:
        """
        Whether the device exists at all.

        Checked before subscribing; an unavailable sensor is never initialized.
        """
        return True

    @abstractmethod
    async def _initialize_impl(self) -> None:
        pass

    @abstractmethod
    async def _shutdown_impl(self) -> None:
        pass

    @abstractmethod
    async def read_sample(self) -> Optional[AccelerationSample]:
        """
        Wait for and return the next sample.

        Returns:
            The next AccelerationSample, or None once the source is exhausted
        """

    async def check_health(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "initialized": self._initialized,
            "available": self.is_available(),
            "status": "ok"
        }
