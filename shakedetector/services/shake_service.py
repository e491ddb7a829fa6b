"""
Service that feeds accelerometer samples to the shake detector and publishes
every accepted shake on the event bus.

The detector belongs to the service, not to the sensor subscription: stopping
the service releases the sensor, starting it again resubscribes, and the shake
count and cooldown carry on from where they were.
"""

import asyncio
from typing import Optional

from shakedetector.core.config import ShakeConfig
from shakedetector.core.events import EventType, BaseEvent
from shakedetector.core.service import BaseService
from shakedetector.detector import ShakeDetector, ShakeEvent
from shakedetector.events.sensors import ShakeDetectedEvent, SensorUnavailableEvent
from shakedetector.events.system import ServiceErrorEvent
from shakedetector.sensors.base import BaseSensor


class ShakeService(BaseService):
    """Reads the sensor, runs the detector and publishes SHAKE_DETECTED events."""

    PRODUCES_EVENTS = {
        EventType.SHAKE_DETECTED: {
            'schema': ShakeDetectedEvent,
            'description': "A debounced shake was detected",
        },
        EventType.SENSOR_UNAVAILABLE: {
            'schema': SensorUnavailableEvent,
            'description': "No accelerometer is available",
        },
    }

    def __init__(self, event_bus, service_registry, sensor: BaseSensor,
                 detector: Optional[ShakeDetector] = None,
                 name: Optional[str] = None,
                 config: Optional[ShakeConfig] = None):
        """
        Args:
            event_bus: The event bus to publish on
            service_registry: The service registry
            sensor: Source of acceleration samples
            detector: Detector to use; built from ``config`` when omitted
            name: Optional service name
            config: Detector tuning, defaults to ShakeConfig()
        """
        super().__init__(event_bus, service_registry, name=name, config=config or ShakeConfig())
        self.sensor = sensor
        self.detector = detector or ShakeDetector(
            threshold=self.config.threshold,
            cooldown_millis=self.config.cooldown_millis,
        )
        self._read_task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        if self.is_running:
            self.logger.warning("Already listening for shakes")
            return

        await super().start()

        if not self.sensor.is_available():
            self.logger.warning("No accelerometer found", sensor=self.sensor.name)
            await self.publish(SensorUnavailableEvent(
                sensor_name=self.sensor.name,
                reason="Sensor is not available",
            ))
            return

        self._read_task = asyncio.create_task(self._read_loop())
        self.logger.info("Listening for shakes",
                         threshold=self.detector.threshold,
                         cooldown_millis=self.detector.cooldown_millis)

    async def stop(self) -> None:
        if self._read_task is not None:
            self._read_task.cancel()
            try:
                await self._read_task
            except asyncio.CancelledError:
                pass
            self._read_task = None
        await super().stop()

    async def pause(self) -> None:
        """Stop listening to the sensor; detector state is kept."""
        await self.stop()

    async def resume(self) -> None:
        await self.start()

    async def wait_until_finished(self) -> None:
        """Wait for the sensor stream to end (returns at once if no stream is running)."""
        if self._read_task is not None:
            await asyncio.shield(self._read_task)

    async def _read_loop(self) -> None:
        """Continuous loop reading samples until the source is exhausted or cancelled."""
        try:
            async with self.sensor.subscription():
                while True:
                    sample = await self.sensor.read_sample()
                    if sample is None:
                        self.logger.info("Sensor stream ended", shake_count=self.detector.shake_count)
                        break

                    shake = self.detector.process(sample)
                    if shake is not None:
                        await self._publish_shake(shake)

                    # Let other tasks run between samples
                    await asyncio.sleep(0)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.error("Error reading sensor", error=str(e), exc_info=True)
            await self.publish(ServiceErrorEvent(
                service_name=self.name,
                error_type=type(e).__name__,
                error_message=str(e),
            ))

    async def _publish_shake(self, shake: ShakeEvent) -> None:
        self.logger.info("Shake detected",
                         sequence_number=shake.sequence_number,
                         g_force=round(shake.g_force, 2))
        await self.publish(ShakeDetectedEvent(
            sequence_number=shake.sequence_number,
            timestamp_millis=shake.timestamp_millis,
            g_force=shake.g_force,
        ))

    async def handle_event(self, event: BaseEvent) -> None:
        # Consumes nothing
        pass
