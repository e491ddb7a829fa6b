"""
Main entry point for the shake detector application.

Wires a sensor to the shake service and the reaction service, sets up logging
and signal handling, and runs until the sensor stream ends or the process is
interrupted.
"""

import argparse
import asyncio
import logging
import signal
import sys
import structlog
from typing import List, Optional

from shakedetector.core import (
    EventRegistry, ServiceRegistry, EventBus, EventTracer, EventType, ApplicationConfig, get_config
)
from shakedetector.core.config import ShakeConfig
from shakedetector.events.system import ApplicationStartupCompletedEvent
from shakedetector.sensors import BaseSensor, SimulatedAccelerometer, ReplaySensor
from shakedetector.services import ShakeService, ReactionService

def setup_logging(level: str = "INFO"):
    """Configure structured logging for the application."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level),
        stream=sys.stdout,
    )

def build_sensor(config: ApplicationConfig) -> BaseSensor:
    """Replay the configured recording if there is one, otherwise simulate."""
    if config.sensor.replay_file:
        return ReplaySensor(config.sensor.replay_file, realtime=config.sensor.replay_realtime)
    return SimulatedAccelerometer(config.sensor)

class ShakeApplication:
    """
    Main application class.

    Owns the event system and the services. The reaction service starts before
    the shake service so no shake is published without a consumer.
    """

    def __init__(self, config: Optional[ApplicationConfig] = None,
                 sensor: Optional[BaseSensor] = None):
        self.logger = structlog.get_logger(app="shakedetector")
        self.config = config or get_config()

        self.event_registry = EventRegistry()
        self.service_registry = ServiceRegistry()

        if self.config.event.tracing_enabled:
            self.event_tracer = EventTracer(max_events=self.config.event.max_trace_events)
        else:
            self.event_tracer = None

        self.event_bus = EventBus(self.event_registry, self.event_tracer)

        self.reaction_service = ReactionService(self.event_bus, self.service_registry)
        self.shake_service = ShakeService(
            self.event_bus,
            self.service_registry,
            sensor=sensor or build_sensor(self.config),
            config=self.config.shake,
        )
        # Start order; shutdown runs in reverse
        self.services = [self.reaction_service, self.shake_service]

    async def initialize(self):
        """
        Start all services.

        If a service fails to start, or startup is cancelled, the services
        already started are stopped again before the error propagates.
        """
        self.logger.info("Starting shake detector")
        try:
            for service in self.services:
                await service.start()
        except asyncio.CancelledError:
            self.logger.info("Startup cancelled")
            await self.shutdown()
            raise
        except Exception as e:
            self.logger.error("Failed to initialize application", error=str(e), exc_info=True)
            await self.shutdown()
            raise

        await self.event_bus.publish(
            ApplicationStartupCompletedEvent(producer_name="shakedetector"),
            "shakedetector"
        )
        self.logger.info("Shake detector ready",
                         services=sorted(self.service_registry.get_all_services()),
                         event_types=sorted(EventType(t).value
                                            for t in self.event_registry.get_all_event_types()))

    async def run(self, duration: Optional[float] = None):
        """
        Run until the sensor stream ends, ``duration`` seconds pass, or the
        task is cancelled.
        """
        try:
            if duration is None:
                await self.shake_service.wait_until_finished()
            else:
                await asyncio.wait_for(self.shake_service.wait_until_finished(), timeout=duration)
        except asyncio.TimeoutError:
            self.logger.info("Run duration elapsed", seconds=duration)
        except asyncio.CancelledError:
            self.logger.info("Application task cancelled")
        finally:
            await self.shutdown()

    async def shutdown(self):
        """Stop the running services in reverse start order."""
        running = [service for service in reversed(self.services) if service.is_running]
        if not running:
            return

        self.logger.info("Shutting down shake detector",
                         shake_count=self.shake_service.detector.shake_count)

        for service in running:
            try:
                await service.stop()
            except Exception as e:
                self.logger.error(f"Error stopping service {service.name}: {e}")

        if self.event_tracer:
            self.logger.info("Event summary", **self.event_tracer.get_event_stats())

    def handle_signal(self, sig, main_task: asyncio.Task):
        """Cancel the main task; running services are stopped on the way out."""
        self.logger.info(f"Received signal {sig.name}, shutting down")
        main_task.cancel()

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="shakedetector",
        description="Detect shake gestures from an accelerometer stream",
    )
    parser.add_argument("--replay", metavar="CSV",
                        help="Replay a recording (timestamp_millis,x,y,z) instead of simulating")
    parser.add_argument("--fast", action="store_true",
                        help="Replay as fast as possible instead of in real time")
    parser.add_argument("--duration", type=float,
                        help="Stop after this many seconds")
    parser.add_argument("--threshold", type=float,
                        help="Shake threshold in g (default from SHAKE_THRESHOLD or 2.7)")
    parser.add_argument("--cooldown", type=int,
                        help="Cooldown in milliseconds (default from SHAKE_COOLDOWN_MILLIS or 800)")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Log level (default from SHAKE_LOG_LEVEL or INFO)")
    return parser.parse_args(argv)

def config_from_args(args: argparse.Namespace) -> ApplicationConfig:
    """Load settings from the environment and apply command line overrides."""
    config = get_config()
    shake_overrides = {}
    if args.threshold is not None:
        shake_overrides["threshold"] = args.threshold
    if args.cooldown is not None:
        shake_overrides["cooldown_millis"] = args.cooldown
    if shake_overrides:
        # Re-validated by the settings model
        config.shake = ShakeConfig(**{**config.shake.model_dump(), **shake_overrides})
    if args.replay:
        config.sensor.replay_file = args.replay
        config.sensor.replay_realtime = not args.fast
    return config

async def main(argv: Optional[List[str]] = None):
    """Application entry point."""
    args = parse_args(argv)
    config = config_from_args(args)
    setup_logging(args.log_level or config.log_level.value)

    app = ShakeApplication(config)

    loop = asyncio.get_running_loop()
    main_task = asyncio.current_task()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda s=sig: app.handle_signal(s, main_task))

    try:
        await app.initialize()
        await app.run(duration=args.duration)
    except asyncio.CancelledError:
        pass

def run():
    """Console script entry point."""
    try:
        asyncio.run(main())
    except Exception as e:
        logging.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    run()
