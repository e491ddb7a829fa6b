"""
Unit tests for the sensor sources.
"""

import math
import tempfile
import unittest
from pathlib import Path

from shakedetector.core.config import SensorConfig
from shakedetector.detector import ShakeDetector
from shakedetector.sensors import ReplaySensor, SimulatedAccelerometer
from tests.unit.fakes import ListSensor, sample


async def drain(sensor):
    samples = []
    async with sensor.subscription():
        while True:
            s = await sensor.read_sample()
            if s is None:
                return samples
            samples.append(s)


class TestSubscription(unittest.IsolatedAsyncioTestCase):
    """Scoped acquisition of a sensor."""

    async def test_subscription_initializes_and_releases(self):
        sensor = ListSensor([sample(0)])
        async with sensor.subscription():
            self.assertTrue(sensor.is_initialized())
        self.assertFalse(sensor.is_initialized())
        self.assertEqual((sensor.initialize_calls, sensor.shutdown_calls), (1, 1))

    async def test_subscription_releases_on_error(self):
        sensor = ListSensor([])
        with self.assertRaises(RuntimeError):
            async with sensor.subscription():
                raise RuntimeError("reader crashed")
        self.assertFalse(sensor.is_initialized())
        self.assertEqual(sensor.shutdown_calls, 1)

    async def test_double_initialize_is_ignored(self):
        sensor = ListSensor([])
        await sensor.initialize()
        await sensor.initialize()
        self.assertEqual(sensor.initialize_calls, 1)
        await sensor.shutdown()
        await sensor.shutdown()
        self.assertEqual(sensor.shutdown_calls, 1)

    async def test_check_health(self):
        health = await ListSensor([], available=False).check_health()
        self.assertEqual(health, {"name": "ListSensor", "initialized": False,
                                  "available": False, "status": "ok"})


class TestSimulatedAccelerometer(unittest.IsolatedAsyncioTestCase):

    def make_sensor(self, **config):
        settings = dict(sample_rate_hz=100.0, shake_interval_seconds=1.0, shake_duration_seconds=0.3)
        settings.update(config)
        return SimulatedAccelerometer(SensorConfig(**settings), seed=7, realtime=False,
                                      start_millis=0, max_samples=300)

    async def test_timestamps_follow_sample_rate(self):
        samples = await drain(self.make_sensor())
        self.assertEqual(len(samples), 300)
        self.assertEqual([s.timestamp_millis for s in samples[:3]], [0, 10, 20])
        self.assertEqual(samples[-1].timestamp_millis, 2990)

    async def test_rest_signal_is_about_one_g(self):
        samples = await drain(self.make_sensor(shake_interval_seconds=0.0))
        detector = ShakeDetector()
        self.assertTrue(all(detector.process(s) is None for s in samples))
        mean_z = sum(s.z for s in samples) / len(samples)
        self.assertAlmostEqual(mean_z, 9.81, delta=0.1)

    async def test_one_shake_per_burst(self):
        detector = ShakeDetector()
        events = [e for e in map(detector.process, await drain(self.make_sensor())) if e]
        self.assertEqual(len(events), 3)
        self.assertEqual([e.sequence_number for e in events], [1, 2, 3])

    async def test_same_seed_same_signal(self):
        first = await drain(self.make_sensor())
        second = await drain(self.make_sensor())
        self.assertEqual(first, second)

    async def test_read_outside_subscription_fails(self):
        with self.assertRaises(RuntimeError):
            await self.make_sensor().read_sample()


class TestReplaySensor(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "session.csv"

    def tearDown(self):
        self.tmp.cleanup()

    async def test_replays_rows_in_order(self):
        self.path.write_text(
            "timestamp_millis,x,y,z\n"
            "1000,30.0,0,0\n"
            "1020,0,0,9.81\n"
            "1801,0,30.0,0\n"
        )
        samples = await drain(ReplaySensor(self.path))
        self.assertEqual([s.timestamp_millis for s in samples], [1000, 1020, 1801])
        self.assertEqual(samples[2].y, 30.0)

    async def test_skips_unreadable_rows(self):
        self.path.write_text(
            "timestamp_millis,x,y,z\n"
            "1000,30.0,0,0\n"
            "abc,1,2,3\n"
            "1100,1,2\n"
            "1200,nan,0,0\n"
        )
        sensor = ReplaySensor(self.path)
        samples = await drain(sensor)
        self.assertEqual([s.timestamp_millis for s in samples], [1000, 1200])
        self.assertTrue(math.isnan(samples[1].x))
        self.assertEqual(sensor.skipped_rows, 2)

    async def test_resubscribe_continues_from_last_row(self):
        self.path.write_text(
            "timestamp_millis,x,y,z\n"
            "1000,30.0,0,0\n"
            "1100,0,0,9.81\n"
            "1200,0,0,9.81\n"
        )
        sensor = ReplaySensor(self.path)
        timestamps = []
        for _ in range(2):
            async with sensor.subscription():
                timestamps.append((await sensor.read_sample()).timestamp_millis)

        self.assertEqual(timestamps, [1000, 1100])
        self.assertEqual([s.timestamp_millis for s in await drain(sensor)], [1200])

    async def test_missing_columns(self):
        self.path.write_text("time,x,y,z\n1,2,3,4\n")
        sensor = ReplaySensor(self.path)
        with self.assertRaises(ValueError):
            await sensor.initialize()
        self.assertFalse(sensor.is_initialized())

    def test_missing_file_is_unavailable(self):
        self.assertFalse(ReplaySensor(self.path).is_available())
        self.path.write_text("timestamp_millis,x,y,z\n")
        self.assertTrue(ReplaySensor(self.path).is_available())


if __name__ == '__main__':
    unittest.main()
