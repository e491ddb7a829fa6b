"""
Unit tests for the settings models.
"""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from shakedetector.core.config import (
    ApplicationConfig,
    EventConfig,
    LogLevel,
    SensorConfig,
    ShakeConfig,
)


class TestShakeConfig(unittest.TestCase):

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        config = ShakeConfig()
        self.assertEqual(config.threshold, 2.7)
        self.assertEqual(config.cooldown_millis, 800)
        self.assertEqual(config.log_level, LogLevel.INFO)

    @patch.dict(os.environ, {"SHAKE_THRESHOLD": "3.1", "SHAKE_COOLDOWN_MILLIS": "1000"}, clear=True)
    def test_environment_overrides(self):
        config = ShakeConfig()
        self.assertEqual(config.threshold, 3.1)
        self.assertEqual(config.cooldown_millis, 1000)

    def test_rejects_invalid_threshold(self):
        for threshold in (0.0, -1.0, float("nan"), float("inf")):
            with self.assertRaises(ValidationError):
                ShakeConfig(threshold=threshold)

    def test_rejects_invalid_cooldown(self):
        for cooldown in (0, -10):
            with self.assertRaises(ValidationError):
                ShakeConfig(cooldown_millis=cooldown)

    @patch.dict(os.environ, {"SHAKE_THRESHOLD": "-2"}, clear=True)
    def test_rejects_invalid_environment_value(self):
        with self.assertRaises(ValidationError):
            ShakeConfig()


class TestApplicationConfig(unittest.TestCase):

    @patch.dict(os.environ, {
        "SHAKE_SENSOR_SAMPLE_RATE_HZ": "100",
        "SHAKE_EVENT_TRACING_ENABLED": "false",
    }, clear=True)
    def test_sections_read_their_own_prefix(self):
        config = ApplicationConfig()
        self.assertEqual(config.sensor.sample_rate_hz, 100.0)
        self.assertFalse(config.event.tracing_enabled)
        self.assertEqual(config.shake.cooldown_millis, 800)

    def test_sensor_sample_rate_must_be_positive(self):
        with self.assertRaises(ValidationError):
            SensorConfig(sample_rate_hz=0)

    @patch.dict(os.environ, {}, clear=True)
    def test_event_defaults(self):
        config = EventConfig()
        self.assertTrue(config.tracing_enabled)
        self.assertEqual(config.max_trace_events, 1000)


if __name__ == '__main__':
    unittest.main()
