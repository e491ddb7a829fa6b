"""
Configuration management for the shake detector application.

Pydantic settings models with validation and environment variable overrides.
Every setting can be supplied through a ``SHAKE_``-prefixed variable or a
``.env`` file; nested sections use their own prefix.
"""

import math
from enum import Enum
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Reference tuning of the detector
DEFAULT_SHAKE_THRESHOLD = 2.7  # g
DEFAULT_SHAKE_COOLDOWN_MILLIS = 800

class LogLevel(str, Enum):
    """Log levels for the application."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class BaseConfig(BaseSettings):
    """
    Base configuration class with common settings for all components.

    All other configuration classes inherit from this class.
    """
    model_config = SettingsConfigDict(env_file=".env", env_prefix="SHAKE_", extra="ignore")

    debug: bool = False
    log_level: LogLevel = LogLevel.INFO

class ShakeConfig(BaseConfig):
    """Tuning of the shake detector (SHAKE_THRESHOLD, SHAKE_COOLDOWN_MILLIS)."""
    model_config = SettingsConfigDict(env_file=".env", env_prefix="SHAKE_", extra="ignore")

    threshold: float = DEFAULT_SHAKE_THRESHOLD
    cooldown_millis: int = DEFAULT_SHAKE_COOLDOWN_MILLIS

    @field_validator("threshold")
    @classmethod
    def validate_threshold(cls, v):
        """Threshold must be a positive, finite g-force."""
        if not math.isfinite(v) or v <= 0.0:
            raise ValueError("Threshold must be a positive, finite g-force")
        return v

    @field_validator("cooldown_millis")
    @classmethod
    def validate_cooldown(cls, v):
        if v <= 0:
            raise ValueError("Cooldown must be positive")
        return v

class SensorConfig(BaseConfig):
    """Configuration for the simulated accelerometer and replay source."""
    model_config = SettingsConfigDict(env_file=".env", env_prefix="SHAKE_SENSOR_", extra="ignore")

    sample_rate_hz: float = 50.0
    noise_stddev: float = 0.15  # m/s^2
    shake_interval_seconds: float = 3.0
    shake_duration_seconds: float = 0.4
    shake_amplitude: float = 35.0  # m/s^2
    replay_file: Optional[str] = None
    replay_realtime: bool = True

    @field_validator("sample_rate_hz")
    @classmethod
    def validate_sample_rate(cls, v):
        """Validate sample rate is positive."""
        if v <= 0.0:
            raise ValueError("Sample rate must be positive")
        return v

class EventConfig(BaseConfig):
    """Configuration for the event system."""
    model_config = SettingsConfigDict(env_file=".env", env_prefix="SHAKE_EVENT_", extra="ignore")

    max_trace_events: int = 1000
    tracing_enabled: bool = True

class ApplicationConfig(BaseConfig):
    """
    Main application configuration that combines all component configurations.

    This is the top-level configuration class used by the application.
    """
    shake: ShakeConfig = Field(default_factory=ShakeConfig)
    sensor: SensorConfig = Field(default_factory=SensorConfig)
    event: EventConfig = Field(default_factory=EventConfig)

def get_config() -> ApplicationConfig:
    """
    Get the application configuration.

    Returns:
        The validated ApplicationConfig instance
    """
    return ApplicationConfig()
