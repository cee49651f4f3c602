"""Data models for acbridge."""

from acbridge.models.climate import (
    DEFAULT_TEMPERATURE,
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    FanSpeed,
    LogicalState,
    Mode,
    TargetState,
    utc_now,
)
from acbridge.models.device import DeviceProfile, DeviceRegistry, RecordedCode

__all__ = [
    "DEFAULT_TEMPERATURE",
    "TEMPERATURE_MAX",
    "TEMPERATURE_MIN",
    "DeviceProfile",
    "DeviceRegistry",
    "FanSpeed",
    "LogicalState",
    "Mode",
    "RecordedCode",
    "TargetState",
    "utc_now",
]
