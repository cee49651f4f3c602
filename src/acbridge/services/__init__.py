from __future__ import annotations

from .bridge import Bridge, build_pipeline
from .discovery import Discovery, build_climate_config, build_error_sensor_config
from .error_status import ErrorStatus
from .mqtt import IRTransmitter, MqttClient
from .publisher import StatePublisher
from .topics import DeviceTopics

__all__ = [
    "Bridge",
    "DeviceTopics",
    "Discovery",
    "ErrorStatus",
    "IRTransmitter",
    "MqttClient",
    "StatePublisher",
    "build_climate_config",
    "build_error_sensor_config",
    "build_pipeline",
]
