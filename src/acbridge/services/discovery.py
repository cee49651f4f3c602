"""Home Assistant MQTT discovery payloads for the bridged AC units."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from acbridge.config import TopicsConfig
from acbridge.errors import TransportError
from acbridge.models import (
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    DeviceProfile,
    FanSpeed,
    Mode,
)

from .mqtt import MqttClient
from .publisher import AVAILABLE, NOT_AVAILABLE
from .topics import DeviceTopics, climate_discovery_topic, error_discovery_topic

logger = logging.getLogger(__name__)


def _sw_version() -> str:
    try:
        return version("acbridge")
    except PackageNotFoundError:
        return "unknown"


def _device_block(device_id: str, profile: DeviceProfile) -> dict[str, Any]:
    return {
        "identifiers": [f"ac_controller_{device_id}"],
        "name": profile.friendly_name,
        "model": "IR Remote Emulator",
        "manufacturer": "AC Controller",
        "sw_version": _sw_version(),
    }


def build_climate_config(
    config: TopicsConfig, device_id: str, profile: DeviceProfile
) -> dict[str, Any]:
    topics = DeviceTopics.for_device(config, device_id)
    modes = [Mode.OFF.value] + [
        mode.value for mode in profile.supported_modes if mode is not Mode.OFF
    ]
    return {
        "name": profile.friendly_name,
        "unique_id": f"ac_controller_{device_id}",
        "object_id": device_id,
        "temperature_unit": "C",
        "temp_step": 1,
        "min_temp": TEMPERATURE_MIN,
        "max_temp": TEMPERATURE_MAX,
        "modes": modes,
        "fan_modes": [speed.value for speed in FanSpeed],
        "current_temperature_topic": topics.current_temperature,
        "temperature_command_topic": topics.temperature_command,
        "temperature_state_topic": topics.temperature_state,
        "mode_command_topic": topics.mode_command,
        "mode_state_topic": topics.mode_state,
        "fan_mode_command_topic": topics.fan_mode_command,
        "fan_mode_state_topic": topics.fan_mode_state,
        "action_topic": topics.action,
        "availability_topic": topics.availability,
        "payload_available": AVAILABLE,
        "payload_not_available": NOT_AVAILABLE,
        "device": _device_block(device_id, profile),
    }


def build_error_sensor_config(
    config: TopicsConfig, device_id: str, profile: DeviceProfile
) -> dict[str, Any]:
    topics = DeviceTopics.for_device(config, device_id)
    return {
        "name": f"{profile.friendly_name} Error",
        "unique_id": f"ac_controller_{device_id}_error",
        "object_id": f"{device_id}_error",
        "state_topic": topics.error,
        "availability_topic": topics.availability,
        "payload_available": AVAILABLE,
        "payload_not_available": NOT_AVAILABLE,
        "icon": "mdi:alert-circle",
        "device": _device_block(device_id, profile),
    }


class Discovery:
    def __init__(self, client: MqttClient, topics: TopicsConfig) -> None:
        self._client = client
        self._topics = topics

    def publish_device(self, device_id: str, profile: DeviceProfile) -> None:
        self._client.publish(
            climate_discovery_topic(self._topics, device_id),
            json.dumps(build_climate_config(self._topics, device_id, profile)),
            retain=True,
        )
        self._client.publish(
            error_discovery_topic(self._topics, device_id),
            json.dumps(build_error_sensor_config(self._topics, device_id, profile)),
            retain=True,
        )

    def publish_all(self, profiles: Iterable[tuple[str, DeviceProfile]]) -> None:
        for device_id, profile in profiles:
            try:
                self.publish_device(device_id, profile)
            except TransportError as exc:
                logger.error(
                    "Error publishing discovery config for %s: %s", device_id, exc
                )
                continue
            logger.debug("Discovery config published for %s", device_id)

    def remove_all(self, device_ids: Iterable[str]) -> None:
        # An empty retained payload deletes the entity in Home Assistant.
        for device_id in device_ids:
            try:
                self._client.publish(
                    climate_discovery_topic(self._topics, device_id), "", retain=True
                )
                self._client.publish(
                    error_discovery_topic(self._topics, device_id), "", retain=True
                )
            except TransportError as exc:
                logger.error(
                    "Error removing discovery config for %s: %s", device_id, exc
                )
