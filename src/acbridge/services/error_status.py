from __future__ import annotations

import logging

from acbridge.config import TopicsConfig
from acbridge.errors import TransportError

from .mqtt import MqttClient
from .topics import DeviceTopics

logger = logging.getLogger(__name__)


class ErrorStatus:
    """Last command error per device, mirrored to the device error topic."""

    def __init__(self, client: MqttClient, topics: TopicsConfig) -> None:
        self._client = client
        self._topics = topics
        self._errors: dict[str, str] = {}

    def set_error(self, device_id: str, message: str) -> None:
        logger.warning("Error for %s: %s", device_id, message)
        self._errors[device_id] = message
        self.publish(device_id)

    def clear_error(self, device_id: str) -> None:
        if device_id not in self._errors:
            return
        logger.info("Error cleared for %s", device_id)
        del self._errors[device_id]
        self.publish(device_id)

    def get_error(self, device_id: str) -> str | None:
        return self._errors.get(device_id)

    def has_error(self, device_id: str) -> bool:
        return device_id in self._errors

    def publish(self, device_id: str) -> None:
        topic = DeviceTopics.for_device(self._topics, device_id).error
        try:
            self._client.publish(topic, self._errors.get(device_id, ""), retain=True)
        except TransportError as exc:
            logger.error("Failed to publish error state for %s: %s", device_id, exc)
