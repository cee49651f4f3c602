from __future__ import annotations

import logging
from collections.abc import Iterable

from acbridge.config import TopicsConfig
from acbridge.errors import PublishError, TransportError
from acbridge.models import LogicalState

from .mqtt import MqttClient
from .topics import DeviceTopics

logger = logging.getLogger(__name__)

AVAILABLE = "online"
NOT_AVAILABLE = "offline"


class StatePublisher:
    """Mirrors logical states onto the Home Assistant climate state topics."""

    def __init__(self, client: MqttClient, topics: TopicsConfig) -> None:
        self._client = client
        self._topics = topics

    def publish_state(self, device_id: str, state: LogicalState) -> None:
        topics = DeviceTopics.for_device(self._topics, device_id)
        temperature = str(state.temperature)
        messages = [
            (topics.mode_state, state.hvac_mode),
            (topics.temperature_state, temperature),
            # No room sensor; the set point doubles as the current temperature.
            (topics.current_temperature, temperature),
            (topics.fan_mode_state, state.fan_speed.value),
            (topics.action, state.hvac_action),
        ]
        try:
            for topic, payload in messages:
                self._client.publish(topic, payload)
        except TransportError as exc:
            message = f"Error publishing state for {device_id}: {exc}"
            raise PublishError(message) from exc

    def publish_all(self, states: dict[str, LogicalState]) -> int:
        """Publish every state; returns how many were published."""
        published = 0
        for device_id, state in states.items():
            try:
                self.publish_state(device_id, state)
            except PublishError as exc:
                logger.error("%s", exc)
                continue
            published += 1
        return published

    def publish_availability(self, device_ids: Iterable[str], online: bool) -> None:
        payload = AVAILABLE if online else NOT_AVAILABLE
        for device_id in device_ids:
            topic = DeviceTopics.for_device(self._topics, device_id).availability
            self._client.publish(topic, payload, retain=True)
