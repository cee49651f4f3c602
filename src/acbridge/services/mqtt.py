"""Thin wrapper around paho-mqtt used by the bridge and the CLI."""

from __future__ import annotations

import json
import logging
import threading
import uuid
from collections.abc import Callable
from typing import Any

import paho.mqtt.client as mqtt

from acbridge.config import MqttConfig, TopicsConfig
from acbridge.errors import TransportError
from acbridge.utils.logging import MQTT_LOGGER
from acbridge.utils.redaction import shorten_code

from .topics import ir_send_topic

logger = logging.getLogger(__name__)

MessageCallback = Callable[[str, str], None]


def _create_paho_client(client_id: str) -> Any:
    return mqtt.Client(
        callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
        client_id=client_id,
        protocol=mqtt.MQTTv311,
    )


class MqttClient:
    def __init__(self, config: MqttConfig, client_type: str = "service") -> None:
        self._config = config
        prefix = "ac-config" if client_type == "cli" else config.client_id_prefix
        self.client_id = f"{prefix}-{uuid.uuid4().hex[:9]}"
        self._client: Any | None = None
        self._connected = threading.Event()
        self._subscriptions: dict[str, MessageCallback] = {}

    @property
    def url(self) -> str:
        return f"mqtt://{self._config.host}:{self._config.port}"

    @property
    def is_connected(self) -> bool:
        return self._connected.is_set()

    def connect(self) -> None:
        if self._client is not None:
            return

        logger.info("Connecting to MQTT broker %s as %s", self.url, self.client_id)
        client = _create_paho_client(self.client_id)
        if self._config.username:
            client.username_pw_set(self._config.username, self._config.password)
        client.on_connect = self._handle_connect
        client.on_disconnect = self._handle_disconnect
        client.enable_logger(logging.getLogger(MQTT_LOGGER))

        try:
            client.connect(self._config.host, self._config.port, self._config.keepalive)
        except OSError as exc:
            raise TransportError(
                f"Failed to connect to MQTT broker at {self.url}: {exc}"
            ) from exc

        client.loop_start()
        self._client = client
        if not self._connected.wait(self._config.connect_timeout):
            self.disconnect()
            raise TransportError(
                f"Failed to connect to MQTT broker at {self.url} "
                f"within {self._config.connect_timeout:g} seconds"
            )

    def disconnect(self) -> None:
        if self._client is None:
            return
        logger.info("Disconnecting from MQTT broker")
        self._client.loop_stop()
        self._client.disconnect()
        self._client = None
        self._connected.clear()

    def _handle_connect(
        self, client: Any, _userdata: Any, _flags: Any, reason_code: Any, _props: Any
    ) -> None:
        if reason_code.is_failure:
            logger.error("MQTT broker refused connection: %s", reason_code)
            return
        logger.info("Connected to MQTT broker %s", self.url)
        self._connected.set()
        # Subscriptions do not survive a clean-session reconnect.
        for topic in self._subscriptions:
            client.subscribe(topic)

    def _handle_disconnect(
        self, _client: Any, _userdata: Any, _flags: Any, reason_code: Any, _props: Any
    ) -> None:
        self._connected.clear()
        logger.warning("Disconnected from MQTT broker: %s", reason_code)

    def _require_client(self) -> Any:
        if self._client is None or not self._connected.is_set():
            raise TransportError("MQTT client is not connected")
        return self._client

    def publish(self, topic: str, payload: str, retain: bool = False) -> None:
        client = self._require_client()
        info = client.publish(topic, payload, qos=0, retain=retain)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise TransportError(
                f"Error publishing to {topic}: {mqtt.error_string(info.rc)}"
            )
        logger.debug("Published to %s: %s", topic, payload)

    def subscribe(self, topic: str, callback: MessageCallback) -> None:
        client = self._require_client()

        def _on_message(_client: Any, _userdata: Any, message: Any) -> None:
            payload = message.payload.decode("utf-8", errors="replace")
            callback(message.topic, payload)

        self._subscriptions[topic] = callback
        client.message_callback_add(topic, _on_message)
        result, _mid = client.subscribe(topic)
        if result != mqtt.MQTT_ERR_SUCCESS:
            raise TransportError(
                f"Error subscribing to {topic}: {mqtt.error_string(result)}"
            )
        logger.debug("Subscribed to %s", topic)

    def unsubscribe(self, topic: str) -> None:
        if self._subscriptions.pop(topic, None) is None or self._client is None:
            return
        self._client.message_callback_remove(topic)
        self._client.unsubscribe(topic)

    @property
    def subscribed_topics(self) -> list[str]:
        return list(self._subscriptions)


class IRTransmitter:
    """Sends IR codes through a Zigbee2MQTT IR blaster."""

    def __init__(self, client: MqttClient, topics: TopicsConfig) -> None:
        self._client = client
        self._topics = topics

    def send(self, device_topic: str, code: str) -> None:
        topic = ir_send_topic(self._topics, device_topic)
        logger.info("Sending IR code to %s: %s", topic, shorten_code(code))
        self._client.publish(topic, json.dumps({"ir_code_to_send": code}))
