"""Long-running service that connects Home Assistant commands to the pipeline."""

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Callable

from acbridge.config import Settings
from acbridge.core import CommandPipeline, PipelineContext
from acbridge.errors import BridgeError, TransportError
from acbridge.models import LogicalState, utc_now
from acbridge.storage import Database

from .discovery import Discovery
from .error_status import ErrorStatus
from .mqtt import IRTransmitter, MqttClient
from .publisher import StatePublisher
from .topics import DeviceTopics, reload_status_topic, reload_topic

logger = logging.getLogger(__name__)


def build_pipeline(
    settings: Settings, db: Database, client: MqttClient
) -> tuple[CommandPipeline, StatePublisher, ErrorStatus]:
    publisher = StatePublisher(client, settings.topics)
    errors = ErrorStatus(client, settings.topics)
    context = PipelineContext(
        states=db,
        library=db,
        transport=IRTransmitter(client, settings.topics),
        publisher=publisher,
        errors=errors,
    )
    return CommandPipeline(context), publisher, errors


class Bridge:
    def __init__(
        self, settings: Settings, db: Database, client: MqttClient | None = None
    ) -> None:
        self.settings = settings
        self.db = db
        self.client = client or MqttClient(settings.mqtt)
        self.pipeline, self.publisher, self.errors = build_pipeline(
            settings, db, self.client
        )
        self.discovery = Discovery(self.client, settings.topics)
        self._command_topics: list[str] = []
        self._devices: list[str] = []
        self._stop = threading.Event()

    def start(self) -> None:
        self.client.connect()
        devices = self.subscribe_commands()
        self.client.subscribe(reload_topic(self.settings.topics), self._on_reload)
        logger.info("Serving %d AC device(s)", len(devices))
        for device_id, state in self.db.load_states().items():
            if device_id in devices:
                logger.info("  - %s: %s", device_id, state.describe())

        self.publish_discovery()
        self.publish_availability()
        self.publish_states()

    def subscribe_commands(self) -> list[str]:
        for topic in self._command_topics:
            self.client.unsubscribe(topic)
        self._command_topics = []

        devices = self.db.available_devices()
        for device_id in devices:
            topics = DeviceTopics.for_device(self.settings.topics, device_id)
            for kind_name, topic in topics.command_topics().items():
                handler = self._command_handler(kind_name, device_id)
                self.client.subscribe(topic, handler)
                self._command_topics.append(topic)
        logger.info("Subscribed to %d command topics", len(self._command_topics))
        self._devices = devices
        return devices

    def _command_handler(
        self, kind_name: str, device_id: str
    ) -> Callable[[str, str], None]:
        def handler(topic: str, payload: str) -> None:
            logger.debug("Command received on %s: %s", topic, payload)
            self.handle_command(kind_name, device_id, payload)

        return handler

    def handle_command(
        self, kind_name: str, device_id: str, payload: str
    ) -> LogicalState | None:
        """Execute one command; failures are already reported by the pipeline."""
        try:
            return self.pipeline.execute(kind_name, device_id, payload)
        except BridgeError:
            return None
        except ValueError as exc:
            logger.error("Cannot handle command for %s: %s", device_id, exc)
            return None
        except Exception:
            logger.exception(
                "Unexpected error handling %s command for %s", kind_name, device_id
            )
            return None

    def publish_discovery(self) -> None:
        registry = self.db.load_devices()
        available = set(self.db.available_devices())
        self.discovery.publish_all(
            (device_id, profile)
            for device_id, profile in registry.devices.items()
            if device_id in available
        )

    def publish_availability(self, online: bool = True) -> None:
        try:
            self.publisher.publish_availability(self.db.available_devices(), online)
        except TransportError as exc:
            logger.error("Error publishing availability: %s", exc)

    def publish_states(self) -> None:
        available = set(self.db.available_devices())
        states = {
            device_id: state
            for device_id, state in self.db.load_states().items()
            if device_id in available
        }
        published = self.publisher.publish_all(states)
        logger.debug("Published %d state(s)", published)

    def retire_devices(self, device_ids: list[str]) -> None:
        """Withdraw devices that are no longer configured from Home Assistant."""
        logger.info("Removing device(s) from Home Assistant: %s", ", ".join(device_ids))
        self.discovery.remove_all(device_ids)
        self.publisher.publish_availability(device_ids, online=False)
        for device_id in device_ids:
            self.errors.clear_error(device_id)

    def _on_reload(self, _topic: str, _payload: str) -> None:
        logger.info("Configuration reload requested")
        try:
            served = set(self._devices)
            removed = sorted(served - set(self.subscribe_commands()))
            if removed:
                self.retire_devices(removed)
            self.publish_discovery()
            status = {"status": "success", "message": "Configuration reloaded"}
        except (BridgeError, ValueError) as exc:
            logger.error("Error reloading configuration: %s", exc)
            status = {
                "status": "error",
                "message": f"Error reloading configuration: {exc}",
            }
        status["timestamp"] = utc_now().isoformat()
        try:
            self.client.publish(
                reload_status_topic(self.settings.topics), json.dumps(status)
            )
        except TransportError as exc:
            logger.error("Error publishing reload status: %s", exc)

    def run_forever(self, tick: float = 1.0) -> None:
        publishing = self.settings.publishing
        tasks: list[tuple[float, Callable[[], None]]] = [
            (publishing.availability_interval, self.publish_availability),
            (publishing.state_interval, self.publish_states),
            (publishing.discovery_interval, self.publish_discovery),
        ]
        now = time.monotonic()
        due = [now + interval for interval, _ in tasks]

        while not self._stop.wait(tick):
            now = time.monotonic()
            for index, (interval, task) in enumerate(tasks):
                if now >= due[index]:
                    try:
                        task()
                    except (BridgeError, ValueError) as exc:
                        logger.error("Periodic publish failed: %s", exc)
                    due[index] = now + interval

    def stop(self) -> None:
        self._stop.set()

    def shutdown(self) -> None:
        self.stop()
        if self.client.is_connected:
            self.publish_availability(online=False)
        self.client.disconnect()
