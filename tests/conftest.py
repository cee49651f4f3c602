from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from acbridge.config import get_settings
from acbridge.models import DeviceProfile, FanSpeed, Mode, RecordedCode


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "ACBRIDGE_CONFIG",
        "ACBRIDGE_DATA",
        "MQTT_HOST",
        "MQTT_PORT",
        "MQTT_USERNAME",
        "MQTT_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)


def on(mode: Mode, fan: FanSpeed, temperature: int | None, code: str) -> RecordedCode:
    return RecordedCode(
        power=True, mode=mode, fan_speed=fan, temperature=temperature, code=code
    )


@pytest.fixture
def living_room() -> DeviceProfile:
    return DeviceProfile(
        friendly_name="Living Room AC",
        ir_device_topic="ir_living_room",
        supported_modes=[Mode.COOL, Mode.HEAT, Mode.DRY, Mode.FAN_ONLY, Mode.AUTO],
        codes=[
            RecordedCode(power=False, code="OFF1"),
            on(Mode.COOL, FanSpeed.AUTO, 22, "C22A"),
            on(Mode.COOL, FanSpeed.HIGH, 22, "C22H"),
            on(Mode.COOL, FanSpeed.AUTO, 24, "C24A"),
            on(Mode.HEAT, FanSpeed.LOW, 26, "H26L"),
            on(Mode.AUTO, FanSpeed.AUTO, 23, "A23A"),
            on(Mode.DRY, FanSpeed.LOW, 24, "D24L"),
            on(Mode.DRY, FanSpeed.AUTO, 24, "D24A"),
            on(Mode.FAN_ONLY, FanSpeed.MEDIUM, 25, "F25M"),
            on(Mode.FAN_ONLY, FanSpeed.AUTO, 27, "F27A"),
        ],
    )


class FakePahoClient:
    """Stands in for ``paho.mqtt.client.Client``; connects synchronously."""

    refuse = False

    def __init__(self, client_id: str) -> None:
        self.client_id = client_id
        self.credentials = None
        self.address = None
        self.published: list[tuple[str, str, bool]] = []
        self.subscribed: list[str] = []
        self.callbacks: dict = {}
        self.publish_rc = 0
        self.loop_running = False
        self.on_connect = None
        self.on_disconnect = None

    def enable_logger(self, logger=None):
        self.logger = logger

    def username_pw_set(self, username, password=None):
        self.credentials = (username, password)

    def connect(self, host, port, keepalive):
        self.address = (host, port)

    def loop_start(self):
        self.loop_running = True
        reason = SimpleNamespace(is_failure=self.refuse)
        self.on_connect(self, None, None, reason, None)

    def loop_stop(self):
        self.loop_running = False

    def disconnect(self):
        self.address = None

    def publish(self, topic, payload, qos=0, retain=False):
        self.published.append((topic, payload, retain))
        return SimpleNamespace(rc=self.publish_rc)

    def message_callback_add(self, topic, callback):
        self.callbacks[topic] = callback

    def message_callback_remove(self, topic):
        self.callbacks.pop(topic, None)

    def subscribe(self, topic):
        self.subscribed.append(topic)
        return (0, 1)

    def unsubscribe(self, topic):
        self.subscribed.remove(topic)

    def deliver(self, topic: str, payload: str) -> None:
        message = SimpleNamespace(topic=topic, payload=payload.encode())
        self.callbacks[topic](self, None, message)

    def payloads(self, topic: str) -> list[str]:
        return [payload for sent, payload, _ in self.published if sent == topic]


@pytest.fixture
def paho(monkeypatch: pytest.MonkeyPatch) -> list[FakePahoClient]:
    """Replace paho with fakes; returns every client created."""
    clients: list[FakePahoClient] = []

    def factory(client_id: str) -> FakePahoClient:
        client = FakePahoClient(client_id)
        clients.append(client)
        return client

    monkeypatch.setattr("acbridge.services.mqtt._create_paho_client", factory)
    return clients


@pytest.fixture
def paho_client_class() -> type[FakePahoClient]:
    return FakePahoClient
