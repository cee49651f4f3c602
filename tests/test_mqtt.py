"""Tests for the MQTT-facing services, run against a fake paho client."""

from __future__ import annotations

import json

import pytest

from acbridge.config import MqttConfig, TopicsConfig
from acbridge.errors import PublishError, TransportError
from acbridge.models import FanSpeed, LogicalState, Mode
from acbridge.services import (
    DeviceTopics,
    Discovery,
    ErrorStatus,
    IRTransmitter,
    MqttClient,
    StatePublisher,
    build_climate_config,
)
from acbridge.services.topics import ir_send_topic

TOPICS = TopicsConfig()


@pytest.fixture
def client(paho):
    mqtt_client = MqttClient(MqttConfig(username="ac", password="pw"))
    mqtt_client.connect()
    return mqtt_client


def test_connect_uses_config(paho, client):
    """Test connect uses config."""
    fake = paho[0]

    assert client.is_connected
    assert fake.address == ("localhost", 1883)
    assert fake.credentials == ("ac", "pw")
    assert fake.client_id.startswith("ac-controller-")
    assert fake.loop_running


def test_cli_clients_use_their_own_prefix(paho):
    """Test CLI clients use their own prefix."""
    MqttClient(MqttConfig(), client_type="cli").connect()

    assert paho[0].client_id.startswith("ac-config-")


def test_refused_connection_times_out(paho, paho_client_class, monkeypatch):
    """Test refused connection times out."""
    monkeypatch.setattr(paho_client_class, "refuse", True)
    mqtt_client = MqttClient(MqttConfig(connect_timeout=0.01))

    with pytest.raises(TransportError, match="within 0.01 seconds"):
        mqtt_client.connect()

    assert not mqtt_client.is_connected
    assert not paho[0].loop_running


def test_unreachable_broker(paho, paho_client_class, monkeypatch):
    """Test unreachable broker."""
    def refuse(self, host, port, keepalive):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(paho_client_class, "connect", refuse)

    with pytest.raises(TransportError, match="Failed to connect"):
        MqttClient(MqttConfig()).connect()


def test_publish_requires_connection(paho):
    """Test publish requires connection."""
    with pytest.raises(TransportError, match="not connected"):
        MqttClient(MqttConfig()).publish("a/b", "x")


def test_publish_failure_raises(paho, client):
    """Test publish failure raises."""
    paho[0].publish_rc = 4

    with pytest.raises(TransportError, match="Error publishing to a/b"):
        client.publish("a/b", "x")


def test_subscribe_decodes_payloads(paho, client):
    """Test subscribe decodes payloads."""
    received = []
    client.subscribe(
        "accontroller/living/mode/set", lambda t, p: received.append((t, p))
    )

    paho[0].deliver("accontroller/living/mode/set", "cool")

    assert received == [("accontroller/living/mode/set", "cool")]
    assert client.subscribed_topics == ["accontroller/living/mode/set"]


def test_reconnect_restores_subscriptions(paho, client):
    """Test reconnect restores subscriptions."""
    fake = paho[0]
    client.subscribe("x/y", lambda t, p: None)
    fake.on_disconnect(fake, None, None, "lost", None)
    assert not client.is_connected

    fake.loop_start()

    assert client.is_connected
    assert fake.subscribed == ["x/y", "x/y"]


def test_unsubscribe(paho, client):
    """Test unsubscribe."""
    client.subscribe("x/y", lambda t, p: None)
    client.unsubscribe("x/y")

    assert client.subscribed_topics == []
    assert paho[0].subscribed == []


def test_ir_transmitter_payload(paho, client):
    """Test IR transmitter payload."""
    IRTransmitter(client, TOPICS).send("ir_living_room", "C22A")

    assert paho[0].published == [
        ("zigbee2mqtt/ir_living_room/set", '{"ir_code_to_send": "C22A"}', False)
    ]


def test_ir_send_topic_uses_configured_base():
    """Test IR send topic uses configured base."""
    assert ir_send_topic(TopicsConfig(ir_base="z2m"), "blaster") == "z2m/blaster/set"


def test_device_topics():
    """Test device topics."""
    topics = DeviceTopics.for_device(TopicsConfig(prefix="house"), "den")

    assert topics.command_topics() == {
        "mode": "house/den/mode/set",
        "temperature": "house/den/temperature/set",
        "fan_mode": "house/den/fan_mode/set",
    }
    assert topics.error == "house/den/error"
    assert topics.availability == "house/den/availability"


def test_state_publisher_mirrors_state(paho, client, fixed_now):
    """Test state publisher mirrors state."""
    state = LogicalState(
        power=True,
        mode=Mode.HEAT,
        fan_speed=FanSpeed.LOW,
        temperature=26,
        last_updated=fixed_now,
    )

    StatePublisher(client, TOPICS).publish_state("living", state)

    assert paho[0].published == [
        ("accontroller/living/mode", "heat", False),
        ("accontroller/living/temperature", "26", False),
        ("accontroller/living/current_temperature", "26", False),
        ("accontroller/living/fan_mode", "low", False),
        ("accontroller/living/action", "heating", False),
    ]


def test_powered_off_state_reports_off(paho, client):
    """Test powered off state reports off."""
    state = LogicalState(mode=Mode.COOL)

    StatePublisher(client, TOPICS).publish_state("living", state)

    assert paho[0].payloads("accontroller/living/mode") == ["off"]
    assert paho[0].payloads("accontroller/living/action") == ["off"]


def test_state_publisher_wraps_transport_errors(paho, client):
    """Test state publisher wraps transport errors."""
    paho[0].publish_rc = 4

    with pytest.raises(PublishError, match="Error publishing state for living"):
        StatePublisher(client, TOPICS).publish_state("living", LogicalState())


def test_publish_all_counts_successes(paho, client):
    """Test publish all counts successes."""
    publisher = StatePublisher(client, TOPICS)

    assert publisher.publish_all({"a": LogicalState(), "b": LogicalState()}) == 2


def test_availability_is_retained(paho, client):
    """Test availability is retained."""
    StatePublisher(client, TOPICS).publish_availability(["living"], online=False)

    assert paho[0].published == [("accontroller/living/availability", "offline", True)]


def test_error_status_set_and_clear(paho, client):
    """Test error status set and clear."""
    status = ErrorStatus(client, TOPICS)

    status.clear_error("living")
    assert paho[0].published == []

    status.set_error("living", "boom")
    assert status.get_error("living") == "boom"
    status.clear_error("living")

    assert not status.has_error("living")
    assert paho[0].published == [
        ("accontroller/living/error", "boom", True),
        ("accontroller/living/error", "", True),
    ]


def test_error_status_survives_broker_failure(paho, client):
    """Test error status survives broker failure."""
    paho[0].publish_rc = 4
    status = ErrorStatus(client, TOPICS)

    status.set_error("living", "boom")

    assert status.has_error("living")



def test_climate_discovery_config(living_room):
    """Test climate discovery config."""
    config = build_climate_config(TOPICS, "living", living_room)

    assert config["unique_id"] == "ac_controller_living"
    assert config["modes"] == ["off", "cool", "heat", "dry", "fan_only", "auto"]
    assert config["fan_modes"] == ["auto", "low", "medium", "high", "quiet"]
    assert config["min_temp"] == 16
    assert config["max_temp"] == 30
    assert config["mode_command_topic"] == "accontroller/living/mode/set"
    assert config["device"]["name"] == "Living Room AC"


def test_discovery_publishes_and_removes(paho, client, living_room):
    """Test discovery publishes and removes."""
    discovery = Discovery(client, TOPICS)

    discovery.publish_all([("living", living_room)])
    discovery.remove_all(["living"])

    topics = [(topic, retain) for topic, _, retain in paho[0].published]
    assert topics == [
        ("homeassistant/climate/living/config", True),
        ("homeassistant/sensor/living_error/config", True),
        ("homeassistant/climate/living/config", True),
        ("homeassistant/sensor/living_error/config", True),
    ]
    sensor_topic = "homeassistant/sensor/living_error/config"
    sensor = json.loads(paho[0].payloads(sensor_topic)[0])
    assert sensor["state_topic"] == "accontroller/living/error"
    assert paho[0].published[-1][1] == ""
