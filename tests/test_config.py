from __future__ import annotations

import pytest

from acbridge.config import (
    MqttConfig,
    Settings,
    TopicsConfig,
    get_settings,
    load_settings,
    render_settings_toml,
    resolve_config_path,
    write_settings,
)


def test_defaults_without_config_file(monkeypatch, tmp_path):
    """Test defaults without config file."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    settings = get_settings()

    assert settings.mqtt.host == "localhost"
    assert settings.mqtt.port == 1883
    assert settings.mqtt.client_id_prefix == "ac-controller"
    assert settings.topics.prefix == "accontroller"
    assert settings.topics.discovery_prefix == "homeassistant"


def test_write_and_load_roundtrip(tmp_path):
    """Test write and load roundtrip."""
    settings = Settings(
        mqtt=MqttConfig(host="broker.lan", port=8883, username="ac", password="s3cret"),
        topics=TopicsConfig(prefix="house"),
    )
    path = tmp_path / "config.toml"

    write_settings(settings, path)

    assert load_settings(path) == settings


def test_render_redacts_password():
    """Test render redacts password."""
    settings = Settings(mqtt=MqttConfig(username="ac", password="s3cret"))

    text = render_settings_toml(settings, redact_secrets=True)

    assert "s3cret" not in text
    assert 'password = "********"' in text


def test_env_overrides_mqtt_section(monkeypatch, tmp_path):
    """Test env overrides MQTT section."""
    path = tmp_path / "config.toml"
    path.write_text('[mqtt]\nhost = "from-file"\nport = 1883\n')
    monkeypatch.setenv("ACBRIDGE_CONFIG", str(path))
    monkeypatch.setenv("MQTT_HOST", "from-env")
    monkeypatch.setenv("MQTT_PORT", "1884")

    settings = get_settings()

    assert settings.mqtt.host == "from-env"
    assert settings.mqtt.port == 1884


def test_missing_env_config_is_an_error(monkeypatch, tmp_path):
    """Test missing env config is an error."""
    monkeypatch.setenv("ACBRIDGE_CONFIG", str(tmp_path / "missing.toml"))

    with pytest.raises(FileNotFoundError):
        resolve_config_path()

    path, exists = resolve_config_path(allow_missing=True)
    assert path == tmp_path / "missing.toml"
    assert exists is False


def test_invalid_toml(tmp_path):
    """Test invalid TOML is rejected."""
    path = tmp_path / "config.toml"
    path.write_text("[mqtt\nhost = ")

    with pytest.raises(ValueError, match="Invalid TOML"):
        load_settings(path)


def test_unknown_keys_are_rejected(tmp_path):
    """Test unknown keys are rejected."""
    path = tmp_path / "config.toml"
    path.write_text('[mqtt]\nbroker = "x"\n')

    with pytest.raises(ValueError, match="Invalid config file"):
        load_settings(path)
