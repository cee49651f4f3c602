from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .paths import default_config_path, default_data_dir, expand_path

CONFIG_ENV_VAR = "ACBRIDGE_CONFIG"

# Environment variables that override the [mqtt] section.
MQTT_ENV_VARS = {
    "MQTT_HOST": "host",
    "MQTT_PORT": "port",
    "MQTT_USERNAME": "username",
    "MQTT_PASSWORD": "password",
}


class DatabaseConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    path: str = Field(default_factory=lambda: str(default_data_dir()))


class MqttConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    host: str = "localhost"
    port: int = Field(default=1883, ge=1, le=65535)
    username: str | None = None
    password: str | None = None
    client_id_prefix: str = "ac-controller"
    keepalive: int = Field(default=60, ge=5)
    connect_timeout: float = Field(default=10.0, gt=0)


class TopicsConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    prefix: str = "accontroller"
    discovery_prefix: str = "homeassistant"
    ir_base: str = "zigbee2mqtt"


class PublishingConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    availability_interval: float = Field(default=30.0, gt=0)
    state_interval: float = Field(default=60.0, gt=0)
    discovery_interval: float = Field(default=60.0, gt=0)


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    mqtt: MqttConfig = Field(default_factory=MqttConfig)
    topics: TopicsConfig = Field(default_factory=TopicsConfig)
    publishing: PublishingConfig = Field(default_factory=PublishingConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def _apply_env_overrides(data: dict) -> dict:
    overrides = {
        field: os.environ[name]
        for name, field in MQTT_ENV_VARS.items()
        if os.environ.get(name)
    }
    if not overrides:
        return data
    return {**data, "mqtt": {**data.get("mqtt", {}), **overrides}}


def _validate(data: dict, source: str) -> Settings:
    try:
        return Settings.model_validate(_apply_env_overrides(data))
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {source}\n{exc}") from exc


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    return _validate(data or {}, str(path))


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return _validate({}, "defaults")


def data_dir_from_settings(settings: Settings) -> Path:
    return expand_path(settings.database.path)


def _toml_string(value: str) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings, redact_secrets: bool = False) -> str:
    mqtt = settings.mqtt
    lines = [
        "# acbridge configuration",
        "",
        "[database]",
        f"path = {_toml_string(settings.database.path)}",
        "",
        "[mqtt]",
        f"host = {_toml_string(mqtt.host)}",
        f"port = {mqtt.port}",
    ]
    if mqtt.username:
        lines.append(f"username = {_toml_string(mqtt.username)}")
    if mqtt.password:
        password = "********" if redact_secrets else mqtt.password
        lines.append(f"password = {_toml_string(password)}")
    lines += [
        f"client_id_prefix = {_toml_string(mqtt.client_id_prefix)}",
        f"keepalive = {mqtt.keepalive}",
        f"connect_timeout = {mqtt.connect_timeout}",
        "",
        "[topics]",
        f"prefix = {_toml_string(settings.topics.prefix)}",
        f"discovery_prefix = {_toml_string(settings.topics.discovery_prefix)}",
        f"ir_base = {_toml_string(settings.topics.ir_base)}",
        "",
        "[publishing]",
        f"availability_interval = {settings.publishing.availability_interval}",
        f"state_interval = {settings.publishing.state_interval}",
        f"discovery_interval = {settings.publishing.discovery_interval}",
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
