from __future__ import annotations

from dataclasses import dataclass

from acbridge.config import TopicsConfig


@dataclass(frozen=True)
class DeviceTopics:
    mode_command: str
    mode_state: str
    temperature_command: str
    temperature_state: str
    current_temperature: str
    fan_mode_command: str
    fan_mode_state: str
    action: str
    error: str
    availability: str

    @classmethod
    def for_device(cls, config: TopicsConfig, device_id: str) -> DeviceTopics:
        base = f"{config.prefix}/{device_id}"
        return cls(
            mode_command=f"{base}/mode/set",
            mode_state=f"{base}/mode",
            temperature_command=f"{base}/temperature/set",
            temperature_state=f"{base}/temperature",
            current_temperature=f"{base}/current_temperature",
            fan_mode_command=f"{base}/fan_mode/set",
            fan_mode_state=f"{base}/fan_mode",
            action=f"{base}/action",
            error=f"{base}/error",
            availability=f"{base}/availability",
        )

    def command_topics(self) -> dict[str, str]:
        """Command topic per command kind name."""
        return {
            "mode": self.mode_command,
            "temperature": self.temperature_command,
            "fan_mode": self.fan_mode_command,
        }


def ir_send_topic(config: TopicsConfig, device_topic: str) -> str:
    return f"{config.ir_base}/{device_topic}/set"


def reload_topic(config: TopicsConfig) -> str:
    return f"{config.prefix}/config/reload"


def reload_status_topic(config: TopicsConfig) -> str:
    return f"{config.prefix}/config/reload/status"


def climate_discovery_topic(config: TopicsConfig, device_id: str) -> str:
    return f"{config.discovery_prefix}/climate/{device_id}/config"


def error_discovery_topic(config: TopicsConfig, device_id: str) -> str:
    return f"{config.discovery_prefix}/sensor/{device_id}_error/config"
