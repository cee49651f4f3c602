"""Exceptions raised while resolving and applying AC commands."""

from __future__ import annotations

from collections.abc import Sequence

from acbridge.models import FanSpeed, Mode


class BridgeError(Exception):
    """Base class for errors that abort a single command."""


class DeviceNotFoundError(BridgeError):
    def __init__(self, device_id: str, reason: str = "not found") -> None:
        super().__init__(f"AC {device_id} {reason}")
        self.device_id = device_id


class InvalidCommandError(BridgeError):
    pass


class ModeNotSupportedError(BridgeError):
    def __init__(
        self, device_id: str, mode: Mode, supported_modes: Sequence[Mode]
    ) -> None:
        supported = ", ".join(m.value for m in supported_modes) or "none"
        super().__init__(
            f"Mode {mode.value} is not supported by AC {device_id}. "
            f"Supported modes: {supported}"
        )
        self.device_id = device_id
        self.mode = mode
        self.supported_modes = list(supported_modes)


class NoMatchingCodeError(BridgeError):
    def __init__(
        self,
        message: str,
        available_temperatures: Sequence[int] = (),
        available_fan_speeds: Sequence[FanSpeed] = (),
    ) -> None:
        super().__init__(message)
        self.available_temperatures = list(available_temperatures)
        self.available_fan_speeds = list(available_fan_speeds)


class TransportError(BridgeError):
    """The MQTT broker could not be reached or refused a message."""


class PublishError(BridgeError):
    """State could not be published to observers."""
