"""Climate state models shared by the resolver and the command pipeline."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

TEMPERATURE_MIN = 16
TEMPERATURE_MAX = 30
DEFAULT_TEMPERATURE = 22


class Mode(str, Enum):
    AUTO = "auto"
    COOL = "cool"
    HEAT = "heat"
    DRY = "dry"
    FAN_ONLY = "fan_only"
    OFF = "off"


class FanSpeed(str, Enum):
    AUTO = "auto"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    QUIET = "quiet"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TargetState(BaseModel):
    """State the resolver is asked to reach.

    Only ``power`` is required: a power-off request carries nothing else
    that matters.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    power: bool
    mode: Mode | None = None
    fan_speed: FanSpeed | None = None
    temperature: int | None = None

    def with_changes(self, **changes: object) -> TargetState:
        return self.model_copy(update=changes)


class LogicalState(BaseModel):
    """Believed current operating state of one AC unit."""

    model_config = {"frozen": True, "extra": "forbid"}

    power: bool = False
    mode: Mode = Mode.AUTO
    fan_speed: FanSpeed = FanSpeed.AUTO
    temperature: int = Field(
        default=DEFAULT_TEMPERATURE, ge=TEMPERATURE_MIN, le=TEMPERATURE_MAX
    )
    last_updated: datetime = Field(default_factory=utc_now)

    @property
    def hvac_mode(self) -> str:
        return self.mode.value if self.power else Mode.OFF.value

    @property
    def hvac_action(self) -> str:
        if not self.power:
            return "off"
        if self.mode is Mode.COOL:
            return "cooling"
        if self.mode is Mode.HEAT:
            return "heating"
        return "idle"

    def target(self) -> TargetState:
        return TargetState(
            power=self.power,
            mode=self.mode,
            fan_speed=self.fan_speed,
            temperature=self.temperature,
        )

    def describe(self) -> str:
        power = "ON" if self.power else "OFF"
        return (
            f"Power={power}, Mode={self.mode.value}, "
            f"Temp={self.temperature}°C, Fan={self.fan_speed.value}"
        )
