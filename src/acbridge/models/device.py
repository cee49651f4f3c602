"""Device profile and recorded IR code models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .climate import FanSpeed, Mode

CodeKey = tuple[bool, Mode | None, FanSpeed | None, int | None]


class RecordedCode(BaseModel):
    """A captured IR signal for one (power, mode, fan, temperature) combination."""

    model_config = {"extra": "forbid"}

    power: bool
    mode: Mode | None = None
    fan_speed: FanSpeed | None = None
    temperature: int | None = None
    code: str = Field(min_length=1)

    def key(self) -> CodeKey:
        return (self.power, self.mode, self.fan_speed, self.temperature)

    def describe(self) -> str:
        if not self.power:
            return "OFF"
        parts = [
            self.mode.value if self.mode else "?",
            self.fan_speed.value if self.fan_speed else "?",
        ]
        if self.temperature is not None:
            parts.append(f"{self.temperature}°C")
        return " / ".join(parts)


class DeviceProfile(BaseModel):
    """One AC unit: its IR blaster, supported modes and recorded codes."""

    model_config = {"extra": "forbid"}

    friendly_name: str
    ir_device_topic: str
    supported_modes: list[Mode] = Field(default_factory=list)
    codes: list[RecordedCode] = Field(default_factory=list)

    @field_validator("supported_modes")
    @classmethod
    def _dedupe_modes(cls, modes: list[Mode]) -> list[Mode]:
        return list(dict.fromkeys(modes))

    def supports(self, mode: Mode) -> bool:
        return mode in self.supported_modes

    def upsert_code(self, recorded: RecordedCode) -> bool:
        """Add ``recorded``, replacing an entry with the same key.

        Returns True when an existing entry was replaced.
        """
        for index, existing in enumerate(self.codes):
            if existing.key() == recorded.key():
                self.codes[index] = recorded
                return True
        self.codes.append(recorded)
        return False


class DeviceRegistry(BaseModel):
    """All configured AC devices keyed by device id."""

    model_config = {"extra": "forbid"}

    devices: dict[str, DeviceProfile] = Field(default_factory=dict)
