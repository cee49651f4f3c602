"""Validate, resolve and apply AC commands.

Every command kind runs through :func:`execute_command`, which only persists
a new state after its IR code was resolved and transmitted.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, Protocol, TypeVar

from acbridge.errors import (
    BridgeError,
    DeviceNotFoundError,
    InvalidCommandError,
    PublishError,
)
from acbridge.models import (
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    DeviceProfile,
    FanSpeed,
    LogicalState,
    Mode,
    utc_now,
)

from .resolver import resolve

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StateStore(Protocol):
    def get_state(self, device_id: str) -> LogicalState | None: ...

    def put_state(self, device_id: str, state: LogicalState) -> None: ...


class CodeLibrary(Protocol):
    def get_profile(self, device_id: str) -> DeviceProfile | None: ...


class Transport(Protocol):
    def send(self, device_topic: str, code: str) -> None: ...


class Publisher(Protocol):
    def publish_state(self, device_id: str, state: LogicalState) -> None: ...


class ErrorChannel(Protocol):
    def set_error(self, device_id: str, message: str) -> None: ...

    def clear_error(self, device_id: str) -> None: ...


@dataclass(frozen=True)
class CommandKind(Generic[T]):
    label: str
    validate: Callable[[str], T]
    apply: Callable[[LogicalState, T], LogicalState]


@dataclass(frozen=True)
class ModeCommand:
    power: bool
    mode: Mode | None = None


_MODE_KEYWORDS = {mode.value: mode for mode in Mode if mode is not Mode.OFF}


def parse_mode(payload: str) -> ModeCommand:
    keyword = payload.strip().lower()
    if keyword == Mode.OFF.value:
        return ModeCommand(power=False)
    if keyword in _MODE_KEYWORDS:
        return ModeCommand(power=True, mode=_MODE_KEYWORDS[keyword])
    valid = ", ".join(mode.value for mode in Mode)
    raise InvalidCommandError(f"Unknown mode: {payload}. Valid options: {valid}")


def apply_mode(state: LogicalState, command: ModeCommand) -> LogicalState:
    if not command.power:
        return state.model_copy(update={"power": False})
    return state.model_copy(update={"power": True, "mode": command.mode})


def parse_temperature(payload: str) -> int:
    """Parse a set point; "22" and "22.0" are accepted, "22.5" is not."""
    try:
        value = float(payload)
    except ValueError:
        raise InvalidCommandError(f"Invalid temperature value: {payload}") from None

    if math.isfinite(value) and value.is_integer():
        temperature = int(value)
        if TEMPERATURE_MIN <= temperature <= TEMPERATURE_MAX:
            return temperature

    raise InvalidCommandError(
        f"Temperature must be an integer between {TEMPERATURE_MIN}-"
        f"{TEMPERATURE_MAX}°C, got: {payload}"
    )


def apply_temperature(state: LogicalState, temperature: int) -> LogicalState:
    return state.model_copy(update={"temperature": temperature})


def parse_fan_speed(payload: str) -> FanSpeed:
    try:
        return FanSpeed(payload)
    except ValueError:
        valid = ", ".join(speed.value for speed in FanSpeed)
        raise InvalidCommandError(
            f"Unknown fan mode: {payload}. Valid options: {valid}"
        ) from None


def apply_fan_speed(state: LogicalState, fan_speed: FanSpeed) -> LogicalState:
    return state.model_copy(update={"fan_speed": fan_speed})


MODE_COMMAND = CommandKind("Mode", parse_mode, apply_mode)
TEMPERATURE_COMMAND = CommandKind("Temperature", parse_temperature, apply_temperature)
FAN_SPEED_COMMAND = CommandKind("Fan mode", parse_fan_speed, apply_fan_speed)

COMMAND_KINDS: dict[str, CommandKind] = {
    "mode": MODE_COMMAND,
    "temperature": TEMPERATURE_COMMAND,
    "fan_mode": FAN_SPEED_COMMAND,
}


@dataclass
class PipelineContext:
    states: StateStore
    library: CodeLibrary
    transport: Transport
    publisher: Publisher
    errors: ErrorChannel
    clock: Callable[[], datetime] = field(default=utc_now)


def _lookup(
    context: PipelineContext, device_id: str
) -> tuple[LogicalState, DeviceProfile]:
    state = context.states.get_state(device_id)
    profile = context.library.get_profile(device_id)
    if state is None or profile is None:
        raise DeviceNotFoundError(device_id, "not found or not properly configured")
    return state, profile


def execute_command(
    context: PipelineContext, kind: CommandKind[T], device_id: str, payload: str
) -> LogicalState:
    """Run one command end to end and return the state that was applied.

    Raises the :class:`BridgeError` that aborted the command after reporting
    it on the device error channel. Storage failures (``OSError`` and
    ``ValueError`` for unreadable data files) are reported the same way. Stored
    state is only replaced once the resolved code has been sent.
    """
    logger.info("%s command for %s: %s", kind.label, device_id, payload)
    try:
        current, profile = _lookup(context, device_id)
        command = kind.validate(payload)
        candidate = kind.apply(current, command)
        code = resolve(profile, candidate.target(), device_id)

        logger.info("Found IR code for %s - State: %s", device_id, candidate.describe())
        context.transport.send(profile.ir_device_topic, code)

        applied = candidate.model_copy(update={"last_updated": context.clock()})
        context.states.put_state(device_id, applied)
    except (BridgeError, OSError, ValueError) as exc:
        logger.error(
            "Failed to handle %s command for %s: %s", kind.label.lower(), device_id, exc
        )
        context.errors.set_error(device_id, str(exc))
        raise

    try:
        context.publisher.publish_state(device_id, applied)
    except PublishError as exc:
        logger.warning("State for %s applied but not published: %s", device_id, exc)

    context.errors.clear_error(device_id)
    logger.info("%s command executed successfully for %s", kind.label, device_id)
    return applied


class CommandPipeline:
    """Entry points for the three command kinds bound to one context."""

    def __init__(self, context: PipelineContext) -> None:
        self.context = context

    def execute(self, kind_name: str, device_id: str, payload: str) -> LogicalState:
        try:
            kind = COMMAND_KINDS[kind_name]
        except KeyError:
            valid = ", ".join(COMMAND_KINDS)
            raise InvalidCommandError(
                f"Unknown command kind: {kind_name}. Valid options: {valid}"
            ) from None
        return execute_command(self.context, kind, device_id, payload)

    def set_mode(self, device_id: str, payload: str) -> LogicalState:
        return execute_command(self.context, MODE_COMMAND, device_id, payload)

    def set_temperature(self, device_id: str, payload: str) -> LogicalState:
        return execute_command(self.context, TEMPERATURE_COMMAND, device_id, payload)

    def set_fan_speed(self, device_id: str, payload: str) -> LogicalState:
        return execute_command(self.context, FAN_SPEED_COMMAND, device_id, payload)
