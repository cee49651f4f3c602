"""Mode-specific rules for picking a recorded IR code.

Each strategy is a pure function of the recorded codes and the requested
state. ``find`` returns ``None`` when the strategy has nothing to offer and
raises :class:`NoMatchingCodeError` when the mode it owns cannot be served.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from acbridge.errors import NoMatchingCodeError
from acbridge.models import (
    DEFAULT_TEMPERATURE,
    FanSpeed,
    Mode,
    RecordedCode,
    TargetState,
)

logger = logging.getLogger(__name__)

DRY_DEFAULT_TEMPERATURE = 24
FAN_ONLY_DEFAULT_TEMPERATURE = DEFAULT_TEMPERATURE

Finder = Callable[[Sequence[RecordedCode], TargetState], RecordedCode | None]


@dataclass(frozen=True)
class MatchStrategy:
    name: str
    handles: Callable[[TargetState], bool]
    find: Finder


def _first(
    codes: Iterable[RecordedCode], predicate: Callable[[RecordedCode], bool]
) -> RecordedCode | None:
    return next((code for code in codes if predicate(code)), None)


def find_exact(
    codes: Sequence[RecordedCode], target: TargetState
) -> RecordedCode | None:
    match = _first(
        codes,
        lambda code: code.power
        and code.mode == target.mode
        and code.fan_speed == target.fan_speed
        and code.temperature == target.temperature,
    )
    if match:
        logger.debug("Exact match for %s", target)
    return match


def find_with_auto_fan(
    codes: Sequence[RecordedCode], target: TargetState
) -> RecordedCode | None:
    match = find_exact(codes, target.with_changes(fan_speed=FanSpeed.AUTO))
    if match:
        logger.debug("Auto fan match for %s", target)
    return match


def _mode_codes(codes: Iterable[RecordedCode], mode: Mode | None) -> list[RecordedCode]:
    return [code for code in codes if code.power and code.mode == mode]


def available_temperatures(
    codes: Sequence[RecordedCode], mode: Mode | None
) -> list[int]:
    return sorted(
        {
            code.temperature
            for code in _mode_codes(codes, mode)
            if code.temperature is not None
        }
    )


def available_fan_speeds(
    codes: Sequence[RecordedCode], mode: Mode | None, temperature: int | None = None
) -> list[FanSpeed]:
    """Fan speeds recorded for ``mode``, at ``temperature`` when given."""
    speeds = [
        code.fan_speed
        for code in _mode_codes(codes, mode)
        if code.fan_speed is not None
        and (temperature is None or code.temperature == temperature)
    ]
    return list(dict.fromkeys(speeds))


def _label(target: TargetState) -> str:
    return target.mode.value.upper() if target.mode else "UNKNOWN"


def _fan_label(target: TargetState) -> str:
    return target.fan_speed.value if target.fan_speed else "unset"


def _mode_not_available(
    codes: Sequence[RecordedCode], target: TargetState, default_temperature: int
) -> NoMatchingCodeError:
    temperature = (
        target.temperature if target.temperature is not None else default_temperature
    )
    temperatures = available_temperatures(codes, target.mode)
    speeds = available_fan_speeds(codes, target.mode, temperature)

    message = f"{_label(target)} mode not available"
    if not temperatures:
        message += " for this AC"
    elif temperature not in temperatures:
        listed = ", ".join(str(value) for value in temperatures)
        message += f" at {temperature}°C. Available temperatures: {listed}°C"
    elif not speeds:
        message += f" at {temperature}°C"
    else:
        listed = ", ".join(speed.value for speed in speeds)
        message += (
            f" with {_fan_label(target)} fan speed. Available speeds: {listed}"
        )

    return NoMatchingCodeError(message, temperatures, speeds)


def _find_power_off(
    codes: Sequence[RecordedCode], target: TargetState
) -> RecordedCode | None:
    match = _first(codes, lambda code: not code.power)
    if match is None:
        logger.debug("No OFF code recorded")
    return match


def _find_with_fan_fallback(
    codes: Sequence[RecordedCode], target: TargetState
) -> RecordedCode | None:
    match = find_exact(codes, target) or find_with_auto_fan(codes, target)
    if match:
        return match
    raise _mode_not_available(codes, target, DEFAULT_TEMPERATURE)


def _find_dry(
    codes: Sequence[RecordedCode], target: TargetState
) -> RecordedCode | None:
    match = find_exact(codes, target)
    if match:
        return match

    # Most units ignore the set point in dry mode.
    defaulted = target.with_changes(temperature=DRY_DEFAULT_TEMPERATURE)
    logger.debug("DRY mode: trying default temperature %s°C", DRY_DEFAULT_TEMPERATURE)
    match = find_exact(codes, defaulted) or find_with_auto_fan(codes, defaulted)
    if match:
        return match
    raise _mode_not_available(codes, target, DRY_DEFAULT_TEMPERATURE)


def _find_fan_only(
    codes: Sequence[RecordedCode], target: TargetState
) -> RecordedCode | None:
    defaulted = target.with_changes(temperature=FAN_ONLY_DEFAULT_TEMPERATURE)
    mode_codes = _mode_codes(codes, target.mode)

    match = (
        find_exact(codes, target)
        or find_exact(codes, defaulted)
        or _first(mode_codes, lambda code: code.fan_speed == target.fan_speed)
        or find_with_auto_fan(codes, defaulted)
        or _first(mode_codes, lambda code: code.fan_speed is FanSpeed.AUTO)
    )
    if match:
        logger.debug("FAN_ONLY mode: using code recorded at %s°C", match.temperature)
        return match

    speeds = available_fan_speeds(codes, target.mode)
    message = "FAN_ONLY mode not available"
    if not speeds:
        message += " for this AC"
    else:
        listed = ", ".join(speed.value for speed in speeds)
        message += f" with {_fan_label(target)} fan speed. Available speeds: {listed}"
    raise NoMatchingCodeError(message, available_fan_speeds=speeds)


def _powered(*modes: Mode) -> Callable[[TargetState], bool]:
    return lambda target: target.power and target.mode in modes


POWER_OFF = MatchStrategy("power_off", lambda target: not target.power, _find_power_off)
AUTO = MatchStrategy("auto", _powered(Mode.AUTO), _find_with_fan_fallback)
COOL_HEAT = MatchStrategy(
    "cool_heat", _powered(Mode.COOL, Mode.HEAT), _find_with_fan_fallback
)
DRY = MatchStrategy("dry", _powered(Mode.DRY), _find_dry)
FAN_ONLY = MatchStrategy("fan_only", _powered(Mode.FAN_ONLY), _find_fan_only)

# Power-off must come first so an off request never reaches a mode strategy.
STRATEGIES: tuple[MatchStrategy, ...] = (POWER_OFF, AUTO, COOL_HEAT, DRY, FAN_ONLY)
