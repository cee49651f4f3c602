from __future__ import annotations

from .pipeline import (
    COMMAND_KINDS,
    FAN_SPEED_COMMAND,
    MODE_COMMAND,
    TEMPERATURE_COMMAND,
    CommandKind,
    CommandPipeline,
    ModeCommand,
    PipelineContext,
    execute_command,
    parse_fan_speed,
    parse_mode,
    parse_temperature,
)
from .resolver import find_code, resolve
from .strategies import STRATEGIES, MatchStrategy

__all__ = [
    "FAN_SPEED_COMMAND",
    "MODE_COMMAND",
    "STRATEGIES",
    "TEMPERATURE_COMMAND",
    "CommandKind",
    "COMMAND_KINDS",
    "CommandPipeline",
    "MatchStrategy",
    "ModeCommand",
    "PipelineContext",
    "execute_command",
    "find_code",
    "parse_fan_speed",
    "parse_mode",
    "parse_temperature",
    "resolve",
]
