"""acbridge - drive IR air conditioners from Home Assistant with recorded IR codes."""

from __future__ import annotations

from importlib.metadata import version

from .config import Settings, get_settings
from .core import CommandPipeline, find_code, resolve
from .errors import (
    BridgeError,
    DeviceNotFoundError,
    InvalidCommandError,
    ModeNotSupportedError,
    NoMatchingCodeError,
)
from .models import (
    DeviceProfile,
    DeviceRegistry,
    FanSpeed,
    LogicalState,
    Mode,
    RecordedCode,
    TargetState,
)
from .storage import Database

__all__ = [
    "BridgeError",
    "CommandPipeline",
    "Database",
    "DeviceNotFoundError",
    "DeviceProfile",
    "DeviceRegistry",
    "FanSpeed",
    "InvalidCommandError",
    "LogicalState",
    "Mode",
    "ModeNotSupportedError",
    "NoMatchingCodeError",
    "RecordedCode",
    "Settings",
    "TargetState",
    "__version__",
    "find_code",
    "get_settings",
    "resolve",
]

__version__ = version("acbridge")
