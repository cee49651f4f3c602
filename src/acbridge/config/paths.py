from __future__ import annotations

import os
from pathlib import Path

import platformdirs

APP_NAME = "acbridge"
CONFIG_FILENAME = "config.toml"


def xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def default_config_path() -> Path:
    return xdg_config_home() / APP_NAME / CONFIG_FILENAME


def default_data_dir() -> Path:
    """Data directory: ``ACBRIDGE_DATA`` if set, else the platform data dir."""
    env_dir = os.environ.get("ACBRIDGE_DATA")
    return Path(env_dir or platformdirs.user_data_dir(APP_NAME))


def expand_path(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(value)))
