from __future__ import annotations

import logging
import os

import coloredlogs  # type: ignore[import]

DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# paho logs every packet; only let it through when debugging.
MQTT_LOGGER = "paho"


def setup_logging(level: str | None = None) -> None:
    resolved = (level or os.environ.get("LOGLEVEL", "INFO")).upper()

    coloredlogs.install(
        level=resolved,
        fmt=DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )

    mqtt_level = logging.DEBUG if resolved == "DEBUG" else logging.WARNING
    logging.getLogger(MQTT_LOGGER).setLevel(mqtt_level)
