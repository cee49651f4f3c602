from __future__ import annotations

from .database import DEVICES_FILE, STATES_FILE, Database

__all__ = ["DEVICES_FILE", "STATES_FILE", "Database"]
