from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

import yaml
from pydantic import ValidationError

from acbridge.models import DeviceProfile, DeviceRegistry, LogicalState, RecordedCode

logger = logging.getLogger(__name__)

DEVICES_FILE = "devices.yaml"
STATES_FILE = "states.json"

# Serialises read-modify-write cycles on the data files within this process.
_write_lock = threading.RLock()


def _atomic_write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "w") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class Database:
    """Device registry (``devices.yaml``) and logical states (``states.json``)."""

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._devices_path = data_dir / DEVICES_FILE
        self._states_path = data_dir / STATES_FILE

    @property
    def path(self) -> Path:
        return self._data_dir

    @property
    def devices_path(self) -> Path:
        return self._devices_path

    @property
    def states_path(self) -> Path:
        return self._states_path

    def ensure_dirs(self) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)

    def init(self, force: bool = False) -> bool:
        """Create empty data files; returns True if anything was written."""
        self.ensure_dirs()
        created = False
        with _write_lock:
            if force or not self._devices_path.exists():
                self.save_devices(DeviceRegistry())
                created = True
            if force or not self._states_path.exists():
                self.save_states({})
                created = True
        return created

    # Device registry

    def load_devices(self) -> DeviceRegistry:
        if not self._devices_path.exists():
            return DeviceRegistry()

        try:
            with self._devices_path.open("r") as handle:
                data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ValueError(
                f"Invalid YAML in devices file: {self._devices_path}\n{exc}"
            ) from exc

        try:
            return DeviceRegistry.model_validate(data)
        except ValidationError as exc:
            raise ValueError(
                f"Invalid devices file: {self._devices_path}\n{exc}"
            ) from exc

    def save_devices(self, registry: DeviceRegistry) -> None:
        header = (
            "# acbridge device registry\n"
            "# Recorded IR codes per AC unit, keyed by device id\n\n"
        )
        body = yaml.safe_dump(
            registry.model_dump(mode="json", exclude_none=True),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        _atomic_write(self._devices_path, header + body)

    def get_profile(self, device_id: str) -> DeviceProfile | None:
        return self.load_devices().devices.get(device_id)

    def add_device(self, device_id: str, profile: DeviceProfile) -> bool:
        """Add or update a device; returns True if it was newly created.

        A default logical state is created for devices that have none.
        """
        with _write_lock:
            registry = self.load_devices()
            created = device_id not in registry.devices
            registry.devices[device_id] = profile
            self.save_devices(registry)

            states = self.load_states()
            if device_id not in states:
                states[device_id] = LogicalState()
                self.save_states(states)
        return created

    def remove_device(self, device_id: str) -> bool:
        with _write_lock:
            registry = self.load_devices()
            if device_id not in registry.devices:
                return False
            del registry.devices[device_id]
            self.save_devices(registry)

            states = self.load_states()
            if states.pop(device_id, None) is not None:
                self.save_states(states)
        return True

    def add_code(self, device_id: str, recorded: RecordedCode) -> bool:
        """Store a recorded code; returns True if it replaced an existing one."""
        with _write_lock:
            registry = self.load_devices()
            profile = registry.devices.get(device_id)
            if profile is None:
                raise KeyError(device_id)
            replaced = profile.upsert_code(recorded)
            self.save_devices(registry)
        logger.info(
            "%s IR code for %s: %s",
            "Replaced" if replaced else "Added",
            device_id,
            recorded.describe(),
        )
        return replaced

    def remove_code(self, device_id: str, index: int) -> RecordedCode:
        with _write_lock:
            registry = self.load_devices()
            profile = registry.devices.get(device_id)
            if profile is None:
                raise KeyError(device_id)
            if not 0 <= index < len(profile.codes):
                raise IndexError(f"No code #{index} for {device_id}")
            removed = profile.codes.pop(index)
            self.save_devices(registry)
        return removed

    # Logical states

    def load_states(self) -> dict[str, LogicalState]:
        if not self._states_path.exists():
            return {}

        try:
            with self._states_path.open("r") as handle:
                data = json.load(handle) or {}
        except json.JSONDecodeError as exc:
            raise ValueError(
                f"Invalid JSON in states file: {self._states_path}\n{exc}"
            ) from exc

        try:
            return {
                device_id: LogicalState.model_validate(state)
                for device_id, state in data.items()
            }
        except ValidationError as exc:
            raise ValueError(
                f"Invalid states file: {self._states_path}\n{exc}"
            ) from exc

    def save_states(self, states: dict[str, LogicalState]) -> None:
        data = {
            device_id: state.model_dump(mode="json")
            for device_id, state in sorted(states.items())
        }
        _atomic_write(self._states_path, json.dumps(data, indent=2) + "\n")

    def get_state(self, device_id: str) -> LogicalState | None:
        return self.load_states().get(device_id)

    def put_state(self, device_id: str, state: LogicalState) -> None:
        with _write_lock:
            states = self.load_states()
            states[device_id] = state
            self.save_states(states)

    def available_devices(self) -> list[str]:
        """Device ids that have both a profile and a logical state."""
        states = self.load_states()
        devices = self.load_devices().devices
        return [device_id for device_id in devices if device_id in states]
