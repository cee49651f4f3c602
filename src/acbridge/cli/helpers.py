from __future__ import annotations

from pathlib import Path

import typer

from acbridge.config import (
    Settings,
    data_dir_from_settings,
    get_settings,
    resolve_config_path,
)
from acbridge.models import DeviceProfile, DeviceRegistry
from acbridge.storage import Database


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def build_database(settings: Settings, data_dir: Path | None = None) -> Database:
    path = data_dir or data_dir_from_settings(settings)
    return Database(path)


def load_devices_or_exit(db: Database) -> DeviceRegistry:
    try:
        return db.load_devices()
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def get_profile_or_exit(db: Database, device_id: str) -> DeviceProfile:
    profile = load_devices_or_exit(db).devices.get(device_id)
    if profile is None:
        typer.echo(f"Device '{device_id}' not found in {db.devices_path}", err=True)
        raise typer.Exit(1)
    return profile
