from __future__ import annotations

import typer
from rich.console import Console

from acbridge.cli.helpers import (
    build_database,
    load_devices_or_exit,
    load_settings_or_exit,
    resolve_config_path_or_exit,
)
from acbridge.utils.redaction import Redactor


def register(app: typer.Typer) -> None:
    @app.command()
    def info() -> None:
        """Show acbridge data directory info and stats."""
        settings = load_settings_or_exit()
        db = build_database(settings)
        registry = load_devices_or_exit(db)
        config_path, config_exists = resolve_config_path_or_exit(allow_missing=True)
        redactor = Redactor()

        console = Console()

        console.print("[bold]acbridge Info[/bold]\n")
        console.print(f"Data directory: {db.path}")
        console.print(f"Device registry: {db.devices_path}")
        console.print(f"State file: {db.states_path}")
        console.print(f"Config file: {config_path if config_exists else 'defaults'}")

        console.print("\n[bold]MQTT[/bold]")
        console.print(f"Broker: {settings.mqtt.host}:{settings.mqtt.port}")
        if settings.mqtt.username:
            console.print(f"Username: {settings.mqtt.username}")
            console.print(f"Password: {redactor.redact_secret(settings.mqtt.password)}")
        console.print(f"Topic prefix: {settings.topics.prefix}")

        console.print("\n[bold]Statistics[/bold]")
        console.print(f"Devices: {len(registry.devices)}")
        total = sum(len(profile.codes) for profile in registry.devices.values())
        console.print(f"Recorded IR codes: {total}")
