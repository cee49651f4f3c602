from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from acbridge.cli.helpers import (
    build_database,
    load_devices_or_exit,
    load_settings_or_exit,
)
from acbridge.models import DeviceProfile, Mode

app = typer.Typer(no_args_is_help=True)

DEFAULT_MODES = [mode for mode in Mode if mode is not Mode.OFF]


@app.command("list")
def list_devices() -> None:
    """List AC devices with their current state."""
    settings = load_settings_or_exit()
    db = build_database(settings)
    registry = load_devices_or_exit(db)
    states = db.load_states()

    console = Console()

    if not registry.devices:
        console.print("No devices defined.")
        console.print(f"Use 'acbridge devices add' or edit {db.devices_path}")
        return

    table = Table()
    table.add_column("Device", style="cyan")
    table.add_column("Name")
    table.add_column("IR Blaster", style="green")
    table.add_column("Modes")
    table.add_column("Codes", justify="right")
    table.add_column("State", style="yellow")

    for device_id, profile in sorted(registry.devices.items()):
        state = states.get(device_id)
        table.add_row(
            device_id,
            profile.friendly_name,
            profile.ir_device_topic,
            ", ".join(mode.value for mode in profile.supported_modes),
            str(len(profile.codes)),
            state.describe() if state else "[red]missing[/red]",
        )

    console.print(table)


@app.command("add")
def add_device(
    device_id: Annotated[str, typer.Argument(help="Device id used in MQTT topics")],
    ir_topic: Annotated[
        str,
        typer.Option("--ir-topic", help="Zigbee2MQTT name of the IR blaster"),
    ],
    name: Annotated[
        str | None, typer.Option("--name", help="Friendly name shown in the hub")
    ] = None,
    modes: Annotated[
        list[Mode] | None,
        typer.Option("--mode", "-m", help="Supported mode (repeat for several)"),
    ] = None,
) -> None:
    """Add or update an AC device. Recorded codes are kept on update."""
    settings = load_settings_or_exit()
    db = build_database(settings)
    existing = load_devices_or_exit(db).devices.get(device_id)

    profile = DeviceProfile(
        friendly_name=name or (existing.friendly_name if existing else device_id),
        ir_device_topic=ir_topic,
        supported_modes=modes or DEFAULT_MODES,
        codes=existing.codes if existing else [],
    )
    created = db.add_device(device_id, profile)

    console = Console()
    action = "Added" if created else "Updated"
    console.print(f"[green]✓[/green] {action} '{device_id}' → '{ir_topic}'")


@app.command("remove")
def remove_device(
    device_id: Annotated[str, typer.Argument(help="Device id")],
) -> None:
    """Remove an AC device, its codes and its state."""
    settings = load_settings_or_exit()
    db = build_database(settings)

    console = Console()
    if db.remove_device(device_id):
        console.print(f"[green]✓[/green] Removed device '{device_id}'")
    else:
        console.print(f"[yellow]![/yellow] Device '{device_id}' not found")
        raise typer.Exit(1)
