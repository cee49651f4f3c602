from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from acbridge.cli.helpers import (
    build_database,
    get_profile_or_exit,
    load_settings_or_exit,
)
from acbridge.models import (
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    FanSpeed,
    Mode,
    RecordedCode,
)
from acbridge.utils.redaction import Redactor

app = typer.Typer(no_args_is_help=True)


@app.command("list")
def list_codes(
    device_id: Annotated[str, typer.Argument(help="Device id")],
    full: Annotated[
        bool, typer.Option("--full", help="Print complete IR codes")
    ] = False,
) -> None:
    """List recorded IR codes of a device."""
    settings = load_settings_or_exit()
    db = build_database(settings)
    profile = get_profile_or_exit(db, device_id)

    console = Console()

    if not profile.codes:
        console.print(f"No IR codes recorded for '{device_id}'.")
        return

    redactor = Redactor(enabled=not full)
    table = Table(title=profile.friendly_name)
    table.add_column("#", justify="right")
    table.add_column("Power")
    table.add_column("Mode", style="cyan")
    table.add_column("Fan", style="green")
    table.add_column("Temp", justify="right")
    table.add_column("Code")

    for index, recorded in enumerate(profile.codes):
        table.add_row(
            str(index),
            "on" if recorded.power else "off",
            recorded.mode.value if recorded.mode else "",
            recorded.fan_speed.value if recorded.fan_speed else "",
            "" if recorded.temperature is None else f"{recorded.temperature}°C",
            redactor.redact_code(recorded.code),
        )

    console.print(table)


@app.command("add")
def add_code(
    device_id: Annotated[str, typer.Argument(help="Device id")],
    code: Annotated[str, typer.Argument(help="Recorded IR code (base64)")],
    off: Annotated[
        bool, typer.Option("--off", help="The code switches the unit off")
    ] = False,
    mode: Annotated[Mode | None, typer.Option("--mode", "-m")] = None,
    fan: Annotated[FanSpeed | None, typer.Option("--fan", "-f")] = None,
    temperature: Annotated[
        int | None,
        typer.Option(
            "--temperature", "-t", min=TEMPERATURE_MIN, max=TEMPERATURE_MAX
        ),
    ] = None,
) -> None:
    """Store a recorded IR code, replacing one with the same settings."""
    settings = load_settings_or_exit()
    db = build_database(settings)
    profile = get_profile_or_exit(db, device_id)

    if off or mode is Mode.OFF:
        recorded = RecordedCode(power=False, code=code)
    else:
        if mode is None or fan is None:
            typer.echo("--mode and --fan are required unless --off is given", err=True)
            raise typer.Exit(1)
        if temperature is None and mode is not Mode.FAN_ONLY:
            typer.echo(f"--temperature is required for {mode.value} mode", err=True)
            raise typer.Exit(1)
        if not profile.supports(mode):
            typer.echo(
                f"Warning: {mode.value} is not a supported mode of '{device_id}'",
                err=True,
            )
        recorded = RecordedCode(
            power=True, mode=mode, fan_speed=fan, temperature=temperature, code=code
        )

    replaced = db.add_code(device_id, recorded)

    console = Console()
    action = "Replaced" if replaced else "Added"
    console.print(
        f"[green]✓[/green] {action} code for '{device_id}': {recorded.describe()}"
    )


@app.command("remove")
def remove_code(
    device_id: Annotated[str, typer.Argument(help="Device id")],
    index: Annotated[int, typer.Argument(help="Code number from 'codes list'")],
) -> None:
    """Remove a recorded IR code."""
    settings = load_settings_or_exit()
    db = build_database(settings)
    get_profile_or_exit(db, device_id)

    console = Console()
    try:
        removed = db.remove_code(device_id, index)
    except IndexError as exc:
        console.print(f"[yellow]![/yellow] {exc}")
        raise typer.Exit(1) from None

    console.print(f"[green]✓[/green] Removed code #{index}: {removed.describe()}")
