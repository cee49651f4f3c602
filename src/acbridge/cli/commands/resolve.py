from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from acbridge.cli.helpers import (
    build_database,
    get_profile_or_exit,
    load_settings_or_exit,
)
from acbridge.core import find_code
from acbridge.errors import BridgeError
from acbridge.models import (
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    FanSpeed,
    Mode,
    TargetState,
)
from acbridge.utils.redaction import Redactor


def register(app: typer.Typer) -> None:
    @app.command()
    def resolve(
        device_id: Annotated[str, typer.Argument(help="Device id")],
        off: Annotated[bool, typer.Option("--off", help="Resolve power off")] = False,
        mode: Annotated[Mode | None, typer.Option("--mode", "-m")] = None,
        fan: Annotated[FanSpeed | None, typer.Option("--fan", "-f")] = None,
        temperature: Annotated[
            int | None,
            typer.Option(
                "--temperature", "-t", min=TEMPERATURE_MIN, max=TEMPERATURE_MAX
            ),
        ] = None,
        full: Annotated[
            bool, typer.Option("--full", help="Print the complete IR code")
        ] = False,
    ) -> None:
        """Show which recorded code a state would send, without sending it.

        Options that are not given are taken from the device's current state.
        """
        settings = load_settings_or_exit()
        db = build_database(settings)
        profile = get_profile_or_exit(db, device_id)
        current = db.get_state(device_id)

        if off or mode is Mode.OFF:
            target = TargetState(power=False)
        else:
            base = current.target() if current else TargetState(power=True)
            if temperature is None:
                temperature = base.temperature
            target = base.with_changes(
                power=True,
                mode=mode or base.mode or Mode.AUTO,
                fan_speed=fan or base.fan_speed or FanSpeed.AUTO,
                temperature=temperature,
            )

        console = Console()
        try:
            recorded = find_code(profile, target, device_id)
        except BridgeError as exc:
            console.print(f"[red]✗[/red] {exc}")
            raise typer.Exit(1) from None

        code = Redactor(enabled=not full).redact_code(recorded.code)
        console.print(f"[green]✓[/green] {recorded.describe()}: {code}")
