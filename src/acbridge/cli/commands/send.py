from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from acbridge.cli.helpers import build_database, load_settings_or_exit
from acbridge.core import COMMAND_KINDS
from acbridge.errors import BridgeError
from acbridge.services import MqttClient, build_pipeline


def register(app: typer.Typer) -> None:
    @app.command()
    def send(
        device_id: Annotated[str, typer.Argument(help="Device id")],
        kind: Annotated[
            str,
            typer.Argument(help=f"Command kind: {', '.join(COMMAND_KINDS)}"),
        ],
        payload: Annotated[str, typer.Argument(help="Command value, e.g. cool or 22")],
    ) -> None:
        """Apply one command to a device and transmit its IR code."""
        settings = load_settings_or_exit()
        db = build_database(settings)
        console = Console()

        client = MqttClient(settings.mqtt, client_type="cli")
        try:
            client.connect()
            pipeline, _publisher, _errors = build_pipeline(settings, db, client)
            state = pipeline.execute(kind, device_id, payload)
        except (BridgeError, OSError, ValueError) as exc:
            console.print(f"[red]✗[/red] {exc}")
            raise typer.Exit(1) from None
        finally:
            client.disconnect()

        console.print(f"[green]✓[/green] {device_id}: {state.describe()}")
