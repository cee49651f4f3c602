from __future__ import annotations

import signal

import typer
from rich.console import Console

from acbridge.cli.helpers import build_database, load_settings_or_exit
from acbridge.errors import TransportError
from acbridge.services import Bridge


def register(app: typer.Typer) -> None:
    @app.command()
    def run() -> None:
        """Run the bridge service until interrupted."""
        settings = load_settings_or_exit()
        db = build_database(settings)
        console = Console()

        bridge = Bridge(settings, db)
        signal.signal(signal.SIGTERM, lambda *_: bridge.stop())

        console.print(
            f"Connecting to MQTT broker {settings.mqtt.host}:{settings.mqtt.port}..."
        )
        try:
            bridge.start()
            console.print("[green]Bridge running.[/green] Press Ctrl+C to stop.\n")
            bridge.run_forever()
        except KeyboardInterrupt:
            console.print("\nShutting down...")
        except TransportError as exc:
            console.print(f"[red]MQTT connection failed:[/red] {exc}")
            console.print("Check that the broker is running and the [mqtt] settings.")
            raise typer.Exit(1) from None
        finally:
            bridge.shutdown()

        console.print("[green]Bridge stopped.[/green]")
