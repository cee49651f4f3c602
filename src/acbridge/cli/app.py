from __future__ import annotations

from typing import Annotated

import typer

from acbridge.utils.logging import setup_logging

from .commands import codes as codes_cmd
from .commands import config as config_cmd
from .commands import devices as devices_cmd
from .commands.info import register as register_info
from .commands.init import register as register_init
from .commands.resolve import register as register_resolve
from .commands.run import register as register_run
from .commands.send import register as register_send

app = typer.Typer(
    help="acbridge - drive IR air conditioners from Home Assistant over MQTT",
    no_args_is_help=True,
)

app.add_typer(config_cmd.app, name="config", help="Show or create the config file")
app.add_typer(devices_cmd.app, name="devices", help="Manage AC devices")
app.add_typer(codes_cmd.app, name="codes", help="Manage recorded IR codes")

register_init(app)
register_info(app)
register_resolve(app)
register_send(app)
register_run(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Log level (default: LOGLEVEL env or INFO)"),
    ] = None,
) -> None:
    """acbridge CLI."""
    setup_logging(log_level)

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"acbridge version {get_version('acbridge')}")
        raise typer.Exit()
