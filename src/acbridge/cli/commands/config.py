from __future__ import annotations

from typing import Annotated

import typer

from acbridge.cli.helpers import load_settings_or_exit, resolve_config_path_or_exit
from acbridge.config import Settings, render_settings_toml, write_settings

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    show_secrets: Annotated[
        bool,
        typer.Option("--show-secrets", help="Print the MQTT password in clear"),
    ] = False,
) -> None:
    """Show current configuration."""
    settings = load_settings_or_exit()
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    source = str(path) if exists else "defaults"
    typer.echo(f"Config source: {source}")
    typer.echo(render_settings_toml(settings, redact_secrets=not show_secrets))


@app.command("init")
def init_config(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Write a default config file."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    if exists and not force:
        typer.echo(f"Config already exists at {path}")
        return

    write_settings(Settings(), path)
    typer.echo(f"Wrote default config to {path}")
