"""Entry point for rt."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from rt_cli import __version__
from rt_cli.commands import analyze as analyze_commands
from rt_cli.commands import settings as settings_commands
from rt_cli.commands.export import export_command
from rt_cli.commands.track import track_command
from rt_cli.commands.workouts import (
    delete_command,
    edit_command,
    kudos_command,
    list_command,
    log_command,
)
from rt_cli.core.config import ConfigError, default_config_path, load_config, resolve_data_dir
from rt_cli.core.persistence import FileStore
from rt_cli.core.settings import load_settings
from rt_cli.core.state import AppState
from rt_cli.core.store import WorkoutStore

app = typer.Typer(
    add_completion=False,
    help="Running workout log with training stats and live tracking",
    invoke_without_command=True,
)


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route library logging through Rich on stderr."""
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_time=False,
                show_path=verbose,
            )
        ],
        force=True,
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output JSON where available"),
    plain_output: bool = typer.Option(
        False,
        "--plain",
        help="Output plain text (no rich formatting/tables)",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet output"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Initialize global app state."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if json_output and plain_output:
        typer.echo("Options --json and --plain are mutually exclusive.")
        raise typer.Exit(code=2)

    configure_logging(verbose, quiet)

    cfg_path = (config or default_config_path()).expanduser().resolve()
    try:
        cfg = load_config(cfg_path)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}")
        raise typer.Exit(code=2)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    console = Console(
        quiet=quiet,
        no_color=plain_output,
        log_time=False,
        log_path=False,
    )
    kv = FileStore(resolve_data_dir(cfg))
    ctx.obj = AppState(
        json_output=(json_output and not plain_output),
        plain_output=plain_output,
        verbose=verbose,
        quiet=quiet,
        config_path=cfg_path,
        config=cfg,
        console=console,
        kv=kv,
        store=WorkoutStore(kv).load(),
        settings=load_settings(kv),
    )


# Top-level commands
app.command("log")(log_command)
app.command("list")(list_command)
app.command("edit")(edit_command)
app.command("delete")(delete_command)
app.command("kudos")(kudos_command)
app.command("track")(track_command)
app.command("export")(export_command)
app.add_typer(analyze_commands.app, name="analyze")
app.add_typer(settings_commands.app, name="settings")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
