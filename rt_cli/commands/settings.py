"""Display settings commands."""

from __future__ import annotations

from dataclasses import asdict

import typer

from rt_cli.commands.common import fail, get_state, print_json_payload
from rt_cli.core.models import TrackerError
from rt_cli.core.settings import set_units, toggle_theme
from rt_cli.core.state import AppState

app = typer.Typer(help="View and change display settings")


def _report(state: AppState, saved: bool = True) -> None:
    payload = asdict(state.settings)
    if not saved:
        typer.echo("Warning: settings changed for this run but could not be saved.", err=True)

    if state.json_output:
        print_json_payload(state, payload)
        return
    if state.plain_output:
        for key, value in payload.items():
            typer.echo(f"{key}\t{value}")
        return
    state.console.print(f"Theme: {state.settings.theme}")
    state.console.print(f"Units: {state.settings.units}")


@app.command("show")
def show_command(ctx: typer.Context) -> None:
    """Show current settings."""
    _report(get_state(ctx))


@app.command("theme")
def theme_command(ctx: typer.Context) -> None:
    """Toggle between light and dark theme."""
    state = get_state(ctx)
    saved = state.update_settings(toggle_theme(state.settings))
    _report(state, saved)


@app.command("units")
def units_command(
    ctx: typer.Context,
    units: str = typer.Argument(..., help="metric|imperial"),
) -> None:
    """Set distance units used for display."""
    state = get_state(ctx)
    try:
        updated = set_units(state.settings, units.strip().lower())
    except TrackerError as exc:
        fail(state, exc)
    saved = state.update_settings(updated)
    _report(state, saved)
