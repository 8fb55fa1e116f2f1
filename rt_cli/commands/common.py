"""Shared command helpers."""

from __future__ import annotations

import json
from typing import Any, Dict, NoReturn

import typer

from rt_cli.core.classify import classify_type
from rt_cli.core.models import TrackerError, Workout
from rt_cli.core.state import AppState
from rt_cli.utils.formatting import convert_distance, format_pace


def get_state(ctx: typer.Context) -> AppState:
    """Extract validated app state from Typer context."""
    state = ctx.obj
    if not isinstance(state, AppState):
        raise typer.Exit(code=2)
    return state


def print_json_payload(state: AppState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":")))
        return
    state.console.print_json(data=payload)


def fail(state: AppState, exc: TrackerError) -> NoReturn:
    """Report a tracker error in the active output mode and exit 1."""
    if state.json_output:
        print_json_payload(state, {"status": "error", "kind": exc.kind, "message": str(exc)})
    elif state.plain_output:
        typer.echo("status\terror")
        typer.echo(f"kind\t{exc.kind}")
        typer.echo(f"message\t{exc}")
    else:
        state.console.print(f"Error: {exc}", markup=False)
    raise typer.Exit(code=1)


def warn_if_unsaved(state: AppState) -> None:
    if not state.store.last_write_ok and not state.json_output:
        typer.echo("Warning: change kept in memory but could not be saved.", err=True)


def workout_payload(index: int, workout: Workout) -> Dict[str, Any]:
    payload = workout.to_dict()
    payload["index"] = index
    payload["pace"] = format_pace(workout.duration, workout.distance)
    payload["category"] = classify_type(workout.type)
    return payload


def describe_workout(state: AppState, workout: Workout) -> str:
    return (
        f"{workout.date}  {convert_distance(workout.distance, state.settings.imperial)}  "
        f"{workout.duration:g} min  {workout.type or '-'}"
    )
