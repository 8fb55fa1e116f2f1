"""Workout log commands: add, list, edit, delete and kudos."""

from __future__ import annotations

from typing import Any, Dict, Optional

import typer
from rich.table import Table

from rt_cli.commands.common import (
    describe_workout,
    fail,
    get_state,
    print_json_payload,
    warn_if_unsaved,
    workout_payload,
)
from rt_cli.core.classify import type_label
from rt_cli.core.models import TrackerError
from rt_cli.utils.date_ranges import validate_date
from rt_cli.utils.formatting import convert_distance


def log_command(
    ctx: typer.Context,
    date: str = typer.Argument(..., help="Workout date YYYY-MM-DD", callback=validate_date),
    distance: float = typer.Argument(..., help="Distance in kilometers"),
    duration: float = typer.Argument(..., help="Duration in minutes"),
    workout_type: str = typer.Option("", "--type", help="Workout type, e.g. 'Easy Run'"),
) -> None:
    """Log a completed run."""
    state = get_state(ctx)
    try:
        workout = state.store.append(
            {"date": date, "distance": distance, "duration": duration, "type": workout_type.strip()}
        )
    except TrackerError as exc:
        fail(state, exc)
    warn_if_unsaved(state)

    index = len(state.store) - 1
    if state.json_output:
        print_json_payload(state, {"status": "logged", "workout": workout_payload(index, workout)})
        return
    if state.plain_output:
        typer.echo(f"status\tlogged\nindex\t{index}")
        return
    state.console.print(f"Logged run #{index}: {describe_workout(state, workout)}", markup=False)


def list_command(ctx: typer.Context) -> None:
    """List logged workouts in insertion order."""
    state = get_state(ctx)
    workouts = state.store.get_all()
    rows = [workout_payload(index, workout) for index, workout in enumerate(workouts)]

    if state.json_output:
        print_json_payload(state, {"workouts": rows, "total": len(rows)})
        return

    if state.plain_output:
        for row in rows:
            typer.echo(
                "\t".join(
                    str(row[key])
                    for key in ("index", "date", "distance", "duration", "type", "pace", "kudos")
                )
            )
        return

    if not rows:
        state.console.print("No runs logged yet. Start tracking your runs!")
        return

    table = Table(title="Workouts")
    for column in ("#", "Date", "Distance", "Duration", "Type", "Pace", "Kudos"):
        table.add_column(column)
    for row in rows:
        table.add_row(
            str(row["index"]),
            row["date"],
            convert_distance(row["distance"], state.settings.imperial),
            f"{row['duration']:g} min",
            f"{row['type'] or '-'} ({type_label(row['category'])})",
            f"{row['pace']} /km",
            str(row["kudos"]),
        )
    state.console.print(table)


def edit_command(
    ctx: typer.Context,
    index: int = typer.Argument(..., help="Workout index as shown by 'list'"),
    date: Optional[str] = typer.Option(None, help="New date YYYY-MM-DD", callback=validate_date),
    distance: Optional[float] = typer.Option(None, help="New distance in kilometers"),
    duration: Optional[float] = typer.Option(None, help="New duration in minutes"),
    workout_type: Optional[str] = typer.Option(None, "--type", help="New workout type"),
) -> None:
    """Edit fields of a logged workout; unspecified fields are kept."""
    state = get_state(ctx)
    partial: Dict[str, Any] = {}
    if date is not None:
        partial["date"] = date
    if distance is not None:
        partial["distance"] = distance
    if duration is not None:
        partial["duration"] = duration
    if workout_type is not None:
        partial["type"] = workout_type.strip()

    try:
        workout = state.store.update_at(index, partial)
    except TrackerError as exc:
        fail(state, exc)
    warn_if_unsaved(state)

    if state.json_output:
        print_json_payload(state, {"status": "updated", "workout": workout_payload(index, workout)})
        return
    if state.plain_output:
        typer.echo(f"status\tupdated\nindex\t{index}")
        return
    state.console.print(f"Updated run #{index}: {describe_workout(state, workout)}", markup=False)


def delete_command(
    ctx: typer.Context,
    index: int = typer.Argument(..., help="Workout index as shown by 'list'"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a logged workout."""
    state = get_state(ctx)
    try:
        workout = state.store.get(index)
    except TrackerError as exc:
        fail(state, exc)

    if not yes and not typer.confirm(
        f"Delete run #{index} ({describe_workout(state, workout)})?"
    ):
        typer.echo("Aborted.")
        raise typer.Exit(code=1)

    removed = state.store.remove_at(index)
    warn_if_unsaved(state)

    if state.json_output:
        print_json_payload(state, {"status": "deleted", "workout": workout_payload(index, removed)})
        return
    if state.plain_output:
        typer.echo(f"status\tdeleted\nindex\t{index}")
        return
    state.console.print(f"Deleted run #{index}")


def kudos_command(
    ctx: typer.Context,
    index: int = typer.Argument(..., help="Workout index as shown by 'list'"),
) -> None:
    """Give kudos to a logged workout."""
    state = get_state(ctx)
    try:
        workout = state.store.increment_kudos(index)
    except TrackerError as exc:
        fail(state, exc)
    warn_if_unsaved(state)

    if state.json_output:
        print_json_payload(state, {"status": "kudos", "index": index, "kudos": workout.kudos})
        return
    if state.plain_output:
        typer.echo(f"kudos\t{workout.kudos}")
        return
    state.console.print(f"Run #{index} now has {workout.kudos} kudos")
