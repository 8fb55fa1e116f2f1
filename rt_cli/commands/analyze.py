"""Training analysis commands."""

from __future__ import annotations

from datetime import date
from typing import Optional

import typer
from rich.table import Table

from rt_cli.commands.common import get_state, print_json_payload
from rt_cli.core.classify import type_label
from rt_cli.core.constants import RECORD_LABELS
from rt_cli.core.stats import (
    aggregate_by_day,
    aggregate_by_week,
    build_calendar,
    compute_personal_records,
    compute_summary,
    kudos_summary,
    suggest_next_workout,
)
from rt_cli.utils.date_ranges import parse_date, validate_date
from rt_cli.utils.formatting import convert_distance, format_number

app = typer.Typer(help="Training analysis commands")


def _reference(reference_date: Optional[str]) -> date:
    return parse_date(reference_date) if reference_date else date.today()


def _analysis_setting(ctx: typer.Context, key: str, explicit: Optional[int]) -> int:
    if explicit is not None:
        if explicit <= 0:
            raise typer.BadParameter("must be greater than 0")
        return explicit
    return int(get_state(ctx).config["analysis"][key])


def _bar(distance: float, longest: float, width: int = 30) -> str:
    if longest <= 0:
        return ""
    return "#" * int(round(distance / longest * width))


@app.command("summary")
def summary_command(ctx: typer.Context) -> None:
    """Total distance, number of runs and best pace."""
    state = get_state(ctx)
    summary = compute_summary(state.store.get_all())

    if state.json_output:
        print_json_payload(state, summary)
        return
    if state.plain_output:
        for key, value in summary.items():
            typer.echo(f"{key}\t{value}")
        return

    best = summary["best_pace"]
    state.console.print("Your Running Stats")
    state.console.print(
        f"Total Distance: {convert_distance(summary['total_distance'], state.settings.imperial)}"
    )
    state.console.print(f"Total Runs: {summary['total_runs']}")
    state.console.print(f"Best Pace: {best}{'' if best == 'N/A' else ' min/km'}")


@app.command("records")
def records_command(ctx: typer.Context) -> None:
    """Personal records: fastest pace, longest run and longest duration."""
    state = get_state(ctx)
    records = compute_personal_records(state.store.get_all())

    if state.json_output:
        print_json_payload(state, records)
        return
    if state.plain_output:
        for key, value in records.items():
            typer.echo(f"{key}\t{value}")
        return

    if not records:
        state.console.print("Complete more runs to see your personal records!")
        return

    display = {
        "fastest_pace": lambda value: f"{value} min/km",
        "longest_distance": lambda value: convert_distance(value, state.settings.imperial),
        "longest_duration": lambda value: f"{format_number(value)} min",
    }
    for key, value in records.items():
        state.console.print(f"{RECORD_LABELS[key]}: {display[key](value)}")


@app.command("suggest")
def suggest_command(
    ctx: typer.Context,
    window: Optional[int] = typer.Option(None, help="Number of recent runs to consider"),
) -> None:
    """Suggest the next workout type to balance recent training."""
    state = get_state(ctx)
    recent_window = _analysis_setting(ctx, "suggestion_window", window)
    workouts = state.store.get_all()
    suggestion = suggest_next_workout(workouts, recent_window=recent_window)
    kudos = kudos_summary(workouts)

    if state.json_output:
        print_json_payload(state, {"suggestion": suggestion, "window": recent_window, "kudos": kudos})
        return
    if state.plain_output:
        typer.echo(suggestion)
        return
    state.console.print(f"Suggested Workout: {suggestion}")
    state.console.print(f"Average kudos per run: {kudos['average']}")


@app.command("daily")
def daily_command(
    ctx: typer.Context,
    days: Optional[int] = typer.Option(None, help="Number of trailing days"),
    reference_date: Optional[str] = typer.Option(
        None, "--date", help="Last day of the window YYYY-MM-DD (default: today)", callback=validate_date
    ),
) -> None:
    """Distance per day for the trailing days."""
    state = get_state(ctx)
    window = _analysis_setting(ctx, "daily_window", days)
    rows = aggregate_by_day(state.store.get_all(), window, _reference(reference_date))

    if state.json_output:
        print_json_payload(state, {"days": rows})
        return
    if state.plain_output:
        for row in rows:
            typer.echo(f"{row['date']}\t{row['distance']}")
        return

    longest = max((row["distance"] for row in rows), default=0.0)
    state.console.print("Your Week So Far")
    for row in rows:
        state.console.print(
            f"{row['date']}  {convert_distance(row['distance'], state.settings.imperial):>10}  "
            f"{_bar(row['distance'], longest)}"
        )


@app.command("weekly")
def weekly_command(
    ctx: typer.Context,
    weeks: Optional[int] = typer.Option(None, help="Number of trailing weeks"),
    reference_date: Optional[str] = typer.Option(
        None, "--date", help="Last day of the latest week YYYY-MM-DD (default: today)", callback=validate_date
    ),
) -> None:
    """Distance per trailing 7-day window."""
    state = get_state(ctx)
    count = _analysis_setting(ctx, "weekly_window", weeks)
    rows = aggregate_by_week(state.store.get_all(), count, _reference(reference_date))

    if state.json_output:
        print_json_payload(state, {"weeks": rows})
        return
    if state.plain_output:
        for row in rows:
            typer.echo(f"{row['week_end']}\t{row['distance']}")
        return

    table = Table(title="Weekly Distance")
    table.add_column("Week ending")
    table.add_column("From")
    table.add_column("Distance", justify="right")
    for row in rows:
        end = parse_date(row["week_end"])
        table.add_row(
            f"{end.strftime('%b')} {end.day}",
            row["week_start"],
            convert_distance(row["distance"], state.settings.imperial),
        )
    state.console.print(table)


@app.command("calendar")
def calendar_command(
    ctx: typer.Context,
    days: Optional[int] = typer.Option(None, help="Number of trailing days"),
    reference_date: Optional[str] = typer.Option(
        None, "--date", help="Last day shown YYYY-MM-DD (default: today)", callback=validate_date
    ),
) -> None:
    """Training calendar marking active days and their workout type."""
    state = get_state(ctx)
    window = _analysis_setting(ctx, "calendar_days", days)
    rows = build_calendar(state.store.get_all(), window, _reference(reference_date))

    if state.json_output:
        print_json_payload(state, {"days": rows})
        return
    if state.plain_output:
        for row in rows:
            typer.echo(f"{row['date']}\t{row['count']}\t{row['type'] or ''}")
        return

    for row in rows:
        marker = "." if not row["active"] else "*" * row["count"]
        label = type_label(row["type"]) if row["active"] else ""
        state.console.print(f"{row['weekday']} {row['date']}  {marker:<4} {label}")
