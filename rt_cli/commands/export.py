"""Export workouts to JSON or CSV."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Dict, Optional

import typer

from rt_cli.commands.common import get_state, print_json_payload
from rt_cli.core.config import resolve_output_dir
from rt_cli.core.constants import EXPORT_FILE_PREFIX
from rt_cli.exporters.csv_export import write_csv
from rt_cli.exporters.json_export import build_export_payload, write_json


def default_export_name(output_format: str, today: Optional[date] = None) -> str:
    return f"{EXPORT_FILE_PREFIX}-{(today or date.today()).isoformat()}.{output_format}"


def export_command(
    ctx: typer.Context,
    output_format: str = typer.Option("json", "--format", help="Export format: json|csv"),
    output_dir: Optional[Path] = typer.Option(None, help="Output directory"),
    output_file: Optional[Path] = typer.Option(None, help="Output file (overrides --output-dir)"),
) -> None:
    """Export all logged workouts."""
    state = get_state(ctx)

    if output_format not in {"json", "csv"}:
        raise typer.BadParameter("--format must be json|csv")

    workouts = state.store.get_all()
    result: Dict[str, object]

    if output_format == "csv" and not workouts:
        result = {"status": "error", "format": "csv", "message": "No workouts to export!"}
    else:
        path = output_file or (
            resolve_output_dir(state.config, explicit=output_dir) / default_export_name(output_format)
        )
        if output_format == "json":
            write_json(path, build_export_payload(workouts))
        else:
            write_csv(path, workouts)
        result = {"status": "exported", "format": output_format, "path": str(path), "count": len(workouts)}

    if state.json_output:
        print_json_payload(state, result)
        if result["status"] == "error":
            raise typer.Exit(code=1)
        return

    if state.plain_output:
        for key in ("status", "format", "path", "count", "message"):
            if key in result and result[key] is not None:
                typer.echo(f"{key}\t{result[key]}")
        if result["status"] == "error":
            raise typer.Exit(code=1)
        return

    if result.get("status") == "error":
        state.console.print(str(result.get("message", "Export failed")))
        raise typer.Exit(code=1)

    state.console.print(
        f"Exported {result.get('count', 0)} workouts as {result.get('format')} "
        f"to {result.get('path')}",
        markup=False,
    )
