"""CSV export helpers.

Fields are joined with plain commas and never quoted, so a type label that
contains a comma shifts the remaining columns of its row.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from rt_cli.core.constants import CSV_HEADERS
from rt_cli.core.models import Workout
from rt_cli.utils.formatting import format_number, format_pace


def workout_row(workout: Workout) -> List[str]:
    return [
        workout.date,
        format_number(workout.distance),
        format_number(workout.duration),
        workout.type or "",
        format_pace(workout.duration, workout.distance),
        str(workout.kudos),
    ]


def workouts_to_csv(workouts: Sequence[Workout]) -> str:
    lines = [",".join(CSV_HEADERS)]
    lines.extend(",".join(workout_row(w)) for w in workouts)
    return "\n".join(lines)


def write_csv(path: Path, workouts: Sequence[Workout]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(workouts_to_csv(workouts))
    return path
