"""Summary statistics, personal records, aggregates and workout suggestions."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from rt_cli.core.classify import classify_type
from rt_cli.core.constants import SUGGESTION_LABELS
from rt_cli.core.models import Workout
from rt_cli.utils.date_ranges import trailing_days, trailing_weeks, try_parse_date
from rt_cli.utils.formatting import format_pace_value

logger = logging.getLogger(__name__)


def best_pace(workouts: Iterable[Workout]) -> Optional[float]:
    """Lowest minutes-per-km over workouts with positive distance and duration."""
    paces = [w.duration / w.distance for w in workouts if w.distance > 0 and w.duration > 0]
    return min(paces) if paces else None


def compute_summary(workouts: Sequence[Workout]) -> Dict[str, Any]:
    """Total distance, run count and best pace (``M:SS`` per km or ``N/A``)."""
    pace = best_pace(workouts)
    return {
        "total_distance": sum(w.distance for w in workouts),
        "total_runs": len(workouts),
        "best_pace": format_pace_value(pace) if pace is not None and pace > 0 else "N/A",
    }


def compute_personal_records(workouts: Sequence[Workout]) -> Dict[str, Any]:
    """Fastest pace, longest distance and longest duration, when present."""
    records: Dict[str, Any] = {}
    if not workouts:
        return records

    summary = compute_summary(workouts)
    if summary["best_pace"] != "N/A":
        records["fastest_pace"] = summary["best_pace"]

    longest_distance = max(w.distance for w in workouts)
    if longest_distance > 0:
        records["longest_distance"] = longest_distance

    longest_duration = max(w.duration for w in workouts)
    if longest_duration > 0:
        records["longest_duration"] = longest_duration

    return records


def suggest_next_workout(workouts: Sequence[Workout], recent_window: int = 7) -> str:
    """Suggest the least practiced of easy/tempo/speed in the recent window.

    Ties resolve in the order Easy, Tempo, Speed, so an empty history
    suggests an easy run.
    """
    counts = {key: 0 for key in SUGGESTION_LABELS}
    recent = list(workouts)[-recent_window:] if recent_window > 0 else []
    for workout in recent:
        workout_type = classify_type(workout.type)
        if workout_type in counts:
            counts[workout_type] += 1

    least = min(counts.values())
    for key, label in SUGGESTION_LABELS.items():
        if counts[key] == least:
            return label
    return SUGGESTION_LABELS["easy"]


def calendar_membership(workouts: Iterable[Workout], date_str: str) -> List[Workout]:
    """Workouts whose date string equals ``date_str`` exactly."""
    return [w for w in workouts if w.date == date_str]


def aggregate_by_day(
    workouts: Sequence[Workout],
    window_days: int,
    reference_date: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Daily distance totals for the trailing window, oldest day first."""
    reference = reference_date or date.today()
    rows = []
    for day in trailing_days(reference, window_days):
        day_str = day.isoformat()
        rows.append(
            {
                "date": day_str,
                "distance": sum(w.distance for w in calendar_membership(workouts, day_str)),
            }
        )
    return rows


def aggregate_by_week(
    workouts: Sequence[Workout],
    week_count: int,
    reference_date: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Distance totals for trailing 7-day windows, most recent window last."""
    reference = reference_date or date.today()
    dated = []
    for workout in workouts:
        parsed = try_parse_date(workout.date)
        if parsed is None:
            logger.debug("Workout date %r is not YYYY-MM-DD; left out of weekly totals", workout.date)
            continue
        dated.append((parsed, workout.distance))

    rows = []
    for start, end in trailing_weeks(reference, week_count):
        rows.append(
            {
                "week_start": start.isoformat(),
                "week_end": end.isoformat(),
                "distance": sum(distance for day, distance in dated if start <= day <= end),
            }
        )
    return rows


def build_calendar(
    workouts: Sequence[Workout],
    days: int = 28,
    reference_date: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Per-day activity for the trailing ``days`` days, oldest first."""
    reference = reference_date or date.today()
    rows = []
    for day in trailing_days(reference, days):
        matches = calendar_membership(workouts, day.isoformat())
        rows.append(
            {
                "date": day.isoformat(),
                "weekday": day.strftime("%a"),
                "count": len(matches),
                "active": bool(matches),
                "type": classify_type(matches[0].type) if matches else None,
            }
        )
    return rows


def kudos_summary(workouts: Sequence[Workout]) -> Dict[str, int]:
    total = sum(w.kudos for w in workouts)
    # An empty history shows 2 as a friendly placeholder.
    average = total // len(workouts) if workouts else 2
    return {"total": total, "average": average}
