from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from rt_cli.core.models import Workout
from rt_cli.exporters.csv_export import workouts_to_csv, write_csv
from rt_cli.exporters.json_export import build_export_payload, write_json


def test_build_export_payload(sample_workouts) -> None:
    stamp = datetime(2026, 2, 14, 8, 30, tzinfo=timezone.utc)
    payload = build_export_payload(sample_workouts, exported_at=stamp)
    assert payload["totalWorkouts"] == 3
    assert payload["exportDate"] == "2026-02-14T08:30:00+00:00"
    assert payload["workouts"][1] == {
        "date": "2026-02-11",
        "distance": 8.0,
        "duration": 36.0,
        "type": "Tempo Run",
        "kudos": 2,
    }


def test_write_json_is_pretty_printed(tmp_path: Path, sample_workouts) -> None:
    path = write_json(tmp_path / "out" / "export.json", build_export_payload(sample_workouts))
    text = path.read_text()
    assert text.startswith('{\n  "workouts": [')
    assert json.loads(text)["totalWorkouts"] == 3


def test_workouts_to_csv(sample_workouts) -> None:
    lines = workouts_to_csv(sample_workouts).split("\n")
    assert lines[0] == "Date,Distance (km),Duration (min),Type,Pace (min/km),Kudos"
    assert lines[1] == "2026-02-09,5,25,Easy Run,5:00,0"
    assert lines[2] == "2026-02-11,8,36,Tempo Run,4:30,2"
    assert len(lines) == 4


def test_csv_does_not_quote_embedded_commas(tmp_path: Path) -> None:
    workout = Workout(date="2026-02-14", distance=5.5, duration=30, type="Easy, hilly")
    path = write_csv(tmp_path / "out.csv", [workout])
    row = path.read_text().split("\n")[1]
    assert row == "2026-02-14,5.5,30,Easy, hilly,5:27,0"
    assert len(row.split(",")) == 7
